"""Decide whether a guarded route may render."""

from enum import Enum

from src.storefront.entities import AuthUser

LOGIN_PATH = "/login"


class GuardDecision(str, Enum):
    PLACEHOLDER = "placeholder"
    REDIRECT = "redirect"
    RENDER = "render"


def guard_route(user: AuthUser | None, loading: bool) -> GuardDecision:
    """Pure function of session state.

    While the session is still loading the caller shows a neutral placeholder
    instead of redirecting, so a refresh never flashes the login page.
    """
    if loading:
        return GuardDecision.PLACEHOLDER
    if user is None:
        return GuardDecision.REDIRECT
    return GuardDecision.RENDER
