"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, HTTPException, Request, status

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.core.backend import StoreBackend
from src.storefront.core.models import UserSession
from src.storefront.core.services import (
    LOGIN_PATH,
    AuthContext,
    GuardDecision,
    SubmissionGuard,
    UserSessionService,
    guard_route,
)
from src.storefront.entities import AuthUser
from src.storefront.runtime.context import get_config


def get_backend(request: Request) -> StoreBackend:
    """Get the store backend instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.backend


def get_user_session_service(request: Request) -> UserSessionService:
    """Get the User Session service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.user_session_service


def get_submission_guard(request: Request) -> SubmissionGuard:
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.submission_guard


async def get_user_session(
    request: Request,
    session_service: UserSessionService = Depends(get_user_session_service),
) -> UserSession | None:
    """Browser session named by the session cookie, if it is still valid."""
    session_id = request.cookies.get(get_config().security.session_cookie_name)
    if not session_id:
        return None
    return await session_service.get_user_session(session_id)


async def get_auth_context(
    user_session: UserSession | None = Depends(get_user_session),
    backend: StoreBackend = Depends(get_backend),
) -> AsyncIterator[AuthContext]:
    """Auth context that lives for the duration of the request."""
    context = AuthContext(backend, user_session.access_token if user_session else None)
    await context.initialize()
    try:
        yield context
    finally:
        context.close()


async def require_user(auth: AuthContext = Depends(get_auth_context)) -> AuthUser:
    """Route guard for the admin routes.

    A session that is still resolving gets a neutral 503 and never a
    redirect; no session sends the browser to the login page.
    """
    decision = guard_route(auth.user, auth.loading)
    if decision is GuardDecision.PLACEHOLDER:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session is loading",
            headers={"Retry-After": "1"},
        )
    if decision is GuardDecision.REDIRECT:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Authentication required",
            headers={"Location": LOGIN_PATH},
        )
    return auth.user


async def require_user_session(
    _user: AuthUser = Depends(require_user),
    user_session: UserSession | None = Depends(get_user_session),
) -> UserSession:
    """The browser session behind an authenticated request."""
    if user_session is None:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Authentication required",
            headers={"Location": LOGIN_PATH},
        )
    return user_session
