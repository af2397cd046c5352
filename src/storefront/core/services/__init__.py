"""Core services exports."""

from src.storefront.core.storage.session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
)

# Session Services
from .session.auth_context import AuthContext
from .session.route_guard import LOGIN_PATH, GuardDecision, guard_route
from .session.user_session import UserSessionService

# Submission
from .submission import SubmissionGuard

__all__ = [
    # Session Services
    "AuthContext",
    "GuardDecision",
    "LOGIN_PATH",
    "UserSessionService",
    "guard_route",
    # Submission
    "SubmissionGuard",
    # Session Storage for testing
    "InMemorySessionStorage",
    "RedisSessionStorage",
]
