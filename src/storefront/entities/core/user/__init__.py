"""Entity package: authentication users."""

from .entity import AuthUser, BackendSession

__all__ = ["AuthUser", "BackendSession"]
