"""Core models."""

from .notice import Notice
from .session import UserSession

__all__ = ["Notice", "UserSession"]
