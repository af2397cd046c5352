"""User domain entities as seen through the backend's auth subsystem."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.storefront.entities.core._base import Entity


class AuthUser(Entity):
    """An authentication identity, as listed by the admin dashboard."""

    email: str | None = Field(default=None, description="Sign-in email address")


class BackendSession(BaseModel):
    """Tokens returned by a successful sign-in."""

    access_token: str = Field(description="Bearer token for the backend")
    refresh_token: str | None = Field(default=None, description="Refresh token")
    expires_at: datetime | None = Field(default=None, description="Access token expiry")
    user: AuthUser = Field(description="Signed-in user")
