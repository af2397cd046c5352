"""Browser session model."""

import time

from pydantic import BaseModel, Field

from src.storefront.entities import BackendSession


class UserSession(BaseModel):
    """Server-side session of a signed-in browser.

    Holds the backend tokens so they never reach the browser, which only sees
    the session id cookie.
    """

    id: str = Field(description="Session identifier")
    user_id: str = Field(description="Backend user id")
    email: str | None = Field(default=None, description="Signed-in email")
    access_token: str = Field(description="Backend access token")
    refresh_token: str | None = Field(default=None, description="Backend refresh token")
    pending_delete_id: str | None = Field(
        default=None, description="Product marked for deletion, awaiting confirmation"
    )
    created_at: int = Field(description="Creation timestamp")
    last_accessed_at: int = Field(description="Last access timestamp")
    expires_at: int = Field(description="Session expiration timestamp")

    @classmethod
    def create(
        cls,
        session_id: str,
        backend_session: BackendSession,
        session_max_age: int = 3600,
    ) -> "UserSession":
        """Create a new user session with timestamps."""
        now = int(time.time())
        return cls(
            id=session_id,
            user_id=backend_session.user.id,
            email=backend_session.user.email,
            access_token=backend_session.access_token,
            refresh_token=backend_session.refresh_token,
            created_at=now,
            last_accessed_at=now,
            expires_at=now + session_max_age,
        )

    def is_expired(self) -> bool:
        """Check if session is expired."""
        return time.time() > self.expires_at

    def update_access(self) -> None:
        """Update last accessed time."""
        self.last_accessed_at = int(time.time())
