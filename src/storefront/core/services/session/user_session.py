import secrets

from src.storefront.core.models.session import UserSession
from src.storefront.core.storage.session_storage import SessionStorage
from src.storefront.entities import BackendSession
from src.storefront.runtime.context import get_config


class UserSessionService:
    """Browser sessions: created at sign-in, read on every guarded request."""

    def __init__(self, session_storage: SessionStorage) -> None:
        self._storage = session_storage

    async def create_user_session(self, backend_session: BackendSession) -> str:
        """Store the tokens of a fresh sign-in and return the new session id."""
        user_session = UserSession.create(
            session_id=secrets.token_urlsafe(32),
            backend_session=backend_session,
            session_max_age=get_config().app.session_max_age,
        )
        await self._storage.save(user_session)
        return user_session.id

    async def get_user_session(self, session_id: str) -> UserSession | None:
        """Get a session by id, or None if it is unknown or expired.

        Reading a session refreshes its last-access time.
        """
        user_session = await self._storage.load(session_id)
        if not user_session:
            return None

        if user_session.is_expired():
            await self._storage.delete(session_id)
            return None

        user_session.update_access()
        await self._storage.save(user_session)
        return user_session

    async def set_pending_delete(self, user_session: UserSession, product_id: str | None) -> None:
        """Record (or clear, with ``None``) the product awaiting delete confirmation."""
        user_session.pending_delete_id = product_id
        await self._storage.save(user_session)

    async def delete_user_session(self, session_id: str) -> None:
        await self._storage.delete(session_id)

    async def purge_expired(self) -> int:
        return await self._storage.purge_expired()

    def storage_available(self) -> bool:
        return self._storage.is_available()
