"""Per-request authentication state."""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from src.storefront.core.backend import AuthEvent, BackendError, StoreBackend
from src.storefront.entities import AuthUser, BackendSession


class AuthContext:
    """Current identity of one browser, resolved against the backend.

    The context starts ``loading`` and unauthenticated. :meth:`initialize`
    looks the session up once; a failed lookup resolves to "unauthenticated"
    and is never raised. While open, the context follows session-change
    events for its token; after :meth:`close` further events are ignored.
    """

    def __init__(self, backend: StoreBackend, access_token: str | None = None) -> None:
        self._backend = backend
        self._access_token = access_token
        self._unsubscribe: Callable[[], None] | None = None
        self._closed = False
        self.user: AuthUser | None = None
        self.loading = True

    @property
    def access_token(self) -> str | None:
        return self._access_token

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    async def initialize(self) -> None:
        self._subscribe()

        user = None
        if self._access_token:
            try:
                user = await self._backend.get_session(self._access_token)
            except BackendError:
                logger.opt(exception=True).warning("Session lookup failed; treating as signed out")

        if not self._closed:
            self.user = user
            self.loading = False

    async def sign_in(self, email: str, password: str) -> BackendSession:
        """Sign in and follow the new session. Backend errors propagate."""
        session = await self._backend.sign_in(email, password)
        self._access_token = session.access_token
        self._subscribe()
        self._handle_event("SIGNED_IN", session.user)
        return session

    async def sign_out(self) -> None:
        """Revoke the current session; the backend's SIGNED_OUT event clears ``user``."""
        if self._access_token:
            await self._backend.sign_out(self._access_token)
        self._handle_event("SIGNED_OUT", None)

    def close(self) -> None:
        """Stop following session changes."""
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _subscribe(self) -> None:
        if self._closed:
            return
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._unsubscribe = self._backend.on_auth_state_change(
            self._access_token, self._handle_event
        )

    def _handle_event(self, event: AuthEvent, user: AuthUser | None) -> None:
        if self._closed:
            return
        logger.debug("Auth state change: {}", event)
        self.user = None if event == "SIGNED_OUT" else user
        self.loading = False
