"""Backend capability interface.

The storefront treats its hosted backend as a black box reachable through
this interface: table-style product and category operations plus an auth
subsystem. Implementations must raise :mod:`.errors` exceptions on failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Literal

from loguru import logger

from src.storefront.entities import AuthUser, BackendSession, Category, Product

AuthEvent = Literal["SIGNED_IN", "SIGNED_OUT", "USER_UPDATED"]
AuthListener = Callable[[AuthEvent, AuthUser | None], None]


class StoreBackend(ABC):
    """Abstract interface for the hosted data store and auth system."""

    def __init__(self) -> None:
        self._auth_listeners: dict[str, list[AuthListener]] = {}

    # -- products -----------------------------------------------------------

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """Return all products, newest ``created_at`` first."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Product | None:
        """Return one product, or ``None`` when no row matches."""

    @abstractmethod
    async def insert_products(self, rows: list[dict[str, Any]]) -> list[Product]:
        """Insert one or many product rows and return them as stored."""

    @abstractmethod
    async def update_product(self, product_id: str, values: dict[str, Any]) -> Product | None:
        """Update one product by id; ``None`` when no row matched."""

    @abstractmethod
    async def delete_product(self, product_id: str) -> None:
        """Delete one product by id."""

    @abstractmethod
    async def product_ids_in_category(self, category_name: str) -> list[str]:
        """Ids of products whose ``category`` equals ``category_name``."""

    @abstractmethod
    async def delete_products_in_category(self, category_name: str) -> int:
        """Delete every product in a category and return how many were removed."""

    # -- categories ---------------------------------------------------------

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """Return all categories ordered by name."""

    @abstractmethod
    async def insert_category(self, name: str) -> Category:
        """Insert a category. Raises ``UniqueViolationError`` on a duplicate name."""

    @abstractmethod
    async def delete_category(self, name: str) -> None:
        """Delete a category by name."""

    # -- auth ---------------------------------------------------------------

    @abstractmethod
    async def get_session(self, access_token: str) -> AuthUser | None:
        """Resolve an access token to its user, ``None`` if it is not valid."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> BackendSession:
        """Exchange credentials for a session. Raises ``AuthenticationError``."""

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> AuthUser:
        """Register a new identity."""

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        """Revoke a session."""

    @abstractmethod
    async def admin_list_users(self) -> list[AuthUser]:
        """List every identity. Needs the service-role credential."""

    @abstractmethod
    async def admin_delete_user(self, user_id: str) -> None:
        """Delete an identity. Needs the service-role credential."""

    async def close(self) -> None:
        """Release client resources."""

    # -- session-change notifications --------------------------------------

    def on_auth_state_change(
        self, access_token: str | None, listener: AuthListener
    ) -> Callable[[], None]:
        """Subscribe to changes of the session identified by ``access_token``.

        Returns a callable that removes the subscription.
        """
        key = access_token or ""
        self._auth_listeners.setdefault(key, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._auth_listeners.get(key, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._auth_listeners.pop(key, None)

        return unsubscribe

    def listener_count(self, access_token: str | None = None) -> int:
        """Number of live subscriptions, for one token or overall."""
        if access_token is not None:
            return len(self._auth_listeners.get(access_token, []))
        return sum(len(listeners) for listeners in self._auth_listeners.values())

    def _notify(self, access_token: str, event: AuthEvent, user: AuthUser | None) -> None:
        for listener in list(self._auth_listeners.get(access_token, [])):
            try:
                listener(event, user)
            except Exception:
                logger.exception("Auth state listener failed for event {}", event)
