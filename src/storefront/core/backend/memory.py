"""In-process backend used for development and as the test double."""

from __future__ import annotations

import itertools
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from loguru import logger
from pydantic import ValidationError

from src.storefront.core.backend.base import StoreBackend
from src.storefront.core.backend.errors import (
    AdminCredentialsMissing,
    AuthenticationError,
    BackendError,
    UniqueViolationError,
)
from src.storefront.entities import AuthUser, BackendSession, Category, Product


class InMemoryBackend(StoreBackend):
    """Dictionary-backed implementation of :class:`StoreBackend`.

    Mirrors the behaviour the views rely on from the hosted backend: unique
    category names, newest-first product ordering, and admin operations that
    require a service-role credential (``admin_enabled``).
    """

    def __init__(self, *, admin_enabled: bool = True, session_ttl_seconds: int = 3600):
        super().__init__()
        self.admin_enabled = admin_enabled
        self._session_ttl = session_ttl_seconds
        self._sequence = itertools.count()
        self._products: dict[str, tuple[int, Product]] = {}
        self._categories: dict[str, Category] = {}
        self._users: dict[str, tuple[AuthUser, str]] = {}
        self._tokens: dict[str, str] = {}

    # -- products -----------------------------------------------------------

    async def list_products(self) -> list[Product]:
        ordered = sorted(
            self._products.values(),
            key=lambda entry: (entry[1].created_at, entry[0]),
            reverse=True,
        )
        return [product.model_copy() for _, product in ordered]

    async def get_product(self, product_id: str) -> Product | None:
        entry = self._products.get(product_id)
        return entry[1].model_copy() if entry else None

    async def insert_products(self, rows: list[dict[str, Any]]) -> list[Product]:
        try:
            products = [Product(**row) for row in rows]
        except ValidationError as e:
            raise BackendError(f"Invalid product row: {e}") from e

        for product in products:
            self._products[product.id] = (next(self._sequence), product)
        return [product.model_copy() for product in products]

    async def update_product(self, product_id: str, values: dict[str, Any]) -> Product | None:
        entry = self._products.get(product_id)
        if entry is None:
            return None

        sequence, current = entry
        try:
            updated = Product(**{**current.model_dump(), **values, "id": product_id})
        except ValidationError as e:
            raise BackendError(f"Invalid product values: {e}") from e

        self._products[product_id] = (sequence, updated)
        return updated.model_copy()

    async def delete_product(self, product_id: str) -> None:
        self._products.pop(product_id, None)

    async def product_ids_in_category(self, category_name: str) -> list[str]:
        return [
            product.id
            for _, product in self._products.values()
            if product.category == category_name
        ]

    async def delete_products_in_category(self, category_name: str) -> int:
        ids = await self.product_ids_in_category(category_name)
        for product_id in ids:
            del self._products[product_id]
        return len(ids)

    # -- categories ---------------------------------------------------------

    async def list_categories(self) -> list[Category]:
        return [
            self._categories[name].model_copy() for name in sorted(self._categories)
        ]

    async def insert_category(self, name: str) -> Category:
        if name in self._categories:
            raise UniqueViolationError(
                f'duplicate key value violates unique constraint "categories_name_key": {name}'
            )
        category = Category(name=name)
        self._categories[name] = category
        return category.model_copy()

    async def delete_category(self, name: str) -> None:
        self._categories.pop(name, None)

    # -- auth ---------------------------------------------------------------

    async def get_session(self, access_token: str) -> AuthUser | None:
        user_id = self._tokens.get(access_token)
        if user_id is None or user_id not in self._users:
            return None
        return self._users[user_id][0].model_copy()

    async def sign_in(self, email: str, password: str) -> BackendSession:
        for user, stored_password in self._users.values():
            if user.email == email and secrets.compare_digest(stored_password, password):
                token = secrets.token_urlsafe(32)
                self._tokens[token] = user.id
                logger.debug("In-memory sign-in for user {}", user.id)
                return BackendSession(
                    access_token=token,
                    refresh_token=secrets.token_urlsafe(16),
                    expires_at=datetime.now(UTC) + timedelta(seconds=self._session_ttl),
                    user=user.model_copy(),
                )
        raise AuthenticationError("Invalid login credentials")

    async def sign_up(self, email: str, password: str) -> AuthUser:
        if any(user.email == email for user, _ in self._users.values()):
            raise BackendError("User already registered")
        user = AuthUser(email=email)
        self._users[user.id] = (user, password)
        return user.model_copy()

    async def sign_out(self, access_token: str) -> None:
        if self._tokens.pop(access_token, None) is not None:
            self._notify(access_token, "SIGNED_OUT", None)

    async def admin_list_users(self) -> list[AuthUser]:
        self._require_admin()
        users = sorted((user for user, _ in self._users.values()), key=lambda u: u.created_at)
        return [user.model_copy() for user in users]

    async def admin_delete_user(self, user_id: str) -> None:
        self._require_admin()
        if self._users.pop(user_id, None) is None:
            raise BackendError(f"User not found: {user_id}")

        revoked = [token for token, owner in self._tokens.items() if owner == user_id]
        for token in revoked:
            del self._tokens[token]
            self._notify(token, "SIGNED_OUT", None)

    def _require_admin(self) -> None:
        if not self.admin_enabled:
            raise AdminCredentialsMissing()
