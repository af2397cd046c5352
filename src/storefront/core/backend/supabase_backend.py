"""Supabase implementation of the backend capability interface."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
from supabase_auth.errors import AuthApiError, AuthError

from src.storefront.core.backend.base import StoreBackend
from src.storefront.core.backend.errors import (
    AdminCredentialsMissing,
    AuthenticationError,
    BackendError,
    UniqueViolationError,
)
from src.storefront.entities import AuthUser, BackendSession, Category, Product
from src.storefront.runtime.config.config_data import SupabaseConfig

PRODUCTS = "products"
CATEGORIES = "categories"


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Re-raise client-library failures as backend errors."""
    try:
        yield
    except APIError as e:
        if e.code == UniqueViolationError.POSTGRES_CODE:
            raise UniqueViolationError(e.message or operation) from e
        raise BackendError(f"{operation} failed: {e.message}", code=e.code) from e
    except AuthError as e:
        raise BackendError(f"{operation} failed: {e.message}", code=getattr(e, "code", None)) from e
    except httpx.HTTPError as e:
        raise BackendError(f"{operation} failed: {e}") from e
    except ValidationError as e:
        raise BackendError(f"{operation} returned an unreadable row: {e}") from e


def _to_auth_user(user: Any) -> AuthUser:
    return AuthUser(id=user.id, email=user.email, created_at=user.created_at)


class SupabaseBackend(StoreBackend):
    """Talks to a Supabase project.

    Three clients are kept apart so that one visitor's sign-in never changes
    the credentials used for anybody else's queries:

    - ``auth``: anon key, used for sign-in, sign-up and token lookups.
    - ``data``: service-role key when configured (anon key otherwise), used for
      table access. Admin routes are already guarded server-side.
    - ``admin``: service-role client for identity management, or ``None``.
    """

    def __init__(
        self,
        auth_client: AsyncClient,
        data_client: AsyncClient,
        admin_client: AsyncClient | None = None,
    ) -> None:
        super().__init__()
        self._auth = auth_client
        self._data = data_client
        self._admin = admin_client

    @classmethod
    async def connect(cls, config: SupabaseConfig) -> "SupabaseBackend":
        """Create the clients for a Supabase project."""
        options = AsyncClientOptions(auto_refresh_token=False, persist_session=False)

        auth_client = await acreate_client(config.url, config.anon_key, options=options)
        admin_client = None
        if config.service_role_key:
            admin_client = await acreate_client(
                config.url, config.service_role_key, options=options
            )
        data_client = admin_client or await acreate_client(
            config.url, config.anon_key, options=options
        )

        logger.info(
            "Supabase backend connected to {} (admin {})",
            config.url,
            "enabled" if admin_client else "disabled",
        )
        return cls(auth_client, data_client, admin_client)

    # -- products -----------------------------------------------------------

    async def list_products(self) -> list[Product]:
        with _translate_errors("list products"):
            response = (
                await self._data.table(PRODUCTS)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
            return [Product.model_validate(row) for row in response.data]

    async def get_product(self, product_id: str) -> Product | None:
        with _translate_errors("get product"):
            response = (
                await self._data.table(PRODUCTS)
                .select("*")
                .eq("id", product_id)
                .maybe_single()
                .execute()
            )
            if response is None or not response.data:
                return None
            return Product.model_validate(response.data)

    async def insert_products(self, rows: list[dict[str, Any]]) -> list[Product]:
        with _translate_errors("insert products"):
            response = await self._data.table(PRODUCTS).insert(rows).execute()
            return [Product.model_validate(row) for row in response.data]

    async def update_product(self, product_id: str, values: dict[str, Any]) -> Product | None:
        with _translate_errors("update product"):
            response = (
                await self._data.table(PRODUCTS).update(values).eq("id", product_id).execute()
            )
            if not response.data:
                return None
            return Product.model_validate(response.data[0])

    async def delete_product(self, product_id: str) -> None:
        with _translate_errors("delete product"):
            await self._data.table(PRODUCTS).delete().eq("id", product_id).execute()

    async def product_ids_in_category(self, category_name: str) -> list[str]:
        with _translate_errors("find products by category"):
            response = (
                await self._data.table(PRODUCTS)
                .select("id")
                .eq("category", category_name)
                .execute()
            )
        return [row["id"] for row in response.data]

    async def delete_products_in_category(self, category_name: str) -> int:
        with _translate_errors("delete products by category"):
            response = (
                await self._data.table(PRODUCTS)
                .delete()
                .eq("category", category_name)
                .execute()
            )
        return len(response.data)

    # -- categories ---------------------------------------------------------

    async def list_categories(self) -> list[Category]:
        with _translate_errors("list categories"):
            response = await self._data.table(CATEGORIES).select("*").order("name").execute()
            return [Category.model_validate(row) for row in response.data]

    async def insert_category(self, name: str) -> Category:
        with _translate_errors("insert category"):
            response = await self._data.table(CATEGORIES).insert({"name": name}).execute()
            return Category.model_validate(response.data[0])

    async def delete_category(self, name: str) -> None:
        with _translate_errors("delete category"):
            await self._data.table(CATEGORIES).delete().eq("name", name).execute()

    # -- auth ---------------------------------------------------------------

    async def get_session(self, access_token: str) -> AuthUser | None:
        try:
            response = await self._auth.auth.get_user(access_token)
        except AuthApiError as e:
            if e.status in (401, 403):
                return None
            raise BackendError(f"get session failed: {e.message}") from e
        except (AuthError, httpx.HTTPError) as e:
            raise BackendError(f"get session failed: {e}") from e

        if response is None or response.user is None:
            return None
        return _to_auth_user(response.user)

    async def sign_in(self, email: str, password: str) -> BackendSession:
        try:
            response = await self._auth.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as e:
            raise AuthenticationError(e.message, code=getattr(e, "code", None)) from e
        except (AuthError, httpx.HTTPError) as e:
            raise BackendError(f"sign in failed: {e}") from e

        session = response.session
        if session is None or response.user is None:
            raise AuthenticationError("Sign-in returned no session")

        expires_at = None
        if session.expires_at:
            expires_at = datetime.fromtimestamp(session.expires_at, UTC)
        return BackendSession(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=expires_at,
            user=_to_auth_user(response.user),
        )

    async def sign_up(self, email: str, password: str) -> AuthUser:
        with _translate_errors("sign up"):
            response = await self._auth.auth.sign_up({"email": email, "password": password})
        if response.user is None:
            raise BackendError("sign up returned no user")
        return _to_auth_user(response.user)

    async def sign_out(self, access_token: str) -> None:
        with _translate_errors("sign out"):
            await self._auth.auth.admin.sign_out(access_token)
        self._notify(access_token, "SIGNED_OUT", None)

    async def admin_list_users(self) -> list[AuthUser]:
        admin = self._require_admin()
        with _translate_errors("list users"):
            users = await admin.auth.admin.list_users()
        return [_to_auth_user(user) for user in users]

    async def admin_delete_user(self, user_id: str) -> None:
        admin = self._require_admin()
        with _translate_errors("delete user"):
            await admin.auth.admin.delete_user(user_id)

    def _require_admin(self) -> AsyncClient:
        if self._admin is None:
            raise AdminCredentialsMissing()
        return self._admin
