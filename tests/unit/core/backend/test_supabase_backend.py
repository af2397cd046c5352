"""Tests for the Supabase backend against mocked clients."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError
from supabase_auth.errors import AuthApiError

from src.storefront.core.backend import (
    AdminCredentialsMissing,
    AuthenticationError,
    BackendError,
    UniqueViolationError,
)
from src.storefront.core.backend.supabase_backend import SupabaseBackend

CREATED = "2024-05-01T10:00:00+00:00"


def _query(data=None, error: Exception | None = None) -> MagicMock:
    """A fluent query builder whose ``execute`` returns ``data`` or raises ``error``."""
    builder = MagicMock()
    for method in ("select", "insert", "update", "delete", "eq", "order", "maybe_single"):
        getattr(builder, method).return_value = builder
    if error is not None:
        builder.execute = AsyncMock(side_effect=error)
    else:
        builder.execute = AsyncMock(return_value=SimpleNamespace(data=data))
    return builder


def _client(builder: MagicMock | None = None) -> MagicMock:
    client = MagicMock()
    client.table.return_value = builder or _query([])
    client.auth = MagicMock()
    client.auth.admin = MagicMock()
    return client


def _gotrue_user(user_id: str = "u-1", email: str = "admin@example.com"):
    return SimpleNamespace(id=user_id, email=email, created_at=datetime(2024, 5, 1, tzinfo=UTC))


class TestProductQueries:
    @pytest.mark.asyncio
    async def test_list_products_newest_first(self):
        builder = _query([{"id": "p1", "name": "Widget", "price": 9.99, "created_at": CREATED}])
        client = _client(builder)
        backend = SupabaseBackend(client, client)

        products = await backend.list_products()

        client.table.assert_called_with("products")
        builder.order.assert_called_once_with("created_at", desc=True)
        assert products[0].name == "Widget"
        assert products[0].price == 9.99

    @pytest.mark.asyncio
    async def test_get_product_missing_row(self):
        builder = _query()
        builder.execute = AsyncMock(return_value=None)
        client = _client(builder)

        assert await SupabaseBackend(client, client).get_product("p1") is None
        builder.eq.assert_called_once_with("id", "p1")

    @pytest.mark.asyncio
    async def test_update_returns_none_when_nothing_matched(self):
        client = _client(_query([]))

        assert await SupabaseBackend(client, client).update_product("p1", {"name": "x"}) is None

    @pytest.mark.asyncio
    async def test_product_ids_in_category(self):
        builder = _query([{"id": "p1"}, {"id": "p2"}])
        client = _client(builder)

        ids = await SupabaseBackend(client, client).product_ids_in_category("Vehicles")

        assert ids == ["p1", "p2"]
        builder.eq.assert_called_once_with("category", "Vehicles")

    @pytest.mark.asyncio
    async def test_api_error_is_translated(self):
        error = APIError({"message": "permission denied", "code": "42501", "hint": None, "details": None})
        client = _client(_query(error=error))

        with pytest.raises(BackendError) as exc_info:
            await SupabaseBackend(client, client).list_products()

        assert exc_info.value.code == "42501"
        assert not isinstance(exc_info.value, UniqueViolationError)

    @pytest.mark.asyncio
    async def test_null_featured_reads_as_not_featured(self):
        row = {"id": "p1", "name": "Widget", "price": 9.99, "featured": None, "created_at": CREATED}
        client = _client(_query([row]))

        products = await SupabaseBackend(client, client).list_products()

        assert products[0].featured is False

    @pytest.mark.asyncio
    async def test_unreadable_row_is_a_backend_error(self):
        client = _client(_query([{"id": "p1", "name": None, "price": 9.99, "created_at": CREATED}]))

        with pytest.raises(BackendError, match="unreadable row"):
            await SupabaseBackend(client, client).list_products()

    @pytest.mark.asyncio
    async def test_network_error_is_translated(self):
        client = _client(_query(error=httpx.ConnectError("down")))

        with pytest.raises(BackendError):
            await SupabaseBackend(client, client).list_categories()


class TestCategoryQueries:
    @pytest.mark.asyncio
    async def test_duplicate_name_raises_unique_violation(self):
        error = APIError(
            {"message": "duplicate key value", "code": "23505", "hint": None, "details": None}
        )
        client = _client(_query(error=error))

        with pytest.raises(UniqueViolationError):
            await SupabaseBackend(client, client).insert_category("Home")

    @pytest.mark.asyncio
    async def test_categories_ordered_by_name(self):
        builder = _query([{"id": "c1", "name": "Home", "created_at": CREATED}])
        client = _client(builder)

        categories = await SupabaseBackend(client, client).list_categories()

        builder.order.assert_called_once_with("name")
        assert [c.name for c in categories] == ["Home"]


class TestAuth:
    @pytest.mark.asyncio
    async def test_sign_in_returns_session(self):
        auth = _client()
        auth.auth.sign_in_with_password = AsyncMock(
            return_value=SimpleNamespace(
                session=SimpleNamespace(
                    access_token="at", refresh_token="rt", expires_at=1_700_000_000
                ),
                user=_gotrue_user(),
            )
        )

        session = await SupabaseBackend(auth, _client()).sign_in("admin@example.com", "pw")

        assert session.access_token == "at"
        assert session.user.email == "admin@example.com"
        assert session.expires_at == datetime.fromtimestamp(1_700_000_000, UTC)

    @pytest.mark.asyncio
    async def test_rejected_credentials(self):
        auth = _client()
        auth.auth.sign_in_with_password = AsyncMock(
            side_effect=AuthApiError("Invalid login credentials", 400, "invalid_credentials")
        )

        with pytest.raises(AuthenticationError):
            await SupabaseBackend(auth, _client()).sign_in("admin@example.com", "bad")

    @pytest.mark.asyncio
    async def test_expired_token_resolves_to_no_user(self):
        auth = _client()
        auth.auth.get_user = AsyncMock(side_effect=AuthApiError("JWT expired", 401, None))

        assert await SupabaseBackend(auth, _client()).get_session("old") is None

    @pytest.mark.asyncio
    async def test_get_session_returns_user(self):
        auth = _client()
        auth.auth.get_user = AsyncMock(return_value=SimpleNamespace(user=_gotrue_user("u-9")))

        user = await SupabaseBackend(auth, _client()).get_session("token")

        assert user.id == "u-9"
        auth.auth.get_user.assert_awaited_once_with("token")

    @pytest.mark.asyncio
    async def test_sign_out_notifies_listeners(self):
        auth = _client()
        auth.auth.admin.sign_out = AsyncMock()
        backend = SupabaseBackend(auth, _client())
        events = []
        backend.on_auth_state_change("at", lambda event, user: events.append(event))

        await backend.sign_out("at")

        auth.auth.admin.sign_out.assert_awaited_once_with("at")
        assert events == ["SIGNED_OUT"]


class TestAdmin:
    @pytest.mark.asyncio
    async def test_admin_operations_need_service_role(self):
        backend = SupabaseBackend(_client(), _client(), admin_client=None)

        with pytest.raises(AdminCredentialsMissing):
            await backend.admin_list_users()
        with pytest.raises(AdminCredentialsMissing):
            await backend.admin_delete_user("u-1")

    @pytest.mark.asyncio
    async def test_list_and_delete_users(self):
        admin = _client()
        admin.auth.admin.list_users = AsyncMock(return_value=[_gotrue_user("u-1"), _gotrue_user("u-2", "b@example.com")])
        admin.auth.admin.delete_user = AsyncMock()
        backend = SupabaseBackend(_client(), admin, admin_client=admin)

        users = await backend.admin_list_users()
        await backend.admin_delete_user("u-2")

        assert [u.email for u in users] == ["admin@example.com", "b@example.com"]
        admin.auth.admin.delete_user.assert_awaited_once_with("u-2")
