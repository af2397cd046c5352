"""Tests for the admin dashboard view."""

from unittest.mock import AsyncMock

import pytest

from src.storefront.core.backend import BackendError, InMemoryBackend
from src.storefront.core.errors import BackendFailure, CategoryInUse, ValidationFailed
from src.storefront.core.services import (
    InMemorySessionStorage,
    SubmissionGuard,
    UserSessionService,
)
from src.storefront.core.services.views import DashboardView
from tests.utils import ADMIN_EMAIL, ADMIN_PASSWORD, seed_admin, seed_catalog


async def _dashboard(backend: InMemoryBackend) -> DashboardView:
    sessions = UserSessionService(InMemorySessionStorage())
    backend_session = await backend.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
    session_id = await sessions.create_user_session(backend_session)
    user_session = await sessions.get_user_session(session_id)
    return DashboardView(backend, sessions, SubmissionGuard(), user_session)


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


class TestDashboardLoad:
    """Initial lists."""

    @pytest.mark.asyncio
    async def test_load_fetches_all_lists(self, backend):
        await seed_catalog(backend)
        await seed_admin(backend)

        async with await _dashboard(backend) as view:
            await view.load()
            page = view.page()

        assert len(page.products) == 4
        assert [c.name for c in page.categories] == ["Home", "Vehicles"]
        assert [u.email for u in page.users] == [ADMIN_EMAIL]
        assert page.errors == []

    @pytest.mark.asyncio
    async def test_user_listing_without_service_role(self):
        backend = InMemoryBackend(admin_enabled=False)
        await seed_admin(backend)

        async with await _dashboard(backend) as view:
            await view.load()
            page = view.page()

        assert page.users == []
        assert [e.message for e in page.errors] == ["User management is not available"]


class TestProductDelete:
    """Two-phase product delete."""

    @pytest.mark.asyncio
    async def test_request_then_confirm_deletes(self, backend):
        products = await seed_catalog(backend)
        await seed_admin(backend)
        lamp = products["Desk Lamp"]

        async with await _dashboard(backend) as view:
            await view.load()
            await view.request_delete(lamp.id)
            assert view.page().pending_delete_id == lamp.id
            assert await backend.get_product(lamp.id) is not None

            await view.confirm_delete()
            page = view.page()

        assert await backend.get_product(lamp.id) is None
        assert lamp.id not in {p.id for p in page.products}
        assert page.pending_delete_id is None
        assert page.notice.level == "success"
        assert page.notice.message == "Product deleted successfully"

    @pytest.mark.asyncio
    async def test_cancel_clears_pending(self, backend):
        products = await seed_catalog(backend)
        await seed_admin(backend)

        async with await _dashboard(backend) as view:
            await view.request_delete(products["Notebook"].id)
            await view.cancel_delete()

            assert view.page().pending_delete_id is None

        assert await backend.get_product(products["Notebook"].id) is not None

    @pytest.mark.asyncio
    async def test_confirm_without_pending_is_rejected(self, backend):
        await seed_admin(backend)

        async with await _dashboard(backend) as view:
            with pytest.raises(ValidationFailed):
                await view.confirm_delete()

    @pytest.mark.asyncio
    async def test_failed_delete_clears_pending_and_keeps_product(self, backend):
        products = await seed_catalog(backend)
        await seed_admin(backend)
        bike = products["Red Bicycle"]
        backend.delete_product = AsyncMock(side_effect=BackendError("boom"))

        async with await _dashboard(backend) as view:
            await view.request_delete(bike.id)
            with pytest.raises(BackendFailure, match="Failed to delete product"):
                await view.confirm_delete()
            page = view.page()

        assert page.pending_delete_id is None
        assert bike.id in {p.id for p in page.products}
        assert page.notice is None


class TestCategoryManagement:
    @pytest.mark.asyncio
    async def test_create_trims_and_refreshes(self, backend):
        await seed_admin(backend)

        async with await _dashboard(backend) as view:
            await view.create_category("  Garden  ")
            page = view.page()

        assert [c.name for c in page.categories] == ["Garden"]
        assert page.notice.message == "Category created successfully"

    @pytest.mark.asyncio
    async def test_blank_name_never_reaches_backend(self, backend):
        await seed_admin(backend)
        backend.insert_category = AsyncMock()

        async with await _dashboard(backend) as view:
            with pytest.raises(ValidationFailed, match="Category name is required"):
                await view.create_category("   ")

        backend.insert_category.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_surfaces_generic_failure(self, backend):
        await seed_catalog(backend)
        await seed_admin(backend)

        async with await _dashboard(backend) as view:
            with pytest.raises(BackendFailure, match="Failed to create category"):
                await view.create_category("Home")

    @pytest.mark.asyncio
    async def test_category_in_use_is_not_deleted(self, backend):
        await seed_catalog(backend)
        await seed_admin(backend)

        async with await _dashboard(backend) as view:
            await view.load()
            with pytest.raises(CategoryInUse, match="Cannot delete category that has products"):
                await view.delete_category("Vehicles")
            page = view.page()

        assert "Vehicles" in [c.name for c in await backend.list_categories()]
        assert "Vehicles" in [c.name for c in page.categories]

    @pytest.mark.asyncio
    async def test_unused_category_is_deleted(self, backend):
        await seed_admin(backend)
        await backend.insert_category("Empty")

        async with await _dashboard(backend) as view:
            await view.delete_category("Empty")
            page = view.page()

        assert page.categories == []
        assert page.notice.message == "Category deleted successfully"


class TestUserManagement:
    @pytest.mark.asyncio
    async def test_create_user(self, backend):
        await seed_admin(backend)

        async with await _dashboard(backend) as view:
            await view.create_user(" new@example.com ", "secret")
            page = view.page()

        assert "new@example.com" in [u.email for u in page.users]
        assert page.notice.message == "User created successfully"

    @pytest.mark.asyncio
    async def test_create_user_requires_both_fields(self, backend):
        await seed_admin(backend)

        async with await _dashboard(backend) as view:
            with pytest.raises(ValidationFailed, match="Email and password are required"):
                await view.create_user("new@example.com", "")

    @pytest.mark.asyncio
    async def test_delete_user_removes_identity(self, backend):
        await seed_admin(backend)
        other = await backend.sign_up("other@example.com", "pw")

        async with await _dashboard(backend) as view:
            await view.delete_user(other.id)
            page = view.page()

        assert [u.email for u in page.users] == [ADMIN_EMAIL]
        with pytest.raises(BackendError):
            await backend.sign_in("other@example.com", "pw")

    @pytest.mark.asyncio
    async def test_delete_unknown_user_fails(self, backend):
        await seed_admin(backend)

        async with await _dashboard(backend) as view:
            with pytest.raises(BackendFailure, match="Failed to delete user"):
                await view.delete_user("missing")
