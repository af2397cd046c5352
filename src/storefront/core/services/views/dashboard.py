"""Admin dashboard: products, categories and users."""

from __future__ import annotations

from loguru import logger
from pydantic import BaseModel, Field

from src.storefront.core.backend import AdminCredentialsMissing, BackendError, StoreBackend
from src.storefront.core.errors import BackendFailure, CategoryInUse, ValidationFailed
from src.storefront.core.models import Notice, UserSession
from src.storefront.core.services.session.user_session import UserSessionService
from src.storefront.core.services.submission import SubmissionGuard
from src.storefront.core.services.views.base import View
from src.storefront.core.services.views.gallery import ProductCard
from src.storefront.entities import AuthUser, Category, Product


class DashboardPage(BaseModel):
    products: list[ProductCard] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    users: list[AuthUser] = Field(default_factory=list)
    pending_delete_id: str | None = None
    notice: Notice | None = None
    errors: list[Notice] = Field(default_factory=list)


class DashboardView(View):
    """Lists and mutations of the admin dashboard.

    Every mutation either succeeds (success notice, affected list re-fetched)
    or raises a :class:`StorefrontError` and leaves the lists as they were.
    The category delete checks for referencing products first and then
    deletes; the two steps are not atomic, which is accepted for a single
    admin writer.
    """

    def __init__(
        self,
        backend: StoreBackend,
        sessions: UserSessionService,
        guard: SubmissionGuard,
        user_session: UserSession,
    ) -> None:
        super().__init__()
        self._backend = backend
        self._sessions = sessions
        self._guard = guard
        self._session = user_session
        self.products: list[Product] = []
        self.categories: list[Category] = []
        self.users: list[AuthUser] = []
        self.notice: Notice | None = None

    def _key(self, action: str) -> str:
        return f"{self._session.id}:{action}"

    # -- loading ------------------------------------------------------------

    async def load(self) -> None:
        self._set(loading=True)
        try:
            await self.fetch_products()
            await self.fetch_categories()
            await self.fetch_users()
        finally:
            self._set(loading=False)

    async def fetch_products(self) -> None:
        try:
            self._set(products=await self._backend.list_products())
        except BackendError:
            logger.exception("Failed to load products for the dashboard")
            self._report("Failed to load products")

    async def fetch_categories(self) -> None:
        try:
            self._set(categories=await self._backend.list_categories())
        except BackendError:
            logger.exception("Failed to load categories")
            self._report("Failed to load categories")

    async def fetch_users(self) -> None:
        try:
            self._set(users=await self._backend.admin_list_users())
        except AdminCredentialsMissing:
            logger.warning("User listing needs the service-role credential")
            self._report("User management is not available")
        except BackendError:
            logger.exception("Failed to load users")
            self._report("Failed to load users")

    def page(self) -> DashboardPage:
        return DashboardPage(
            products=[ProductCard.from_product(p) for p in self.products],
            categories=list(self.categories),
            users=list(self.users),
            pending_delete_id=self._session.pending_delete_id,
            notice=self.notice,
            errors=list(self.errors),
        )

    # -- products -----------------------------------------------------------

    async def request_delete(self, product_id: str) -> None:
        """First phase: remember which product the admin wants to delete."""
        await self._sessions.set_pending_delete(self._session, product_id)

    async def cancel_delete(self) -> None:
        await self._sessions.set_pending_delete(self._session, None)

    async def confirm_delete(self) -> None:
        """Second phase: delete the pending product.

        The pending mark is cleared and the list re-fetched whatever the outcome.
        """
        product_id = self._session.pending_delete_id
        if not product_id:
            raise ValidationFailed("No product is marked for deletion")

        async with self._guard.hold(self._key("delete-product")):
            self._set(busy=True)
            try:
                await self._backend.delete_product(product_id)
            except BackendError as e:
                logger.exception("Failed to delete product {}", product_id)
                raise BackendFailure("Failed to delete product") from e
            finally:
                await self._sessions.set_pending_delete(self._session, None)
                await self.fetch_products()
                self._set(busy=False)

        self._set(notice=Notice.success("Product deleted successfully"))

    # -- categories ---------------------------------------------------------

    async def create_category(self, name: str) -> None:
        name = name.strip()
        if not name:
            raise ValidationFailed("Category name is required")

        async with self._guard.hold(self._key("create-category")):
            self._set(busy=True)
            try:
                await self._backend.insert_category(name)
            except BackendError as e:
                logger.exception("Failed to create category {!r}", name)
                raise BackendFailure("Failed to create category") from e
            finally:
                self._set(busy=False)

        await self.fetch_categories()
        self._set(notice=Notice.success("Category created successfully"))

    async def delete_category(self, name: str) -> None:
        """Delete a category nobody references. Referenced ones are refused."""
        async with self._guard.hold(self._key("delete-category")):
            self._set(busy=True)
            try:
                referencing = await self._backend.product_ids_in_category(name)
                if referencing:
                    raise CategoryInUse()
                await self._backend.delete_category(name)
            except BackendError as e:
                logger.exception("Failed to delete category {!r}", name)
                raise BackendFailure("Failed to delete category") from e
            finally:
                self._set(busy=False)

        await self.fetch_categories()
        self._set(notice=Notice.success("Category deleted successfully"))

    # -- users --------------------------------------------------------------

    async def create_user(self, email: str, password: str) -> None:
        email = email.strip()
        if not email or not password:
            raise ValidationFailed("Email and password are required")

        async with self._guard.hold(self._key("create-user")):
            self._set(busy=True)
            try:
                await self._backend.sign_up(email, password)
            except BackendError as e:
                logger.exception("Failed to create user {}", email)
                raise BackendFailure("Failed to create user") from e
            finally:
                self._set(busy=False)

        await self.fetch_users()
        self._set(notice=Notice.success("User created successfully"))

    async def delete_user(self, user_id: str) -> None:
        """Remove the identity itself through the admin API, revoking its sessions."""
        async with self._guard.hold(self._key("delete-user")):
            self._set(busy=True)
            try:
                await self._backend.admin_delete_user(user_id)
            except BackendError as e:
                logger.exception("Failed to delete user {}", user_id)
                raise BackendFailure("Failed to delete user") from e
            finally:
                self._set(busy=False)

        await self.fetch_users()
        self._set(notice=Notice.success("User deleted successfully"))
