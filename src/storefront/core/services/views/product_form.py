"""Create/edit product form."""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Literal

from loguru import logger
from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, ValidationError

from src.storefront.core.backend import BackendError, StoreBackend, UniqueViolationError
from src.storefront.core.errors import (
    BackendFailure,
    CategoryAlreadyExists,
    ValidationFailed,
)
from src.storefront.core.models import Notice
from src.storefront.core.services.submission import SubmissionGuard
from src.storefront.core.services.views.base import View
from src.storefront.entities import Product

DASHBOARD_PATH = "/admin"
NAME_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000

HTTP_SCHEMES = ("http", "https")

# Any length; scheme and host checked in _check_url
_url = TypeAdapter(AnyUrl)


class ProductFormValues(BaseModel):
    """Raw form fields as entered. ``None`` and ``""`` both mean "not provided"."""

    name: str | None = None
    model_name: str | None = None
    description: str | None = None
    price: str | float | None = None
    image_url: str | None = None
    youtube_url: str | None = None
    category: str | None = None
    featured: bool = False

    @classmethod
    def from_product(cls, product: Product) -> "ProductFormValues":
        return cls(**product.row())


class ProductFormPage(BaseModel):
    mode: Literal["new", "editing"]
    product_id: str | None = None
    values: ProductFormValues
    categories: list[str] = Field(default_factory=list)
    notice: Notice | None = None
    errors: list[Notice] = Field(default_factory=list)


class FormOutcome(BaseModel):
    notice: Notice
    redirect_to: str
    product: Product | None = None


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _parse_price(value: str | float | None) -> float:
    if isinstance(value, bool):
        raise ValidationFailed("Price must be a positive number")
    raw = _text(value)
    if not raw:
        raise ValidationFailed("Price is required")
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise ValidationFailed("Price must be a positive number") from None
    if not amount.is_finite() or amount <= 0:
        raise ValidationFailed("Price must be a positive number")

    price = float(amount)
    if not math.isfinite(price):
        raise ValidationFailed("Price must be a positive number")
    return price


def _check_url(value: str, label: str) -> None:
    try:
        url = _url.validate_python(value)
    except ValidationError:
        raise ValidationFailed(f"{label} must be a valid URL") from None
    if url.scheme not in HTTP_SCHEMES or not url.host:
        raise ValidationFailed(f"{label} must be a valid URL")


def validate_product_form(values: ProductFormValues) -> dict[str, Any]:
    """Validate and normalise the form into a product row.

    Raises ``ValidationFailed`` naming the first rule broken. Text is trimmed
    and empty optional fields become ``None``. The model name is optional and
    accepts any characters.
    """
    name = _text(values.name)
    if not name:
        raise ValidationFailed("Name is required")
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationFailed(f"Name must be at most {NAME_MAX_LENGTH} characters")

    description = _text(values.description)
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationFailed(
            f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )

    price = _parse_price(values.price)

    image_url = _text(values.image_url)
    if image_url:
        _check_url(image_url, "Image URL")
    youtube_url = _text(values.youtube_url)
    if youtube_url:
        _check_url(youtube_url, "Video URL")

    return {
        "name": name,
        "model_name": _text(values.model_name) or None,
        "description": description or None,
        "price": price,
        "image_url": image_url or None,
        "youtube_url": youtube_url or None,
        "category": _text(values.category) or None,
        "featured": values.featured,
    }


class ProductFormView(View):
    """One form serving two states.

    ``new``: empty fields, submit inserts. ``editing``: fields pre-filled from
    the product in the URL, submit updates. Both end on the dashboard, as does
    :meth:`cancel`, which has no side effects.
    """

    def __init__(
        self,
        backend: StoreBackend,
        guard: SubmissionGuard,
        session_key: str,
        product_id: str | None = None,
        values: ProductFormValues | None = None,
    ) -> None:
        super().__init__()
        self._backend = backend
        self._guard = guard
        self._session_key = session_key
        self.product_id = product_id
        self.values = values or ProductFormValues()
        self.categories: list[str] = []
        self.notice: Notice | None = None

    @property
    def mode(self) -> Literal["new", "editing"]:
        return "editing" if self.product_id else "new"

    @property
    def submit_key(self) -> str:
        return f"{self._session_key}:product-form:{self.product_id or 'new'}"

    async def load(self) -> bool:
        """Fetch category options and, when editing, the product.

        Returns False when the product to edit cannot be loaded.
        """
        self._set(loading=True)
        try:
            await self.fetch_categories()
            if self.product_id is None:
                return True

            try:
                product = await self._backend.get_product(self.product_id)
            except BackendError:
                logger.exception("Failed to load product {} for editing", self.product_id)
                product = None
            if product is None:
                return False

            self._set(values=ProductFormValues.from_product(product))
            return True
        finally:
            self._set(loading=False)

    async def fetch_categories(self) -> None:
        try:
            categories = await self._backend.list_categories()
        except BackendError:
            logger.exception("Failed to load categories for the product form")
            self._report("Failed to load categories")
            return
        self._set(categories=[category.name for category in categories])

    def page(self) -> ProductFormPage:
        return ProductFormPage(
            mode=self.mode,
            product_id=self.product_id,
            values=self.values,
            categories=list(self.categories),
            notice=self.notice,
            errors=list(self.errors),
        )

    async def submit(self, values: ProductFormValues) -> FormOutcome:
        self._set(values=values)
        row = validate_product_form(values)

        async with self._guard.hold(self.submit_key):
            self._set(busy=True)
            try:
                if self.product_id is None:
                    product = await self._insert(row)
                    message = "Product created successfully"
                else:
                    product = await self._update(row)
                    message = "Product updated successfully"
            finally:
                self._set(busy=False)

        return FormOutcome(
            notice=Notice.success(message), redirect_to=DASHBOARD_PATH, product=product
        )

    async def _insert(self, row: dict[str, Any]) -> Product:
        try:
            created = await self._backend.insert_products([row])
        except BackendError as e:
            logger.exception("Failed to create product")
            raise BackendFailure("Failed to create product") from e
        return created[0]

    async def _update(self, row: dict[str, Any]) -> Product:
        try:
            updated = await self._backend.update_product(self.product_id, row)
        except BackendError as e:
            logger.exception("Failed to update product {}", self.product_id)
            raise BackendFailure("Failed to update product") from e
        if updated is None:
            logger.error("Product {} disappeared before the update", self.product_id)
            raise BackendFailure("Failed to update product")
        return updated

    def cancel(self) -> str:
        return DASHBOARD_PATH

    async def create_category(self, name: str) -> None:
        """Insert a category from the form and select it."""
        name = name.strip()
        if not name:
            raise ValidationFailed("Category name is required")

        async with self._guard.hold(f"{self._session_key}:form-category"):
            self._set(busy=True)
            try:
                await self._backend.insert_category(name)
            except UniqueViolationError as e:
                raise CategoryAlreadyExists() from e
            except BackendError as e:
                logger.exception("Failed to create category {!r} from the form", name)
                raise BackendFailure("Failed to create category") from e
            finally:
                self._set(busy=False)

        await self.fetch_categories()
        self._set(
            values=self.values.model_copy(update={"category": name}),
            notice=Notice.success("Category created successfully"),
        )
