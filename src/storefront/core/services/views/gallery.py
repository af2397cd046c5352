"""Public product gallery."""

from __future__ import annotations

from loguru import logger
from pydantic import BaseModel, Field

from src.storefront.core.backend import BackendError, StoreBackend
from src.storefront.core.models import Notice
from src.storefront.core.services.catalog import (
    DEFAULT_FEATURED_LIMIT,
    category_options,
    filter_products,
    format_price,
    partition_products,
)
from src.storefront.core.services.views.base import View
from src.storefront.entities import Product


class ProductCard(Product):
    """A product plus its display price."""

    price_display: str

    @classmethod
    def from_product(cls, product: Product) -> "ProductCard":
        return cls(**product.model_dump(), price_display=format_price(product.price))


class GalleryPage(BaseModel):
    search: str = ""
    category: str = ""
    featured: list[ProductCard] = Field(default_factory=list)
    products: list[ProductCard] = Field(default_factory=list)
    featured_total: int = 0
    categories: list[str] = Field(default_factory=list)
    errors: list[Notice] = Field(default_factory=list)


class GalleryView(View):
    def __init__(self, backend: StoreBackend, featured_limit: int = DEFAULT_FEATURED_LIMIT) -> None:
        super().__init__()
        self._backend = backend
        self._featured_limit = featured_limit
        self.products: list[Product] = []

    async def load_products(self) -> None:
        """Fetch every product, newest first. On failure the list stays empty."""
        self._set(loading=True)
        try:
            products = await self._backend.list_products()
        except BackendError:
            logger.exception("Failed to load products for the gallery")
            self._report("Failed to load products")
        else:
            self._set(products=products)
        finally:
            self._set(loading=False)

    def page(self, search: str = "", category: str = "") -> GalleryPage:
        filtered = filter_products(self.products, search, category)
        partition = partition_products(filtered, self._featured_limit)
        return GalleryPage(
            search=search,
            category=category,
            featured=[ProductCard.from_product(p) for p in partition.featured],
            products=[ProductCard.from_product(p) for p in partition.regular],
            featured_total=partition.featured_total,
            categories=category_options(self.products),
            errors=list(self.errors),
        )
