"""Product detail with the chat ordering link."""

from __future__ import annotations

from loguru import logger
from pydantic import BaseModel

from src.storefront.core.backend import BackendError, StoreBackend
from src.storefront.core.services.catalog import build_order_message, build_order_url
from src.storefront.core.services.views.base import View
from src.storefront.core.services.views.gallery import ProductCard
from src.storefront.entities import Product


class ProductDetailPage(BaseModel):
    product: ProductCard
    order_message: str
    order_url: str


class ProductDetailView(View):
    def __init__(self, backend: StoreBackend, whatsapp_number: str) -> None:
        super().__init__()
        self._backend = backend
        self._whatsapp_number = whatsapp_number
        self.product: Product | None = None

    async def load_product(self, product_id: str) -> Product | None:
        """Fetch one product.

        A missing row and a failed call both yield ``None``; the caller sends
        the visitor back to the gallery either way.
        """
        self._set(loading=True)
        try:
            product = await self._backend.get_product(product_id)
        except BackendError:
            logger.exception("Error fetching product {}", product_id)
            product = None
        finally:
            self._set(loading=False)

        self._set(product=product)
        return product

    def page(self) -> ProductDetailPage:
        if self.product is None:
            raise RuntimeError("page() called before a product was loaded")
        return ProductDetailPage(
            product=ProductCard.from_product(self.product),
            order_message=build_order_message(self.product),
            order_url=build_order_url(self.product, self._whatsapp_number),
        )
