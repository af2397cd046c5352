"""Public pages: the gallery and the product detail."""

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.storefront.api.http.deps import get_backend
from src.storefront.api.http.responses import see_other
from src.storefront.core.backend import StoreBackend
from src.storefront.core.services.views import (
    GalleryPage,
    GalleryView,
    ProductDetailPage,
    ProductDetailView,
)
from src.storefront.runtime.context import get_config

router = APIRouter(tags=["storefront"])

GALLERY_PATH = "/"


@router.get("/", response_model=GalleryPage)
async def gallery(
    search: str = "",
    category: str = "",
    backend: StoreBackend = Depends(get_backend),
) -> GalleryPage:
    """All products, filtered by free-text search and exact category.

    Featured products are listed separately and capped; the rest are unbounded.
    """
    async with GalleryView(backend, get_config().store.featured_limit) as view:
        await view.load_products()
        return view.page(search=search, category=category)


@router.get("/product/{product_id}", response_model=None)
async def product_detail(
    product_id: str,
    backend: StoreBackend = Depends(get_backend),
) -> ProductDetailPage | JSONResponse:
    """One product with its ordering link, or back to the gallery if it cannot be shown."""
    async with ProductDetailView(backend, get_config().store.whatsapp_number) as view:
        if await view.load_product(product_id) is None:
            return see_other(GALLERY_PATH)
        return view.page()
