"""View components behind the HTTP routes."""

from .dashboard import DashboardPage, DashboardView
from .detail import ProductDetailPage, ProductDetailView
from .gallery import GalleryPage, GalleryView, ProductCard
from .product_form import (
    FormOutcome,
    ProductFormPage,
    ProductFormValues,
    ProductFormView,
    validate_product_form,
)

__all__ = [
    "DashboardPage",
    "DashboardView",
    "FormOutcome",
    "GalleryPage",
    "GalleryView",
    "ProductCard",
    "ProductDetailPage",
    "ProductDetailView",
    "ProductFormPage",
    "ProductFormValues",
    "ProductFormView",
    "validate_product_form",
]
