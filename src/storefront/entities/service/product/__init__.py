"""Entity package: Product."""

from .entity import PRODUCT_COLUMNS, Product

__all__ = ["PRODUCT_COLUMNS", "Product"]
