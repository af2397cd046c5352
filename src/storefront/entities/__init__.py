"""Entities module organised by business concept.

Rows live in the hosted backend, so each package holds only the pydantic
domain model; there are no table or repository modules here.
"""

from .core.user import AuthUser, BackendSession
from .service.category import Category
from .service.product import PRODUCT_COLUMNS, Product

__all__ = [
    "AuthUser",
    "BackendSession",
    "Category",
    "PRODUCT_COLUMNS",
    "Product",
]
