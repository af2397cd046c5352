"""Pure catalog helpers shared by the gallery and detail views."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from urllib.parse import quote

from loguru import logger

from src.storefront.entities import Product

DEFAULT_FEATURED_LIMIT = 4
WHATSAPP_BASE_URL = "https://wa.me"

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"
_CENTS = Decimal("0.01")


def coerce_price(value: Any) -> Decimal:
    """Turn any stored price into a finite Decimal, falling back to zero.

    Floats go through ``str`` first so ``9.005`` is read as the decimal the
    user typed rather than its binary approximation.
    """
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        logger.warning("Unreadable price {!r}; showing 0", value)
        return Decimal(0)

    if not amount.is_finite():
        logger.warning("Non-finite price {!r}; showing 0", value)
        return Decimal(0)
    return amount


def format_price(value: Any) -> str:
    """Two fraction digits, half-up: ``9.5 -> $9.50``, ``9.005 -> $9.01``."""
    return f"${coerce_price(value).quantize(_CENTS, rounding=ROUND_HALF_UP)}"


def matches_search(product: Product, search: str) -> bool:
    """Case-insensitive substring match on name or description."""
    if not search:
        return True
    needle = search.casefold()
    if needle in product.name.casefold():
        return True
    return bool(product.description) and needle in product.description.casefold()


def filter_products(products: Iterable[Product], search: str = "", category: str = "") -> list[Product]:
    """Products matching both the search text and the exact category."""
    return [
        product
        for product in products
        if matches_search(product, search)
        and (not category or product.category == category)
    ]


@dataclass
class Partition:
    featured: list[Product] = field(default_factory=list)
    regular: list[Product] = field(default_factory=list)
    featured_total: int = 0


def partition_products(
    products: Sequence[Product], featured_limit: int = DEFAULT_FEATURED_LIMIT
) -> Partition:
    """Split into featured and regular groups.

    Only ``featured_limit`` featured products are kept for display;
    ``featured_total`` still counts all of them.
    """
    featured = [product for product in products if product.featured]
    regular = [product for product in products if not product.featured]
    return Partition(
        featured=featured[:featured_limit],
        regular=regular,
        featured_total=len(featured),
    )


def category_options(products: Iterable[Product]) -> list[str]:
    """Distinct categories in use by the given products, sorted by name.

    Categories without products do not appear here even though they exist in
    the categories table.
    """
    return sorted({product.category for product in products if product.category})


def build_order_message(product: Product) -> str:
    return f"Hello, I'm interested in the product: {product.name} - {format_price(product.price)}"


def build_order_url(product: Product, whatsapp_number: str) -> str:
    """Chat deep link carrying the pre-filled order message."""
    text = quote(build_order_message(product), safe=_URI_COMPONENT_SAFE)
    return f"{WHATSAPP_BASE_URL}/{whatsapp_number}?text={text}"
