"""Helpers shared by the test modules."""

import asyncio
from typing import Any

from src.storefront.core.backend import InMemoryBackend
from src.storefront.entities import Product

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct horse battery staple"

CATALOG_ROWS: list[dict[str, Any]] = [
    {
        "name": "Red Bicycle",
        "model_name": "RB-200",
        "description": "A fast road bike",
        "price": 499.0,
        "category": "Vehicles",
        "featured": True,
    },
    {
        "name": "Blue Scooter",
        "description": "Electric, folds flat",
        "price": 299.5,
        "category": "Vehicles",
        "featured": False,
    },
    {
        "name": "Desk Lamp",
        "description": "Warm light with a red shade",
        "price": 25,
        "category": "Home",
        "featured": True,
    },
    {
        "name": "Notebook",
        "description": None,
        "price": 3.005,
        "category": None,
        "featured": False,
    },
]


async def seed_catalog(backend: InMemoryBackend) -> dict[str, Product]:
    """Insert the categories and products above; returns products by name."""
    for name in ("Home", "Vehicles"):
        await backend.insert_category(name)
    products = await backend.insert_products(CATALOG_ROWS)
    return {product.name: product for product in products}


async def seed_admin(backend: InMemoryBackend) -> None:
    await backend.sign_up(ADMIN_EMAIL, ADMIN_PASSWORD)


class SlowInMemoryBackend(InMemoryBackend):
    """In-memory backend whose product writes wait on an event."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.release = asyncio.Event()
        self.insert_calls = 0
        self.update_calls = 0

    async def insert_products(self, rows):
        self.insert_calls += 1
        await self.release.wait()
        return await super().insert_products(rows)

    async def update_product(self, product_id, values):
        self.update_calls += 1
        await self.release.wait()
        return await super().update_product(product_id, values)
