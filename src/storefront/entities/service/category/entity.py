"""Entity: Category."""

from pydantic import Field

from src.storefront.entities.core._base import Entity


class Category(Entity):
    """A category row. ``name`` is unique and is what products reference."""

    name: str = Field(description="Unique category name")
