"""Entity: Product."""

from typing import Any

from pydantic import Field, field_validator

from src.storefront.entities.core._base import Entity

# Columns written by the product form.
PRODUCT_COLUMNS = (
    "name",
    "model_name",
    "description",
    "price",
    "image_url",
    "youtube_url",
    "category",
    "featured",
)


class Product(Entity):
    """A product row from the ``products`` table.

    ``price`` is kept as stored: numbers come back as ``float`` but the gallery
    must also cope with textual values, so formatting coerces it.
    ``category`` references a Category by name, not by id.
    """

    name: str = Field(description="Display name")
    description: str | None = Field(default=None, description="Free-text description")
    price: float | str = Field(default=0, description="Unit price, currency-agnostic")
    image_url: str | None = Field(default=None, description="Product image URL")
    youtube_url: str | None = Field(default=None, description="External video URL")
    category: str | None = Field(default=None, description="Category name")
    featured: bool = Field(default=False, description="Shown in the suggestions section")
    model_name: str | None = Field(default=None, description="Model or SKU name")

    @field_validator("featured", mode="before")
    @classmethod
    def _null_featured_is_false(cls, value: Any) -> Any:
        # Rows written before the column had a default hold NULL
        return False if value is None else value

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return self.id == other.id and self.row() == other.row()

    def __hash__(self) -> int:
        return hash(self.id)

    def row(self) -> dict[str, Any]:
        """Writable columns as a plain dict."""
        return {column: getattr(self, column) for column in PRODUCT_COLUMNS}
