"""Entity package: Category."""

from .entity import Category

__all__ = ["Category"]
