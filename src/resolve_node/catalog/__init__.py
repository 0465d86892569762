"""Release catalog loading."""

from .loader import CatalogLoader

__all__ = ["CatalogLoader"]
