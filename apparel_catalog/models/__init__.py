"""SQLAlchemy models for the apparel catalog."""

from apparel_catalog.models.catalog_item import CatalogItem

__all__ = [
    "CatalogItem",
]
