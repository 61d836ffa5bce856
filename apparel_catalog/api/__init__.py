"""FastAPI routes for the apparel catalog."""

from apparel_catalog.api.catalog import router as catalog_router

__all__ = ["catalog_router"]
