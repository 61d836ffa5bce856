"""Business logic services for the apparel catalog."""

from apparel_catalog.services.catalog import (
    CatalogItemService,
    FailureKind,
    ServiceResult,
)
from apparel_catalog.services.image_storage import LocalImageStorage
from apparel_catalog.services.store import (
    CatalogItemStore,
    CatalogStoreError,
    ConnectionFailure,
    ConstraintViolation,
    RecordNotFound,
    SqlAlchemyCatalogStore,
)
from apparel_catalog.services.transcoder import from_storage, to_storage

__all__ = [
    "CatalogItemService",
    "CatalogItemStore",
    "CatalogStoreError",
    "ConnectionFailure",
    "ConstraintViolation",
    "FailureKind",
    "LocalImageStorage",
    "RecordNotFound",
    "ServiceResult",
    "SqlAlchemyCatalogStore",
    "from_storage",
    "to_storage",
]
