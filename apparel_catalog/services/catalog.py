"""Catalog item service.

Wraps the field transcoder around an injected row store and reports every
outcome through a ServiceResult envelope. Store failures are classified by
exception type; nothing is retried.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from apparel_catalog.schemas import CatalogItemCreate, CatalogItemUpdate
from apparel_catalog.services.store import (
    CatalogItemStore,
    CatalogStoreError,
    ConnectionFailure,
    ConstraintViolation,
    RecordNotFound,
)
from apparel_catalog.services.transcoder import (
    from_storage,
    parse_specifications,
    to_storage,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FailureKind(str, Enum):
    """Why a catalog operation failed."""

    CONSTRAINT_VIOLATION = "constraint_violation"
    NOT_FOUND = "not_found"
    CONNECTION_FAILURE = "connection_failure"
    STORE_ERROR = "store_error"


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Uniform outcome of a catalog operation.

    Attributes:
        success: Whether the operation succeeded
        data: Operation payload on success
        error: Error message on failure
        failure: Failure classification on failure
    """

    success: bool
    data: T | None = None
    error: str | None = None
    failure: FailureKind | None = None

    @classmethod
    def ok(cls, data: T | None = None) -> "ServiceResult[T]":
        """Build a successful result carrying ``data``."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, failure: FailureKind, error: str) -> "ServiceResult[T]":
        """Build a failed result with its classification and message."""
        return cls(success=False, error=error, failure=failure)


def classify_store_error(error: CatalogStoreError) -> FailureKind:
    """Map a store exception to a FailureKind."""
    if isinstance(error, ConstraintViolation):
        return FailureKind.CONSTRAINT_VIOLATION
    if isinstance(error, RecordNotFound):
        return FailureKind.NOT_FOUND
    if isinstance(error, ConnectionFailure):
        return FailureKind.CONNECTION_FAILURE
    return FailureKind.STORE_ERROR


class CatalogItemService:
    """List, create, update and delete catalog items against a row store."""

    def __init__(
        self,
        store: CatalogItemStore,
        *,
        merge_extension_fields: bool = False,
    ) -> None:
        """Initialize the service.

        Args:
            store: Row store handle, owned by the caller.
            merge_extension_fields: Keep stored extension fields that an
                update does not mention. When False, every update rewrites
                the whole specifications blob from the request alone.
        """
        self.store = store
        self.merge_extension_fields = merge_extension_fields

    def _failure(self, operation: str, error: CatalogStoreError) -> ServiceResult[Any]:
        failure = classify_store_error(error)
        logger.error("Catalog %s failed (%s): %s", operation, failure.value, error)
        return ServiceResult.fail(failure, str(error) or failure.value)

    async def list_items(self) -> ServiceResult[list[dict[str, Any]]]:
        """Return every catalog item, newest first."""
        try:
            rows = await self.store.list_rows()
        except CatalogStoreError as e:
            return self._failure("list", e)
        return ServiceResult.ok([from_storage(row) for row in rows])

    async def get_item(self, item_id: str) -> ServiceResult[dict[str, Any]]:
        """Return one catalog item, or a NOT_FOUND failure if the id is unknown."""
        try:
            row = await self.store.get_row(item_id)
        except CatalogStoreError as e:
            return self._failure("get", e)
        return ServiceResult.ok(from_storage(row))

    async def create_item(
        self, request: CatalogItemCreate
    ) -> ServiceResult[dict[str, Any]]:
        """Create a catalog item with a fresh id.

        Args:
            request: Validated create request.

        Returns:
            ServiceResult carrying the created item in API shape.
        """
        values = to_storage(request.to_input())
        values["id"] = str(uuid.uuid4())
        values["created_at"] = datetime.now(UTC)

        try:
            row = await self.store.insert_row(values)
        except CatalogStoreError as e:
            return self._failure("create", e)

        item = from_storage(row)
        logger.info("Catalog item created: %s", values["id"])
        return ServiceResult.ok(item)

    async def update_item(
        self, item_id: str, request: CatalogItemUpdate
    ) -> ServiceResult[dict[str, Any]]:
        """Apply a partial update to a catalog item.

        First-class fields the request leaves out keep their stored values.
        Extension fields are rewritten from the request unless the service
        merges extension fields, in which case the stored ones are kept too.
        There is no version check; the last write wins.

        Args:
            item_id: Id of the item to update.
            request: Validated update request.

        Returns:
            ServiceResult carrying the updated item, or a NOT_FOUND failure.
        """
        base_specifications = None
        try:
            if self.merge_extension_fields:
                current = await self.store.get_row(item_id)
                base_specifications = parse_specifications(current.get("specifications"))
            values = to_storage(request.to_input(), base_specifications)
            row = await self.store.update_row(item_id, values)
        except CatalogStoreError as e:
            return self._failure("update", e)

        logger.info("Catalog item updated: %s", item_id)
        return ServiceResult.ok(from_storage(row))

    async def delete_item(self, item_id: str) -> ServiceResult[dict[str, Any]]:
        """Delete a catalog item.

        The deleted item is returned so the caller can remove its stored
        image; this service does not touch blob storage.
        """
        try:
            row = await self.store.delete_row(item_id)
        except CatalogStoreError as e:
            return self._failure("delete", e)

        logger.info("Catalog item deleted: %s", item_id)
        return ServiceResult.ok(from_storage(row))

    async def is_sku_available(
        self, sku: str, exclude_id: str | None = None
    ) -> ServiceResult[bool]:
        """Check that no other catalog item holds ``sku``."""
        try:
            existing_id = await self.store.find_id_by_sku(sku.strip(), exclude_id)
        except CatalogStoreError as e:
            return self._failure("sku validation", e)
        return ServiceResult.ok(existing_id is None)
