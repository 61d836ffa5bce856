"""FastAPI routes for catalog item management."""

import logging
from datetime import datetime
from typing import Annotated, Any, NoReturn

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from apparel_catalog.config import Settings, get_settings
from apparel_catalog.database import get_db
from apparel_catalog.schemas import CatalogItemCreate, CatalogItemUpdate
from apparel_catalog.services.catalog import (
    CatalogItemService,
    FailureKind,
    ServiceResult,
)
from apparel_catalog.services.image_storage import LocalImageStorage
from apparel_catalog.services.store import CatalogItemStore, SqlAlchemyCatalogStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


class CatalogAPIError(Exception):
    """Raised by catalog routes to produce a ``{success: false, ...}`` response."""

    def __init__(self, status_code: int, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error


# --- Pydantic Schemas ---


class CatalogItemOut(BaseModel):
    """A catalog item in API shape."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "ignore",
    }

    id: str
    name: str
    category: str
    sport: str
    sku: str
    status: str
    base_price: float
    unit_cost: float
    image_url: str | None = None
    fabric: str
    description: str
    min_quantity: int
    max_quantity: int
    build_instructions: str
    eta_days: str
    sizes: list[Any]
    colors: list[Any]
    customization_options: list[Any]
    specifications: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CatalogItemResponse(BaseModel):
    """Response schema for a single catalog item."""

    success: bool = True
    message: str | None = None
    data: CatalogItemOut


class CatalogItemListResponse(BaseModel):
    """Response schema for the catalog listing."""

    success: bool = True
    data: list[CatalogItemOut]
    count: int


class DeleteResponse(BaseModel):
    """Response schema for a deletion."""

    success: bool = True
    message: str


class SkuAvailabilityResponse(BaseModel):
    """Response schema for SKU validation."""

    success: bool = True
    available: bool
    message: str


# --- Dependencies ---


def get_catalog_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CatalogItemStore:
    """Dependency that provides a catalog store bound to the request session."""
    return SqlAlchemyCatalogStore(db)


def get_catalog_service(
    store: Annotated[CatalogItemStore, Depends(get_catalog_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CatalogItemService:
    """Dependency that provides a catalog service configured from settings."""
    return CatalogItemService(
        store,
        merge_extension_fields=settings.merge_extension_fields,
    )


def get_image_storage(
    settings: Annotated[Settings, Depends(get_settings)],
) -> LocalImageStorage:
    """Dependency that provides the catalog image storage."""
    return LocalImageStorage(settings.upload_dir)


_FAILURE_STATUS = {
    FailureKind.CONSTRAINT_VIOLATION: status.HTTP_400_BAD_REQUEST,
    FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def _raise_for_failure(result: ServiceResult[Any], message: str) -> NoReturn:
    """Raise a CatalogAPIError matching the failure kind of ``result``."""
    status_code = _FAILURE_STATUS.get(
        result.failure, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    if result.failure is FailureKind.CONSTRAINT_VIOLATION:
        message = "Invalid request data"
    elif result.failure is FailureKind.NOT_FOUND:
        message = "Catalog item not found"
    raise CatalogAPIError(status_code, message, result.error)


# --- API Endpoints ---


@router.get("", response_model=CatalogItemListResponse)
async def list_catalog_items(
    service: Annotated[CatalogItemService, Depends(get_catalog_service)],
) -> CatalogItemListResponse:
    """Get all catalog items, newest first.

    Returns:
        CatalogItemListResponse: Every catalog item and the item count.

    Raises:
        CatalogAPIError: 500 if the catalog store cannot be read.
    """
    result = await service.list_items()
    if not result.success:
        _raise_for_failure(result, "Failed to fetch catalog items")

    items = result.data or []
    return CatalogItemListResponse(
        data=[CatalogItemOut.model_validate(item) for item in items],
        count=len(items),
    )


@router.get("/validate-sku", response_model=SkuAvailabilityResponse)
async def validate_sku(
    service: Annotated[CatalogItemService, Depends(get_catalog_service)],
    sku: Annotated[str | None, Query(description="SKU to check")] = None,
    exclude_id: Annotated[
        str | None,
        Query(alias="excludeId", description="Item to ignore (the one being edited)"),
    ] = None,
) -> SkuAvailabilityResponse:
    """Check whether a SKU is free to use.

    Args:
        sku: The SKU to check. Surrounding whitespace is ignored.
        exclude_id: Item whose own SKU should not count as taken.

    Returns:
        SkuAvailabilityResponse: Whether the SKU is available.

    Raises:
        CatalogAPIError: 400 if no SKU is given.
        CatalogAPIError: 500 if the catalog store cannot be read.
    """
    if not sku or not sku.strip():
        raise CatalogAPIError(status.HTTP_400_BAD_REQUEST, "SKU parameter is required")

    result = await service.is_sku_available(sku, exclude_id)
    if not result.success:
        _raise_for_failure(result, "Failed to validate SKU")

    available = bool(result.data)
    return SkuAvailabilityResponse(
        available=available,
        message="SKU is available" if available else "SKU already exists",
    )


@router.get("/{item_id}", response_model=CatalogItemResponse)
async def get_catalog_item(
    item_id: str,
    service: Annotated[CatalogItemService, Depends(get_catalog_service)],
) -> CatalogItemResponse:
    """Get a single catalog item by ID.

    Args:
        item_id: ID of the catalog item.

    Returns:
        CatalogItemResponse: The catalog item.

    Raises:
        CatalogAPIError: 404 if no item has this ID.
        CatalogAPIError: 500 if the catalog store cannot be read.
    """
    result = await service.get_item(item_id)
    if not result.success:
        _raise_for_failure(result, "Failed to fetch catalog item")

    return CatalogItemResponse(data=CatalogItemOut.model_validate(result.data))


@router.post(
    "",
    response_model=CatalogItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_catalog_item(
    payload: CatalogItemCreate,
    service: Annotated[CatalogItemService, Depends(get_catalog_service)],
) -> CatalogItemResponse:
    """Create a catalog item.

    Args:
        payload: Validated create request.

    Returns:
        CatalogItemResponse: The created item, with its new ID.

    Raises:
        CatalogAPIError: 400 if a constraint is violated (duplicate SKU).
        CatalogAPIError: 500 if the catalog store fails otherwise.
    """
    result = await service.create_item(payload)
    if not result.success:
        _raise_for_failure(result, "Failed to create catalog item")

    return CatalogItemResponse(
        message="Catalog item created successfully",
        data=CatalogItemOut.model_validate(result.data),
    )


@router.patch("/{item_id}", response_model=CatalogItemResponse)
async def update_catalog_item(
    item_id: str,
    payload: CatalogItemUpdate,
    service: Annotated[CatalogItemService, Depends(get_catalog_service)],
) -> CatalogItemResponse:
    """Partially update a catalog item.

    Unless extension merging is enabled, extension fields (sizes, colors,
    fabric, ...) that the body leaves out are cleared.

    Args:
        item_id: ID of the catalog item.
        payload: Validated update request.

    Returns:
        CatalogItemResponse: The item as stored after the update.

    Raises:
        CatalogAPIError: 400 if a constraint is violated (duplicate SKU).
        CatalogAPIError: 404 if no item has this ID.
        CatalogAPIError: 500 if the catalog store fails otherwise.
    """
    result = await service.update_item(item_id, payload)
    if not result.success:
        _raise_for_failure(result, "Failed to update catalog item")

    return CatalogItemResponse(
        message="Catalog item updated successfully",
        data=CatalogItemOut.model_validate(result.data),
    )


@router.delete("/{item_id}", response_model=DeleteResponse)
async def delete_catalog_item(
    item_id: str,
    service: Annotated[CatalogItemService, Depends(get_catalog_service)],
    image_storage: Annotated[LocalImageStorage, Depends(get_image_storage)],
) -> DeleteResponse:
    """Delete a catalog item and then its stored image.

    The image is removed after the row; if that fails the row stays deleted
    and the leftover file is only logged.

    Args:
        item_id: ID of the catalog item.

    Returns:
        DeleteResponse: Confirmation of the deletion.

    Raises:
        CatalogAPIError: 404 if no item has this ID.
        CatalogAPIError: 500 if the catalog store fails.
    """
    result = await service.delete_item(item_id)
    if not result.success:
        _raise_for_failure(result, "Failed to delete catalog item")

    image_url = (result.data or {}).get("imageUrl")
    if image_url:
        try:
            image_storage.delete(image_url)
        except OSError as e:
            logger.warning(
                "Catalog item %s deleted but image %s was not removed: %s",
                item_id,
                image_url,
                e,
            )

    return DeleteResponse(message="Catalog item deleted successfully")
