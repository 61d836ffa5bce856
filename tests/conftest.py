"""Shared fixtures for catalog tests."""

import copy
from collections.abc import Generator
from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient

from apparel_catalog.api.catalog import get_catalog_store, get_image_storage
from apparel_catalog.config import Settings, get_settings
from apparel_catalog.main import app
from apparel_catalog.services.catalog import CatalogItemService
from apparel_catalog.services.image_storage import LocalImageStorage
from apparel_catalog.services.store import (
    CatalogStoreError,
    ConstraintViolation,
    RecordNotFound,
)

COLUMN_DEFAULTS: dict[str, Any] = {
    "sport": None,
    "sku": None,
    "status": "active",
    "base_price": Decimal("0.00"),
    "unit_cost": Decimal("0.00"),
    "base_image_url": None,
    "specifications": "{}",
}


class InMemoryCatalogStore:
    """Dict-backed stand-in for the SQL catalog store.

    Mirrors the table constraints the service relies on: unique SKU and
    not-null name/category. Set ``error`` to make every call raise it.
    """

    def __init__(self) -> None:
        self.rows: dict[str, dict[str, Any]] = {}
        self.error: CatalogStoreError | None = None

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    def _check_sku(self, sku: Any, item_id: str) -> None:
        if sku is None:
            return
        for other_id, row in self.rows.items():
            if other_id != item_id and row.get("sku") == sku:
                raise ConstraintViolation(
                    'duplicate key value violates unique constraint "catalog_items_sku_key"'
                )

    async def list_rows(self) -> list[dict[str, Any]]:
        self._check()
        rows = sorted(self.rows.values(), key=lambda r: r["created_at"], reverse=True)
        return copy.deepcopy(rows)

    async def get_row(self, item_id: str) -> dict[str, Any]:
        self._check()
        if item_id not in self.rows:
            raise RecordNotFound(f"Catalog item '{item_id}' not found")
        return copy.deepcopy(self.rows[item_id])

    async def insert_row(self, values: dict[str, Any]) -> dict[str, Any]:
        self._check()
        row = {**COLUMN_DEFAULTS, **values}
        for column in ("name", "category"):
            if row.get(column) is None:
                raise ConstraintViolation(
                    f'null value in column "{column}" violates not-null constraint'
                )
        self._check_sku(row.get("sku"), row["id"])
        self.rows[row["id"]] = row
        return copy.deepcopy(row)

    async def update_row(self, item_id: str, values: dict[str, Any]) -> dict[str, Any]:
        self._check()
        if item_id not in self.rows:
            raise RecordNotFound(f"Catalog item '{item_id}' not found")
        self._check_sku(values.get("sku"), item_id)
        self.rows[item_id].update(values)
        return copy.deepcopy(self.rows[item_id])

    async def delete_row(self, item_id: str) -> dict[str, Any]:
        self._check()
        if item_id not in self.rows:
            raise RecordNotFound(f"Catalog item '{item_id}' not found")
        return self.rows.pop(item_id)

    async def find_id_by_sku(self, sku: str, exclude_id: str | None = None) -> str | None:
        self._check()
        for item_id, row in self.rows.items():
            if row.get("sku") == sku and item_id != exclude_id:
                return item_id
        return None


@pytest.fixture
def store() -> InMemoryCatalogStore:
    """Create an empty in-memory catalog store."""
    return InMemoryCatalogStore()


@pytest.fixture
def service(store: InMemoryCatalogStore) -> CatalogItemService:
    """Create a catalog service that rewrites extension fields on update."""
    return CatalogItemService(store)


@pytest.fixture
def merging_service(store: InMemoryCatalogStore) -> CatalogItemService:
    """Create a catalog service that merges extension fields on update."""
    return CatalogItemService(store, merge_extension_fields=True)


@pytest.fixture
def image_storage(tmp_path) -> LocalImageStorage:
    """Create image storage rooted in a temporary directory."""
    return LocalImageStorage(tmp_path)


@pytest.fixture
def app_settings() -> Settings:
    """Create settings that ignore the environment and any .env file."""
    return Settings(_env_file=None, merge_extension_fields=False)


@pytest.fixture
def client(
    store: InMemoryCatalogStore,
    app_settings: Settings,
    image_storage: LocalImageStorage,
) -> Generator[TestClient, None, None]:
    """Create a test client wired to the in-memory store."""
    app.dependency_overrides[get_catalog_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: app_settings
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
