"""Row store access for catalog items.

The store works in the storage shape: plain dicts keyed by column name.
Driver errors are translated into the CatalogStoreError hierarchy so callers
can branch on the kind of failure instead of on error text.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from apparel_catalog.models.catalog_item import CatalogItem

logger = logging.getLogger(__name__)


class CatalogStoreError(Exception):
    """Raised when a row store operation fails."""


class ConstraintViolation(CatalogStoreError):
    """Raised when a write breaks a uniqueness, not-null or check constraint."""


class RecordNotFound(CatalogStoreError):
    """Raised when the addressed catalog item does not exist."""


class ConnectionFailure(CatalogStoreError):
    """Raised when the row store cannot be reached."""


class CatalogItemStore(Protocol):
    """Operations the catalog service needs from a row store.

    ``get_row``, ``update_row`` and ``delete_row`` raise RecordNotFound when
    no row has the given id. Every method may raise ConstraintViolation,
    ConnectionFailure or CatalogStoreError.
    """

    async def list_rows(self) -> list[dict[str, Any]]: ...

    async def get_row(self, item_id: str) -> dict[str, Any]: ...

    async def insert_row(self, values: dict[str, Any]) -> dict[str, Any]: ...

    async def update_row(
        self, item_id: str, values: dict[str, Any]
    ) -> dict[str, Any]: ...

    async def delete_row(self, item_id: str) -> dict[str, Any]: ...

    async def find_id_by_sku(
        self, sku: str, exclude_id: str | None = None
    ) -> str | None: ...


_COLUMNS = tuple(CatalogItem.__table__.c)


class SqlAlchemyCatalogStore:
    """Catalog item store backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncIterator[None]:
        """Roll back and re-raise driver errors as CatalogStoreError subclasses."""
        try:
            yield
        except (IntegrityError, DataError) as e:
            await self._session.rollback()
            logger.error("Constraint violation during %s: %s", operation, e.orig)
            raise ConstraintViolation(str(e.orig)) from e
        except (OperationalError, InterfaceError) as e:
            await self._session.rollback()
            logger.error("Connection failure during %s: %s", operation, e.orig)
            raise ConnectionFailure(str(e.orig)) from e
        except DBAPIError as e:
            await self._session.rollback()
            if e.connection_invalidated:
                logger.error("Connection lost during %s: %s", operation, e.orig)
                raise ConnectionFailure(str(e.orig)) from e
            logger.error("Database error during %s: %s", operation, e.orig)
            raise CatalogStoreError(str(e.orig)) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Database error during %s: %s", operation, e)
            raise CatalogStoreError(str(e)) from e
        except OSError as e:
            logger.error("Connection failure during %s: %s", operation, e)
            raise ConnectionFailure(str(e)) from e

    async def list_rows(self) -> list[dict[str, Any]]:
        """Return all rows, newest first."""
        async with self._translate_errors("list"):
            result = await self._session.execute(
                select(*_COLUMNS).order_by(CatalogItem.created_at.desc())
            )
            return [dict(row) for row in result.mappings().all()]

    async def get_row(self, item_id: str) -> dict[str, Any]:
        async with self._translate_errors("get"):
            result = await self._session.execute(
                select(*_COLUMNS).where(CatalogItem.id == item_id)
            )
            row = result.mappings().one_or_none()
        if row is None:
            raise RecordNotFound(f"Catalog item '{item_id}' not found")
        return dict(row)

    async def insert_row(self, values: dict[str, Any]) -> dict[str, Any]:
        async with self._translate_errors("insert"):
            result = await self._session.execute(
                insert(CatalogItem).values(**values).returning(*_COLUMNS)
            )
            row = dict(result.mappings().one())
            await self._session.commit()
        return row

    async def update_row(self, item_id: str, values: dict[str, Any]) -> dict[str, Any]:
        async with self._translate_errors("update"):
            result = await self._session.execute(
                update(CatalogItem)
                .where(CatalogItem.id == item_id)
                .values(**values)
                .returning(*_COLUMNS)
            )
            row = result.mappings().one_or_none()
            await self._session.commit()
        if row is None:
            raise RecordNotFound(f"Catalog item '{item_id}' not found")
        return dict(row)

    async def delete_row(self, item_id: str) -> dict[str, Any]:
        """Delete the row matching ``item_id`` and return it as it was."""
        async with self._translate_errors("delete"):
            result = await self._session.execute(
                delete(CatalogItem)
                .where(CatalogItem.id == item_id)
                .returning(*_COLUMNS)
            )
            row = result.mappings().one_or_none()
            await self._session.commit()
        if row is None:
            raise RecordNotFound(f"Catalog item '{item_id}' not found")
        return dict(row)

    async def find_id_by_sku(
        self, sku: str, exclude_id: str | None = None
    ) -> str | None:
        """Return the id of an item holding ``sku``, ignoring ``exclude_id``."""
        query = select(CatalogItem.id).where(CatalogItem.sku == sku)
        if exclude_id:
            query = query.where(CatalogItem.id != exclude_id)
        async with self._translate_errors("sku lookup"):
            result = await self._session.execute(query.limit(1))
            return result.scalar_one_or_none()
