"""CatalogItem model for sellable product definitions."""

import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from apparel_catalog.database import Base


class CatalogItem(Base):
    """A catalog item: one sellable apparel product definition.

    Only first-class attributes get their own column. Extension attributes
    (fabric, sizes, quantities, lead time, ...) live in ``specifications`` as
    JSON text and are unpacked by the transcoder.

    Attributes:
        id: Unique identifier (UUID string)
        name: Display name of the product
        category: Product category (e.g., 'Jerseys')
        sport: Sport the product is made for
        sku: Stock keeping unit code, unique when set
        status: 'active', 'inactive' or 'discontinued'
        base_price: Selling price per unit
        unit_cost: Manufacturing cost per unit
        base_image_url: URL of the primary product image
        specifications: JSON text holding the extension attributes
        created_at: Timestamp when the record was created
        updated_at: Timestamp when the record was last written
    """

    __tablename__ = "catalog_items"
    __table_args__ = (
        Index("idx_catalog_items_category", "category"),
        Index("idx_catalog_items_status", "status"),
        Index("idx_catalog_items_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    sport: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )
    sku: Mapped[str | None] = mapped_column(
        String(100),
        unique=True,
        nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
    )
    base_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    unit_cost: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    base_image_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    specifications: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="{}",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<CatalogItem(sku={self.sku!r}, name={self.name!r})>"
