"""Tests for SQLAlchemy models."""

from apparel_catalog.models import CatalogItem


class TestCatalogItemModel:
    """Tests for the CatalogItem model."""

    def test_catalog_item_attributes(self) -> None:
        """Test that CatalogItem has all required attributes."""
        item = CatalogItem(
            name="Jersey A",
            category="Jerseys",
            sku="JER-001",
        )
        assert item.name == "Jersey A"
        assert item.category == "Jerseys"
        assert item.sku == "JER-001"

    def test_catalog_item_default_id(self) -> None:
        """Test that the id is only assigned on insert."""
        item = CatalogItem(name="Shorts", category="Shorts")
        # id will be None until persisted, but default is set
        assert item.id is None
        assert CatalogItem.__table__.c.id.default is not None

    def test_catalog_item_optional_columns(self) -> None:
        """Test that sport, sku and image URL are nullable."""
        columns = CatalogItem.__table__.c
        assert columns.sport.nullable is True
        assert columns.sku.nullable is True
        assert columns.base_image_url.nullable is True
        assert columns.name.nullable is False
        assert columns.category.nullable is False

    def test_catalog_item_sku_unique(self) -> None:
        """Test that SKU carries a unique constraint."""
        assert CatalogItem.__table__.c.sku.unique is True

    def test_catalog_item_column_defaults(self) -> None:
        """Test the insert defaults for status and specifications."""
        columns = CatalogItem.__table__.c
        assert columns.status.default.arg == "active"
        assert columns.specifications.default.arg == "{}"

    def test_catalog_item_repr(self) -> None:
        """Test CatalogItem string representation."""
        item = CatalogItem(name="Hoodie", category="Outerwear", sku="HOO-7")
        repr_str = repr(item)
        assert "HOO-7" in repr_str
        assert "Hoodie" in repr_str

    def test_catalog_item_tablename(self) -> None:
        """Test that CatalogItem has correct table name."""
        assert CatalogItem.__tablename__ == "catalog_items"

    def test_catalog_item_indexes(self) -> None:
        """Test that listing and filter columns are indexed."""
        index_names = {index.name for index in CatalogItem.__table__.indexes}
        assert index_names == {
            "idx_catalog_items_category",
            "idx_catalog_items_status",
            "idx_catalog_items_created_at",
        }
