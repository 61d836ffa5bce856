"""Request schemas for catalog item operations.

Create and update have separate models: create requires a name, a category and
a base price, update accepts any subset of fields. Both accept camelCase or
snake_case keys and drop keys they do not know.
"""

from typing import Annotated, Any

from pydantic import BaseModel, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# A list, a JSON array string or a comma-separated string
SequenceInput = list[str] | str | None


class CatalogItemFields(BaseModel):
    """Fields shared by the create and update requests."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "ignore",
    }

    sport: str | None = None
    sku: str | None = None
    status: str | None = None
    unit_cost: float | None = Field(default=None, ge=0)
    image_url: str | None = None

    fabric: str | None = None
    description: str | None = None
    min_quantity: int | None = Field(default=None, ge=1)
    max_quantity: int | None = Field(default=None, ge=1)
    build_instructions: str | None = None
    eta_days: str | None = None
    sizes: SequenceInput = None
    colors: SequenceInput = None
    customization_options: SequenceInput = None

    def to_input(self) -> dict[str, Any]:
        """Return the fields the caller set, keyed by their API (camelCase) names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class CatalogItemCreate(CatalogItemFields):
    """Request to create a catalog item."""

    name: NonBlankStr
    category: NonBlankStr
    base_price: float = Field(ge=0)
    status: NonBlankStr = "active"

    def to_input(self) -> dict[str, Any]:
        data = super().to_input()
        data.setdefault("status", self.status)
        return data


class CatalogItemUpdate(CatalogItemFields):
    """Partial update of a catalog item; every field is optional."""

    name: NonBlankStr | None = None
    category: NonBlankStr | None = None
    status: NonBlankStr | None = None
    base_price: float | None = Field(default=None, ge=0)

    @field_validator("name", "category", "status", "base_price", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        """Required columns may be left out of an update but never cleared."""
        if value is None:
            raise ValueError("may not be null")
        return value
