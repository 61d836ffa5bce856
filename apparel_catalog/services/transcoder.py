"""Field transcoder between the catalog API shape and the storage row shape.

The API shape is flat and camelCase. The storage shape has one snake_case
column per first-class attribute plus a ``specifications`` JSON text column
that carries every extension attribute.

Both directions fail open: malformed values are replaced by defaults and
logged, never raised.
"""

import copy
import json
import logging
import math
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MIN_QUANTITY = 1
DEFAULT_MAX_QUANTITY = 1000
DEFAULT_ETA_DAYS = "7-10 business days"

STRING_FIELDS = ("name", "category", "sport", "sku", "status")

# API field -> storage column
PRICE_FIELDS = {
    "basePrice": "base_price",
    "unitCost": "unit_cost",
}

# Storage column -> API field
COLUMN_RENAMES = {
    "base_price": "basePrice",
    "unit_cost": "unitCost",
    "base_image_url": "imageUrl",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

SCALAR_EXTENSION_FIELDS = (
    "fabric",
    "description",
    "minQuantity",
    "maxQuantity",
    "buildInstructions",
    "etaDays",
)
SEQUENCE_EXTENSION_FIELDS = ("sizes", "colors", "customizationOptions")
EXTENSION_FIELDS = SCALAR_EXTENSION_FIELDS + SEQUENCE_EXTENSION_FIELDS

LEGACY_CUSTOMIZATION_KEY = "customization_options"


def _first_present(data: Mapping[str, Any], *keys: str) -> str | None:
    """Return the first of ``keys`` present in ``data``."""
    for key in keys:
        if key in data:
            return key
    return None


def _parse_price(value: Any) -> float:
    """Parse a price, clamping unparsable and negative values to 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _parse_quantity(value: Any, default: int) -> int:
    """Parse a quantity as an integer of at least 1."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        try:
            number = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return default
    return max(1, number)


def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = value if isinstance(value, str) else str(value)
    return text or default


def decode_sequence(value: Any, field: str) -> list[Any]:
    """Decode one of the accepted encodings of a sequence field.

    Accepts a list or tuple (copied as given), a JSON array string, or a
    comma-separated string. Anything else decodes to an empty list.

    Args:
        value: Raw value supplied for the field.
        field: Field name, used in the warning on failure.

    Returns:
        The decoded list, order and duplicates preserved.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                logger.warning("Invalid JSON array for %s: %r", field, value)
                return []
            return parsed if isinstance(parsed, list) else []
        return [part.strip() for part in text.split(",") if part.strip()]
    logger.warning("Unsupported value for %s: %r", field, value)
    return []


def _coerce_sequence(value: Any, field: str) -> list[Any]:
    """Coerce a stored extension value into a list."""
    if value is None or isinstance(value, (str, list, tuple)):
        return decode_sequence(value, field)
    if isinstance(value, Mapping):
        logger.warning("Unsupported value for %s: %r", field, value)
        return []
    return [value]


def parse_specifications(value: Any) -> dict[str, Any]:
    """Parse a stored ``specifications`` value into a fresh dict.

    Accepts JSON text, an already parsed mapping or ``None``. Malformed text
    and non-object JSON are logged and treated as empty.
    """
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return copy.deepcopy(dict(value))
    if isinstance(value, (str, bytes)):
        if not value.strip():
            return {}
        try:
            parsed = json.loads(value)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Failed to parse specifications: %r", value)
            return {}
        if isinstance(parsed, dict):
            return parsed
    logger.warning("Ignoring non-object specifications: %r", value)
    return {}


def to_storage(
    data: Mapping[str, Any],
    base_specifications: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Translate API-shaped input into a storage row.

    Only keys present in ``data`` are translated, so the result can be used
    for partial updates of first-class columns. Unknown keys are dropped.
    String columns are trimmed; a blank ``sku`` is stored as NULL.

    ``specifications`` is always written. It holds the extension fields found
    in ``data`` layered over ``base_specifications``; without a base every
    extension field the caller leaves out is dropped from storage.

    Args:
        data: Loosely typed API-shaped input.
        base_specifications: Stored extension fields to keep (merge mode).

    Returns:
        Column values ready for the row store, including ``updated_at``.
    """
    if not isinstance(data, Mapping):
        logger.warning("Ignoring non-mapping catalog input: %r", data)
        data = {}

    values: dict[str, Any] = {}

    for field in STRING_FIELDS:
        if field in data:
            raw = data[field]
            values[field] = "" if raw is None else str(raw).strip()
    # sku is unique when set; a blank sku means no sku at all
    if "sku" in values and not values["sku"]:
        values["sku"] = None

    for api_field, column in PRICE_FIELDS.items():
        key = _first_present(data, api_field, column)
        if key is not None:
            values[column] = _parse_price(data[key])

    image_key = _first_present(data, "imageUrl", "image_url")
    if image_key is not None:
        values["base_image_url"] = data[image_key]

    specifications: dict[str, Any] = dict(base_specifications or {})
    for field in SCALAR_EXTENSION_FIELDS:
        if field in data:
            specifications[field] = data[field]
    for field in SEQUENCE_EXTENSION_FIELDS:
        if field in data:
            specifications[field] = decode_sequence(data[field], field)

    values["specifications"] = json.dumps(specifications, default=str)
    values["updated_at"] = datetime.now(UTC)
    return values


def from_storage(row: Any) -> dict[str, Any] | None:
    """Translate a storage row into the API shape.

    Unknown columns are passed through. Extension fields are unpacked from
    ``specifications`` with defaults applied, so the result always carries
    every catalog attribute. The input row is never modified.

    Args:
        row: A row mapping as returned by the row store.

    Returns:
        The API-shaped item, or None when ``row`` is not a mapping.
    """
    if not isinstance(row, Mapping):
        return None

    item = dict(row)
    for column, api_field in COLUMN_RENAMES.items():
        if column in item:
            item[api_field] = item.pop(column)

    specifications = parse_specifications(item.get("specifications"))

    # Rows written before the rename carry customization_options
    legacy_options = item.pop(LEGACY_CUSTOMIZATION_KEY, None)
    stored_legacy = specifications.pop(LEGACY_CUSTOMIZATION_KEY, None)
    if legacy_options is None:
        legacy_options = stored_legacy
    if legacy_options is not None and "customizationOptions" not in specifications:
        specifications["customizationOptions"] = legacy_options

    item["specifications"] = specifications

    for field in SEQUENCE_EXTENSION_FIELDS:
        item[field] = _coerce_sequence(specifications.get(field), field)
    item["minQuantity"] = _parse_quantity(
        specifications.get("minQuantity"), DEFAULT_MIN_QUANTITY
    )
    item["maxQuantity"] = _parse_quantity(
        specifications.get("maxQuantity"), DEFAULT_MAX_QUANTITY
    )
    item["fabric"] = _text(specifications.get("fabric"), "")
    item["description"] = _text(specifications.get("description"), "")
    item["buildInstructions"] = _text(specifications.get("buildInstructions"), "")
    item["etaDays"] = _text(specifications.get("etaDays"), DEFAULT_ETA_DAYS)

    for field in STRING_FIELDS:
        value = item.get(field)
        item[field] = "" if value is None else str(value)
    item["basePrice"] = _parse_price(item.get("basePrice"))
    item["unitCost"] = _parse_price(item.get("unitCost"))
    item.setdefault("imageUrl", None)
    return item
