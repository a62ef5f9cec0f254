"""JSON-safe serialization of party entities and result pages."""

from dataclasses import fields, is_dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from syndicate_party.models.base import Money
from syndicate_party.store.base import Page


def to_dict(obj: Any) -> dict:
    """Convert an entity, request, page or mapping to a JSON-safe dict.

    Pages keep their paging metadata next to the serialized content.
    """
    if isinstance(obj, Page):
        return {
            "content": [to_dict(item) for item in obj.content],
            "page": obj.page,
            "size": obj.size,
            "total_elements": obj.total_elements,
            "total_pages": obj.total_pages,
        }
    if is_dataclass(obj) and not isinstance(obj, Money):
        return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, dict):
        return serialize_value(obj)
    return {"value": serialize_value(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    # Money before Decimal; datetime is a date subclass
    if isinstance(value, Money):
        return str(value.amount)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value
