"""
Shared schema building blocks.

``CamelModel`` exposes snake_case attributes as camelCase JSON keys
while still accepting snake_case input (useful in tests and internal
code).  ``Money`` keeps amounts as ``Decimal`` in Python and writes
them as plain decimal strings so no digits are lost on the wire.
``PagedResult`` wraps one page of a search.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Precision of a stored transaction amount.
MONEY_MAX_DIGITS = 19
MONEY_DECIMAL_PLACES = 4


def _decimal_text(value: Decimal) -> str:
    # Fixed-point notation, never exponent form ("1E+2").
    return format(value, "f")


Money = Annotated[Decimal, PlainSerializer(_decimal_text, return_type=str, when_used="json")]


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PagedResult(CamelModel, Generic[T]):
    """One page of items plus the numbers needed to render a pager."""

    items: List[T]
    page_number: int
    page_size: int
    total_count: int
    total_pages: int
