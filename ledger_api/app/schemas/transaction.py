"""
Pydantic models for transaction data.

``capture_date`` is assigned by the server on every write and is never
read from the client.  Transaction dates without a timezone are taken
as UTC.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import MONEY_DECIMAL_PLACES, MONEY_MAX_DIGITS, CamelModel, Money, as_utc


class TransactionBase(CamelModel):
    account_code: int = Field(..., examples=[1])
    transaction_date: datetime = Field(..., examples=["2025-01-31T09:30:00Z"])
    amount: Money = Field(
        ...,
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
        examples=["150.00"],
        description="Signed amount; negative values are debits",
    )
    description: str = Field(..., min_length=1, max_length=100, examples=["Salary"])

    @field_validator("transaction_date")
    @classmethod
    def normalise_transaction_date(cls, v: datetime) -> datetime:
        return as_utc(v)


class TransactionCreate(TransactionBase):
    """Schema for posting a transaction."""
    pass


class TransactionUpdate(TransactionBase):
    """Schema for updating a transaction.  ``code`` must match the route."""

    code: int


class TransactionRead(TransactionBase):
    """Schema for reading a transaction."""

    code: int
    capture_date: datetime


class TransactionSummary(CamelModel):
    """Compact transaction view embedded in an account."""

    code: int
    transaction_date: datetime
    amount: Money
    description: str
    capture_date: Optional[datetime] = None
