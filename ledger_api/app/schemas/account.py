"""
Pydantic models for account data.

``outstanding_balance`` and ``is_closed`` are read-only from the
client's point of view: the balance is derived from the account's
transactions and the status only changes through close/reopen.
"""

from decimal import Decimal
from typing import List

from pydantic import Field

from .common import CamelModel, Money
from .transaction import TransactionSummary


class AccountBase(CamelModel):
    person_code: int = Field(..., examples=[1])
    account_number: str = Field(..., min_length=1, max_length=50, examples=["ACC-0001"])


class AccountCreate(AccountBase):
    """Schema for opening an account."""
    pass


class AccountUpdate(AccountBase):
    """Schema for updating an account.  ``code`` must match the route."""

    code: int


class AccountRead(AccountBase):
    """Schema for reading an account."""

    code: int
    outstanding_balance: Money = Decimal("0")
    is_closed: bool = False


class AccountSummary(CamelModel):
    """Compact account view embedded in a person."""

    code: int
    account_number: str
    outstanding_balance: Money
    is_closed: bool


class AccountDetail(AccountRead):
    """An account together with its transactions."""

    transactions: List[TransactionSummary] = Field(default_factory=list)
