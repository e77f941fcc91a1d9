"""
Pydantic models for person data.

A person is identified by a storage-assigned ``code`` and a unique
``id_number``.  The detailed read model also lists the accounts the
person owns so the front end can render them without a second call.
"""

from typing import List, Optional

from pydantic import Field

from .account import AccountSummary
from .common import CamelModel


class PersonBase(CamelModel):
    id_number: str = Field(..., min_length=1, max_length=50, examples=["8001015009087"])
    name: Optional[str] = Field(None, max_length=50, examples=["Thandi"])
    surname: Optional[str] = Field(None, max_length=50, examples=["Nkosi"])


class PersonCreate(PersonBase):
    """Schema for creating a person."""
    pass


class PersonUpdate(PersonBase):
    """Schema for updating a person.  ``code`` must match the route."""

    code: int


class PersonRead(PersonBase):
    """Schema for reading a person."""

    code: int


class PersonDetail(PersonRead):
    """A person together with a summary of the accounts they own."""

    accounts: List[AccountSummary] = Field(default_factory=list)
