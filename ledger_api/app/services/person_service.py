"""
Business logic for persons.

Enforces ``id_number`` uniqueness, the deletion rule (a person may only
be deleted when every account they own is closed) and the paging rules
of the person search.
"""

import logging
import math
from typing import List, Optional

from ledger_api.app.core.errors import ConflictError, ValidationError
from ledger_api.app.repositories.account_repository import AccountRepository
from ledger_api.app.repositories.person_repository import (
    DUPLICATE_ID_NUMBER_MESSAGE,
    PersonRepository,
)
from ledger_api.app.schemas.account import AccountSummary
from ledger_api.app.schemas.common import PagedResult
from ledger_api.app.schemas.person import PersonCreate, PersonDetail, PersonRead, PersonUpdate

MAX_PAGE_SIZE = 10

# Largest row offset SQLite accepts (signed 64-bit INTEGER).
MAX_OFFSET = 2**63 - 1


class PersonService:
    """Service for managing persons."""

    def __init__(
        self,
        person_repository: Optional[PersonRepository] = None,
        account_repository: Optional[AccountRepository] = None,
    ) -> None:
        self.person_repository = person_repository or PersonRepository()
        self.account_repository = account_repository or AccountRepository()

    async def get_all(self) -> List[PersonRead]:
        return await self.person_repository.get_all()

    async def get_by_code(self, code: int) -> Optional[PersonDetail]:
        """Return the person with a summary of their accounts, or ``None``."""
        person = await self.person_repository.get_by_code(code)
        if person is None:
            return None
        accounts = await self.account_repository.get_by_person_code(code)
        return PersonDetail(
            **person.model_dump(),
            accounts=[AccountSummary.model_validate(account) for account in accounts],
        )

    async def create(self, data: PersonCreate) -> PersonRead:
        """Create a person.

        Raises ``ConflictError`` if another person already has the same
        ID number.
        """
        logger = logging.getLogger(__name__)
        if await self.person_repository.exists_by_id_number(data.id_number):
            logger.warning("Rejected person with duplicate ID number %s", data.id_number)
            raise ConflictError(DUPLICATE_ID_NUMBER_MESSAGE)
        person = await self.person_repository.add(data)
        logger.info("Created person %s", person.code)
        return person

    async def update(self, data: PersonUpdate) -> Optional[PersonRead]:
        """Update a person's ID number, name and surname.

        Returns ``None`` if no person exists at ``data.code``.  A new ID
        number is only checked for uniqueness (and applied) when it
        differs from the stored one ignoring case.
        """
        logger = logging.getLogger(__name__)
        existing = await self.person_repository.get_by_code(data.code)
        if existing is None:
            return None

        if existing.id_number.lower() != data.id_number.lower():
            if await self.person_repository.exists_by_id_number(data.id_number):
                logger.warning("Rejected ID number change of person %s to %s", data.code, data.id_number)
                raise ConflictError(DUPLICATE_ID_NUMBER_MESSAGE)
            existing.id_number = data.id_number

        existing.name = data.name
        existing.surname = data.surname

        updated = await self.person_repository.update(existing)
        logger.info("Updated person %s", updated.code)
        return updated

    async def delete(self, code: int) -> bool:
        """Delete a person.

        Returns ``False`` if the person does not exist.  Raises
        ``ConflictError`` if the person owns at least one open account;
        closed accounts are removed together with the person.
        """
        logger = logging.getLogger(__name__)
        existing = await self.person_repository.get_by_code(code)
        if existing is None:
            return False

        accounts = await self.account_repository.get_by_person_code(code)
        if any(not account.is_closed for account in accounts):
            logger.warning("Rejected deletion of person %s with open accounts", code)
            raise ConflictError("The person cannot be deleted because they have open accounts.")

        await self.person_repository.delete(code)
        logger.info("Deleted person %s (%d closed accounts)", code, len(accounts))
        return True

    async def search(
        self,
        id_number: Optional[str] = None,
        surname: Optional[str] = None,
        account_number: Optional[str] = None,
        page_number: int = 1,
        page_size: int = MAX_PAGE_SIZE,
    ) -> PagedResult[PersonRead]:
        """Search persons and return one page of results.

        ``page_number`` starts at 1.  ``page_size`` values that are not
        positive or exceed ``MAX_PAGE_SIZE`` are replaced by
        ``MAX_PAGE_SIZE``.  A page number whose offset does not fit in a
        storage integer is rejected with ``ValidationError``.
        """
        if page_number < 1:
            raise ValidationError("The page number must be greater than or equal to 1.")
        if page_size <= 0 or page_size > MAX_PAGE_SIZE:
            page_size = MAX_PAGE_SIZE

        skip = (page_number - 1) * page_size
        if skip > MAX_OFFSET:
            raise ValidationError("The page number is too large.")
        total_count = await self.person_repository.count(id_number, surname, account_number)
        items = await self.person_repository.search(id_number, surname, account_number, skip, page_size)
        return PagedResult[PersonRead](
            items=items,
            page_number=page_number,
            page_size=page_size,
            total_count=total_count,
            total_pages=math.ceil(total_count / page_size),
        )
