"""
Business logic for accounts.

Accounts belong to an existing person, carry a globally unique account
number and move between open and closed.  An account can only be closed
once its outstanding balance is zero.  The balance itself is maintained
by ``TransactionService`` and is never taken from client input.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from ledger_api.app.core.errors import ConflictError
from ledger_api.app.repositories.account_repository import (
    DUPLICATE_ACCOUNT_NUMBER_MESSAGE,
    MISSING_PERSON_MESSAGE,
    AccountRepository,
)
from ledger_api.app.repositories.person_repository import PersonRepository
from ledger_api.app.repositories.transaction_repository import TransactionRepository
from ledger_api.app.schemas.account import AccountCreate, AccountDetail, AccountRead, AccountUpdate
from ledger_api.app.schemas.transaction import TransactionSummary


class AccountService:
    """Service for the account lifecycle."""

    def __init__(
        self,
        account_repository: Optional[AccountRepository] = None,
        person_repository: Optional[PersonRepository] = None,
        transaction_repository: Optional[TransactionRepository] = None,
    ) -> None:
        self.account_repository = account_repository or AccountRepository()
        self.person_repository = person_repository or PersonRepository()
        self.transaction_repository = transaction_repository or TransactionRepository()

    async def get_by_code(self, code: int) -> Optional[AccountDetail]:
        """Return the account with its transactions, or ``None``."""
        account = await self.account_repository.get_by_code(code)
        if account is None:
            return None
        transactions = await self.transaction_repository.get_by_account_code(code)
        return AccountDetail(
            **account.model_dump(),
            transactions=[TransactionSummary.model_validate(t) for t in transactions],
        )

    async def get_by_account_number(self, account_number: str) -> Optional[AccountRead]:
        return await self.account_repository.get_by_account_number(account_number)

    async def get_by_person_code(self, person_code: int) -> List[AccountRead]:
        return await self.account_repository.get_by_person_code(person_code)

    async def create(self, data: AccountCreate) -> AccountRead:
        """Open a new account with a zero balance.

        Raises ``ConflictError`` if the person does not exist or the
        account number is already in use.
        """
        logger = logging.getLogger(__name__)
        await self._ensure_person_exists(data.person_code)

        if await self.account_repository.get_by_account_number(data.account_number) is not None:
            logger.warning("Rejected duplicate account number %s", data.account_number)
            raise ConflictError(DUPLICATE_ACCOUNT_NUMBER_MESSAGE)

        account = await self.account_repository.add(data)
        logger.info("Opened account %s for person %s", account.code, account.person_code)
        return account

    async def update(self, data: AccountUpdate) -> Optional[AccountRead]:
        """Change the owner and/or number of an account.

        Returns ``None`` if the account does not exist.  A new owner must
        exist and a new account number must not belong to another
        account.
        """
        logger = logging.getLogger(__name__)
        existing = await self.account_repository.get_by_code(data.code)
        if existing is None:
            return None

        if existing.person_code != data.person_code:
            await self._ensure_person_exists(data.person_code)
            existing.person_code = data.person_code

        if existing.account_number.lower() != data.account_number.lower():
            other = await self.account_repository.get_by_account_number(data.account_number)
            if other is not None and other.code != existing.code:
                logger.warning("Rejected account number change of %s to %s", data.code, data.account_number)
                raise ConflictError(DUPLICATE_ACCOUNT_NUMBER_MESSAGE)
            existing.account_number = data.account_number

        updated = await self.account_repository.update(existing)
        logger.info("Updated account %s", updated.code)
        return updated

    async def close(self, code: int) -> Optional[AccountRead]:
        """Close an account whose balance is zero."""
        logger = logging.getLogger(__name__)
        account = await self.account_repository.get_by_code(code)
        if account is None:
            return None
        if account.outstanding_balance != Decimal("0"):
            logger.warning("Rejected closing account %s with balance %s", code, account.outstanding_balance)
            raise ConflictError("The account cannot be closed because the balance is not zero.")
        if account.is_closed:
            raise ConflictError("The account is already closed.")

        await self.account_repository.set_closed(code, True)
        account.is_closed = True
        logger.info("Closed account %s", code)
        return account

    async def reopen(self, code: int) -> Optional[AccountRead]:
        """Reopen a closed account."""
        logger = logging.getLogger(__name__)
        account = await self.account_repository.get_by_code(code)
        if account is None:
            return None
        if not account.is_closed:
            raise ConflictError("The account is not closed.")

        await self.account_repository.set_closed(code, False)
        account.is_closed = False
        logger.info("Reopened account %s", code)
        return account

    async def _ensure_person_exists(self, person_code: int) -> None:
        if await self.person_repository.get_by_code(person_code) is None:
            logging.getLogger(__name__).warning("Rejected account for unknown person %s", person_code)
            raise ConflictError(MISSING_PERSON_MESSAGE)
