"""
Business logic for transactions.

Transactions are posted against open accounts only, can never move to
another account and must have a non-zero amount dated no later than
now.  After every write the owning account's outstanding balance is
recomputed from the full set of its stored transactions, so repeated
or out-of-order writes cannot double count.

The transaction write and the balance write are two separate storage
commits; a failure between them leaves the balance stale until the
next write to that account.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from ledger_api.app.core.errors import ConflictError, ValidationError
from ledger_api.app.repositories.account_repository import AccountRepository
from ledger_api.app.repositories.transaction_repository import (
    MISSING_ACCOUNT_MESSAGE,
    TransactionRepository,
)
from ledger_api.app.schemas.common import utcnow
from ledger_api.app.schemas.transaction import (
    TransactionBase,
    TransactionCreate,
    TransactionRead,
    TransactionUpdate,
)

CLOSED_ACCOUNT_MESSAGE = "Transactions cannot be posted to a closed account."


class TransactionService:
    """Service for posting and correcting transactions."""

    def __init__(
        self,
        transaction_repository: Optional[TransactionRepository] = None,
        account_repository: Optional[AccountRepository] = None,
    ) -> None:
        self.transaction_repository = transaction_repository or TransactionRepository()
        self.account_repository = account_repository or AccountRepository()

    async def get_by_code(self, code: int) -> Optional[TransactionRead]:
        return await self.transaction_repository.get_by_code(code)

    async def get_by_account_code(self, account_code: int) -> List[TransactionRead]:
        return await self.transaction_repository.get_by_account_code(account_code)

    async def create(self, data: TransactionCreate) -> TransactionRead:
        """Post a transaction and refresh the account balance.

        Raises ``ConflictError`` if the account does not exist or is
        closed and ``ValidationError`` if the transaction itself is
        invalid.
        """
        logger = logging.getLogger(__name__)
        account = await self.account_repository.get_by_code(data.account_code)
        if account is None:
            raise ConflictError(MISSING_ACCOUNT_MESSAGE)
        if account.is_closed:
            logger.warning("Rejected transaction on closed account %s", account.code)
            raise ConflictError(CLOSED_ACCOUNT_MESSAGE)

        self._validate(data)

        transaction = await self.transaction_repository.add(data, capture_date=utcnow())
        await self._recalculate_balance(transaction.account_code)
        logger.info("Posted transaction %s to account %s", transaction.code, transaction.account_code)
        return transaction

    async def update(self, data: TransactionUpdate) -> Optional[TransactionRead]:
        """Correct a transaction's date, amount or description.

        Returns ``None`` if the transaction does not exist.  Raises
        ``ConflictError`` when the update names a different account or
        the account is closed.
        """
        logger = logging.getLogger(__name__)
        existing = await self.transaction_repository.get_by_code(data.code)
        if existing is None:
            return None

        if existing.account_code != data.account_code:
            logger.warning("Rejected moving transaction %s to account %s", data.code, data.account_code)
            raise ConflictError("Changing the account of a transaction is not allowed.")

        account = await self.account_repository.get_by_code(existing.account_code)
        if account is not None and account.is_closed:
            logger.warning("Rejected change to transaction %s on closed account %s", data.code, account.code)
            raise ConflictError(CLOSED_ACCOUNT_MESSAGE)

        self._validate(data)

        existing.transaction_date = data.transaction_date
        existing.amount = data.amount
        existing.description = data.description
        existing.capture_date = utcnow()

        updated = await self.transaction_repository.update(existing)
        await self._recalculate_balance(updated.account_code)
        logger.info("Updated transaction %s", updated.code)
        return updated

    @staticmethod
    def _validate(data: TransactionBase) -> None:
        if data.amount == 0:
            raise ValidationError("The transaction amount cannot be zero.")
        if data.transaction_date > utcnow():
            raise ValidationError("The transaction date cannot be in the future.")

    async def _recalculate_balance(self, account_code: int) -> None:
        """Set the account balance to the sum of all its stored transactions."""
        transactions = await self.transaction_repository.get_by_account_code(account_code)
        balance = sum((t.amount for t in transactions), Decimal("0"))
        await self.account_repository.update_balance(account_code, balance)
        logging.getLogger(__name__).debug("Account %s balance recalculated to %s", account_code, balance)
