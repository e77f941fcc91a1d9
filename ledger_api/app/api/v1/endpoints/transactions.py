"""
Transaction endpoints for API v1.

Transactions are posted and corrected here; every write refreshes the
owning account's outstanding balance.  Transactions cannot be deleted.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ledger_api.app.core.errors import ValidationError
from ledger_api.app.schemas.transaction import TransactionCreate, TransactionRead, TransactionUpdate
from ledger_api.app.services.transaction_service import TransactionService

from .persons import ROUTE_CODE_MISMATCH_MESSAGE

router = APIRouter()


def get_transaction_service() -> TransactionService:
    return TransactionService()


@router.get("/by-account/{account_code}", response_model=List[TransactionRead])
async def list_transactions_for_account(
    account_code: int,
    service: TransactionService = Depends(get_transaction_service),
) -> List[TransactionRead]:
    return await service.get_by_account_code(account_code)


@router.get("/{code}", response_model=TransactionRead)
async def get_transaction(code: int, service: TransactionService = Depends(get_transaction_service)):
    transaction = await service.get_by_code(code)
    if transaction is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return transaction


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_in: TransactionCreate,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionRead:
    """Post a transaction to an open account.

    The amount must not be zero and the transaction date must not be in
    the future.  The capture date is set by the server.
    """
    return await service.create(transaction_in)


@router.put("/{code}", response_model=TransactionRead)
async def update_transaction(
    code: int,
    transaction_in: TransactionUpdate,
    service: TransactionService = Depends(get_transaction_service),
):
    """Correct the date, amount or description of a transaction."""
    if code != transaction_in.code:
        raise ValidationError(ROUTE_CODE_MISMATCH_MESSAGE)
    transaction = await service.update(transaction_in)
    if transaction is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return transaction
