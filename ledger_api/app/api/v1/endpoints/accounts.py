"""
Account endpoints for API v1.

Accounts are opened, renumbered or moved to another owner, and closed
or reopened.  There is no delete route; accounts are only closed.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ledger_api.app.core.errors import ValidationError
from ledger_api.app.schemas.account import AccountCreate, AccountDetail, AccountRead, AccountUpdate
from ledger_api.app.services.account_service import AccountService

from .persons import ROUTE_CODE_MISMATCH_MESSAGE

router = APIRouter()


def get_account_service() -> AccountService:
    return AccountService()


@router.get("/by-number/{account_number}", response_model=AccountRead)
async def get_account_by_number(
    account_number: str,
    service: AccountService = Depends(get_account_service),
):
    account = await service.get_by_account_number(account_number)
    if account is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return account


@router.get("/by-person/{person_code}", response_model=List[AccountRead])
async def list_accounts_for_person(
    person_code: int,
    service: AccountService = Depends(get_account_service),
) -> List[AccountRead]:
    return await service.get_by_person_code(person_code)


@router.get("/{code}", response_model=AccountDetail)
async def get_account(code: int, service: AccountService = Depends(get_account_service)):
    """Retrieve an account with its transactions.  Returns 404 if not found."""
    account = await service.get_by_code(code)
    if account is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return account


@router.post("", response_model=AccountRead, status_code=status.HTTP_201_CREATED)
async def create_account(
    account_in: AccountCreate,
    service: AccountService = Depends(get_account_service),
) -> AccountRead:
    """Open an account for an existing person with a zero balance."""
    return await service.create(account_in)


@router.put("/{code}", response_model=AccountRead)
async def update_account(
    code: int,
    account_in: AccountUpdate,
    service: AccountService = Depends(get_account_service),
):
    """Change the owner or number of an account."""
    if code != account_in.code:
        raise ValidationError(ROUTE_CODE_MISMATCH_MESSAGE)
    account = await service.update(account_in)
    if account is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return account


@router.post("/{code}/close", response_model=AccountRead)
async def close_account(code: int, service: AccountService = Depends(get_account_service)):
    """Close an account.  The outstanding balance must be zero."""
    account = await service.close(code)
    if account is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return account


@router.post("/{code}/reopen", response_model=AccountRead)
async def reopen_account(code: int, service: AccountService = Depends(get_account_service)):
    """Reopen a closed account."""
    account = await service.reopen(code)
    if account is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return account
