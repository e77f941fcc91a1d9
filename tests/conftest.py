"""Pytest configuration and fixtures."""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from ledger_api.app.core.config import settings
from ledger_api.app.core.db import init_db
from ledger_api.app.schemas.account import AccountCreate, AccountRead
from ledger_api.app.schemas.person import PersonCreate, PersonRead
from ledger_api.app.schemas.transaction import TransactionCreate
from ledger_api.app.services.account_service import AccountService
from ledger_api.app.services.person_service import PersonService
from ledger_api.app.services.transaction_service import TransactionService


def run(coro):
    """Drive a service coroutine to completion."""
    return asyncio.run(coro)


def yesterday() -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=1)


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch) -> str:
    """Point the app at a fresh SQLite file for each test."""
    path = str(tmp_path / "ledger-test.db")
    monkeypatch.setattr(settings, "database_url", path)
    init_db()
    return path


@pytest.fixture
def person_service() -> PersonService:
    return PersonService()


@pytest.fixture
def account_service() -> AccountService:
    return AccountService()


@pytest.fixture
def transaction_service() -> TransactionService:
    return TransactionService()


@pytest.fixture
def person(person_service: PersonService) -> PersonRead:
    """A stored person without accounts."""
    return run(person_service.create(PersonCreate(id_number="8001015009087", name="Thandi", surname="Nkosi")))


@pytest.fixture
def account(account_service: AccountService, person: PersonRead) -> AccountRead:
    """An open, empty account owned by ``person``."""
    return run(account_service.create(AccountCreate(person_code=person.code, account_number="ACC-0001")))


@pytest.fixture
def post(transaction_service: TransactionService):
    """Post a transaction dated yesterday to an account."""

    def _post(account_code: int, amount: str, description: str = "Deposit"):
        return run(
            transaction_service.create(
                TransactionCreate(
                    account_code=account_code,
                    transaction_date=yesterday(),
                    amount=Decimal(amount),
                    description=description,
                )
            )
        )

    return _post


@pytest.fixture
def client() -> TestClient:
    from ledger_api.app.main import app

    with TestClient(app) as test_client:
        yield test_client
