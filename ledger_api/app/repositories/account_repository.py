"""
SQLite storage for accounts and their status rows.

An account's closed flag lives in ``account_status``.  The repository
inserts the two rows in a single commit and always reads them joined,
so callers only ever see ``AccountRead`` with ``is_closed`` filled in.
Each write touches only its own columns: owner and number, balance, or
status.
"""

from __future__ import annotations

import sqlite3
from decimal import Decimal
from typing import List, Optional

from ledger_api.app.core.db import get_connection
from ledger_api.app.core.errors import ConflictError
from ledger_api.app.schemas.account import AccountCreate, AccountRead

DUPLICATE_ACCOUNT_NUMBER_MESSAGE = "An account with the same account number already exists."
MISSING_PERSON_MESSAGE = "The person does not exist."

_SELECT = (
    "SELECT a.code, a.person_code, a.account_number, a.outstanding_balance,"
    " COALESCE(s.is_closed, 0) AS is_closed"
    " FROM accounts a LEFT JOIN account_status s ON s.account_code = a.code"
)


def _integrity_conflict(exc: sqlite3.IntegrityError) -> ConflictError:
    if "UNIQUE" in str(exc).upper():
        return ConflictError(DUPLICATE_ACCOUNT_NUMBER_MESSAGE)
    return ConflictError(MISSING_PERSON_MESSAGE)


class AccountRepository:
    """Persistence operations for the ``accounts`` and ``account_status`` tables."""

    async def get_by_code(self, code: int) -> Optional[AccountRead]:
        conn = get_connection()
        try:
            row = conn.execute(f"{_SELECT} WHERE a.code = ?", (code,)).fetchone()
            return self._row_to_account(row) if row else None
        finally:
            conn.close()

    async def get_by_account_number(self, account_number: str) -> Optional[AccountRead]:
        """Look up an account by number (case-insensitive)."""
        conn = get_connection()
        try:
            row = conn.execute(
                f"{_SELECT} WHERE a.account_number = ?",
                (account_number,),
            ).fetchone()
            return self._row_to_account(row) if row else None
        finally:
            conn.close()

    async def get_by_person_code(self, person_code: int) -> List[AccountRead]:
        conn = get_connection()
        try:
            rows = conn.execute(
                f"{_SELECT} WHERE a.person_code = ? ORDER BY a.code",
                (person_code,),
            ).fetchall()
            return [self._row_to_account(row) for row in rows]
        finally:
            conn.close()

    async def add(self, data: AccountCreate) -> AccountRead:
        """Insert an open account with a zero balance and its status row."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO accounts (person_code, account_number, outstanding_balance) VALUES (?, ?, ?)",
                (data.person_code, data.account_number, "0"),
            )
            code = cursor.lastrowid
            cursor.execute(
                "INSERT INTO account_status (account_code, is_closed) VALUES (?, 0)",
                (code,),
            )
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise _integrity_conflict(exc) from exc
        finally:
            conn.close()
        return AccountRead(
            code=code,
            person_code=data.person_code,
            account_number=data.account_number,
            outstanding_balance=Decimal("0"),
            is_closed=False,
        )

    async def update(self, account: AccountRead) -> AccountRead:
        """Persist the owner and number of ``account``.

        Balance and status are only written by ``update_balance`` and
        ``set_closed``.
        """
        conn = get_connection()
        try:
            conn.execute(
                "UPDATE accounts SET person_code = ?, account_number = ? WHERE code = ?",
                (account.person_code, account.account_number, account.code),
            )
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise _integrity_conflict(exc) from exc
        finally:
            conn.close()
        return account

    async def update_balance(self, code: int, balance: Decimal) -> None:
        conn = get_connection()
        try:
            conn.execute(
                "UPDATE accounts SET outstanding_balance = ? WHERE code = ?",
                (str(balance), code),
            )
            conn.commit()
        finally:
            conn.close()

    async def set_closed(self, code: int, is_closed: bool) -> None:
        """Write the status row of an account, creating it if missing."""
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO account_status (account_code, is_closed) VALUES (?, ?)
                ON CONFLICT(account_code) DO UPDATE SET is_closed = excluded.is_closed
                """,
                (code, 1 if is_closed else 0),
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_account(row: sqlite3.Row) -> AccountRead:
        return AccountRead(
            code=row["code"],
            person_code=row["person_code"],
            account_number=row["account_number"],
            outstanding_balance=Decimal(row["outstanding_balance"]),
            is_closed=bool(row["is_closed"]),
        )
