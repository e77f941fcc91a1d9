"""
SQLite storage for transactions.

Amounts are stored as decimal text and dates as ISO-8601 UTC strings so
that values round-trip without loss.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ledger_api.app.core.db import get_connection
from ledger_api.app.core.errors import ConflictError
from ledger_api.app.schemas.common import as_utc
from ledger_api.app.schemas.transaction import TransactionCreate, TransactionRead

MISSING_ACCOUNT_MESSAGE = "The account does not exist."

_COLUMNS = "code, account_code, transaction_date, capture_date, amount, description"


class TransactionRepository:
    """Persistence operations for the ``transactions`` table."""

    async def get_by_code(self, code: int) -> Optional[TransactionRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM transactions WHERE code = ?",
                (code,),
            ).fetchone()
            return self._row_to_transaction(row) if row else None
        finally:
            conn.close()

    async def get_by_account_code(self, account_code: int) -> List[TransactionRead]:
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM transactions WHERE account_code = ?"
                " ORDER BY transaction_date, code",
                (account_code,),
            ).fetchall()
            return [self._row_to_transaction(row) for row in rows]
        finally:
            conn.close()

    async def add(self, data: TransactionCreate, capture_date: datetime) -> TransactionRead:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO transactions (account_code, transaction_date, capture_date, amount, description)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    data.account_code,
                    as_utc(data.transaction_date).isoformat(),
                    as_utc(capture_date).isoformat(),
                    str(data.amount),
                    data.description,
                ),
            )
            code = cursor.lastrowid
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise ConflictError(MISSING_ACCOUNT_MESSAGE) from exc
        finally:
            conn.close()
        return TransactionRead(
            code=code,
            account_code=data.account_code,
            transaction_date=data.transaction_date,
            capture_date=capture_date,
            amount=data.amount,
            description=data.description,
        )

    async def update(self, transaction: TransactionRead) -> TransactionRead:
        """Persist date, amount, description and capture date.

        ``account_code`` is never written after the insert.
        """
        conn = get_connection()
        try:
            conn.execute(
                """
                UPDATE transactions
                SET transaction_date = ?, capture_date = ?, amount = ?, description = ?
                WHERE code = ?
                """,
                (
                    as_utc(transaction.transaction_date).isoformat(),
                    as_utc(transaction.capture_date).isoformat(),
                    str(transaction.amount),
                    transaction.description,
                    transaction.code,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return transaction

    @staticmethod
    def _row_to_transaction(row: sqlite3.Row) -> TransactionRead:
        return TransactionRead(
            code=row["code"],
            account_code=row["account_code"],
            transaction_date=datetime.fromisoformat(row["transaction_date"]),
            capture_date=datetime.fromisoformat(row["capture_date"]),
            amount=Decimal(row["amount"]),
            description=row["description"],
        )
