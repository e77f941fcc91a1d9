"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations on application start
(``init_db``).  Applied migration versions are stored in the
``migrations`` table and new migrations are executed in order.

Uniqueness of ``persons.id_number`` and ``accounts.account_number`` is
enforced here with case-insensitive unique constraints, backing up the
pre-check reads done by the services.  Deleting a person cascades to
its accounts, their status rows and their transactions.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign key enforcement is switched on for the lifetime of
    the connection; SQLite leaves it off by default.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit.

    The work done through the cursor is committed on success and rolled
    back if the block raises.
    """
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS persons (
            code INTEGER PRIMARY KEY AUTOINCREMENT,
            id_number TEXT NOT NULL COLLATE NOCASE,
            name TEXT,
            surname TEXT,
            CONSTRAINT ix_person_id UNIQUE (id_number)
        );

        CREATE TABLE IF NOT EXISTS accounts (
            code INTEGER PRIMARY KEY AUTOINCREMENT,
            person_code INTEGER NOT NULL,
            account_number TEXT NOT NULL COLLATE NOCASE,
            outstanding_balance TEXT NOT NULL DEFAULT '0',
            CONSTRAINT ix_account_num UNIQUE (account_number),
            FOREIGN KEY(person_code) REFERENCES persons(code) ON DELETE CASCADE
        );

        -- One status row per account, created together with the account.
        CREATE TABLE IF NOT EXISTS account_status (
            account_code INTEGER PRIMARY KEY,
            is_closed INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY(account_code) REFERENCES accounts(code) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS transactions (
            code INTEGER PRIMARY KEY AUTOINCREMENT,
            account_code INTEGER NOT NULL,
            transaction_date TIMESTAMP NOT NULL,
            capture_date TIMESTAMP NOT NULL,
            amount TEXT NOT NULL,
            description TEXT NOT NULL,
            FOREIGN KEY(account_code) REFERENCES accounts(code) ON DELETE CASCADE
        );
        """,
    ),
    # Migration 2: indices on owner references used by the lookups
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_accounts_person_code ON accounts(person_code);
        CREATE INDEX IF NOT EXISTS idx_transactions_account_code ON transactions(account_code);
        CREATE INDEX IF NOT EXISTS idx_persons_surname ON persons(surname);
        """,
    ),
]


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any entries of ``MIGRATIONS``
    with a higher version.  To change the schema, append a migration
    with an incremented version number.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
