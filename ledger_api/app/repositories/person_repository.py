"""
SQLite storage for persons.

Besides plain CRUD the repository answers the existence check used for
``id_number`` uniqueness and the filtered, paged search.  Search
filters are AND-combined and blank filters are ignored.
"""

from __future__ import annotations

import sqlite3
from typing import List, Optional, Tuple

from ledger_api.app.core.db import get_connection
from ledger_api.app.core.errors import ConflictError
from ledger_api.app.schemas.person import PersonCreate, PersonRead

DUPLICATE_ID_NUMBER_MESSAGE = "A person with the same ID number already exists."

_COLUMNS = "code, id_number, name, surname"


class PersonRepository:
    """Persistence operations for the ``persons`` table."""

    async def get_all(self) -> List[PersonRead]:
        conn = get_connection()
        try:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM persons ORDER BY code").fetchall()
            return [self._row_to_person(row) for row in rows]
        finally:
            conn.close()

    async def get_by_code(self, code: int) -> Optional[PersonRead]:
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM persons WHERE code = ?",
                (code,),
            ).fetchone()
            return self._row_to_person(row) if row else None
        finally:
            conn.close()

    async def exists_by_id_number(self, id_number: str) -> bool:
        """Return ``True`` if any person has ``id_number`` (case-insensitive)."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT 1 FROM persons WHERE id_number = ? LIMIT 1",
                (id_number,),
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    async def add(self, data: PersonCreate) -> PersonRead:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO persons (id_number, name, surname) VALUES (?, ?, ?)",
                (data.id_number, data.name, data.surname),
            )
            code = cursor.lastrowid
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise ConflictError(DUPLICATE_ID_NUMBER_MESSAGE) from exc
        finally:
            conn.close()
        return PersonRead(code=code, id_number=data.id_number, name=data.name, surname=data.surname)

    async def update(self, person: PersonRead) -> PersonRead:
        conn = get_connection()
        try:
            conn.execute(
                "UPDATE persons SET id_number = ?, name = ?, surname = ? WHERE code = ?",
                (person.id_number, person.name, person.surname, person.code),
            )
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise ConflictError(DUPLICATE_ID_NUMBER_MESSAGE) from exc
        finally:
            conn.close()
        return person

    async def delete(self, code: int) -> bool:
        """Delete a person; owned accounts and their transactions cascade."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM persons WHERE code = ?", (code,))
            affected = cursor.rowcount
            conn.commit()
            return affected > 0
        finally:
            conn.close()

    async def search(
        self,
        id_number: Optional[str],
        surname: Optional[str],
        account_number: Optional[str],
        skip: int,
        take: int,
    ) -> List[PersonRead]:
        """Return one page of matching persons ordered by surname, name, ID number."""
        where, params = self._build_search_filter(id_number, surname, account_number)
        query = (
            f"SELECT {_COLUMNS} FROM persons{where}"
            " ORDER BY surname, name, id_number LIMIT ? OFFSET ?"
        )
        conn = get_connection()
        try:
            rows = conn.execute(query, (*params, take, skip)).fetchall()
            return [self._row_to_person(row) for row in rows]
        finally:
            conn.close()

    async def count(
        self,
        id_number: Optional[str],
        surname: Optional[str],
        account_number: Optional[str],
    ) -> int:
        where, params = self._build_search_filter(id_number, surname, account_number)
        conn = get_connection()
        try:
            row = conn.execute(f"SELECT COUNT(*) AS count FROM persons{where}", params).fetchone()
            return row["count"]
        finally:
            conn.close()

    @staticmethod
    def _build_search_filter(
        id_number: Optional[str],
        surname: Optional[str],
        account_number: Optional[str],
    ) -> Tuple[str, tuple]:
        where_clauses: list[str] = []
        params: list = []
        if id_number and id_number.strip():
            where_clauses.append("id_number = ?")
            params.append(id_number)
        if surname and surname.strip():
            # Escape LIKE wildcards so the filter is a literal "contains".
            pattern = surname.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            where_clauses.append("surname LIKE ? ESCAPE '\\'")
            params.append(f"%{pattern}%")
        if account_number and account_number.strip():
            where_clauses.append(
                "EXISTS (SELECT 1 FROM accounts a WHERE a.person_code = persons.code AND a.account_number = ?)"
            )
            params.append(account_number)
        if not where_clauses:
            return "", ()
        return " WHERE " + " AND ".join(where_clauses), tuple(params)

    @staticmethod
    def _row_to_person(row: sqlite3.Row) -> PersonRead:
        return PersonRead(
            code=row["code"],
            id_number=row["id_number"],
            name=row["name"],
            surname=row["surname"],
        )
