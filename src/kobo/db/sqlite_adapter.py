"""SQLite access to KoboReader.sqlite.

The file is opened through a ``mode=ro`` URI: an import can read a database
copied from (or still mounted on) the device, but can never write to it.
"""

import sqlite3
from pathlib import Path
from typing import Any

from .interface import DatabaseAdapter
from .types import ConnectionError as DBConnectionError
from .types import DatabaseError, QueryError, Row


class SQLiteAdapter(DatabaseAdapter):
    """Read-only SQLite adapter for the Kobo device database."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        if not self.db_path.is_file():
            raise DBConnectionError(f"Kobo database not found: {self.db_path}")

        try:
            self._conn = sqlite3.connect(f"{self.db_path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as e:
            raise DBConnectionError(f"Failed to open Kobo database {self.db_path}: {e}") from e
        self._conn.row_factory = sqlite3.Row

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _cursor(self, query: str, params: tuple | None) -> sqlite3.Cursor:
        if self._conn is None:
            raise DatabaseError("Kobo database is not open (call connect() first)")
        try:
            return self._conn.execute(query, params or ())
        except sqlite3.Error as e:
            raise QueryError(f"Kobo query failed: {e}") from e

    def fetchall(self, query: str, params: tuple | None = None) -> list[Row]:
        return [dict(row) for row in self._cursor(query, params).fetchall()]

    def fetchone(self, query: str, params: tuple | None = None) -> Row | None:
        row = self._cursor(query, params).fetchone()
        return dict(row) if row is not None else None

    def fetchscalar(self, query: str, params: tuple | None = None) -> Any:
        row = self._cursor(query, params).fetchone()
        return row[0] if row is not None else None

    def exists(self) -> bool:
        return self.db_path.is_file()

    def __repr__(self) -> str:
        state = "open" if self._conn is not None else "closed"
        return f"SQLiteAdapter({self.db_path}, {state})"
