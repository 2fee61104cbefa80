"""Read-only source of Kobo database rows.

KoboRepository only issues SELECT statements, so adapters expose the fetch
half of a database API and nothing that could change the device file.
"""

from abc import ABC, abstractmethod
from typing import Any

from .types import Row


class DatabaseAdapter(ABC):
    """Row source over an open Kobo database."""

    @abstractmethod
    def connect(self) -> None:
        """Open the database.

        Raises:
            ConnectionError: If the file is missing or cannot be opened
        """

    @abstractmethod
    def close(self) -> None:
        """Release the database. Safe to call twice."""

    @abstractmethod
    def fetchall(self, query: str, params: tuple | None = None) -> list[Row]:
        """Rows of a SELECT, each as a column -> value dict.

        Raises:
            QueryError: If the statement fails
        """

    @abstractmethod
    def fetchone(self, query: str, params: tuple | None = None) -> Row | None:
        """First row of a SELECT, or None."""

    @abstractmethod
    def fetchscalar(self, query: str, params: tuple | None = None) -> Any:
        """First column of the first row (count(*) and single-title lookups)."""

    def __enter__(self) -> "DatabaseAdapter":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
