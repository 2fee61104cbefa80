"""Read-only access to the Kobo e-reader database.

The device database (KoboReader.sqlite) is treated purely as a record source:
nothing in this package writes to it.

Example:
    >>> from kobo.db import SQLiteAdapter
    >>>
    >>> with SQLiteAdapter("KoboReader.sqlite") as adapter:
    ...     adapter.fetchscalar("SELECT count(*) FROM Bookmark")
"""

from .interface import DatabaseAdapter
from .sqlite_adapter import SQLiteAdapter
from .types import ConnectionError, DatabaseError, QueryError, Row

__all__ = [
    # Interface
    "DatabaseAdapter",
    "SQLiteAdapter",
    # Types and exceptions
    "DatabaseError",
    "ConnectionError",
    "QueryError",
    "Row",
]
