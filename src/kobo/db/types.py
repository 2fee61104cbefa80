"""Shared types and exceptions for the Kobo database access layer."""

from typing import Any


class DatabaseError(Exception):
    """Base exception for Kobo database operations."""

    pass


class ConnectionError(DatabaseError):
    """Error opening the Kobo database."""

    pass


class QueryError(DatabaseError):
    """A query could not be executed against the Kobo schema."""

    pass


# Type alias for database rows
Row = dict[str, Any]
