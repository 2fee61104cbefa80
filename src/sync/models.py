"""Result types for sync passes."""

from dataclasses import dataclass, field
from enum import Enum

from inbox.document import Document


@dataclass
class MergeResult:
    """Outcome of merging records into one document (in memory)."""

    document: Document
    added: int
    skipped: int


class SyncOutcome(str, Enum):
    """What happened to one inbox note during a sync."""

    CREATED = "created"  # note did not exist and was written
    UPDATED = "updated"  # new highlights appended
    UNCHANGED = "unchanged"  # nothing to add, note left untouched
    FAILED = "failed"  # storage error, note left at its previous state


@dataclass
class BookSyncResult:
    """Sync result for a single book."""

    book_title: str
    path: str
    outcome: SyncOutcome
    added: int = 0
    skipped: int = 0
    error: str | None = None


@dataclass
class SyncReport:
    """Summary of a sync over several books."""

    books: list[BookSyncResult] = field(default_factory=list)

    def _count(self, outcome: SyncOutcome) -> int:
        return sum(1 for book in self.books if book.outcome == outcome)

    @property
    def added(self) -> int:
        return sum(book.added for book in self.books)

    @property
    def created(self) -> int:
        return self._count(SyncOutcome.CREATED)

    @property
    def updated(self) -> int:
        return self._count(SyncOutcome.UPDATED)

    @property
    def unchanged(self) -> int:
        return self._count(SyncOutcome.UNCHANGED)

    @property
    def failed(self) -> int:
        return self._count(SyncOutcome.FAILED)

    @property
    def is_noop(self) -> bool:
        """True if no note was created or changed."""
        return self.created == 0 and self.updated == 0 and self.failed == 0
