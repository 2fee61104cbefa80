"""Value records read from the Kobo database."""

import re
from dataclasses import dataclass
from datetime import datetime

_WHITESPACE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace (including newlines) to single spaces."""
    return _WHITESPACE.sub(" ", text).strip()


@dataclass(frozen=True)
class HighlightRecord:
    """A single highlight (Kobo bookmark row) with its optional device note."""

    id: str
    text: str
    book_id: str
    created_at: datetime
    note: str | None = None
    chapter_progress: float | None = None


@dataclass(frozen=True)
class Book:
    """A catalog entry: a book-level content row."""

    book_id: str
    title: str


@dataclass(frozen=True)
class Content:
    """A content row (book or chapter)."""

    title: str
    content_id: str
    chapter_id_bookmarked: str | None = None
    book_title: str | None = None


@dataclass(frozen=True)
class BookDetails:
    """Book metadata rendered into the header of a new inbox note."""

    title: str
    author: str
    description: str | None = None
    publisher: str | None = None
    date_last_read: datetime | None = None
    read_status: int = 0
    percent_read: float = 0
    isbn: str | None = None
    series: str | None = None
    series_number: float | None = None
    time_spent_reading: int = 0

    def to_metadata(self) -> dict:
        """Frontmatter fields for this book, omitting unknown values."""
        metadata = {
            "title": self.title,
            "author": self.author,
            "publisher": self.publisher,
            "isbn": self.isbn,
            "series": self.series,
            "series_number": self.series_number,
            "read_status": self.read_status,
            "percent_read": self.percent_read,
            "date_last_read": (
                self.date_last_read.isoformat(timespec="seconds") if self.date_last_read else None
            ),
            "time_spent_reading": self.time_spent_reading,
            "description": self.description,
        }
        return {key: value for key, value in metadata.items() if value is not None}


@dataclass
class HighlightSelector:
    """Which highlights to fetch and in what order."""

    book_id: str | None = None
    sort_by_chapter_progress: bool = False
