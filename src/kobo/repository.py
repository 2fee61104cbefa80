"""Queries against the Kobo device schema.

Only two tables matter: Bookmark (one row per highlight) and content (one row
per book and per chapter). Rows are turned into the value records from
kobo.models; malformed rows are dropped with a warning instead of failing the
whole import.
"""

from datetime import datetime
from typing import Any

from common.constants import KOBO_BOOK_CONTENT_TYPE
from common.logger import get_logger

from .db import DatabaseAdapter, QueryError, Row
from .models import Book, BookDetails, Content, HighlightRecord, normalize_whitespace

logger = get_logger(__name__)

_BOOKMARK_COLUMNS = "BookmarkID, Text, ContentID, VolumeID, Annotation, DateCreated, ChapterProgress"

_BOOK_DETAIL_COLUMNS = """
    Title,
    Attribution,
    Description,
    Publisher,
    DateLastRead,
    ReadStatus,
    ___PercentRead,
    ISBN,
    Series,
    SeriesNumber,
    TimeSpentReading
"""


def parse_kobo_timestamp(value: Any) -> datetime | None:
    """Parse a Kobo timestamp such as '2024-03-01T21:14:05.000' or '...Z'.

    Returns:
        Naive datetime, or None if the value is missing or unparseable
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1]
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class KoboRepository:
    """Read-only queries over an open Kobo database adapter."""

    def __init__(self, adapter: DatabaseAdapter):
        self.adapter = adapter

    def get_all_bookmarks(
        self,
        sort_by_chapter_progress: bool = False,
        book_id: str | None = None,
    ) -> list[HighlightRecord]:
        """Fetch every highlight, optionally for one book.

        Args:
            sort_by_chapter_progress: Order by chapter progress, then creation
                time. Otherwise order by creation time only.
            book_id: Restrict to highlights of this book (VolumeID)

        Returns:
            Highlight records in the requested order. Rows missing an id,
            text, book reference or creation date are skipped.
        """
        where = "Text IS NOT NULL"
        params: tuple = ()
        if book_id is not None:
            where += " AND VolumeID = ?"
            params = (book_id,)

        order = (
            "ChapterProgress ASC, DateCreated ASC"
            if sort_by_chapter_progress
            else "DateCreated ASC"
        )

        rows = self.adapter.fetchall(
            f"SELECT {_BOOKMARK_COLUMNS} FROM Bookmark WHERE {where} ORDER BY {order}",
            params or None,
        )

        if not rows:
            if book_id is not None:
                logger.warning(f"No highlights or annotations found for book {book_id}")
            else:
                logger.warning(
                    "The Bookmark table returned no results. "
                    "Do you have any highlights or annotations?"
                )
            return []

        records = []
        skipped = 0
        for row in rows:
            record = self._bookmark_from_row(row)
            if record is None:
                skipped += 1
                continue
            records.append(record)

        if skipped:
            logger.warning(f"Skipped {skipped} bookmark(s) with missing required values")

        return records

    def get_bookmark_by_id(self, bookmark_id: str) -> HighlightRecord | None:
        """Fetch a single highlight, or None if missing or malformed."""
        row = self.adapter.fetchone(
            f"SELECT {_BOOKMARK_COLUMNS} FROM Bookmark WHERE BookmarkID = ?",
            (bookmark_id,),
        )
        if row is None:
            return None
        return self._bookmark_from_row(row)

    def get_total_bookmarks(self) -> int:
        """Count highlight rows (rows with text)."""
        total = self.adapter.fetchscalar("SELECT count(*) FROM Bookmark WHERE Text IS NOT NULL")
        return int(total or 0)

    def get_content_by_content_id(self, content_id: str) -> Content | None:
        """Fetch one content row by exact ContentID.

        Raises:
            QueryError: If more than one row matches
        """
        rows = self.adapter.fetchall(
            "SELECT Title, ContentID, ChapterIDBookmarked, BookTitle FROM content WHERE ContentID = ?",
            (content_id,),
        )
        if len(rows) > 1:
            raise QueryError(f"Filtering by ContentID yielded more than 1 result: {content_id}")
        return self._content_from_row(rows[0]) if rows else None

    def get_book_catalog(self) -> list[Book]:
        """List every book on the device, with or without highlights."""
        rows = self.adapter.fetchall(
            "SELECT ContentID, Title FROM content "
            "WHERE ContentType = ? AND Title IS NOT NULL "
            "ORDER BY Title ASC",
            (KOBO_BOOK_CONTENT_TYPE,),
        )
        return [Book(book_id=str(row["ContentID"]), title=str(row["Title"])) for row in rows]

    def get_books_with_highlights(self) -> list[Book]:
        """List books that have at least one highlight."""
        rows = self.adapter.fetchall(
            "SELECT DISTINCT content.ContentID, content.Title FROM content "
            "JOIN Bookmark ON content.ContentID = Bookmark.VolumeID "
            "WHERE content.ContentType = ? AND content.Title IS NOT NULL "
            "AND Bookmark.Text IS NOT NULL "
            "ORDER BY content.Title ASC",
            (KOBO_BOOK_CONTENT_TYPE,),
        )
        return [Book(book_id=str(row["ContentID"]), title=str(row["Title"])) for row in rows]

    def get_book_title(self, book_id: str) -> str | None:
        """Look up the title of a book by its ContentID."""
        title = self.adapter.fetchscalar(
            "SELECT Title FROM content WHERE ContentID = ? AND Title IS NOT NULL LIMIT 1",
            (book_id,),
        )
        return None if title is None else str(title)

    def get_book_details_by_title(self, title: str) -> BookDetails | None:
        """Fetch book metadata for a title.

        Returns:
            BookDetails, or None if the book or its author is unknown
        """
        row = self.adapter.fetchone(
            f"SELECT {_BOOK_DETAIL_COLUMNS} FROM content "
            "WHERE Title = ? AND ContentType = ? LIMIT 1",
            (title, KOBO_BOOK_CONTENT_TYPE),
        )
        if row is None or row["Attribution"] is None:
            logger.debug(f"No book details found for {title!r}")
            return None
        return self._details_from_row(row)

    def get_all_book_details(self) -> list[BookDetails]:
        """Fetch metadata for every book with a known title and author."""
        rows = self.adapter.fetchall(
            f"SELECT DISTINCT {_BOOK_DETAIL_COLUMNS} FROM content "
            "WHERE Title IS NOT NULL AND ContentType = ? "
            "ORDER BY Title ASC",
            (KOBO_BOOK_CONTENT_TYPE,),
        )
        return [
            self._details_from_row(row)
            for row in rows
            if row["Title"] is not None and row["Attribution"] is not None
        ]

    @staticmethod
    def _bookmark_from_row(row: Row) -> HighlightRecord | None:
        bookmark_id = row.get("BookmarkID")
        text = row.get("Text")
        book_ref = row.get("VolumeID") or row.get("ContentID")
        created_at = parse_kobo_timestamp(row.get("DateCreated"))

        if bookmark_id is None or text is None or book_ref is None or created_at is None:
            logger.debug(f"Skipping a bookmark with missing required values: {bookmark_id!r}")
            return None

        annotation = row.get("Annotation")
        note = normalize_whitespace(str(annotation)) if annotation is not None else None

        return HighlightRecord(
            id=str(bookmark_id),
            text=normalize_whitespace(str(text)),
            book_id=str(book_ref),
            created_at=created_at,
            note=note or None,
            chapter_progress=_optional_float(row.get("ChapterProgress")),
        )

    @staticmethod
    def _content_from_row(row: Row) -> Content:
        return Content(
            title=str(row.get("Title") or ""),
            content_id=str(row.get("ContentID") or ""),
            chapter_id_bookmarked=_optional_str(row.get("ChapterIDBookmarked")),
            book_title=_optional_str(row.get("BookTitle")),
        )

    @staticmethod
    def _details_from_row(row: Row) -> BookDetails:
        series_number = _optional_float(row.get("SeriesNumber"))
        return BookDetails(
            title=str(row["Title"]),
            author=str(row["Attribution"]),
            description=_optional_str(row.get("Description")),
            publisher=_optional_str(row.get("Publisher")),
            date_last_read=parse_kobo_timestamp(row.get("DateLastRead")),
            read_status=int(row.get("ReadStatus") or 0),
            percent_read=float(row.get("___PercentRead") or 0),
            isbn=_optional_str(row.get("ISBN")),
            series=_optional_str(row.get("Series")),
            series_number=series_number,
            time_spent_reading=int(row.get("TimeSpentReading") or 0),
        )
