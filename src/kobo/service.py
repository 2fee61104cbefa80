"""Highlight fetching for the sync engine."""

from common.logger import get_logger

from .models import BookDetails, HighlightRecord, HighlightSelector
from .repository import KoboRepository

logger = get_logger(__name__)


class HighlightService:
    """Turns repository queries into per-book record sequences."""

    def __init__(self, repository: KoboRepository):
        self.repository = repository
        self._titles: dict[str, str] = {}

    def fetch_highlights(self, selector: HighlightSelector | None = None) -> list[HighlightRecord]:
        """Fetch highlight records in the selector's order."""
        selector = selector or HighlightSelector()
        return self.repository.get_all_bookmarks(
            sort_by_chapter_progress=selector.sort_by_chapter_progress,
            book_id=selector.book_id,
        )

    def fetch_book_catalog(self) -> list[str]:
        """Identifiers of every book on the device."""
        books = self.repository.get_book_catalog()
        for book in books:
            self._titles.setdefault(book.book_id, book.title)
        return [book.book_id for book in books]

    def book_title(self, book_id: str) -> str:
        """Title of a book, falling back to its identifier when unknown."""
        if book_id not in self._titles:
            title = self.repository.get_book_title(book_id)
            if title is None:
                logger.warning(f"No title found for book {book_id}, using its id instead")
                title = book_id
            self._titles[book_id] = title
        return self._titles[book_id]

    def book_details(self, book_id: str) -> BookDetails | None:
        return self.repository.get_book_details_by_title(self.book_title(book_id))

    @staticmethod
    def group_by_book(records: list[HighlightRecord]) -> dict[str, list[HighlightRecord]]:
        """Group records by book id.

        Books appear in order of their first record and records keep their
        input order within each book.
        """
        grouped: dict[str, list[HighlightRecord]] = {}
        for record in records:
            grouped.setdefault(record.book_id, []).append(record)
        return grouped
