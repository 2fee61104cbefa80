"""Sync Kobo highlights into one inbox note per book.

Books are processed one after another. A storage failure on one book is
logged and reported, and the remaining books are still synced.
"""

from datetime import date, datetime

from common.env import ImportSettings
from common.logger import get_logger
from inbox.document import parse, serialize
from inbox.stats import stamp_stats
from kobo.db import DatabaseError
from kobo.models import BookDetails, HighlightRecord, HighlightSelector
from kobo.service import HighlightService
from vault.paths import inbox_path, parent_folder
from vault.storage import DocumentStorage, StorageError

from .engine import initialize_document, merge_records
from .models import BookSyncResult, SyncOutcome, SyncReport

logger = get_logger(__name__)


def sync_book(
    storage: DocumentStorage,
    path: str,
    book_title: str,
    records: list[HighlightRecord],
    details: BookDetails | None = None,
    today: date | None = None,
    now: datetime | None = None,
) -> BookSyncResult:
    """Merge records into the inbox note at path.

    An existing note with nothing new is left untouched. A missing note is
    always written, header-only if there are no records.

    Raises:
        StorageError: If the note cannot be read or written
    """
    existed = storage.exists(path)

    if existed:
        document = parse(storage.read(path))
    else:
        document = initialize_document(book_title, details, today)

    merge = merge_records(document, records)

    if existed and merge.added == 0:
        logger.debug(f"{path}: nothing to add")
        return BookSyncResult(
            book_title=book_title,
            path=path,
            outcome=SyncOutcome.UNCHANGED,
            skipped=merge.skipped,
        )

    folder = parent_folder(path)
    if folder and not storage.exists(folder):
        storage.create_container(folder)

    document = merge.document
    stamp_stats(document, now)
    storage.write(path, serialize(document))

    outcome = SyncOutcome.UPDATED if existed else SyncOutcome.CREATED
    logger.info(f"{outcome.value.capitalize()} {path}: [bold]{merge.added}[/bold] new highlight(s)")

    return BookSyncResult(
        book_title=book_title,
        path=path,
        outcome=outcome,
        added=merge.added,
        skipped=merge.skipped,
    )


def sync_library(
    service: HighlightService,
    storage: DocumentStorage,
    settings: ImportSettings,
    book_id: str | None = None,
    today: date | None = None,
    now: datetime | None = None,
) -> SyncReport:
    """Sync every book (or a single book) from the device into the vault.

    Args:
        service: Highlight source
        storage: Vault storage
        settings: Folder and ordering settings
        book_id: Only sync this book
        today: Creation date for new notes (defaults to today)
        now: Stats timestamp (defaults to the current time)

    Returns:
        SyncReport with one entry per book
    """
    records = service.fetch_highlights(
        HighlightSelector(
            book_id=book_id,
            sort_by_chapter_progress=settings.sort_by_chapter_progress,
        )
    )
    grouped = service.group_by_book(records)

    if settings.import_all_books and book_id is None:
        for catalog_id in service.fetch_book_catalog():
            grouped.setdefault(catalog_id, [])
    elif book_id is not None:
        grouped.setdefault(book_id, [])

    logger.info(f"Syncing [bold]{len(grouped)}[/bold] book(s) into {settings.inbox_folder}/")

    report = SyncReport()
    for current_id, book_records in grouped.items():
        title = service.book_title(current_id)
        path = inbox_path(settings.inbox_folder, title)

        try:
            details = None if storage.exists(path) else service.book_details(current_id)
            result = sync_book(storage, path, title, book_records, details, today, now)
        except (StorageError, DatabaseError) as e:
            logger.error(f"[red]✗[/red] Failed to sync {title!r}: {e}")
            result = BookSyncResult(
                book_title=title,
                path=path,
                outcome=SyncOutcome.FAILED,
                error=str(e),
            )

        report.books.append(result)

    return report
