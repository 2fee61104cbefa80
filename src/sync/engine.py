"""Idempotent merge of highlight records into an inbox note.

Merging only ever appends: highlight blocks already in the note (and the memo
lines a user has edited below them) are never re-emitted or altered. A record
whose id is already present is skipped, so merging the same records twice
leaves the note byte-identical.
"""

from datetime import date

from common.constants import STATS_INSIGHTS_KEY, STATS_TOTAL_KEY
from common.logger import get_logger
from inbox.blocks import Block, blank_line, empty_memo, highlight_block
from inbox.document import Document, append_blocks, new_document, record_ids
from kobo.models import BookDetails, HighlightRecord

from .models import MergeResult

logger = get_logger(__name__)


def blocks_for_record(record: HighlightRecord) -> list[Block]:
    """Blocks appended for one new record: separator, highlight, empty memo."""
    return [
        blank_line(),
        highlight_block(record.id, record.text, record.note),
        empty_memo(),
    ]


def merge_records(document: Document, records: list[HighlightRecord]) -> MergeResult:
    """Append blocks for records not yet present in document.

    Args:
        document: Existing (or freshly initialized) inbox note
        records: Records for one book, in the order they should appear

    Returns:
        MergeResult with the merged document. When nothing is new, the
        document returned is the one passed in.
    """
    present = record_ids(document)
    new_blocks: list[Block] = []
    added = 0
    skipped = 0

    for record in records:
        if record.id in present:
            skipped += 1
            continue
        present.add(record.id)
        new_blocks.extend(blocks_for_record(record))
        added += 1

    if added == 0:
        logger.debug(f"Nothing to add ({skipped} record(s) already present)")
        return MergeResult(document=document, added=0, skipped=skipped)

    return MergeResult(
        document=append_blocks(document, new_blocks),
        added=added,
        skipped=skipped,
    )


def initial_metadata(
    book_title: str,
    details: BookDetails | None = None,
    today: date | None = None,
) -> dict:
    """Frontmatter of a freshly created inbox note."""
    metadata: dict = {"title": book_title}
    if details is not None:
        metadata.update(details.to_metadata())
        metadata["title"] = book_title
    metadata["created"] = (today or date.today()).isoformat()
    metadata[STATS_TOTAL_KEY] = 0
    metadata[STATS_INSIGHTS_KEY] = 0
    return metadata


def initialize_document(
    book_title: str,
    details: BookDetails | None = None,
    today: date | None = None,
) -> Document:
    """A header-only inbox note for a book."""
    return new_document(initial_metadata(book_title, details, today))
