"""Promote annotated highlights into standalone insight notes.

Each highlight block in an inbox note moves through three states:

    IMPORTED   - empty or unchecked memo ("- [ ] memo:", "- [ ] memo: drafting")
    ANNOTATED  - memo filled in and checked ("- [x] memo: connects to X")
    EXTRACTED  - memo replaced by a link ("- insight: [[connects to X]]")

Only ANNOTATED blocks are extracted. The link line is terminal, so running
the extraction again never touches an extracted block.

Candidates are addressed through block handles, so rewriting one control
line never invalidates the position of another.
"""

from datetime import date, datetime

from common.logger import get_logger
from inbox.blocks import ControlLine, HighlightBlock, MemoLine, insight_link
from inbox.document import (
    Document,
    control_line,
    find_highlight_blocks,
    header_metadata,
    parse,
    replace_adjacent_line,
    serialize,
)
from inbox.stats import stamp_stats
from vault.paths import insight_path, normalize_folder, note_name
from vault.storage import DocumentStorage, StorageConflictError, StorageError

from .models import Candidate, ExtractionReport, InsightNote
from .notes import render_insight_note

logger = get_logger(__name__)


def _is_annotated(block: HighlightBlock, control: ControlLine | None) -> bool:
    return isinstance(control, MemoLine) and control.is_filled


def find_candidates(document: Document) -> list[Candidate]:
    """Annotated highlight blocks, in document order."""
    candidates = []
    for ref in find_highlight_blocks(document, _is_annotated):
        memo = control_line(document, ref)
        candidates.append(Candidate(ref=ref, title=memo.text, highlight=document.get(ref)))
    return candidates


def source_book_title(document: Document, path: str) -> str:
    """Book title from the note header, or the note name if it has none."""
    title = header_metadata(document).get("title")
    return str(title) if title else note_name(path)


def _create_note(storage: DocumentStorage, target_path: str, note: InsightNote, report: ExtractionReport) -> None:
    try:
        storage.create(target_path, render_insight_note(note))
    except StorageConflictError:
        logger.info(f"{target_path} already exists, linking to it")
        report.linked += 1
    except StorageError as e:
        logger.error(f"[red]✗[/red] Could not create {target_path}: {e}. Linking anyway.")
        report.failed += 1
    else:
        logger.info(f"[green]✓[/green] Created {target_path}")
        report.created += 1


def extract_insights(
    storage: DocumentStorage,
    path: str,
    insight_folder: str,
    today: date | None = None,
    now: datetime | None = None,
) -> ExtractionReport:
    """Create an insight note for every annotated highlight in the note at path.

    Args:
        storage: Vault storage
        path: Vault-relative path of the inbox note
        insight_folder: Folder receiving the insight notes
        today: Creation date recorded in new notes (defaults to today)
        now: Stats timestamp (defaults to the current time)

    Returns:
        ExtractionReport with per-outcome counts

    Raises:
        StorageError: If the inbox note cannot be read or written back
    """
    report = ExtractionReport(path=path)
    document = parse(storage.read(path))
    candidates = find_candidates(document)
    report.candidates = len(candidates)

    if not candidates:
        logger.info(f"Nothing to extract from {path}")
        return report

    folder = normalize_folder(insight_folder)
    if folder and not storage.exists(folder):
        try:
            storage.create_container(folder)
        except StorageError as e:
            logger.error(f"[red]✗[/red] Could not create folder {folder}: {e}")

    book_title = source_book_title(document, path)
    created_on = today or date.today()

    for candidate in candidates:
        quoted_text = candidate.highlight.quoted_text.strip()
        if not quoted_text:
            logger.warning(f"Memo {candidate.title!r} has no quoted text above it, skipping")
            report.skipped += 1
            continue

        target_path = insight_path(folder, candidate.title)
        note = InsightNote(
            title=candidate.title,
            quoted_text=quoted_text,
            source_book_title=book_title,
            source_note=note_name(path),
            created_at=created_on,
            source_record_id=candidate.highlight.record_id,
        )
        _create_note(storage, target_path, note, report)

        target = note_name(target_path)
        replace_adjacent_line(document, candidate.ref, insight_link(target))
        report.targets.append(target)

    if report.is_noop:
        return report

    stamp_stats(document, now)
    storage.write(path, serialize(document))
    return report
