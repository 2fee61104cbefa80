"""Data models for insight extraction."""

from dataclasses import dataclass, field
from datetime import date

from inbox.blocks import HighlightBlock
from inbox.document import BlockRef


@dataclass(frozen=True)
class InsightNote:
    """A standalone note promoted from an annotated highlight.

    source_note is the name of the inbox note the highlight came from, which
    the "book" link points at. source_book_title is the human title shown in
    the citation.
    """

    title: str
    quoted_text: str
    source_book_title: str
    source_note: str
    created_at: date
    source_record_id: str | None = None


@dataclass(frozen=True)
class Candidate:
    """An annotated highlight block waiting to be extracted."""

    ref: BlockRef
    title: str
    highlight: HighlightBlock


@dataclass
class ExtractionReport:
    """Summary of one extraction pass over an inbox note."""

    path: str
    candidates: int = 0
    created: int = 0
    linked: int = 0  # target note already existed
    failed: int = 0  # note could not be written, link written anyway
    skipped: int = 0  # nothing quoted above the memo
    targets: list[str] = field(default_factory=list)

    @property
    def rewritten(self) -> int:
        """Number of memo lines replaced by insight links."""
        return self.created + self.linked + self.failed

    @property
    def is_noop(self) -> bool:
        return self.rewritten == 0
