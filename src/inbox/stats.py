"""Derived highlight/insight counters for an inbox note.

The counters are a pure function of the note body. The copy kept in the
frontmatter is a display cache: it is always recomputed from the body and
written whole, never incremented.
"""

from dataclasses import dataclass
from datetime import datetime

from common.constants import STATS_INSIGHTS_KEY, STATS_TOTAL_KEY, STATS_UPDATED_KEY
from common.logger import get_logger

from .blocks import INSIGHT_RE, QUOTE_OPENING_RE
from .document import (
    Document,
    FrontmatterError,
    body_text,
    load_header,
    parse,
    set_header_metadata,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Stats:
    highlights_total: int
    insights_created: int


@dataclass(frozen=True)
class StatsCache:
    highlights_total: int
    insights_created: int
    updated_at: datetime

    def apply_to(self, metadata: dict) -> None:
        metadata[STATS_TOTAL_KEY] = self.highlights_total
        metadata[STATS_INSIGHTS_KEY] = self.insights_created
        metadata[STATS_UPDATED_KEY] = self.updated_at.isoformat(timespec="seconds")

    @classmethod
    def from_metadata(cls, metadata: dict) -> "StatsCache | None":
        """Read a cached copy back from frontmatter, if one is present."""
        try:
            updated_at = metadata[STATS_UPDATED_KEY]
            if not isinstance(updated_at, datetime):
                updated_at = datetime.fromisoformat(str(updated_at))
            return cls(
                highlights_total=int(metadata[STATS_TOTAL_KEY]),
                insights_created=int(metadata[STATS_INSIGHTS_KEY]),
                updated_at=updated_at,
            )
        except (KeyError, TypeError, ValueError):
            return None


def compute_stats(body: str) -> Stats:
    """Count highlight openings and insight links in a note body."""
    highlights = 0
    insights = 0
    for line in body.split("\n"):
        if QUOTE_OPENING_RE.match(line):
            highlights += 1
        elif INSIGHT_RE.match(line):
            insights += 1
    return Stats(highlights_total=highlights, insights_created=insights)


def document_stats(text: str) -> Stats:
    """Stats of a whole note, frontmatter excluded."""
    return compute_stats(body_text(parse(text)))


def refresh_stats_cache(storage, metadata_store, path: str, now: datetime | None = None) -> StatsCache:
    """Recompute the counters of the note at path and store them in its frontmatter.

    Args:
        storage: DocumentStorage holding the note
        metadata_store: FrontmatterStore over the same storage
        path: Vault-relative note path
        now: Timestamp to record (defaults to the current time)

    Returns:
        The cache as written
    """
    stats = document_stats(storage.read(path))
    cache = StatsCache(
        highlights_total=stats.highlights_total,
        insights_created=stats.insights_created,
        updated_at=now or datetime.now(),
    )
    metadata_store.mutate(path, cache.apply_to)
    logger.debug(
        f"Stats for {path}: {cache.highlights_total} highlights, "
        f"{cache.insights_created} insights"
    )
    return cache


def stamp_stats(document: Document, now: datetime | None = None) -> StatsCache:
    """Recompute the counters of an in-memory note and write them into its header.

    Used by passes that are about to write the note anyway, so the cache
    lands in the same single write as the body. A header that does not parse
    is left exactly as the user wrote it and the cache is not stamped.
    """
    stats = compute_stats(body_text(document))
    cache = StatsCache(
        highlights_total=stats.highlights_total,
        insights_created=stats.insights_created,
        updated_at=now or datetime.now(),
    )
    try:
        metadata = load_header(document)
    except FrontmatterError as e:
        logger.warning(f"Keeping unreadable frontmatter as is, stats not stamped: {e}")
        return cache
    cache.apply_to(metadata)
    set_header_metadata(document, metadata)
    return cache
