"""End-to-end import and extraction runs over a Kobo database and a vault."""

from datetime import date, datetime

import pytest

from common.env import ImportSettings
from inbox.document import (
    HighlightState,
    find_highlight_blocks,
    header_metadata,
    highlight_state,
    parse,
)
from insights.engine import extract_insights
from kobo.db import SQLiteAdapter
from kobo.repository import KoboRepository
from kobo.service import HighlightService
from sync.library import sync_library

TODAY = date(2024, 6, 1)
NOW = datetime(2024, 6, 1, 12, 0)
DUNE = "Kobo-Inboxes/Dune.md"


@pytest.fixture
def library(kobo_db):
    kobo_db.add_book("book-1", "Dune", author="Frank Herbert")
    kobo_db.add_bookmark("b1", "book-1", "Fear is the mind-killer.")
    kobo_db.add_bookmark("b2", "book-1", "I must not fear.", created="2024-01-02T10:00:00.000")
    return kobo_db


@pytest.fixture
def service(library):
    adapter = SQLiteAdapter(library.path)
    adapter.connect()
    yield HighlightService(KoboRepository(adapter))
    adapter.close()


def _import(service, storage, **settings):
    return sync_library(service, storage, ImportSettings(**settings), today=TODAY, now=NOW)


def _states(text):
    document = parse(text)
    return {
        document.get(ref).record_id: highlight_state(document, ref)
        for ref in find_highlight_blocks(document)
    }


class TestImportAndExtract:
    def test_first_import(self, service, storage):
        report = _import(service, storage)

        text = storage.read(DUNE)
        metadata = header_metadata(parse(text))
        assert report.added == 2
        assert _states(text) == {"b1": HighlightState.IMPORTED, "b2": HighlightState.IMPORTED}
        assert text.count("- [ ] memo:\n") == 2
        assert metadata["highlights_total"] == 2
        assert metadata["insights_created"] == 0

    def test_reimport_changes_nothing(self, service, storage):
        _import(service, storage)
        before = storage.read(DUNE)

        report = _import(service, storage)

        assert report.added == 0
        assert storage.read(DUNE) == before

    def test_extract_filled_memo(self, service, storage):
        _import(service, storage)
        text = storage.read(DUNE).replace("- [ ] memo:", "- [x] memo: connects to X", 1)
        storage.write(DUNE, text)

        report = extract_insights(storage, DUNE, "Kobo-Insights", today=TODAY, now=NOW)

        result = storage.read(DUNE)
        assert report.created == 1
        assert storage.exists("Kobo-Insights/connects to X.md")
        assert _states(result) == {"b1": HighlightState.EXTRACTED, "b2": HighlightState.IMPORTED}
        assert "- insight: [[connects to X]]" in result
        assert header_metadata(parse(result))["insights_created"] == 1

    def test_placeholder_only_memo_is_not_extracted(self, service, storage):
        _import(service, storage)
        text = storage.read(DUNE).replace("- [ ] memo:", "- [x] memo: _", 1)
        storage.write(DUNE, text)

        report = extract_insights(storage, DUNE, "Kobo-Insights", today=TODAY, now=NOW)

        assert report.created == 0
        assert storage.read(DUNE) == text

    def test_import_after_extraction_keeps_links(self, library, service, storage):
        _import(service, storage)
        storage.write(DUNE, storage.read(DUNE).replace("- [ ] memo:", "- [x] memo: connects to X", 1))
        extract_insights(storage, DUNE, "Kobo-Insights", today=TODAY, now=NOW)
        library.add_bookmark("b3", "book-1", "Bless the Maker.", created="2024-01-03T10:00:00.000")

        _import(service, storage)

        result = storage.read(DUNE)
        assert _states(result) == {
            "b1": HighlightState.EXTRACTED,
            "b2": HighlightState.IMPORTED,
            "b3": HighlightState.IMPORTED,
        }
        metadata = header_metadata(parse(result))
        assert metadata["highlights_total"] == 3
        assert metadata["insights_created"] == 1

    def test_import_all_books(self, library, service, storage):
        library.add_book("book-2", "Neuromancer")
        library.add_book("book-3", "Snow Crash")

        report = _import(service, storage, import_all_books=True)

        assert report.created == 3
        for title in ("Neuromancer", "Snow Crash"):
            metadata = header_metadata(parse(storage.read(f"Kobo-Inboxes/{title}.md")))
            assert metadata["highlights_total"] == 0
            assert metadata["title"] == title
