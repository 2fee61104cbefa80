"""Tests for insight note rendering and reports."""

from datetime import date

from inbox.document import header_metadata, parse
from insights.models import ExtractionReport, InsightNote
from insights.notes import insight_metadata, render_insight_note


def _note(**overrides):
    fields = dict(
        title="fear as a choice",
        quoted_text="I must not fear.",
        source_book_title="Dune",
        source_note="Dune",
        created_at=date(2024, 6, 1),
        source_record_id="h2",
    )
    fields.update(overrides)
    return InsightNote(**fields)


class TestInsightMetadata:
    def test_fields(self):
        assert insight_metadata(_note()) == {
            "title": "fear as a choice",
            "book": "[[Dune]]",
            "bookmark": "h2",
            "created": "2024-06-01",
        }

    def test_without_record_id(self):
        assert "bookmark" not in insight_metadata(_note(source_record_id=None))


class TestRenderInsightNote:
    def test_layout(self):
        text = render_insight_note(_note())

        header, body = text.split("---\n\n", 1)
        assert header_metadata(parse(text))["book"] == "[[Dune]]"
        assert body == (
            "> [!quote] fear as a choice\n"
            "> I must not fear.\n"
            ">\n"
            "> <cite>— *Dune*</cite>\n"
        )

    def test_multi_paragraph_quote(self):
        text = render_insight_note(_note(quoted_text="First line\n\nSecond line\n"))

        assert "> First line\n>\n> Second line\n>\n> <cite>" in text

    def test_book_link_targets_inbox_note(self):
        note = _note(source_book_title="Dune: Messiah", source_note="Dune Messiah")

        text = render_insight_note(note)

        assert header_metadata(parse(text))["book"] == "[[Dune Messiah]]"
        assert "> <cite>— *Dune: Messiah*</cite>" in text


class TestExtractionReport:
    def test_counts(self):
        report = ExtractionReport(path="Dune.md", candidates=4, created=1, linked=1, failed=1, skipped=1)

        assert report.rewritten == 3
        assert not report.is_noop

    def test_empty_report_is_noop(self):
        assert ExtractionReport(path="Dune.md").is_noop
