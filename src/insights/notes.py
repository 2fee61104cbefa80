"""Rendering of insight notes."""

from inbox.document import render_header

from .models import InsightNote


def insight_metadata(note: InsightNote) -> dict:
    metadata = {
        "title": note.title,
        "book": f"[[{note.source_note}]]",
    }
    if note.source_record_id:
        metadata["bookmark"] = note.source_record_id
    metadata["created"] = note.created_at.isoformat()
    return metadata


def render_insight_note(note: InsightNote) -> str:
    """Full text of an insight note.

    Example output:

        ---
        title: connects to X
        book: '[[Dune]]'
        bookmark: b1
        created: '2026-10-18'
        ---

        > [!quote] connects to X
        > The quoted passage.
        >
        > <cite>— *Dune*</cite>
    """
    header = list(render_header(insight_metadata(note)).lines)
    quote = [f"> {line}" if line else ">" for line in note.quoted_text.strip().split("\n")]
    lines = [
        *header,
        "",
        f"> [!quote] {note.title}",
        *quote,
        ">",
        f"> <cite>— *{note.source_book_title}*</cite>",
    ]
    return "\n".join(lines) + "\n"
