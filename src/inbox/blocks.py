"""Block variants of an inbox note.

An inbox note is an ordered sequence of blocks. Each block keeps the exact
lines it was parsed from, so writing a note back reproduces untouched blocks
byte-for-byte. Blocks built by the sync or extraction engines get canonical
lines from the constructors below.

Persisted layout of one highlight:

    > [!quote]
    > <!-- id: 0b2c5b1e-... -->
    > The quoted passage.
    > 📝 Short note typed on the device
    - [ ] memo:

After extraction the control line becomes:

    - insight: [[Title Of The Insight Note]]
"""

import re
from dataclasses import dataclass
from typing import Literal, Union

from common.constants import (
    ANNOTATION_PREFIX,
    EMPTY_MEMO_LINE,
    INSIGHT_LINK_LINE,
    QUOTE_OPENING,
    RECORD_ID_MARKER,
)

QUOTE_LINE_RE = re.compile(r"^>")
QUOTE_OPENING_RE = re.compile(r"^>\s*\[!quote\][+-]?")
RECORD_ID_RE = re.compile(r"<!--\s*id:\s*([^\s>]+)\s*-->")
COMMENT_RE = re.compile(r"<!--")
ANNOTATION_RE = re.compile(r"^>\s*📝\s?(.*)$")
QUOTE_STRIP_RE = re.compile(r"^>\s?")

MEMO_RE = re.compile(r"^\s*-\s*\[([ xX])\]\s*memo:\s*(.*?)\s*$")
LABEL_RE = re.compile(r"^\s*-\s*\[([ xX])\](?:\s*(.*?))?\s*$")
INSIGHT_RE = re.compile(r"^\s*-\s*insight:\s*\[\[([^\[\]]+)\]\]\s*$")
PLACEHOLDER_RE = re.compile(r"^_(\s+|$)")


@dataclass(frozen=True)
class HeaderBlock:
    """YAML frontmatter, including the "---" fences."""

    lines: tuple[str, ...]


@dataclass(frozen=True)
class HighlightBlock:
    """One imported highlight. Never rewritten once appended."""

    record_id: str | None
    quoted_text: str
    source_note: str | None
    lines: tuple[str, ...]


@dataclass(frozen=True)
class MemoLine:
    """User-editable memo slot directly below a highlight.

    layout is "memo" for "- [x] memo: text" lines and "label" for bare
    checkbox lines ("- [x] _ text"). Either layout only counts as filled once
    it is checked and has text; ticking the box is the signal to promote it.
    """

    text: str
    checked: bool
    layout: Literal["memo", "label"]
    lines: tuple[str, ...]

    @property
    def is_filled(self) -> bool:
        return self.checked and bool(self.text)


@dataclass(frozen=True)
class InsightLinkLine:
    """Reference to an extracted insight note. Terminal."""

    target: str
    lines: tuple[str, ...]


@dataclass(frozen=True)
class TextBlock:
    """Anything else, kept verbatim."""

    lines: tuple[str, ...]


Block = Union[HeaderBlock, HighlightBlock, MemoLine, InsightLinkLine, TextBlock]
ControlLine = Union[MemoLine, InsightLinkLine]


def render_block(block: Block) -> list[str]:
    """Render a block back to its text lines."""
    return list(block.lines)


def strip_placeholder(text: str) -> str:
    """Remove the "_" placeholder prefix from memo text."""
    return PLACEHOLDER_RE.sub("", text.strip(), count=1).strip()


# -----------------------------------------------------------------------------
# Constructors (canonical lines)
# -----------------------------------------------------------------------------


def highlight_block(record_id: str, text: str, note: str | None = None) -> HighlightBlock:
    """Build a highlight block for a freshly imported record."""
    lines = [QUOTE_OPENING, RECORD_ID_MARKER.format(record_id=record_id)]
    lines.extend(f"> {line}" if line else ">" for line in text.split("\n"))
    if note:
        lines.append(f"{ANNOTATION_PREFIX}{note}")
    return HighlightBlock(
        record_id=record_id,
        quoted_text=text,
        source_note=note or None,
        lines=tuple(lines),
    )


def empty_memo() -> MemoLine:
    return MemoLine(text="", checked=False, layout="memo", lines=(EMPTY_MEMO_LINE,))


def insight_link(target: str) -> InsightLinkLine:
    return InsightLinkLine(target=target, lines=(INSIGHT_LINK_LINE.format(target=target),))


def blank_line() -> TextBlock:
    return TextBlock(lines=("",))


# -----------------------------------------------------------------------------
# Line classification (used by the parser)
# -----------------------------------------------------------------------------


def parse_highlight(lines: list[str]) -> HighlightBlock:
    """Build a highlight block from a quote segment starting at its opening line."""
    record_id = None
    note = None
    quoted: list[str] = []

    for line in lines[1:]:
        id_match = RECORD_ID_RE.search(line)
        if id_match:
            if record_id is None:
                record_id = id_match.group(1)
            continue
        if COMMENT_RE.search(line) or QUOTE_OPENING_RE.match(line):
            continue
        annotation = ANNOTATION_RE.match(line)
        if annotation:
            note = annotation.group(1).strip() or None
            continue
        quoted.append(QUOTE_STRIP_RE.sub("", line, count=1))

    return HighlightBlock(
        record_id=record_id,
        quoted_text="\n".join(quoted),
        source_note=note,
        lines=tuple(lines),
    )


def parse_control_line(line: str) -> MemoLine | None:
    """Classify a line directly below a highlight as a memo slot, if it is one."""
    memo = MEMO_RE.match(line)
    if memo:
        return MemoLine(
            text=strip_placeholder(memo.group(2)),
            checked=memo.group(1) != " ",
            layout="memo",
            lines=(line,),
        )

    label = LABEL_RE.match(line)
    if label:
        return MemoLine(
            text=strip_placeholder(label.group(2) or ""),
            checked=label.group(1) != " ",
            layout="label",
            lines=(line,),
        )

    return None


def parse_insight_line(line: str) -> InsightLinkLine | None:
    match = INSIGHT_RE.match(line)
    if match is None:
        return None
    return InsightLinkLine(target=match.group(1).strip(), lines=(line,))
