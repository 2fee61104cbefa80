"""Inbox note parsing, serialization and block-level mutation.

A Document is an arena of blocks plus an explicit ordering list. Callers hold
on to block handles (BlockRef) rather than line numbers, so replacing one
block never shifts the handles of the others.

Round trip: serialize(parse(text)) == text, except that trailing whitespace at
the very end of the note is normalized to a single newline.
"""

from enum import Enum
from typing import Callable, Iterable, Iterator

import yaml

from common.logger import get_logger

from .blocks import (
    QUOTE_LINE_RE,
    QUOTE_OPENING_RE,
    Block,
    ControlLine,
    HeaderBlock,
    HighlightBlock,
    InsightLinkLine,
    MemoLine,
    TextBlock,
    blank_line,
    parse_control_line,
    parse_highlight,
    parse_insight_line,
    render_block,
)

logger = get_logger(__name__)

BlockRef = int

HEADER_FENCE = "---"


class FrontmatterError(ValueError):
    """The note has a header block that does not hold a YAML mapping."""


class HighlightState(str, Enum):
    """Lifecycle of a highlight block."""

    IMPORTED = "imported"  # empty memo
    ANNOTATED = "annotated"  # filled memo, ready for extraction
    EXTRACTED = "extracted"  # insight link written


class Document:
    """Ordered block sequence with stable handles."""

    def __init__(self, blocks: Iterable[Block] = ()):
        self.blocks: dict[BlockRef, Block] = {}
        self.order: list[BlockRef] = []
        self._next_ref: BlockRef = 0
        for block in blocks:
            self.add(block)

    def add(self, block: Block) -> BlockRef:
        """Append a block and return its handle."""
        ref = self._next_ref
        self._next_ref += 1
        self.blocks[ref] = block
        self.order.append(ref)
        return ref

    def insert_first(self, block: Block) -> BlockRef:
        """Put a block in front of all others and return its handle."""
        ref = self._next_ref
        self._next_ref += 1
        self.blocks[ref] = block
        self.order.insert(0, ref)
        return ref

    def insert_after(self, ref: BlockRef, block: Block) -> BlockRef:
        new_ref = self._next_ref
        self._next_ref += 1
        self.blocks[new_ref] = block
        self.order.insert(self.order.index(ref) + 1, new_ref)
        return new_ref

    def remove(self, ref: BlockRef) -> None:
        self.order.remove(ref)
        del self.blocks[ref]

    def get(self, ref: BlockRef) -> Block:
        return self.blocks[ref]

    def next_ref(self, ref: BlockRef) -> BlockRef | None:
        """Handle of the block right after ref, or None at the end."""
        position = self.order.index(ref)
        if position + 1 < len(self.order):
            return self.order[position + 1]
        return None

    def items(self) -> Iterator[tuple[BlockRef, Block]]:
        for ref in self.order:
            yield ref, self.blocks[ref]

    def __iter__(self) -> Iterator[Block]:
        for ref in self.order:
            yield self.blocks[ref]

    def __len__(self) -> int:
        return len(self.order)

    @property
    def header(self) -> HeaderBlock | None:
        if self.order and isinstance(self.blocks[self.order[0]], HeaderBlock):
            return self.blocks[self.order[0]]
        return None

    def copy(self) -> "Document":
        # Blocks are immutable, so sharing them between copies is safe
        clone = Document()
        clone.blocks = dict(self.blocks)
        clone.order = list(self.order)
        clone._next_ref = self._next_ref
        return clone

    def __repr__(self) -> str:
        return f"Document(blocks={len(self.order)})"


# =============================================================================
# Parsing / serialization
# =============================================================================


def _split_header(lines: list[str]) -> tuple[list[str], list[str]]:
    if not lines or lines[0].rstrip() != HEADER_FENCE:
        return [], lines
    for index in range(1, len(lines)):
        if lines[index].rstrip() == HEADER_FENCE:
            return lines[: index + 1], lines[index + 1 :]
    # Unterminated frontmatter is treated as ordinary text
    return [], lines


def _quote_segments(run: list[str]) -> list[list[str]]:
    """Split a quote run so that every opening line starts a new segment."""
    segments: list[list[str]] = []
    for line in run:
        if QUOTE_OPENING_RE.match(line) or not segments:
            segments.append([line])
        else:
            segments[-1].append(line)
    return segments


def parse(raw: str) -> Document:
    """Parse note text into a Document.

    Lines that are not recognized are kept as TextBlocks, so parsing never
    fails and never drops content.
    """
    document = Document()
    if raw == "":
        return document

    header, lines = _split_header(raw.split("\n"))
    if header:
        document.add(HeaderBlock(lines=tuple(header)))

    index = 0
    while index < len(lines):
        line = lines[index]

        if QUOTE_LINE_RE.match(line):
            end = index
            while end < len(lines) and QUOTE_LINE_RE.match(lines[end]):
                end += 1
            for segment in _quote_segments(lines[index:end]):
                if QUOTE_OPENING_RE.match(segment[0]):
                    document.add(parse_highlight(segment))
                else:
                    document.add(TextBlock(lines=tuple(segment)))
            index = end

            if index < len(lines) and document.order:
                last = document.get(document.order[-1])
                control = parse_insight_line(lines[index]) or parse_control_line(lines[index])
                if isinstance(last, HighlightBlock) and control is not None:
                    document.add(control)
                    index += 1
            continue

        insight = parse_insight_line(line)
        document.add(insight if insight is not None else TextBlock(lines=(line,)))
        index += 1

    return document


def serialize(document: Document) -> str:
    """Render a Document back to note text."""
    lines: list[str] = []
    for block in document:
        lines.extend(render_block(block))
    text = "\n".join(lines).rstrip()
    return text + "\n" if text else ""


def body_text(document: Document) -> str:
    """Text of everything below the header."""
    lines: list[str] = []
    for block in document:
        if not isinstance(block, HeaderBlock):
            lines.extend(render_block(block))
    return "\n".join(lines)


# =============================================================================
# Queries
# =============================================================================


def control_line(document: Document, ref: BlockRef) -> ControlLine | None:
    """The memo or insight line attached to a highlight block, if any."""
    following = document.next_ref(ref)
    if following is None:
        return None
    block = document.get(following)
    if isinstance(block, (MemoLine, InsightLinkLine)):
        return block
    return None


def highlight_state(document: Document, ref: BlockRef) -> HighlightState:
    control = control_line(document, ref)
    if isinstance(control, InsightLinkLine):
        return HighlightState.EXTRACTED
    if isinstance(control, MemoLine) and control.is_filled:
        return HighlightState.ANNOTATED
    return HighlightState.IMPORTED


def find_highlight_blocks(
    document: Document,
    predicate: Callable[[HighlightBlock, ControlLine | None], bool] | None = None,
) -> list[BlockRef]:
    """Handles of highlight blocks (in document order) matching predicate.

    The predicate receives the highlight block and its attached control line.
    """
    refs = []
    for ref, block in document.items():
        if not isinstance(block, HighlightBlock):
            continue
        if predicate is None or predicate(block, control_line(document, ref)):
            refs.append(ref)
    return refs


def record_ids(document: Document) -> set[str]:
    """Record ids of every highlight block in the document."""
    return {
        block.record_id
        for block in document
        if isinstance(block, HighlightBlock) and block.record_id is not None
    }


# =============================================================================
# Mutation
# =============================================================================


def append_blocks(document: Document, blocks: Iterable[Block]) -> Document:
    """Return a copy of document with blocks appended at the end.

    Trailing blank lines of the original are dropped first; serialize()
    would strip them anyway.
    """
    blocks = list(blocks)
    result = document.copy()
    if not blocks:
        return result

    while result.order:
        last = result.get(result.order[-1])
        if isinstance(last, TextBlock) and all(not line.strip() for line in last.lines):
            result.remove(result.order[-1])
        else:
            break

    for block in blocks:
        result.add(block)
    return result


def replace_adjacent_line(document: Document, ref: BlockRef, new_line: ControlLine) -> bool:
    """Replace (or insert) the control line of a highlight block, in place.

    An insight link is terminal: once present it is never replaced.

    Returns:
        True if the document changed

    Raises:
        ValueError: If ref is not a highlight block
    """
    if not isinstance(document.get(ref), HighlightBlock):
        raise ValueError(f"Block {ref} is not a highlight block")

    following = document.next_ref(ref)
    current = document.get(following) if following is not None else None

    if isinstance(current, InsightLinkLine):
        logger.debug(f"Highlight block {ref} already links to [[{current.target}]], leaving it")
        return False

    if isinstance(current, MemoLine):
        document.blocks[following] = new_line
    else:
        document.insert_after(ref, new_line)
    return True


# =============================================================================
# Header metadata
# =============================================================================


def load_header(document: Document) -> dict:
    """Parsed frontmatter of the document ({} if it has none).

    Raises:
        FrontmatterError: If the header is present but is not a YAML mapping
    """
    header = document.header
    if header is None:
        return {}
    raw = "\n".join(header.lines[1:-1])
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Note frontmatter is not valid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError(f"Note frontmatter is not a mapping: {type(data).__name__}")
    return data


def header_metadata(document: Document) -> dict:
    """Parsed frontmatter of the document ({} if absent or malformed)."""
    try:
        return load_header(document)
    except FrontmatterError as e:
        logger.warning(f"Could not parse note frontmatter, ignoring it: {e}")
        return {}


def render_header(metadata: dict) -> HeaderBlock:
    dumped = yaml.safe_dump(
        metadata,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=4096,
    )
    lines = [HEADER_FENCE, *dumped.rstrip("\n").split("\n"), HEADER_FENCE]
    return HeaderBlock(lines=tuple(lines))


def set_header_metadata(document: Document, metadata: dict) -> None:
    """Replace (or create) the frontmatter of the document, in place."""
    header = render_header(metadata)
    if document.header is not None:
        document.blocks[document.order[0]] = header
        return

    ref = document.insert_first(header)
    if len(document) > 1:
        document.insert_after(ref, blank_line())


def new_document(metadata: dict) -> Document:
    """A header-only note."""
    return Document([render_header(metadata), blank_line()])
