"""Structured side metadata of a note, kept in its YAML frontmatter."""

import copy
from typing import Callable

from inbox.document import (
    FrontmatterError,
    header_metadata,
    load_header,
    parse,
    serialize,
    set_header_metadata,
)

from .storage import DocumentStorage, StorageError


class FrontmatterStore:
    """Read and mutate the frontmatter of notes in a vault."""

    def __init__(self, storage: DocumentStorage):
        self.storage = storage

    def read(self, path: str) -> dict:
        """Frontmatter of the note at path ({} if it has none)."""
        return header_metadata(parse(self.storage.read(path)))

    def mutate(self, path: str, mutator: Callable[[dict], None]) -> dict:
        """Apply mutator to the note's frontmatter and write the note once.

        Only the header is re-rendered; the body is written back unchanged.
        If mutator raises, nothing is written.

        Returns:
            The frontmatter as written

        Raises:
            StorageError: If the note cannot be read or written, or its
                frontmatter does not parse (the note is left untouched)
        """
        document = parse(self.storage.read(path))
        try:
            metadata = copy.deepcopy(load_header(document))
        except FrontmatterError as e:
            raise StorageError(f"Not rewriting unreadable frontmatter of {path}: {e}") from e
        mutator(metadata)
        set_header_metadata(document, metadata)
        self.storage.write(path, serialize(document))
        return metadata
