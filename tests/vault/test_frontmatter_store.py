"""Tests for FrontmatterStore."""

import pytest

from vault.metadata import FrontmatterStore
from vault.storage import StorageError

NOTE = "---\ntitle: Dune\n---\n\n> [!quote]\n> Text\n- [ ] memo: kept as is\n"


class TestFrontmatterStore:
    def test_read(self, storage):
        storage.write("Dune.md", NOTE)

        assert FrontmatterStore(storage).read("Dune.md") == {"title": "Dune"}

    def test_read_note_without_frontmatter(self, storage):
        storage.write("Plain.md", "Just text\n")

        assert FrontmatterStore(storage).read("Plain.md") == {}

    def test_mutate_rewrites_header_only(self, storage):
        storage.write("Dune.md", NOTE)

        written = FrontmatterStore(storage).mutate(
            "Dune.md", lambda metadata: metadata.update(rating=5)
        )

        assert written == {"title": "Dune", "rating": 5}
        assert storage.read("Dune.md") == NOTE.replace("title: Dune\n", "title: Dune\nrating: 5\n")

    def test_mutate_adds_missing_header(self, storage):
        storage.write("Plain.md", "Just text\n")

        FrontmatterStore(storage).mutate("Plain.md", lambda metadata: metadata.update(title="Plain"))

        assert storage.read("Plain.md") == "---\ntitle: Plain\n---\n\nJust text\n"

    def test_failing_mutator_writes_nothing(self, storage):
        storage.write("Dune.md", NOTE)

        def mutator(metadata):
            metadata["title"] = "Changed"
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            FrontmatterStore(storage).mutate("Dune.md", mutator)

        assert storage.read("Dune.md") == NOTE

    def test_missing_note(self, storage):
        with pytest.raises(StorageError):
            FrontmatterStore(storage).mutate("Missing.md", lambda metadata: None)

    def test_unreadable_frontmatter_is_not_rewritten(self, storage):
        text = "---\ntitle: Dune\nauthor: [unclosed\ntags: mine\n---\n\nBody\n"
        storage.write("Dune.md", text)

        with pytest.raises(StorageError, match="unreadable frontmatter"):
            FrontmatterStore(storage).mutate("Dune.md", lambda metadata: metadata.update(rating=5))

        assert storage.read("Dune.md") == text
