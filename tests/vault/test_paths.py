"""Tests for vault path helpers."""

from vault.paths import (
    inbox_path,
    insight_path,
    normalize_folder,
    note_name,
    note_path,
    parent_folder,
    sanitize_file_name,
)


class TestSanitizeFileName:
    def test_plain_title(self):
        assert sanitize_file_name("Dune") == "Dune"

    def test_unsafe_characters(self):
        assert sanitize_file_name('Why "now"? / later') == "Why now later"
        assert sanitize_file_name("a:b*c|d<e>f") == "a b c d e f"

    def test_wiki_link_characters(self):
        assert sanitize_file_name("[[Link]] #tag ^block") == "Link tag block"

    def test_control_characters_and_whitespace(self):
        assert sanitize_file_name("line\none\ttwo  three") == "line one two three"

    def test_leading_dots(self):
        assert sanitize_file_name("...hidden") == "hidden"

    def test_length_cap(self):
        name = sanitize_file_name("word " * 100)
        assert len(name) <= 120
        assert not name.endswith(" ")

    def test_custom_length(self):
        assert sanitize_file_name("abcdef", max_length=3) == "abc"

    def test_unicode_is_kept(self):
        assert sanitize_file_name("Père Goriot – été") == "Père Goriot – été"


class TestNotePaths:
    def test_inbox_path(self):
        assert inbox_path("Kobo-Inboxes", "Dune: Messiah") == "Kobo-Inboxes/Dune Messiah.md"

    def test_insight_path(self):
        assert insight_path("Kobo-Insights", "fear as a choice") == (
            "Kobo-Insights/fear as a choice.md"
        )

    def test_root_folder(self):
        assert note_path("", "Dune") == "Dune.md"
        assert note_path("/", "Dune") == "Dune.md"

    def test_empty_name(self):
        assert note_path("Inbox", "???") == "Inbox/Untitled.md"

    def test_deterministic(self):
        assert inbox_path("Kobo-Inboxes", "Dune") == inbox_path("Kobo-Inboxes/", "Dune")

    def test_normalize_folder(self):
        assert normalize_folder("/Reading//Kobo/") == "Reading/Kobo"
        assert normalize_folder("Reading\\Kobo") == "Reading/Kobo"
        assert normalize_folder("./Kobo") == "Kobo"

    def test_note_name(self):
        assert note_name("Kobo-Insights/fear as a choice.md") == "fear as a choice"
        assert note_name("Dune.md") == "Dune"
        assert note_name("README") == "README"

    def test_parent_folder(self):
        assert parent_folder("Kobo-Inboxes/Dune.md") == "Kobo-Inboxes"
        assert parent_folder("Dune.md") == ""
