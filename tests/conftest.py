"""Shared fixtures: a throwaway Kobo database and a temporary vault."""

import sqlite3

import pytest

from vault.storage import FileSystemStorage

KOBO_SCHEMA = """
CREATE TABLE content (
    ContentID TEXT NOT NULL,
    ContentType INTEGER,
    Title TEXT,
    BookTitle TEXT,
    ChapterIDBookmarked TEXT,
    Attribution TEXT,
    Description TEXT,
    Publisher TEXT,
    DateLastRead TEXT,
    ReadStatus INTEGER,
    ___PercentRead INTEGER,
    ISBN TEXT,
    Series TEXT,
    SeriesNumber TEXT,
    TimeSpentReading INTEGER
);
CREATE TABLE Bookmark (
    BookmarkID TEXT,
    VolumeID TEXT,
    ContentID TEXT,
    Text TEXT,
    Annotation TEXT,
    DateCreated TEXT,
    ChapterProgress REAL
);
"""


class KoboDatabase:
    """Builder for a minimal KoboReader.sqlite."""

    def __init__(self, path):
        self.path = path
        conn = sqlite3.connect(path)
        conn.executescript(KOBO_SCHEMA)
        conn.commit()
        conn.close()

    def _insert(self, query, params):
        conn = sqlite3.connect(self.path)
        conn.execute(query, params)
        conn.commit()
        conn.close()

    def add_book(self, content_id, title, author="Unknown Author", **extra):
        self._insert(
            "INSERT INTO content (ContentID, ContentType, Title, Attribution, Publisher, "
            "ISBN, ReadStatus, ___PercentRead, TimeSpentReading, DateLastRead) "
            "VALUES (?, 6, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                content_id,
                title,
                author,
                extra.get("publisher"),
                extra.get("isbn"),
                extra.get("read_status", 0),
                extra.get("percent_read", 0),
                extra.get("time_spent_reading", 0),
                extra.get("date_last_read"),
            ),
        )

    def add_chapter(self, content_id, book_title):
        self._insert(
            "INSERT INTO content (ContentID, ContentType, Title, BookTitle) VALUES (?, 9, ?, ?)",
            (content_id, f"Chapter of {book_title}", book_title),
        )

    def add_bookmark(
        self,
        bookmark_id,
        volume_id,
        text,
        created="2024-01-01T10:00:00.000",
        annotation=None,
        chapter_progress=0.0,
        content_id=None,
    ):
        self._insert(
            "INSERT INTO Bookmark (BookmarkID, VolumeID, ContentID, Text, Annotation, "
            "DateCreated, ChapterProgress) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                bookmark_id,
                volume_id,
                content_id or f"{volume_id}!chapter",
                text,
                annotation,
                created,
                chapter_progress,
            ),
        )


@pytest.fixture
def kobo_db(tmp_path):
    """An empty Kobo database with the device schema."""
    return KoboDatabase(tmp_path / "KoboReader.sqlite")


@pytest.fixture
def vault_root(tmp_path):
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def storage(vault_root):
    return FileSystemStorage(vault_root)
