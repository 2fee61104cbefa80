"""Environment configuration for kobo-inbox.

All environment variable access goes through this module. Values can also
come from a .env file in the working directory.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from common.constants import DEFAULT_INBOX_FOLDER, DEFAULT_INSIGHT_FOLDER

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in _TRUTHY


def _folder(name: str, default: str) -> str:
    # A blank or slash-only value falls back to the default folder
    value = os.getenv(name, "").strip().strip("/")
    return value or default


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def kobo_db_path() -> Path:
        """Get the path to the Kobo device database.

        Returns:
            Path to KoboReader.sqlite, defaults to ./KoboReader.sqlite
        """
        return Path(os.getenv("KOBO_DB_PATH", "./KoboReader.sqlite"))

    @staticmethod
    def vault_root() -> Path:
        """Get the root directory of the note vault.

        Returns:
            Vault root, defaults to the current directory
        """
        return Path(os.getenv("VAULT_ROOT", "."))

    @staticmethod
    def inbox_folder() -> str:
        """Get the vault folder holding one inbox note per book.

        Returns:
            Folder name relative to the vault root, defaults to 'Kobo-Inboxes'
        """
        return _folder("KOBO_INBOX_FOLDER", DEFAULT_INBOX_FOLDER)

    @staticmethod
    def insight_folder() -> str:
        """Get the vault folder receiving extracted insight notes.

        Returns:
            Folder name relative to the vault root, defaults to 'Kobo-Insights'
        """
        return _folder("KOBO_INSIGHT_FOLDER", DEFAULT_INSIGHT_FOLDER)

    @staticmethod
    def sort_by_chapter_progress() -> bool:
        """Whether highlights are ordered by chapter progress before creation time."""
        return _flag("KOBO_SORT_BY_CHAPTER_PROGRESS")

    @staticmethod
    def import_all_books() -> bool:
        """Whether books without highlights also get a (header-only) inbox note."""
        return _flag("KOBO_IMPORT_ALL_BOOKS")


env = Environment()


@dataclass
class ImportSettings:
    """Settings snapshot for one import or extraction run."""

    inbox_folder: str = DEFAULT_INBOX_FOLDER
    insight_folder: str = DEFAULT_INSIGHT_FOLDER
    sort_by_chapter_progress: bool = False
    import_all_books: bool = False

    @classmethod
    def from_env(cls) -> "ImportSettings":
        return cls(
            inbox_folder=env.inbox_folder(),
            insight_folder=env.insight_folder(),
            sort_by_chapter_progress=env.sort_by_chapter_progress(),
            import_all_books=env.import_all_books(),
        )
