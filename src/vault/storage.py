"""Document storage for the note vault.

Paths are vault-relative POSIX strings such as "Kobo-Inboxes/Dune.md".
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path

from common.logger import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    """Base exception for vault storage operations."""

    pass


class StorageConflictError(StorageError):
    """A note already exists at the path being created."""

    pass


class DocumentStorage(ABC):
    """Key/value style access to notes in a vault."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check if a note or folder exists."""
        pass

    @abstractmethod
    def read(self, path: str) -> str:
        """Read a note.

        Raises:
            StorageError: If the note is missing or unreadable
        """
        pass

    @abstractmethod
    def write(self, path: str, text: str) -> None:
        """Create or overwrite a note. The write is all-or-nothing.

        Raises:
            StorageError: If the note cannot be written
        """
        pass

    @abstractmethod
    def create(self, path: str, text: str) -> None:
        """Create a new note.

        Raises:
            StorageConflictError: If a note already exists at path
            StorageError: If the note cannot be written
        """
        pass

    @abstractmethod
    def create_container(self, path: str) -> None:
        """Create a folder (and its parents) if it does not exist.

        Raises:
            StorageError: If the folder cannot be created
        """
        pass


class FileSystemStorage(DocumentStorage):
    """Vault stored as a directory tree on the local file system."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def resolve(self, path: str) -> Path:
        """Absolute location of a vault-relative path.

        Raises:
            StorageError: If the path escapes the vault root
        """
        root = self.root.resolve()
        target = (root / path).resolve()
        if target != root and root not in target.parents:
            raise StorageError(f"Path escapes the vault: {path}")
        return target

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def read(self, path: str) -> str:
        try:
            return self.resolve(path).read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def write(self, path: str, text: str) -> None:
        target = self.resolve(path)
        temp_path = target.with_name(target.name + ".tmp")
        try:
            temp_path.write_text(text, encoding="utf-8")
            os.replace(temp_path, target)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StorageError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Wrote {path}")

    def create(self, path: str, text: str) -> None:
        target = self.resolve(path)
        try:
            with open(target, "x", encoding="utf-8") as f:
                f.write(text)
        except FileExistsError as e:
            raise StorageConflictError(f"A note already exists at {path}") from e
        except OSError as e:
            raise StorageError(f"Failed to create {path}: {e}") from e
        logger.debug(f"Created {path}")

    def create_container(self, path: str) -> None:
        try:
            self.resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create folder {path}: {e}") from e

    def __repr__(self) -> str:
        return f"FileSystemStorage(root={self.root})"
