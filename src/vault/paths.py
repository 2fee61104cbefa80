"""Deterministic vault paths for inbox and insight notes."""

import re

from common.constants import MAX_FILE_NAME_LENGTH, NOTE_SUFFIX

# Characters that are unsafe in file names on at least one platform, or that
# break [[wiki links]]
_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\[\]#^]')
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_file_name(name: str, max_length: int = MAX_FILE_NAME_LENGTH) -> str:
    """Make a note title safe to use as a file name.

    Unsafe characters become spaces, whitespace is collapsed, and the result
    is capped at max_length characters. Leading dots are dropped so the note
    never becomes a hidden file.

    Example:
        >>> sanitize_file_name('Why "now"? / later')
        'Why now later'
    """
    cleaned = _CONTROL_CHARS.sub(" ", name)
    cleaned = _UNSAFE_CHARS.sub(" ", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    cleaned = cleaned.lstrip(".").strip()
    return cleaned[:max_length].rstrip()


def normalize_folder(folder: str) -> str:
    """Strip surrounding slashes and collapse duplicate separators."""
    parts = [part for part in folder.replace("\\", "/").split("/") if part and part != "."]
    return "/".join(parts)


def note_path(folder: str, name: str) -> str:
    """Vault-relative path of a note called name inside folder."""
    file_name = sanitize_file_name(name) or "Untitled"
    folder = normalize_folder(folder)
    return f"{folder}/{file_name}{NOTE_SUFFIX}" if folder else f"{file_name}{NOTE_SUFFIX}"


def inbox_path(folder: str, book_title: str) -> str:
    """Path of the inbox note for a book."""
    return note_path(folder, book_title)


def insight_path(folder: str, title: str) -> str:
    """Path of an insight note."""
    return note_path(folder, title)


def note_name(path: str) -> str:
    """Link target for a note path: the file name without folder or suffix."""
    name = path.rsplit("/", 1)[-1]
    if name.endswith(NOTE_SUFFIX):
        name = name[: -len(NOTE_SUFFIX)]
    return name


def parent_folder(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""
