#!/usr/bin/env python3
"""CLI for extracting insight notes from an inbox note."""

import argparse
from pathlib import Path

from common.env import env
from common.logger import error, setup_logging, success, warning
from vault.storage import FileSystemStorage, StorageError

from .engine import extract_insights
from .models import ExtractionReport


def vault_relative(vault: Path, note: Path) -> str:
    """Turn a note argument into a vault-relative POSIX path.

    Raises:
        ValueError: If an absolute note path lies outside the vault
    """
    if note.is_absolute():
        note = note.resolve().relative_to(vault.resolve())
    return note.as_posix()


def print_report(report: ExtractionReport) -> None:
    if report.candidates == 0:
        success(f"Nothing to extract from {report.path}: no filled memos found")
        return

    success(
        f"Created {report.created} insight note(s) from {report.path}"
        + (f", linked {report.linked} existing" if report.linked else "")
    )
    if report.skipped:
        warning(f"Skipped {report.skipped} memo(s) with no quoted text")
    if report.failed:
        warning(f"{report.failed} note(s) could not be written; their links were added anyway")


def cmd_extract(args) -> int:
    """Extract annotated highlights of one inbox note.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if not args.vault.is_dir():
        error(f"{args.vault} is not a directory")
        return 1

    try:
        path = vault_relative(args.vault, args.note)
    except ValueError:
        error(f"{args.note} is not inside the vault {args.vault}")
        return 1

    storage = FileSystemStorage(args.vault)
    if not storage.exists(path):
        error(f"Note not found: {path}")
        return 1

    try:
        report = extract_insights(storage, path, args.insight_folder or env.insight_folder())
    except StorageError as e:
        error(f"Extraction failed: {e}")
        return 1

    print_report(report)
    return 1 if report.failed else 0


def main():
    """Main entry point for the insights CLI."""
    parser = argparse.ArgumentParser(description="Promote annotated highlights to insight notes")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract", help="Create insight notes for every filled memo in an inbox note"
    )
    extract_parser.add_argument("note", type=Path, help="Inbox note, relative to the vault root")
    extract_parser.add_argument(
        "--vault",
        type=Path,
        default=env.vault_root(),
        help="Vault root directory (default: $VAULT_ROOT or current directory)",
    )
    extract_parser.add_argument(
        "--insight-folder",
        default=None,
        help="Folder for new notes (default: $KOBO_INSIGHT_FOLDER or Kobo-Insights)",
    )
    extract_parser.set_defaults(func=cmd_extract)

    args = parser.parse_args()
    setup_logging(level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    exit(main())
