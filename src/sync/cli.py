#!/usr/bin/env python3
"""CLI for importing Kobo highlights into inbox notes."""

import argparse
from pathlib import Path

from common.env import ImportSettings, env
from common.logger import error, setup_logging, success, warning
from kobo.db import DatabaseError, SQLiteAdapter
from kobo.repository import KoboRepository
from kobo.service import HighlightService
from vault.storage import FileSystemStorage

from .library import sync_library
from .models import SyncReport


def print_report(report: SyncReport) -> None:
    """Print a one-line summary per outcome."""
    if report.is_noop:
        success(f"Nothing to add: all {report.unchanged} inbox note(s) are up to date")
        return

    success(
        f"Added {report.added} highlight(s): "
        f"{report.created} note(s) created, {report.updated} updated, "
        f"{report.unchanged} unchanged"
    )
    for book in report.books:
        if book.error:
            warning(f"Failed: {book.book_title} ({book.error})")


def cmd_import(args) -> int:
    """Import highlights from a Kobo database into the vault.

    Returns:
        Exit code (0 for success, 1 if any book failed or the database is unusable)
    """
    if not args.vault.is_dir():
        error(f"{args.vault} is not a directory")
        return 1

    settings = ImportSettings.from_env()
    if args.folder:
        settings.inbox_folder = args.folder
    if args.sort_by_chapter_progress:
        settings.sort_by_chapter_progress = True
    if args.import_all_books:
        settings.import_all_books = True

    try:
        with SQLiteAdapter(args.db) as adapter:
            service = HighlightService(KoboRepository(adapter))
            report = sync_library(
                service,
                FileSystemStorage(args.vault),
                settings,
                book_id=args.book,
            )
    except DatabaseError as e:
        error(f"Could not read the Kobo database: {e}")
        return 1

    print_report(report)
    return 1 if report.failed else 0


def main():
    """Main entry point for the import CLI."""
    parser = argparse.ArgumentParser(description="Import Kobo highlights into inbox notes")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser(
        "import", help="Append new highlights to one inbox note per book"
    )
    import_parser.add_argument(
        "--db",
        type=Path,
        default=env.kobo_db_path(),
        help="Path to KoboReader.sqlite (default: $KOBO_DB_PATH or ./KoboReader.sqlite)",
    )
    import_parser.add_argument(
        "--vault",
        type=Path,
        default=env.vault_root(),
        help="Vault root directory (default: $VAULT_ROOT or current directory)",
    )
    import_parser.add_argument(
        "--folder",
        default=None,
        help="Inbox folder inside the vault (default: $KOBO_INBOX_FOLDER or Kobo-Inboxes)",
    )
    import_parser.add_argument(
        "--book",
        default=None,
        help="Only import the book with this ContentID",
    )
    import_parser.add_argument(
        "--sort-by-chapter-progress",
        action="store_true",
        help="Order highlights by chapter progress instead of creation time",
    )
    import_parser.add_argument(
        "--import-all-books",
        action="store_true",
        help="Also create (header-only) notes for books without highlights",
    )
    import_parser.set_defaults(func=cmd_import)

    args = parser.parse_args()
    setup_logging(level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    exit(main())
