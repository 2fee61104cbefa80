#!/usr/bin/env python3
"""CLI for inspecting inbox notes."""

import argparse
from pathlib import Path

from common.env import env
from common.logger import error, progress, setup_logging, success, warning
from vault.metadata import FrontmatterStore
from vault.storage import FileSystemStorage, StorageError

from .stats import StatsCache, document_stats, refresh_stats_cache


def cmd_stats(args) -> int:
    """Show the highlight/insight counters of a note, optionally refreshing the cache."""
    storage = FileSystemStorage(args.vault)
    path = args.note.as_posix()

    if not storage.exists(path):
        error(f"Note not found: {path}")
        return 1

    try:
        text = storage.read(path)
        stats = document_stats(text)
        metadata_store = FrontmatterStore(storage)
        cached = StatsCache.from_metadata(metadata_store.read(path))

        progress(f"{path}")
        progress(f"  highlights: [bold]{stats.highlights_total}[/bold]")
        progress(f"  insights:   [bold]{stats.insights_created}[/bold]")

        stale = cached is None or (
            cached.highlights_total != stats.highlights_total
            or cached.insights_created != stats.insights_created
        )
        if args.refresh:
            refresh_stats_cache(storage, metadata_store, path)
            success("Stats cache refreshed")
        elif stale:
            warning("Cached stats are missing or out of date (use --refresh)")
    except StorageError as e:
        error(str(e))
        return 1

    return 0


def main():
    """Main entry point for the inbox CLI."""
    parser = argparse.ArgumentParser(description="Inspect Kobo inbox notes")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    stats_parser = subparsers.add_parser("stats", help="Count highlights and extracted insights")
    stats_parser.add_argument("note", type=Path, help="Inbox note, relative to the vault root")
    stats_parser.add_argument(
        "--vault",
        type=Path,
        default=env.vault_root(),
        help="Vault root directory (default: $VAULT_ROOT or current directory)",
    )
    stats_parser.add_argument(
        "--refresh",
        action="store_true",
        help="Recompute the counters and store them in the note's frontmatter",
    )
    stats_parser.set_defaults(func=cmd_stats)

    args = parser.parse_args()
    setup_logging(level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    exit(main())
