"""Logging utilities with rich console output.

Every module gets its logger through get_logger(); CLI entry points call
setup_logging() once. Pass summaries (added/created/skipped counts) go
through the console helpers at the bottom of this module.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Merging highlights...")
    logger.warning("Skipping a bookmark with missing required values")
"""

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

# Shared console so log records and pass summaries interleave correctly
console = Console()


def _rich_handler(show_time: bool = False, show_path: bool = False) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        tracebacks_show_locals=True,
        markup=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(
    name: str,
    level: str | None = None,
    show_time: bool = False,
    show_path: bool = False,
) -> logging.Logger:
    """Get a logger that writes through rich.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level name. Defaults to $LOG_LEVEL, then INFO.
        show_time: Show timestamps in console output
        show_path: Show source paths in console output

    Returns:
        Configured logger instance. Repeated calls with the same name
        return the same logger without stacking handlers.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    logger.setLevel(level.upper())
    logger.addHandler(_rich_handler(show_time=show_time, show_path=show_path))

    # pytest's caplog captures through propagation
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger for a CLI run.

    Args:
        level: Default level for all modules ($LOG_LEVEL wins)
        log_file: Optional path that also receives timestamped records
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_rich_handler())

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)


def progress(message: str) -> None:
    """Print a plain progress line, e.g. "Syncing 3/12 books..."."""
    console.print(message)


def success(message: str) -> None:
    """Print a message with a green checkmark."""
    console.print(f"[green]✓[/green] {message}")


def warning(message: str) -> None:
    """Print a message with a yellow warning sign."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def error(message: str) -> None:
    """Print a message with a red cross to stderr."""
    Console(file=sys.stderr).print(f"[red]✗[/red] {message}")
