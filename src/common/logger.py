"""Logging utilities with rich console output.

Every module gets its logger from here so that sync progress, per-book
outcomes and failures all go through one rich console.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Reading manifest...")
    logger.warning("Notebook has no markups")
    logger.error("Failed to sync book", exc_info=True)
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from .env import env

# Status lines and reports go to stdout; log records and errors to stderr,
# so stdout stays machine-readable with --format json
console = Console()
err_console = Console(stderr=True)

# Set once setup_logging has put the console handler on the root logger
_root_configured = False


def _rich_handler(show_time: bool = False, show_path: bool = False) -> RichHandler:
    handler = RichHandler(
        console=err_console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
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
    """Get a configured logger with rich output.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level name. If None, LOG_LEVEL from the environment
               is used, falling back to INFO.
        show_time: Show timestamp in log output
        show_path: Show file path in log output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Already configured, or the root handler will emit its records
    if logger.handlers or _root_configured:
        return logger

    logger.setLevel((level or env.log_level()).upper())
    logger.addHandler(_rich_handler(show_time=show_time, show_path=show_path))

    # Keep propagation on so pytest's caplog sees records
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger once, at the CLI entry point.

    Loggers already created by get_logger drop their own console handler and
    level, so each record is written once at the root's level.

    Args:
        level: Default logging level; LOG_LEVEL in the environment wins
        log_file: Optional file path to also log to a file
    """
    import os

    global _root_configured

    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_rich_handler())

    for existing in logging.Logger.manager.loggerDict.values():
        if not isinstance(existing, logging.Logger):
            continue
        rich_handlers = [h for h in existing.handlers if isinstance(h, RichHandler)]
        if rich_handlers:
            for handler in rich_handlers:
                existing.removeHandler(handler)
            existing.setLevel(logging.NOTSET)
    _root_configured = True

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)


def progress(message: str) -> None:
    """Print a plain status line, e.g. "Syncing 12 notebooks..."."""
    console.print(message)


def success(message: str) -> None:
    """Print a status line with a green checkmark."""
    console.print(f"[green]✓[/green] {message}")


def skipped(message: str) -> None:
    """Print a status line for work that was intentionally not done."""
    console.print(f"[dim]-[/dim] {message}")


def warning(message: str) -> None:
    """Print a status line with a yellow warning icon."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def error(message: str) -> None:
    """Print a status line with a red X icon to stderr."""
    err_console.print(f"[red]✗[/red] {message}")
