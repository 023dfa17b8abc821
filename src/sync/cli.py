#!/usr/bin/env python3
"""CLI interface for syncing a BookxNote export into a Markdown vault."""

import argparse
import asyncio
from pathlib import Path

from common.env import SyncSettings, validate_settings
from common.errors import ConfigurationError
from common.logger import error, progress, setup_logging

from extract.reader import LocalStorageReader

from .batch import sync_all
from .orchestrator import resync_note
from .reporters import SyncReporter, report_outcome
from .store import VaultDocumentStore


def build_settings(args) -> SyncSettings:
    """Environment settings with command-line overrides applied."""
    settings = SyncSettings.from_env()
    if args.source is not None:
        settings.source_root = args.source
    if args.vault is not None:
        settings.vault_root = args.vault
    if args.dest is not None:
        settings.notes_dir = args.dest.replace("\\", "/").strip("/")
    if args.ignore_unchanged is not None:
        settings.ignore_unchanged = args.ignore_unchanged
    return settings


def cmd_all(args):
    """Sync every notebook in the export.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    settings = build_settings(args)
    store = VaultDocumentStore(settings.vault_root)

    try:
        summary = asyncio.run(sync_all(settings, LocalStorageReader(), store))
    except ConfigurationError as e:
        error(f"Sync aborted: {e}")
        return 1

    reporter = SyncReporter(show_skipped=not args.quiet)
    if args.format == "json":
        print(reporter.report_json(summary))
        return 1 if summary.has_failures else 0
    return reporter.report_console(summary)


def cmd_note(args):
    """Re-sync the notebook behind one existing note.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    settings = build_settings(args)
    try:
        validate_settings(settings)
    except ConfigurationError as e:
        error(f"Sync aborted: {e}")
        return 1

    progress(f"Syncing {args.note}...")
    outcome = asyncio.run(
        resync_note(
            args.note,
            settings=settings,
            reader=LocalStorageReader(),
            store=VaultDocumentStore(settings.vault_root),
        )
    )
    report_outcome(outcome)
    return 1 if outcome.failed else 0


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--source",
        type=Path,
        default=None,
        help="BookxNote export directory (default: $BOOKXNOTE_PATH)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Vault root directory (default: $VAULT_PATH or current directory)",
    )
    parser.add_argument(
        "--dest",
        default=None,
        help="Vault-relative directory for notes (default: $VAULT_NOTES_DIR or vault root)",
    )
    parser.add_argument(
        "--ignore-unchanged",
        dest="ignore_unchanged",
        action="store_true",
        default=None,
        help="Skip notebooks whose markups did not change since the last sync",
    )
    parser.add_argument(
        "--no-ignore-unchanged",
        dest="ignore_unchanged",
        action="store_false",
        help="Always re-render notebooks",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bookxnote-sync",
        description="Sync BookxNote annotations into Markdown notes",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    all_parser = subparsers.add_parser("all", help="Sync every notebook in the export")
    add_common_arguments(all_parser)
    all_parser.add_argument(
        "--format",
        choices=["console", "json"],
        default="console",
        help="Output format (default: console)",
    )
    all_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not list unchanged notebooks",
    )
    all_parser.set_defaults(func=cmd_all)

    note_parser = subparsers.add_parser("note", help="Re-sync the notebook behind one note")
    add_common_arguments(note_parser)
    note_parser.add_argument("note", help="Vault-relative path of the note, e.g. books/Dune.md")
    note_parser.set_defaults(func=cmd_note)

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file)
    return args.func(args)


if __name__ == "__main__":
    exit(main())
