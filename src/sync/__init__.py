"""Sync BookxNote notebooks into a Markdown vault.

Example:
    >>> import asyncio
    >>> from pathlib import Path
    >>> from common.env import SyncSettings
    >>> from extract.reader import LocalStorageReader
    >>> from sync import VaultDocumentStore, sync_all
    >>>
    >>> settings = SyncSettings(source_root=Path("~/BookxNote/notebooks").expanduser())
    >>> summary = asyncio.run(
    ...     sync_all(settings, LocalStorageReader(), VaultDocumentStore(Path("vault")))
    ... )
    >>> summary.counts
"""

from .batch import sync_all
from .decision import should_skip
from .metadata import SyncRecord, format_sync_time, parse_sync_time
from .models import SyncOutcome, SyncStatus, SyncSummary
from .orchestrator import resync_note, sync_book
from .store import DocumentHandle, DocumentStore, VaultDocumentStore

__all__ = [
    # Operations
    "sync_all",
    "sync_book",
    "resync_note",
    "should_skip",
    # Metadata
    "SyncRecord",
    "format_sync_time",
    "parse_sync_time",
    # Outcomes
    "SyncOutcome",
    "SyncStatus",
    "SyncSummary",
    # Store
    "DocumentHandle",
    "DocumentStore",
    "VaultDocumentStore",
]
