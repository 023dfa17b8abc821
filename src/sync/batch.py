"""Sync every notebook listed in the export's root manifest."""

import asyncio
from datetime import datetime

from common.env import SyncSettings, validate_settings
from common.logger import get_logger

from extract.manifest import flatten, load_root_manifest
from extract.models import NotebookRef
from extract.reader import StorageReader

from .models import SyncOutcome, SyncStatus, SyncSummary
from .orchestrator import Clock, note_path_for, sync_book
from .store import DocumentStore

logger = get_logger(__name__)


async def sync_all(
    settings: SyncSettings,
    reader: StorageReader,
    store: DocumentStore,
    clock: Clock = datetime.now,
) -> SyncSummary:
    """
    Sync all notebooks concurrently and wait for every one to settle.

    A failing notebook never stops the others; it shows up as a FAILED
    outcome in the summary.

    Args:
        settings: Sync settings
        reader: Source file access
        store: Destination document store
        clock: Source of recorded sync times

    Returns:
        Summary with one outcome per notebook, in manifest order

    Raises:
        ConfigurationError: If the export root or its manifest is unusable;
            raised before any notebook is touched
    """
    validate_settings(settings)
    root = await load_root_manifest(settings.source_root, reader)
    notebooks = flatten(root)

    logger.info(f"Syncing {len(notebooks)} notebooks from {settings.source_root}...")

    async def run(notebook: NotebookRef) -> SyncOutcome:
        try:
            return await sync_book(
                notebook.id,
                notebook.entry,
                settings=settings,
                reader=reader,
                store=store,
                clock=clock,
            )
        except Exception as e:
            logger.exception(f"Unexpected error syncing {notebook.entry}")
            return SyncOutcome(
                notebook.entry,
                notebook.id,
                SyncStatus.FAILED,
                path=note_path_for(notebook.entry, settings, store),
                reason=f"{type(e).__name__}: {e}",
            )

    outcomes = await asyncio.gather(*(run(notebook) for notebook in notebooks))
    return SyncSummary(outcomes=list(outcomes))
