"""Sync one notebook from the export into the document store."""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path, PurePosixPath

from common.constants import (
    MANIFEST_FILENAME,
    MARKUPS_FILENAME,
    NOTE_EXTENSION,
    NOTEBOOK_KEY,
    SYNC_TIME_KEY,
)
from common.env import SyncSettings
from common.errors import (
    ConfigurationError,
    ManifestMissingError,
    ManifestParseError,
    MarkupParseError,
    MissingSyncRecordError,
    MissingUuidError,
    NotFoundError,
    StorageIOError,
    SyncError,
)
from common.logger import get_logger

from extract.models import BookManifest, MarkupNode, decode_book_manifest, decode_markup
from extract.reader import JsonCache, StorageReader
from render.markdown import render

from .decision import should_skip
from .metadata import SyncRecord, merge_metadata, parse_sync_time
from .models import SyncOutcome, SyncStatus
from .store import DocumentStore, join_path

logger = get_logger(__name__)

Clock = Callable[[], datetime]


async def _load_book_manifest(cache: JsonCache, book_dir: Path) -> BookManifest:
    manifest_path = book_dir / MANIFEST_FILENAME
    try:
        data = await cache.load(manifest_path, parse_error=ManifestParseError)
    except NotFoundError as e:
        raise ManifestMissingError(f"{MANIFEST_FILENAME} not found in {book_dir}") from e

    book = decode_book_manifest(data)
    if book is None:
        raise MissingUuidError(f"No res[0].uuid in {manifest_path}")
    return book


async def _load_markups(cache: JsonCache, book_dir: Path) -> MarkupNode:
    markup_path = book_dir / MARKUPS_FILENAME
    data = await cache.load(markup_path, parse_error=MarkupParseError)
    try:
        return decode_markup(data)
    except ValueError as e:
        raise MarkupParseError(f"Malformed {markup_path}: {e}") from e


def note_path_for(entry: str, settings: SyncSettings, store: DocumentStore) -> str:
    """Store-relative path of the note generated for a notebook entry."""
    notes_dir = settings.notes_dir or store.root_path()
    return join_path(notes_dir, f"{entry}{NOTE_EXTENSION}")


async def _sync_book(
    notebook_id: str,
    entry: str,
    settings: SyncSettings,
    reader: StorageReader,
    store: DocumentStore,
    clock: Clock,
) -> SyncOutcome:
    if settings.source_root is None:
        raise ConfigurationError("BookxNote export path is not set")

    book_dir = settings.source_root / entry
    # Parsed files live only for this call
    cache = JsonCache(reader)

    book = await _load_book_manifest(cache, book_dir)
    root = await _load_markups(cache, book_dir)
    source_modified = await reader.read_modified_time(book_dir / MARKUPS_FILENAME)

    notes_dir = settings.notes_dir or store.root_path()
    await store.ensure_directory(notes_dir)
    path = note_path_for(entry, settings, store)

    existing_metadata: dict = {}
    if await store.exists(path):
        handle = await store.get_document(path)
        if handle is None:
            raise StorageIOError(f"{path} exists but is not a document")

        existing_metadata = await store.get_metadata(handle)
        prior_sync = parse_sync_time(existing_metadata.get(SYNC_TIME_KEY))
        if should_skip(prior_sync, source_modified, settings.ignore_unchanged):
            logger.debug(f"{entry}: unchanged since {prior_sync}, skipping")
            return SyncOutcome(entry, notebook_id, SyncStatus.SKIPPED, path=path)

        await store.overwrite_body(handle, render(root, 1, notebook_id, book.uuid))
        status = SyncStatus.UPDATED
    else:
        handle = await store.create(path, render(root, 1, notebook_id, book.uuid))
        status = SyncStatus.CREATED

    # Second write, after the body is on disk
    record = SyncRecord(book_uuid=book.uuid, notebook_id=notebook_id, last_sync_time=clock())
    try:
        await store.mutate_metadata(
            handle, lambda current: merge_metadata({**existing_metadata, **current}, record)
        )
    except StorageIOError as e:
        if not existing_metadata:
            raise
        # The body write already dropped the old front matter
        logger.warning(f"{entry}: front matter of {path} was not restored: {existing_metadata!r}")
        raise StorageIOError(
            f"{e}; previous front matter of {path}: {existing_metadata!r}"
        ) from e

    logger.debug(f"{entry}: {status.value} {path}")
    return SyncOutcome(entry, notebook_id, status, path=path)


async def sync_book(
    notebook_id: str,
    entry: str,
    *,
    settings: SyncSettings,
    reader: StorageReader,
    store: DocumentStore,
    clock: Clock = datetime.now,
) -> SyncOutcome:
    """
    Render one notebook and create or update its note.

    Steps:
    1. Load <entry>/manifest.json and take the book uuid from res[0]
    2. Load <entry>/markups.json as the markup tree
    3. If the note exists, skip when unchanged; otherwise overwrite its body
       and restore its previous front matter
    4. If it does not exist, create it
    5. Write the sync record (uuid, notebook id, sync time) to front matter

    Per-book errors never escape; they become a FAILED outcome.

    Args:
        notebook_id: Notebook id from the root manifest
        entry: Export directory of the notebook; also the note's file name
        settings: Sync settings (source root, notes dir, policy)
        reader: Source file access
        store: Destination document store
        clock: Source of the recorded sync time

    Returns:
        The outcome for this notebook
    """
    try:
        return await _sync_book(notebook_id, entry, settings, reader, store, clock)
    except SyncError as e:
        logger.debug(f"{entry}: {type(e).__name__}: {e}")
        return _failed(entry, notebook_id, note_path_for(entry, settings, store), e)


def _failed(entry: str, notebook_id: str, path: str | None, error: SyncError) -> SyncOutcome:
    return SyncOutcome(
        entry,
        notebook_id,
        SyncStatus.FAILED,
        path=path,
        reason=f"{type(error).__name__}: {error}",
    )


async def resync_note(
    note_path: str,
    *,
    settings: SyncSettings,
    reader: StorageReader,
    store: DocumentStore,
    clock: Clock = datetime.now,
) -> SyncOutcome:
    """
    Re-sync the notebook an existing note was generated from.

    The notebook id comes from the note's book_x_note_nb property and the
    export entry from the note's file name.
    """
    try:
        handle = await store.get_document(note_path)
        if handle is None:
            raise NotFoundError(f"Note not found: {note_path}")

        notebook_id = await store.get_property(handle, NOTEBOOK_KEY)
        if not notebook_id:
            raise MissingSyncRecordError(
                f"{handle.path} has no {NOTEBOOK_KEY} property; run a full sync first"
            )
    except SyncError as e:
        return _failed(PurePosixPath(note_path).stem, "", note_path, e)

    return await sync_book(
        notebook_id, handle.stem, settings=settings, reader=reader, store=store, clock=clock
    )
