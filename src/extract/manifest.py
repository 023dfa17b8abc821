"""Flatten the notebook hierarchy into the list of books to sync."""

from pathlib import Path

from common.constants import MANIFEST_FILENAME
from common.errors import ConfigurationError, ManifestParseError, NotFoundError, StorageIOError
from common.logger import get_logger

from .models import ManifestNode, NodeKind, NotebookRef, decode_manifest
from .reader import JsonCache, StorageReader

logger = get_logger(__name__)


def flatten(root: ManifestNode) -> list[NotebookRef]:
    """
    Collect every book under a manifest node.

    Traversal is depth-first, pre-order, left to right. Folders contribute
    only their descendants; duplicate ids are kept.

    Args:
        root: Manifest node whose children are walked

    Returns:
        Book references in encounter order
    """
    books: list[NotebookRef] = []
    for child in root.children:
        if child.kind == NodeKind.BOOK:
            books.append(NotebookRef(id=child.id, entry=child.entry))
        else:
            books.extend(flatten(child))
    return books


async def load_root_manifest(source_root: Path, reader: StorageReader) -> ManifestNode:
    """
    Load and decode <source_root>/manifest.json.

    Raises:
        ConfigurationError: If the manifest is missing, unreadable or malformed
    """
    manifest_path = source_root / MANIFEST_FILENAME
    cache = JsonCache(reader)

    try:
        data = await cache.load(manifest_path, parse_error=ManifestParseError)
    except NotFoundError as e:
        raise ConfigurationError(f"{MANIFEST_FILENAME} not found in {source_root}") from e
    except (StorageIOError, ManifestParseError) as e:
        raise ConfigurationError(f"Cannot load {manifest_path}: {e}") from e

    if isinstance(data, dict) and "notebooks" not in data:
        logger.warning(f"No notebooks listed in {manifest_path}")

    try:
        return decode_manifest(data)
    except ValueError as e:
        raise ConfigurationError(f"Malformed {manifest_path}: {e}") from e
