"""Read-only access to the export files.

Reads go through aiofiles so a batch of books can interleave its I/O on a
single event loop.
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from common.errors import NotFoundError, StorageIOError, SyncError


class StorageReader(ABC):
    """Source side of a sync: text contents and modification times."""

    @abstractmethod
    async def read_text(self, path: Path) -> str:
        """Read a UTF-8 file.

        Raises:
            NotFoundError: If the path does not exist
            StorageIOError: If the file cannot be read
        """
        pass

    @abstractmethod
    async def read_modified_time(self, path: Path) -> datetime:
        """Return the file's last-modified time as a naive local datetime.

        Raises:
            NotFoundError: If the path does not exist
            StorageIOError: If the file cannot be stat'ed
        """
        pass


class LocalStorageReader(StorageReader):
    """StorageReader over the local filesystem."""

    async def read_text(self, path: Path) -> str:
        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(f"Cannot read {path}: {e}") from e

    async def read_modified_time(self, path: Path) -> datetime:
        try:
            stat = await aiofiles.os.stat(path)
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {path}") from e
        except OSError as e:
            raise StorageIOError(f"Cannot stat {path}: {e}") from e
        return datetime.fromtimestamp(stat.st_mtime)


class JsonCache:
    """Parsed JSON files for the lifetime of one book sync.

    Create one per sync_book call and let it go when the call returns; it is
    never shared between books.
    """

    def __init__(self, reader: StorageReader):
        self._reader = reader
        self._parsed: dict[Path, Any] = {}

    async def load(self, path: Path, parse_error: type[SyncError] = SyncError) -> Any:
        """
        Read and parse a JSON file, reusing an earlier parse of the same path.

        Args:
            path: File to load
            parse_error: Exception class raised when the file is not valid JSON

        Returns:
            The decoded JSON value
        """
        if path in self._parsed:
            return self._parsed[path]

        text = await self._reader.read_text(path)
        try:
            value = json.loads(text)
        except json.JSONDecodeError as e:
            raise parse_error(f"Invalid JSON in {path}: {e}") from e

        self._parsed[path] = value
        return value
