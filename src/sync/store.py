"""Destination document store.

DocumentStore is the boundary to wherever notes are kept. VaultDocumentStore
keeps them as Markdown files under a vault directory, with metadata stored as
YAML front matter.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

import aiofiles
import aiofiles.os
import yaml

from common.errors import NotFoundError, StorageIOError

FRONT_MATTER_FENCE = "---"

Metadata = dict[str, Any]


@dataclass(frozen=True)
class DocumentHandle:
    """A document in the store, addressed by its store-relative path."""

    path: str

    @property
    def stem(self) -> str:
        """File name without extension, e.g. 'Dune' for 'books/Dune.md'."""
        return PurePosixPath(self.path).stem


def join_path(*parts: str) -> str:
    """Join store paths with forward slashes, dropping empty segments."""
    cleaned = [part.replace("\\", "/").strip("/") for part in parts]
    return "/".join(part for part in cleaned if part)


def split_front_matter(text: str) -> tuple[Metadata, str]:
    """
    Split a document into its front matter mapping and body.

    Raises:
        StorageIOError: If the front matter is not valid YAML
    """
    lines = text.split("\n")
    if not lines or lines[0].rstrip() != FRONT_MATTER_FENCE:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].rstrip() == FRONT_MATTER_FENCE:
            raw = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1 :])
            break
    else:
        # Unterminated fence: not front matter
        return {}, text

    try:
        data = yaml.safe_load(raw) if raw.strip() else {}
    except yaml.YAMLError as e:
        raise StorageIOError(f"Invalid front matter: {e}") from e

    return (data if isinstance(data, dict) else {}), body


def join_front_matter(metadata: Metadata, body: str) -> str:
    """Inverse of split_front_matter; no fence at all for empty metadata."""
    if not metadata:
        return body
    dumped = yaml.safe_dump(
        metadata, allow_unicode=True, sort_keys=False, default_flow_style=False
    )
    return f"{FRONT_MATTER_FENCE}\n{dumped}{FRONT_MATTER_FENCE}\n{body}"


class DocumentStore(ABC):
    """Interface every destination store implements."""

    @abstractmethod
    def root_path(self) -> str:
        """Store-relative path of the store's root directory."""
        pass

    @abstractmethod
    async def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    async def get_document(self, path: str) -> DocumentHandle | None:
        """Return a handle for an existing document, or None."""
        pass

    @abstractmethod
    async def create(self, path: str, body: str) -> DocumentHandle:
        """Create a new document.

        Raises:
            StorageIOError: If the document already exists or cannot be written
        """
        pass

    @abstractmethod
    async def overwrite_body(self, handle: DocumentHandle, body: str) -> None:
        """Replace the document's whole content with body.

        Existing metadata is not carried over; callers that need it must read
        it first and write it back with mutate_metadata.
        """
        pass

    @abstractmethod
    async def get_metadata(self, handle: DocumentHandle) -> Metadata:
        pass

    @abstractmethod
    async def mutate_metadata(
        self, handle: DocumentHandle, fn: Callable[[Metadata], Metadata]
    ) -> None:
        """Read-modify-write the metadata, atomically per document."""
        pass

    @abstractmethod
    async def ensure_directory(self, path: str) -> None:
        """Create a directory if missing; existing directories are fine."""
        pass

    async def get_property(self, handle: DocumentHandle, key: str) -> str | None:
        """Look up one metadata value as a string."""
        value = (await self.get_metadata(handle)).get(key)
        return None if value is None else str(value)


class VaultDocumentStore(DocumentStore):
    """Markdown files under a vault directory."""

    def __init__(self, vault_root: Path):
        self.vault_root = Path(vault_root)
        self._locks: dict[str, asyncio.Lock] = {}

    def root_path(self) -> str:
        return ""

    def _resolve(self, path: str) -> Path:
        return self.vault_root / join_path(path)

    def _lock(self, handle: DocumentHandle) -> asyncio.Lock:
        return self._locks.setdefault(handle.path, asyncio.Lock())

    async def _read(self, handle: DocumentHandle) -> str:
        file_path = self._resolve(handle.path)
        try:
            async with aiofiles.open(file_path, mode="r", encoding="utf-8") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise NotFoundError(f"Document not found: {handle.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(f"Cannot read {handle.path}: {e}") from e

    async def _write(self, path: str, content: str, mode: str = "w") -> None:
        try:
            async with aiofiles.open(
                self._resolve(path), mode=mode, encoding="utf-8", newline=""
            ) as f:
                await f.write(content)
        except FileExistsError as e:
            raise StorageIOError(f"Document already exists: {path}") from e
        except OSError as e:
            raise StorageIOError(f"Cannot write {path}: {e}") from e

    async def exists(self, path: str) -> bool:
        return await aiofiles.os.path.exists(self._resolve(path))

    async def get_document(self, path: str) -> DocumentHandle | None:
        if await aiofiles.os.path.isfile(self._resolve(path)):
            return DocumentHandle(path=join_path(path))
        return None

    async def create(self, path: str, body: str) -> DocumentHandle:
        await self._write(path, body, mode="x")
        return DocumentHandle(path=join_path(path))

    async def overwrite_body(self, handle: DocumentHandle, body: str) -> None:
        async with self._lock(handle):
            await self._write(handle.path, body)

    async def get_metadata(self, handle: DocumentHandle) -> Metadata:
        metadata, _ = split_front_matter(await self._read(handle))
        return metadata

    async def mutate_metadata(
        self, handle: DocumentHandle, fn: Callable[[Metadata], Metadata]
    ) -> None:
        async with self._lock(handle):
            metadata, body = split_front_matter(await self._read(handle))
            updated = fn(dict(metadata))
            await self._write(handle.path, join_front_matter(updated, body))

    async def ensure_directory(self, path: str) -> None:
        try:
            await aiofiles.os.makedirs(self._resolve(path), exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Cannot create directory {path or '.'}: {e}") from e
