"""Decode the BookxNote export: manifests, markup trees and file access."""

from .manifest import flatten, load_root_manifest
from .models import (
    Anchor,
    BookManifest,
    ManifestNode,
    MarkupNode,
    NodeKind,
    NotebookRef,
    decode_book_manifest,
    decode_manifest,
    decode_markup,
)
from .reader import JsonCache, LocalStorageReader, StorageReader

__all__ = [
    # Walker
    "flatten",
    "load_root_manifest",
    # Models
    "Anchor",
    "BookManifest",
    "ManifestNode",
    "MarkupNode",
    "NodeKind",
    "NotebookRef",
    "decode_book_manifest",
    "decode_manifest",
    "decode_markup",
    # File access
    "JsonCache",
    "LocalStorageReader",
    "StorageReader",
]
