"""Typed models for the BookxNote export and their decoders.

The export is a tree of loosely-shaped JSON objects. Everything that may be
missing is resolved here, once, so the renderer and the sync layer work on
fully-typed values.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from common.constants import BOOK_NODE_TYPE


class NodeKind(str, Enum):
    """Kinds of entries in a notebook manifest."""

    BOOK = "book"
    FOLDER = "folder"


@dataclass(frozen=True)
class ManifestNode:
    """One entry of the notebook hierarchy."""

    kind: NodeKind
    id: str
    entry: str
    children: tuple["ManifestNode", ...] = ()


@dataclass(frozen=True)
class NotebookRef:
    """A leaf notebook: its id and the export directory holding it."""

    id: str
    entry: str


@dataclass(frozen=True)
class BookManifest:
    """Per-book manifest; only the book's stable uuid is used."""

    uuid: str


@dataclass(frozen=True)
class Anchor:
    """Page-relative coordinates of an annotation."""

    x: int | float
    y: int | float


@dataclass(frozen=True)
class MarkupNode:
    """One annotation, highlight or note with its nested sub-annotations."""

    title: str | None = None
    excerpt_text: str | None = None
    free_text: str | None = None
    page: int | float | None = None
    uuid: str | None = None
    anchor: Anchor | None = None
    children: tuple["MarkupNode", ...] = ()


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _decode_manifest_node(data: Any) -> ManifestNode:
    if not isinstance(data, dict):
        raise ValueError(f"notebook entry must be an object, got {type(data).__name__}")

    if data.get("type") == BOOK_NODE_TYPE:
        return ManifestNode(
            kind=NodeKind.BOOK,
            id=_as_str(data.get("id")),
            entry=_as_str(data.get("entry")),
        )

    # Any other type value is a folder; a missing list means no children
    notebooks = data.get("notebooks") or []
    if not isinstance(notebooks, list):
        raise ValueError("'notebooks' must be a list")
    children = tuple(_decode_manifest_node(child) for child in notebooks)
    return ManifestNode(
        kind=NodeKind.FOLDER,
        id=_as_str(data.get("id")),
        entry=_as_str(data.get("entry")),
        children=children,
    )


def decode_manifest(data: dict[str, Any]) -> ManifestNode:
    """
    Decode the export's root manifest into a synthetic root folder.

    Args:
        data: Parsed root manifest.json ({"notebooks": [...]})

    Returns:
        Folder node whose children are the top-level notebooks

    Raises:
        ValueError: If the manifest is not a JSON object or an entry is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("manifest root must be a JSON object")

    notebooks = data.get("notebooks") or []
    if not isinstance(notebooks, list):
        raise ValueError("'notebooks' must be a list")

    return ManifestNode(
        kind=NodeKind.FOLDER,
        id="",
        entry="",
        children=tuple(_decode_manifest_node(item) for item in notebooks),
    )


def decode_book_manifest(data: Any) -> BookManifest | None:
    """
    Decode a per-book manifest.

    Returns:
        BookManifest, or None when res[0].uuid is absent
    """
    if not isinstance(data, dict):
        return None
    resources = data.get("res")
    if not isinstance(resources, list) or not resources:
        return None
    first = resources[0]
    if not isinstance(first, dict) or not first.get("uuid"):
        return None
    return BookManifest(uuid=str(first["uuid"]))


def _optional_text(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string, got {type(value).__name__}")
    return value or None


def _decode_anchor(textblocks: Any) -> Anchor | None:
    if not isinstance(textblocks, list) or not textblocks:
        return None
    first_block = textblocks[0]
    if not isinstance(first_block, dict):
        return None
    coordinates = first_block.get("first")
    if not isinstance(coordinates, list) or len(coordinates) < 2:
        return None
    return Anchor(x=coordinates[0], y=coordinates[1])


def decode_markup(data: Any) -> MarkupNode:
    """
    Decode a markups.json tree into MarkupNode values.

    Export field names map as follows: originaltext -> excerpt_text,
    content -> free_text, textblocks[0].first -> anchor, markups -> children.

    Raises:
        ValueError: If a node is not a JSON object or a text field is not a string
    """
    if not isinstance(data, dict):
        raise ValueError(f"markup node must be an object, got {type(data).__name__}")

    children = data.get("markups") or []
    if not isinstance(children, list):
        raise ValueError("'markups' must be a list")

    uuid = data.get("uuid")
    return MarkupNode(
        title=_optional_text(data, "title"),
        excerpt_text=_optional_text(data, "originaltext"),
        free_text=_optional_text(data, "content"),
        page=data.get("page"),
        uuid=None if uuid is None else str(uuid),
        anchor=_decode_anchor(data.get("textblocks")),
        children=tuple(decode_markup(child) for child in children),
    )
