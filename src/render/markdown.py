"""
Render a book's markup tree into one Markdown document.

Per node, in this order and only when the field is present:

    ## Title              (depth > 1 only; level = depth)
    > excerpt line 1
    >excerpt line 2[p3](bookxnotepro://opennote/?...)
    free text
    ...children at depth + 1

Each section ends with a blank line. Output depends only on the input tree.
"""

from common.constants import DEEP_LINK_HOST, DEEP_LINK_SCHEME

from extract.models import MarkupNode

HEADING_MARKER = "#"
QUOTE_MARKER = ">"
BLANK_LINE = "\n\n"


def _format_number(value: int | float | None) -> str:
    if value is None:
        return ""
    # 12.0 prints as 12 so links match the reading app's own format
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_deep_link(node: MarkupNode, notebook_id: str, book_uuid: str) -> str | None:
    """
    Build the bookxnotepro:// URI pointing back at a node's location.

    Returns:
        The URI, or None when the node has no anchor
    """
    if node.anchor is None:
        return None

    params = [
        ("nb", notebook_id),
        ("book", book_uuid),
        ("page", _format_number(node.page)),
        ("x", _format_number(node.anchor.x)),
        ("y", _format_number(node.anchor.y)),
        ("id", "1"),
        ("uuid", node.uuid or ""),
    ]
    query = "&".join(f"{key}={value}" for key, value in params)
    return f"{DEEP_LINK_SCHEME}://{DEEP_LINK_HOST}/?{query}"


def _render_into(
    parts: list[str], node: MarkupNode, depth: int, notebook_id: str, book_uuid: str
) -> None:
    if node.title and depth > 1:
        parts.append(f"{HEADING_MARKER * depth} {node.title}{BLANK_LINE}")

    if node.excerpt_text:
        quoted = node.excerpt_text.replace("\n", "\n" + QUOTE_MARKER)
        parts.append(f"{QUOTE_MARKER} {quoted}")

        link = build_deep_link(node, notebook_id, book_uuid)
        if link is not None:
            # Keep a closing bracket in the excerpt from fusing with the link
            if parts[-1].endswith("]"):
                parts.append("  ")
            parts.append(f"[p{_format_number(node.page)}]({link})")

        parts.append(BLANK_LINE)

    if node.free_text:
        parts.append(f"{node.free_text}{BLANK_LINE}")

    for child in node.children:
        _render_into(parts, child, depth + 1, notebook_id, book_uuid)


def render(node: MarkupNode, depth: int, notebook_id: str, book_uuid: str) -> str:
    """
    Render a markup node and all of its descendants.

    Args:
        node: Root of the (sub)tree to render
        depth: Nesting depth of node; 1 for the markups.json root, which never
               gets a heading
        notebook_id: Notebook id used in deep links
        book_uuid: Book uuid used in deep links

    Returns:
        The Markdown document body

    Raises:
        ValueError: If depth is less than 1
    """
    if depth < 1:
        raise ValueError(f"depth must be >= 1, got {depth}")

    parts: list[str] = []
    _render_into(parts, node, depth, notebook_id, book_uuid)
    return "".join(parts)
