"""Query helpers and text extraction over a parsed report document.

All helpers are total: a missing node or match yields ``None``, ``""`` or
an empty list rather than raising. Nothing here mutates the tree.

Two extraction modes are provided for a code block:

``full_text``
    Every child's text, including the text of coverage decorations. Each
    boundary between a decoration and its neighbours gets one incidental
    separator character, except next to a line break.
``display_text``
    Only the block's own text. Decorations contribute nothing but their
    line breaks, so both modes always split into the same number of lines.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

HTML_PARSER = "html.parser"
DEFAULT_SEPARATOR = " "


def parse_html(markup: str | bytes) -> BeautifulSoup:
    """Parse report markup into a document tree."""
    return BeautifulSoup(markup, HTML_PARSER)


def first_by_tag(node: Tag | None, tag: str) -> Tag | None:
    """Return the first descendant element named *tag*."""
    if node is None:
        return None
    found = node.find(tag)
    return found if isinstance(found, Tag) else None


def all_by_tag(node: Tag | None, tag: str) -> list[Tag]:
    """Return every descendant element named *tag*, in document order."""
    if node is None:
        return []
    return [el for el in node.find_all(tag) if isinstance(el, Tag)]


def all_by_class(node: Tag | None, class_name: str) -> list[Tag]:
    """Return every descendant element carrying the CSS class *class_name*."""
    if node is None:
        return []
    return [el for el in node.find_all(class_=class_name) if isinstance(el, Tag)]


def child_elements(node: Tag | None, tag: str | None = None) -> list[Tag]:
    """Return the direct child elements of *node*, optionally filtered by name."""
    if node is None:
        return []
    return [
        child
        for child in node.children
        if isinstance(child, Tag) and (tag is None or child.name == tag)
    ]


def text(node: Tag | None) -> str:
    """Return the visible text of *node*, fragments joined by single spaces."""
    if node is None:
        return ""
    return node.get_text(" ", strip=True)


def attr(node: Tag | None, name: str) -> str | None:
    """Return attribute *name* of *node*; multi-valued attributes are space-joined."""
    if node is None:
        return None
    value = node.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _pieces(node: Tag) -> list[tuple[str, bool]]:
    """Return ``(text, is_element)`` for each non-empty child of *node*."""
    pieces: list[tuple[str, bool]] = []
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            piece, is_element = str(child), False
        elif isinstance(child, Tag):
            piece, is_element = child.get_text(), True
        else:
            continue
        if piece:
            pieces.append((piece, is_element))
    return pieces


def full_text(node: Tag | None, separator: str = DEFAULT_SEPARATOR) -> str:
    """Return all text under *node*, decorations included.

    One *separator* is placed at each boundary that touches a child element,
    unless either side of the boundary is a line break.
    """
    if node is None:
        return ""
    out = ""
    prev_is_element = False
    for index, (piece, is_element) in enumerate(_pieces(node)):
        at_line_break = out.endswith("\n") or piece.startswith("\n")
        if index and (is_element or prev_is_element) and not at_line_break:
            out += separator
        out += piece
        prev_is_element = is_element
    return out


def display_text(node: Tag | None) -> str:
    """Return the text of *node* with decoration text omitted.

    Line breaks inside decorations are kept so the line structure matches
    :func:`full_text`.
    """
    if node is None:
        return ""
    out: list[str] = []
    for piece, is_element in _pieces(node):
        out.append("\n" * piece.count("\n") if is_element else piece)
    return "".join(out)
