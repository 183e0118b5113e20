"""Indentation-preserving insert/remove helpers for bs4 trees.

Inserted tags copy the indentation of the line their anchor sits on; removed
tags take the whitespace-only text immediately before them along, so repeated
updates never accumulate blank lines.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from ..constants import Constants


def _is_text(node: Optional[PageElement]) -> bool:
    # Comments, doctypes and CDATA are PreformattedString subclasses.
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _is_blank_text(node: Optional[PageElement]) -> bool:
    return _is_text(node) and not str(node).strip()


def leading_indent(anchor: PageElement) -> str:
    """Return the leading whitespace of the line anchor starts on."""
    leading_text = ""
    prev = anchor.previous_sibling
    while _is_text(prev):
        leading_text = str(prev) + leading_text
        prev = prev.previous_sibling
    last_line = leading_text.split("\n")[-1]
    return last_line if not last_line.strip() else ""


def before_indented(anchors: Sequence[PageElement], tags: Sequence[Tag]) -> None:
    """Insert tags before the first anchor, each followed by a newline and the anchor's indent."""
    if not anchors:
        return
    anchor = anchors[0]
    indent = "\n" + leading_indent(anchor)
    for tag in tags:
        anchor.insert_before(tag)
        anchor.insert_before(NavigableString(indent))


def after_indented(anchors: Sequence[PageElement], tags: Sequence[Tag]) -> None:
    """Insert tags after the last anchor, each preceded by a newline and the anchor's indent."""
    if not anchors:
        return
    anchor = anchors[-1]
    indent = "\n" + leading_indent(anchor)
    for tag in reversed(tags):
        anchor.insert_after(tag)
        anchor.insert_after(NavigableString(indent))


def append_indented(
    parent: Union[Tag, BeautifulSoup],
    tags: Sequence[Tag],
    indent: Optional[str] = None,
) -> None:
    """Append tags as the last children of parent, one indented line each."""
    if indent is None:
        indent = Constants.DEFAULT_INDENT
    for tag in tags:
        parent.append(NavigableString("\n" + indent))
        parent.append(tag)
    if tags:
        parent.append(NavigableString("\n"))


def remove_indented(tags: Sequence[Tag]) -> List[Tag]:
    """Detach tags along with the whitespace-only text directly preceding each."""
    removed = []
    for tag in tags:
        prev = tag.previous_sibling
        while _is_blank_text(prev):
            earlier = prev.previous_sibling
            prev.extract()
            prev = earlier
        removed.append(tag.extract())
    return removed
