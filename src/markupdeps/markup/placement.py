"""Places a package's asset tags in the document relative to related packages.

Anchor priority for each asset class:

1. the first tag of the most recently linked parent that already has tags,
2. the package's own previous tags (replaced in place),
3. structural fallbacks for a first-ever insertion: existing provenance
   tags, existing head tags of the same class, the head's last child,
   the head itself, the document root.
"""

from __future__ import annotations

import logging
from typing import Optional, Set

from ..common.logging_utils import extra_context, is_debug_enabled
from ..constants import AssetClass, Constants
from ..graph import PackageNode
from .document import MarkupDocument
from .formatting import after_indented, append_indented, before_indented, remove_indented
from .tags import synthesize_tags

logger = logging.getLogger(__name__)

# asset class -> (provenance selector, head selector)
_SELECTORS = {
    AssetClass.SCRIPTS: (f"script[{Constants.ATTR_REQUIRE}]", "head script"),
    AssetClass.STYLES: (f"link[{Constants.ATTR_REQUIRE}]", "head link[rel=stylesheet]"),
}


def update_tags(
    document: MarkupDocument,
    node: PackageNode,
    update_children: bool = False,
    _visited: Optional[Set[int]] = None,
) -> None:
    """Synchronize node's tags with its selected version.

    Args:
        document: Document to mutate.
        node: Package whose tags are rewritten.
        update_children: Also update every descendant, each exactly once.
    """
    new_tags = synthesize_tags(document, node)
    for asset_class in AssetClass:
        _place(document, node, asset_class, new_tags.of(asset_class))

    if not update_children:
        return
    visited = _visited if _visited is not None else set()
    visited.add(id(node))
    for child in list(node.children.values()):
        if id(child) not in visited:
            update_tags(document, child, update_children=True, _visited=visited)


def _place(document: MarkupDocument, node: PackageNode, asset_class: AssetClass, new_tags: list) -> None:
    old_tags = node.tags(asset_class)

    if not new_tags:
        if old_tags:
            remove_indented(old_tags)
            node.set_tags(asset_class, [])
            _trace(node, asset_class, "removed", len(old_tags))
        return

    for parent in reversed(list(node.parents.values())):
        parent_tags = parent.tags(asset_class)
        if parent_tags:
            before_indented(parent_tags, new_tags)
            remove_indented(old_tags)
            node.set_tags(asset_class, new_tags)
            _trace(node, asset_class, f"before_parent:{parent.name}", len(new_tags))
            return

    if old_tags:
        before_indented(old_tags, new_tags)
        remove_indented(old_tags)
        anchor = "in_place"
    else:
        anchor = _place_first(document, asset_class, new_tags)
    node.set_tags(asset_class, new_tags)
    _trace(node, asset_class, anchor, len(new_tags))


def _place_first(document: MarkupDocument, asset_class: AssetClass, new_tags: list) -> str:
    """Insert tags of a package that has never been placed; returns the anchor used."""
    provenance_selector, head_selector = _SELECTORS[asset_class]

    existing = document.select(provenance_selector)
    if existing:
        before_indented(existing, new_tags)
        return "before_provenance"

    existing = document.select(head_selector)
    if existing:
        before_indented(existing, new_tags)
        return "before_head_tag"

    head = document.head
    if head is not None:
        children = document.element_children(head)
        if children:
            after_indented(children, new_tags)
            return "after_head_child"
        append_indented(head, new_tags)
        return "append_head"

    append_indented(document.root, new_tags)
    return "append_root"


def _trace(node: PackageNode, asset_class: AssetClass, anchor: str, count: int) -> None:
    if is_debug_enabled(logger):
        logger.debug(
            "Tags placed",
            extra=extra_context(
                event="tags_placed",
                component="placement",
                package=node.name,
                asset_class=asset_class.value,
                anchor=anchor,
                count=count,
            ),
        )
