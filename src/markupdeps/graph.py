"""In-memory dependency graph: package nodes plus the canonical ordering list."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

import semantic_version

from .common.logging_utils import extra_context, is_debug_enabled
from .constants import AssetClass, Constants
from .versioning.models import PackageRef, VersionDescriptor
from .versioning.semver import parse_range, range_matches

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PackageNode:
    """One package referenced anywhere in the dependency tree.

    Nodes compare and hash by identity; ``children`` and ``parents`` are
    insertion-ordered and hold each related node at most once.
    """
    name: str
    range: semantic_version.NpmSpec
    text_range: str = Constants.ANY_RANGE
    versions: List[VersionDescriptor] = field(default_factory=list)
    matching_versions: List[VersionDescriptor] = field(default_factory=list)
    scripts: list = field(default_factory=list)
    styles: list = field(default_factory=list)
    children: Dict[str, "PackageNode"] = field(default_factory=dict)
    parents: Dict[str, "PackageNode"] = field(default_factory=dict)
    loaded: Optional[asyncio.Future] = None
    resolving: Optional[asyncio.Future] = None

    @property
    def selected_version(self) -> Optional[VersionDescriptor]:
        """Highest version satisfying the requested range, if any."""
        return self.matching_versions[0] if self.matching_versions else None

    @property
    def ref_text(self) -> str:
        return f"{self.name}@{self.text_range}"

    def set_range(self, spec: semantic_version.NpmSpec, text_range: str) -> None:
        """Overwrite the requested range and recompute matches."""
        self.range = spec
        self.text_range = text_range
        self._match()

    def _match(self) -> None:
        self.matching_versions = [v for v in self.versions if range_matches(self.range, v.version)]

    def tags(self, asset_class: AssetClass) -> list:
        return self.scripts if asset_class is AssetClass.SCRIPTS else self.styles

    def set_tags(self, asset_class: AssetClass, tags: list) -> None:
        if asset_class is AssetClass.SCRIPTS:
            self.scripts = tags
        else:
            self.styles = tags


class DependencyGraph:
    """Package map plus the ordering list (dependencies before dependents)."""

    def __init__(self) -> None:
        self.packages: Dict[str, PackageNode] = {}
        self.ordering: List[PackageNode] = []

    def __contains__(self, node: object) -> bool:
        return isinstance(node, PackageNode) and self.packages.get(node.name) is node

    def __len__(self) -> int:
        return len(self.packages)

    def get(self, name: str) -> Optional[PackageNode]:
        return self.packages.get(name)

    def get_or_create(self, name: str, ref: Optional[PackageRef] = None) -> PackageNode:
        """Return the node for name, creating it (with ref's range or ``*``) on first use."""
        node = self.packages.get(name)
        if node is None:
            if ref is not None:
                node = PackageNode(name=name, range=ref.range, text_range=ref.text_range)
            else:
                node = PackageNode(name=name, range=parse_range(Constants.ANY_RANGE))
            self.packages[name] = node
        return node

    def load_once(
        self,
        node: PackageNode,
        fetch: Callable[[], Awaitable[List[VersionDescriptor]]],
    ) -> asyncio.Future:
        """Return the node's shared metadata future, starting fetch() only if none exists.

        A failed fetch clears the handle so a later request can retry; every
        waiter already attached still sees the failure.
        """
        if node.loaded is None:
            future = asyncio.ensure_future(fetch())

            def _clear_on_failure(done: asyncio.Future) -> None:
                if (done.cancelled() or done.exception() is not None) and node.loaded is done:
                    node.loaded = None

            future.add_done_callback(_clear_on_failure)
            node.loaded = future
        return node.loaded

    def discard(self, node: PackageNode) -> bool:
        """Drop a node that nothing refers to yet.

        Returns:
            True when the node was removed; nodes with edges, tags or an
            ordering slot are kept.
        """
        if self.packages.get(node.name) is not node:
            return False
        if node.parents or node.children or node.scripts or node.styles or self.index_of(node) >= 0:
            return False
        del self.packages[node.name]
        logger.debug("Discarded unresolved package %s", node.name)
        return True

    def link(self, parent: PackageNode, child: PackageNode) -> None:
        """Record a parent -> child dependency edge (idempotent)."""
        parent.children.setdefault(child.name, child)
        child.parents.setdefault(parent.name, parent)

    def index_of(self, node: PackageNode) -> int:
        for index, candidate in enumerate(self.ordering):
            if candidate is node:
                return index
        return -1

    def insert_ordered(self, node: PackageNode) -> int:
        """Insert node before its earliest listed parent, or append.

        Returns:
            The node's index in the ordering list.
        """
        existing = self.index_of(node)
        if existing >= 0:
            return existing

        insert_index = len(self.ordering)
        for parent in node.parents.values():
            parent_index = self.index_of(parent)
            if parent_index >= 0:
                insert_index = min(insert_index, parent_index)

        self.ordering.insert(insert_index, node)
        if is_debug_enabled(logger):
            logger.debug(
                "Ordering insert",
                extra=extra_context(
                    event="ordering_insert",
                    component="graph",
                    package=node.name,
                    index=insert_index,
                    size=len(self.ordering),
                ),
            )
        return insert_index
