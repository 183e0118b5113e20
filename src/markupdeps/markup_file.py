"""An HTML file whose script/link tags track a tree of package dependencies."""

from __future__ import annotations

import logging
from typing import Awaitable, Dict, List, Optional, Union

from .common.logging_utils import extra_context, is_debug_enabled
from .constants import Constants
from .errors import InvalidNodeReferenceError, InvalidReferenceError
from .graph import DependencyGraph, PackageNode
from .markup.document import MarkupDocument
from .markup.placement import update_tags
from .resolver import PackageLoader, Resolver
from .versioning.models import PackageRef
from .versioning.parser import parse_package_ref

logger = logging.getLogger(__name__)


class MarkupFile:
    """An HTML document plus the dependency graph its asset tags are derived from.

    Example:
        markup = MarkupFile(loader)
        await markup.add_dependency("jquery@^2.0.0")
        html = markup.serialize()
    """

    def __init__(self, package_loader: PackageLoader, markup: Optional[str] = None):
        """Initialize the file.

        Args:
            package_loader: Callable mapping a package name to its definition
                (``{"versions": [...]}``); may be a coroutine function.
            markup: Initial HTML; defaults to a minimal skeleton.

        Raises:
            TypeError: package_loader is not callable.
        """
        if not callable(package_loader):
            raise TypeError("MarkupFile must be passed a package_loader callable at creation.")
        self.package_loader = package_loader
        self.graph = DependencyGraph()
        self.resolver = Resolver(self.graph, package_loader)
        self.document = MarkupDocument()
        self.reset(markup)

    @property
    def packages(self) -> Dict[str, PackageNode]:
        return self.graph.packages

    @property
    def dependencies(self) -> List[PackageNode]:
        """The ordering list: dependencies before the dependents that pulled them in."""
        return self.graph.ordering

    def reset(self, markup: Optional[str] = None) -> "MarkupFile":
        """Discard all packages and reload the document from markup (or the skeleton)."""
        # A fresh graph keeps in-flight resolutions from writing into the new one.
        self.graph = DependencyGraph()
        self.resolver = Resolver(self.graph, self.package_loader)
        self.document.load(markup or Constants.DEFAULT_MARKUP)
        return self

    def add_dependency(self, pkg_ref: str) -> Awaitable[PackageNode]:
        """Resolve a ``name@range`` reference and place its tags and its dependencies' tags.

        Raises:
            InvalidReferenceError: immediately, when the reference does not parse.
        """
        ref = parse_package_ref(pkg_ref)
        if ref is None:
            raise InvalidReferenceError(pkg_ref)
        return self._add_resolved(ref)

    async def _add_resolved(self, ref: PackageRef) -> PackageNode:
        if is_debug_enabled(logger):
            logger.debug(
                "Adding dependency",
                extra=extra_context(event="function_entry", component="markup_file",
                                    action="add_dependency", package=str(ref)),
            )
        node = await self.resolver.resolve_package(ref.name, ref.range, ref.text_range)
        self.update_package_tags(node, update_children=True)
        logger.info("Added %s (%s)", ref, node.selected_version.semver if node.selected_version else "no match")
        return node

    def get_or_create_dependency(self, name: str, ref: Optional[PackageRef] = None) -> PackageNode:
        return self.graph.get_or_create(name, ref)

    def update_package_tags(
        self,
        node_or_ref: Union[PackageNode, str],
        update_children: bool = False,
    ) -> PackageNode:
        """Rewrite the tags of a package (and optionally all of its descendants).

        Args:
            node_or_ref: Node of this file's graph, or a package reference naming one.
            update_children: Cascade to every descendant.

        Raises:
            InvalidNodeReferenceError: the package is not part of this file's graph.
        """
        if isinstance(node_or_ref, str):
            ref = parse_package_ref(node_or_ref)
            node = self.graph.get(ref.name) if ref else None
        else:
            node = node_or_ref if node_or_ref in self.graph else None
        if node is None:
            raise InvalidNodeReferenceError(f"Unable to update invalid package instance: {node_or_ref!r}")

        update_tags(self.document, node, update_children=update_children)
        return node

    async def resolve_all_declared_dependencies(self) -> Dict[str, PackageNode]:
        """Re-resolve every known package against its stored range."""
        return await self.resolver.resolve_all()

    async def refresh_all(self) -> "MarkupFile":
        """Re-lay-out every package's tags, dependents first.

        Packages outside the ordering list (no matching version) only have
        stale tags cleared.
        """
        for node in reversed(list(self.graph.ordering)):
            update_tags(self.document, node)
        ordered = {id(node) for node in self.graph.ordering}
        for node in list(self.graph.packages.values()):
            if id(node) not in ordered:
                update_tags(self.document, node)
        return self

    def scan_markup(self) -> List[str]:
        """Adopt existing ``data-require`` tags as the current tags of their packages.

        Returns:
            Names of the packages found, in document order.
        """
        found: List[str] = []
        for element in self.document.select(f"[{Constants.ATTR_REQUIRE}]"):
            value = element.get(Constants.ATTR_REQUIRE)
            ref = parse_package_ref(value) if isinstance(value, str) else None
            if ref is None:
                logger.warning("Skipping tag with invalid %s=%r", Constants.ATTR_REQUIRE, value)
                continue
            node = self.graph.get_or_create(ref.name, ref)
            node.range, node.text_range = ref.range, ref.text_range
            if element.name == "script":
                node.scripts.append(element)
            elif element.name == "link":
                node.styles.append(element)
            else:
                logger.warning("Ignoring %s on unsupported <%s> element", Constants.ATTR_REQUIRE, element.name)
                continue
            if ref.name not in found:
                found.append(ref.name)
        logger.info("Found %d declared package(s) in markup", len(found))
        return found

    def serialize(self) -> str:
        return self.document.serialize()

    to_html = serialize

    def __str__(self) -> str:
        return self.serialize()
