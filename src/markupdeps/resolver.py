"""Incremental dependency resolution against a package metadata provider."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Set, Union

import semantic_version

from .common.logging_utils import Timer, extra_context, is_debug_enabled
from .errors import InvalidReferenceError, MarkupDepsError, MetadataFetchError
from .graph import DependencyGraph, PackageNode
from .versioning.models import PackageDefinition, VersionDescriptor
from .versioning.parser import parse_package_ref
from .versioning.semver import sort_descending

logger = logging.getLogger(__name__)

PackageLoader = Callable[[str], Union[Awaitable[Any], Any]]


class Resolver:
    """Resolves package references into the nodes of a DependencyGraph.

    Metadata is fetched at most once per package name; later requests for the
    same name only re-apply the requested range to the stored version list.
    """

    def __init__(self, graph: DependencyGraph, package_loader: PackageLoader):
        """Initialize the resolver.

        Args:
            graph: Graph store receiving nodes, edges and ordering updates.
            package_loader: Callable mapping a package name to its definition.
                Coroutine results are awaited.
        """
        self.graph = graph
        self.package_loader = package_loader
        # Node -> nodes whose pending dependency resolution it is awaiting.
        self._waiting: Dict[PackageNode, Set[PackageNode]] = defaultdict(set)

    def resolve_dependency(self, pkg_ref: str) -> Awaitable[PackageNode]:
        """Resolve a ``name@range`` reference.

        Raises:
            InvalidReferenceError: immediately, before any asynchronous work,
                when the reference does not parse.
        """
        ref = parse_package_ref(pkg_ref)
        if ref is None:
            raise InvalidReferenceError(pkg_ref)
        return self.resolve_package(ref.name, ref.range, ref.text_range)

    async def resolve_package(
        self,
        name: str,
        spec: semantic_version.NpmSpec,
        text_range: str,
        waiter: Optional[PackageNode] = None,
    ) -> PackageNode:
        """Resolve one package and, recursively, its selected version's dependencies.

        A request arriving while the package's dependencies are already being
        resolved waits for that resolution, unless the pending resolution is
        itself waiting on ``waiter`` (a dependency cycle).

        Args:
            name: Package name.
            spec: Parsed version range.
            text_range: Range as originally written.
            waiter: Package whose dependency resolution issued this request.

        Returns:
            The package's node.

        Raises:
            MetadataFetchError: the provider failed for this package or one of
                its transitive dependencies.
        """
        created = self.graph.get(name) is None
        node = self.graph.get_or_create(name)
        try:
            versions = await self.graph.load_once(node, lambda: self._fetch_versions(name))
        except MarkupDepsError:
            if created:
                self.graph.discard(node)
            raise

        node.versions = versions
        node.set_range(spec, text_range)

        while node.selected_version is not None:
            pending = node.resolving
            if pending is None:
                await self._join(waiter, node, self._start_resolution(node))
                return node
            if waiter is not None and self._waits_on(node, waiter):
                logger.debug("Dependency cycle through %s and %s", node.name, waiter.name)
                return node
            covered = await self._join(waiter, node, pending)
            if node.selected_version is covered:
                return node

        logger.debug("No versions of %s match %s", name, text_range)
        return node

    def _start_resolution(self, node: PackageNode) -> asyncio.Future:
        task = asyncio.ensure_future(self._resolve_version(node, node.selected_version))

        def _clear(done: asyncio.Future) -> None:
            if node.resolving is done:
                node.resolving = None

        task.add_done_callback(_clear)
        node.resolving = task
        return task

    async def _resolve_version(self, node: PackageNode, version: VersionDescriptor) -> VersionDescriptor:
        await self.resolve_dependencies(node, version)
        self.graph.insert_ordered(node)
        return version

    async def _join(
        self,
        waiter: Optional[PackageNode],
        node: PackageNode,
        pending: asyncio.Future,
    ) -> VersionDescriptor:
        """Await node's pending resolution, recording that waiter depends on it."""
        if waiter is None:
            return await asyncio.shield(pending)
        self._waiting[waiter].add(node)
        try:
            return await asyncio.shield(pending)
        finally:
            self._waiting[waiter].discard(node)

    def _waits_on(self, node: PackageNode, waiter: PackageNode) -> bool:
        """True when node's pending resolution already depends on waiter."""
        stack, seen = [node], set()
        while stack:
            current = stack.pop()
            if current is waiter:
                return True
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self._waiting.get(current, ()))
        return False

    async def resolve_dependencies(
        self,
        parent: PackageNode,
        version: Optional[VersionDescriptor] = None,
    ) -> PackageNode:
        """Resolve every dependency declared by version and link it under parent."""
        if version is None:
            version = parent.selected_version
        if version is None:
            return parent

        pending = []
        for dep in version.dependencies:
            ref = parse_package_ref(dep.to_ref_text())
            if ref is None:
                logger.warning(
                    "Ignoring invalid dependency %s of %s@%s",
                    dep.to_ref_text(), parent.name, version.semver,
                )
                continue
            pending.append(self._resolve_child(parent, ref.name, ref.range, ref.text_range))

        await asyncio.gather(*pending)
        return parent

    async def _resolve_child(
        self,
        parent: PackageNode,
        name: str,
        spec: semantic_version.NpmSpec,
        text_range: str,
    ) -> PackageNode:
        child = await self.resolve_package(name, spec, text_range, waiter=parent)
        self.graph.link(parent, child)
        return child

    async def resolve_all(self) -> Dict[str, PackageNode]:
        """Re-resolve every known package against its stored range."""
        nodes = list(self.graph.packages.values())
        await asyncio.gather(
            *(self.resolve_package(node.name, node.range, node.text_range) for node in nodes)
        )
        return self.graph.packages

    async def _fetch_versions(self, name: str) -> List[VersionDescriptor]:
        """Call the provider once and return its versions sorted highest first."""
        with Timer() as t:
            try:
                result = self.package_loader(name)
                if inspect.isawaitable(result):
                    result = await result
            except MarkupDepsError:
                raise
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.error("Metadata lookup for %s failed: %s", name, exc)
                raise MetadataFetchError(name, str(exc)) from exc

        if isinstance(result, PackageDefinition):
            definition = result
        elif isinstance(result, Mapping):
            definition = PackageDefinition.from_dict(name, result)
        else:
            raise MetadataFetchError(name, f"unexpected metadata payload {type(result).__name__}")

        versions = sort_descending(definition.versions)
        if is_debug_enabled(logger):
            logger.debug(
                "Package metadata loaded",
                extra=extra_context(
                    event="metadata_loaded",
                    component="resolver",
                    package=name,
                    count=len(versions),
                    duration_ms=t.duration_ms(),
                ),
            )
        return versions
