"""Data models for package references and version metadata."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

import semantic_version

from .semver import parse_version

logger = logging.getLogger(__name__)


@dataclass
class PackageRef:
    """Parsed ``name@range`` reference."""
    name: str
    text_range: str
    range: semantic_version.NpmSpec

    def __str__(self) -> str:
        return f"{self.name}@{self.text_range}"


@dataclass
class DependencyDecl:
    """A dependency declared by one concrete package version."""
    name: str
    range: Optional[str] = None

    def to_ref_text(self) -> str:
        """Render as a package reference string."""
        return f"{self.name}@{self.range or ''}"


@dataclass
class VersionDescriptor:
    """Metadata for one concrete version of a package."""
    semver: str
    version: semantic_version.Version
    dependencies: List[DependencyDecl] = field(default_factory=list)
    scripts: List[str] = field(default_factory=list)
    styles: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["VersionDescriptor"]:
        """Build a descriptor from provider data.

        Args:
            data: Mapping with ``semver`` and optional ``dependencies``,
                ``scripts`` and ``styles`` keys.

        Returns:
            VersionDescriptor, or None when ``semver`` is not a valid version.
        """
        semver = data.get("semver")
        version = parse_version(semver)
        if version is None:
            return None

        raw_deps = data.get("dependencies") or []
        dependencies: List[DependencyDecl] = []
        if isinstance(raw_deps, Mapping):
            # npm-style {name: range} mapping
            dependencies = [DependencyDecl(name=str(k), range=v) for k, v in raw_deps.items()]
        else:
            for dep in raw_deps:
                if isinstance(dep, DependencyDecl):
                    dependencies.append(dep)
                elif isinstance(dep, Mapping) and dep.get("name"):
                    dependencies.append(DependencyDecl(name=str(dep["name"]), range=dep.get("range")))

        return cls(
            semver=str(semver).strip(),
            version=version,
            dependencies=dependencies,
            scripts=[str(u) for u in data.get("scripts") or []],
            styles=[str(u) for u in data.get("styles") or []],
        )


@dataclass
class PackageDefinition:
    """All known versions of a package, as returned by a metadata provider."""
    name: str
    versions: List[VersionDescriptor] = field(default_factory=list)

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "PackageDefinition":
        """Build a definition from provider data, skipping non-semver versions."""
        versions: List[VersionDescriptor] = []
        for raw in data.get("versions") or []:
            if isinstance(raw, VersionDescriptor):
                versions.append(raw)
                continue
            descriptor = VersionDescriptor.from_dict(raw) if isinstance(raw, Mapping) else None
            if descriptor is None:
                logger.warning("Skipping invalid version entry for %s: %r", name, raw)
                continue
            versions.append(descriptor)
        return cls(name=name, versions=versions)
