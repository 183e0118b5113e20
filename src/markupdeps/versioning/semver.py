"""Thin wrappers around semantic_version for npm-style ranges."""

from __future__ import annotations

from typing import Iterable, List, Optional, TYPE_CHECKING

import semantic_version

from ..constants import Constants

if TYPE_CHECKING:
    from .models import VersionDescriptor


def parse_range(text_range: Optional[str]) -> Optional[semantic_version.NpmSpec]:
    """Parse an npm range; empty input means "any version".

    Returns:
        NpmSpec, or None when the range is invalid.
    """
    text = (text_range or "").strip() or Constants.ANY_RANGE
    try:
        return semantic_version.NpmSpec(text)
    except ValueError:
        return None


def parse_version(semver: Optional[str]) -> Optional[semantic_version.Version]:
    """Parse a concrete version string, or return None when it is not semver."""
    if not semver:
        return None
    try:
        return semantic_version.Version(str(semver).strip())
    except ValueError:
        return None


def sort_descending(versions: Iterable["VersionDescriptor"]) -> List["VersionDescriptor"]:
    """Sort version descriptors by semver precedence, highest first."""
    return sorted(versions, key=lambda v: v.version, reverse=True)


def range_matches(spec: semantic_version.NpmSpec, version: semantic_version.Version) -> bool:
    """Return True when version satisfies the range."""
    return spec.match(version)
