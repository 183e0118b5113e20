"""Exception hierarchy.

Every failure surfaced to callers derives from MarkupDepsError so the CLI can
map it to an exit code and a readable message.
"""

from __future__ import annotations


class MarkupDepsError(Exception):
    """Base error."""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidReferenceError(MarkupDepsError, ValueError):
    """A package reference is malformed or its range does not parse."""

    code = "INVALID_REFERENCE"

    def __init__(self, reference: str) -> None:
        super().__init__(f"Unable to add invalid package reference: {reference}")
        self.reference = reference


class MetadataFetchError(MarkupDepsError):
    """The package metadata provider failed to return a definition."""

    code = "METADATA_FETCH_FAILED"

    def __init__(self, package: str, reason: str) -> None:
        super().__init__(f"Unable to load metadata for {package}: {reason}")
        self.package = package
        self.reason = reason


class InvalidNodeReferenceError(MarkupDepsError, LookupError):
    """Tag update requested for a package that is not part of the graph."""

    code = "INVALID_NODE_REFERENCE"
