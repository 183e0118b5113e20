"""markupdeps: keep an HTML document's asset tags in sync with its package dependencies."""

from .errors import (
    InvalidNodeReferenceError,
    InvalidReferenceError,
    MarkupDepsError,
    MetadataFetchError,
)
from .graph import DependencyGraph, PackageNode
from .markup_file import MarkupFile
from .resolver import Resolver
from .versioning.parser import parse_package_ref

__all__ = [
    "DependencyGraph",
    "InvalidNodeReferenceError",
    "InvalidReferenceError",
    "MarkupDepsError",
    "MarkupFile",
    "MetadataFetchError",
    "PackageNode",
    "Resolver",
    "parse_package_ref",
]

__version__ = "1.0.0"
