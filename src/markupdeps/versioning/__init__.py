"""Package references, version descriptors and semver helpers."""

from .models import DependencyDecl, PackageDefinition, PackageRef, VersionDescriptor
from .parser import parse_package_ref
from .semver import parse_range, parse_version, sort_descending

__all__ = [
    "DependencyDecl",
    "PackageDefinition",
    "PackageRef",
    "VersionDescriptor",
    "parse_package_ref",
    "parse_range",
    "parse_version",
    "sort_descending",
]
