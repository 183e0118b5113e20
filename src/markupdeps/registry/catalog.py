"""File-backed package catalog used as a metadata provider."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping, Optional

import yaml

from ..errors import MetadataFetchError

logger = logging.getLogger(__name__)


class CatalogPackageLoader:
    """Serves package definitions from a ``{name: {"versions": [...]}}`` mapping."""

    def __init__(self, packages: Optional[Mapping[str, Any]] = None):
        self.packages: Dict[str, Any] = dict(packages or {})
        self.request_counts: Dict[str, int] = {}

    @classmethod
    def from_file(cls, path: str) -> "CatalogPackageLoader":
        """Load a catalog from a YAML or JSON file.

        The file holds the package mapping either at the top level or under a
        ``packages`` key.

        Raises:
            OSError: the file cannot be read.
            ValueError: the document is not a mapping.
        """
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Catalog {path} must contain a mapping of packages")
        packages = data.get("packages", data)
        if not isinstance(packages, dict):
            raise ValueError(f"Catalog {path}: 'packages' must be a mapping")
        logger.debug("Loaded %d package definition(s) from %s", len(packages), path)
        return cls(packages)

    async def __call__(self, name: str) -> Dict[str, Any]:
        self.request_counts[name] = self.request_counts.get(name, 0) + 1
        definition = self.packages.get(name)
        if not isinstance(definition, Mapping):
            raise MetadataFetchError(name, "package not found in catalog")
        return copy.deepcopy(dict(definition))
