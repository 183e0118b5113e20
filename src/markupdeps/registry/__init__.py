"""Package metadata providers.

- catalog.py: in-memory / file-backed catalog of package definitions
- client.py: asynchronous HTTP client for a package metadata registry
"""

from .catalog import CatalogPackageLoader
from .client import RegistryPackageLoader

__all__ = [
    "CatalogPackageLoader",
    "RegistryPackageLoader",
]
