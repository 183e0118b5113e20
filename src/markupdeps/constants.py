"""Enums and tunable constants shared across markupdeps."""

from enum import Enum


class ExitCodes(Enum):
    """Process exit status returned by the markupdeps command."""

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    RESOLUTION_ERROR = 3


class AssetClass(Enum):
    """Asset classes tracked per package."""

    SCRIPTS = "scripts"
    STYLES = "styles"


class Constants:  # pylint: disable=too-few-public-methods
    """Tunables for markup layout, registry access and logging; overridden by apply_config()."""

    DEFAULT_MARKUP = "<!DOCTYPE html><html><head></head><body></body></html>"
    ATTR_REQUIRE = "data-require"
    ATTR_SEMVER = "data-semver"
    DEFAULT_INDENT = "  "
    ANY_RANGE = "*"

    REGISTRY_URL = None  # No public default; set via --registry URL or registry_url in config
    REQUEST_TIMEOUT = 30  # Timeout in seconds for metadata requests
    USER_AGENT = "markupdeps/1.0"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "MARKUPDEPS_LOG_LEVEL"
    ENV_CONFIG = "MARKUPDEPS_CONFIG"
