"""Configuration file loading.

Values from a YAML (or JSON) config file are copied onto ``Constants`` so the
rest of the code keeps reading tunables from a single place. CLI flags are
applied afterwards and win.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from .constants import Constants

logger = logging.getLogger(__name__)

# config key -> (Constants attribute, coercion)
_KNOWN_KEYS = {
    "registry_url": ("REGISTRY_URL", str),
    "request_timeout": ("REQUEST_TIMEOUT", int),
    "indent": ("DEFAULT_INDENT", str),
}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from file.

    Args:
        config_path: Path to YAML/JSON config file. Falls back to the path in
            the MARKUPDEPS_CONFIG environment variable.

    Returns:
        Configuration dict (empty when nothing usable was found).
    """
    path = config_path or os.environ.get(Constants.ENV_CONFIG)
    if not path:
        return {}

    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if isinstance(data, dict):
        return data
    logger.warning("Ignoring config file without a top-level mapping: %s", path)
    return {}


def apply_config(cfg: Dict[str, Any]) -> None:
    """Apply recognized configuration keys onto Constants.

    Args:
        cfg: Mapping as returned by load_config.
    """
    for key, (attr, coerce) in _KNOWN_KEYS.items():
        if cfg.get(key) is None:
            continue
        try:
            setattr(Constants, attr, coerce(cfg[key]))
        except (TypeError, ValueError):
            logger.warning("Invalid value for config key %s: %r", key, cfg[key])
            continue
        logger.debug("Config override %s=%r", attr, getattr(Constants, attr))
