"""CLI entry point: resolve packages into an HTML file."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Any, List, Optional

from .args import parse_args
from .common.logging_utils import configure_logging, extra_context, is_debug_enabled
from .config import apply_config, load_config
from .constants import Constants, ExitCodes
from .errors import InvalidReferenceError, MarkupDepsError
from .markup_file import MarkupFile
from .registry.catalog import CatalogPackageLoader
from .registry.client import RegistryPackageLoader

logger = logging.getLogger(__name__)


def _setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def _read_input(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _write_output(path: Optional[str], html: str) -> None:
    if not path:
        sys.stdout.write(html)
        if not html.endswith("\n"):
            sys.stdout.write("\n")
        return
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(html)
    logger.info("Wrote %s", path)


async def run(args: Any, markup: Optional[str]) -> str:
    """Apply the requested packages to markup and return the resulting HTML.

    Raises:
        InvalidReferenceError: a --package value does not parse.
        MetadataFetchError: metadata for a required package could not be loaded.
    """
    registry: Optional[RegistryPackageLoader] = None
    if getattr(args, "CATALOG", None):
        loader: Any = CatalogPackageLoader.from_file(args.CATALOG)
    else:
        registry = RegistryPackageLoader(args.REGISTRY or None, timeout=getattr(args, "TIMEOUT", None))
        loader = registry

    try:
        markup_file = MarkupFile(loader, markup)
        if getattr(args, "SCAN", False):
            markup_file.scan_markup()
            await markup_file.resolve_all_declared_dependencies()
            await markup_file.refresh_all()

        refs: List[str] = list(getattr(args, "PACKAGES", None) or [])
        for ref in refs:
            await markup_file.add_dependency(ref)

        if getattr(args, "REFRESH", False):
            await markup_file.refresh_all()

        if is_debug_enabled(logger):
            logger.debug(
                "Resolution finished",
                extra=extra_context(
                    event="function_exit",
                    component="cli",
                    action="run",
                    count=len(markup_file.dependencies),
                ),
            )
        return markup_file.serialize()
    finally:
        if registry is not None:
            await registry.stop()


def main(argv: Optional[List[str]] = None) -> None:
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    apply_config(load_config(getattr(args, "CONFIG", None)))
    registry_url = getattr(args, "REGISTRY", None)
    if registry_url:
        Constants.REGISTRY_URL = registry_url
    elif registry_url is not None and not Constants.REGISTRY_URL:
        logger.error("--registry needs a URL unless registry_url is set in the config file")
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        markup = _read_input(getattr(args, "INPUT", None))
    except OSError as exc:
        logger.error("Unable to read input file: %s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        html = asyncio.run(run(args, markup))
    except InvalidReferenceError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.RESOLUTION_ERROR.value)
    except MarkupDepsError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.CONNECTION_ERROR.value)
    except (OSError, ValueError) as exc:
        logger.error("Unable to load package catalog: %s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        _write_output(getattr(args, "OUTPUT", None), html)
    except OSError as exc:
        logger.error("Unable to write output file: %s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
