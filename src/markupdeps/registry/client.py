"""Asynchronous client for a package metadata registry."""

from __future__ import annotations

import asyncio
import logging
import urllib.parse
from typing import Any, Dict, Optional, cast

import aiohttp

from ..common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from ..constants import Constants
from ..errors import MetadataFetchError

logger = logging.getLogger(__name__)


class RegistryPackageLoader:
    """Fetches ``<registry_url>/<name>`` and returns the JSON package definition."""

    def __init__(
        self,
        registry_url: Optional[str] = None,
        timeout: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """Initialize the loader.

        Args:
            registry_url: Base URL; defaults to Constants.REGISTRY_URL.
            timeout: Request timeout in seconds; defaults to Constants.REQUEST_TIMEOUT.
            headers: Extra request headers.

        Raises:
            ValueError: no registry URL was given or configured.
        """
        base_url = registry_url or Constants.REGISTRY_URL
        if not base_url:
            raise ValueError("No registry URL given; pass one or set registry_url in the config file")
        self.registry_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout or Constants.REQUEST_TIMEOUT)
        self._headers = {"Accept": "application/json", "User-Agent": Constants.USER_AGENT}
        self._headers.update(headers or {})
        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """Start the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)

    async def stop(self) -> None:
        """Stop the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "RegistryPackageLoader":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()

    def build_url(self, name: str) -> str:
        """Build the metadata URL for a package name."""
        return f"{self.registry_url}/{urllib.parse.quote(name, safe='@')}"

    async def __call__(self, name: str) -> Dict[str, Any]:
        """Fetch one package definition.

        Raises:
            MetadataFetchError: non-200 status, transport error, timeout or a
                body that is not a JSON object.
        """
        await self.start()
        session = cast(aiohttp.ClientSession, self._session)

        url = self.build_url(name)
        with Timer() as t:
            try:
                async with session.get(url, headers=self._headers) as response:
                    status = response.status
                    if status != 200:
                        raise MetadataFetchError(name, f"HTTP {status} from {safe_url(url)}")
                    data = await response.json(content_type=None)
            except asyncio.TimeoutError as exc:
                logger.error("Metadata request for %s timed out after %s seconds", name, self._timeout.total)
                raise MetadataFetchError(name, "request timed out") from exc
            except aiohttp.ClientError as exc:
                logger.error("Metadata request for %s failed: %s", name, exc)
                raise MetadataFetchError(name, f"connection error: {exc}") from exc
            except ValueError as exc:
                raise MetadataFetchError(name, "response is not valid JSON") from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="registry_client",
                    action="GET",
                    outcome="success",
                    status_code=status,
                    duration_ms=t.duration_ms(),
                    target=safe_url(url),
                ),
            )
        if not isinstance(data, dict):
            raise MetadataFetchError(name, "response is not a JSON object")
        return data
