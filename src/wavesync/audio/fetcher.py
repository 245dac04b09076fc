"""Fetch raw audio bytes from HTTP URLs or the local filesystem."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import unquote, urlparse

import aiohttp

from wavesync.exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class AudioFetcher:
    """
    Retrieve the complete payload of an audio source.

    - `http://` and `https://` URLs are requested with aiohttp; `fetch_params`
      are passed through as request keyword arguments (headers, auth, ...).
    - `file://` URLs and plain paths are read from disk in a worker thread.

    No retries are attempted; a failure raises FetchError.
    """

    def __init__(self, session: Optional[aiohttp.ClientSession] = None, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the fetcher.

        Args:
            session: Shared session to use; a short-lived one is opened per
                     request when None
            timeout: Total request timeout in seconds
        """
        self._session = session
        self.timeout = timeout

    async def fetch_blob(self, url: str, fetch_params: Optional[dict[str, Any]] = None) -> bytes:
        """
        Fetch every byte behind `url`.

        Raises:
            FetchError: If the source is missing, unreachable or answers with an
                        HTTP error status
        """
        scheme = urlparse(url).scheme.lower()
        if scheme in ("http", "https"):
            return await self._fetch_http(url, fetch_params or {})
        return await self._fetch_file(url)

    async def _fetch_http(self, url: str, fetch_params: dict[str, Any]) -> bytes:
        logger.debug(f"Fetching {url}")
        try:
            if self._session is not None:
                return await self._read(self._session, url, fetch_params)
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                return await self._read(session, url, fetch_params)
        except aiohttp.ClientResponseError as e:
            raise FetchError(url, original_error=e.message, status=e.status) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(url, original_error=str(e) or type(e).__name__) from e

    @staticmethod
    async def _read(session: aiohttp.ClientSession, url: str, fetch_params: dict[str, Any]) -> bytes:
        async with session.get(url, **fetch_params) as response:
            response.raise_for_status()
            data = await response.read()
            logger.debug(f"Fetched {len(data)} bytes from {url}")
            return data

    async def _fetch_file(self, url: str) -> bytes:
        path = self._to_path(url)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise FetchError(url, original_error=str(e)) from e
        logger.debug(f"Read {len(data)} bytes from {path}")
        return data

    @staticmethod
    def _to_path(url: str) -> Path:
        parsed = urlparse(url)
        if parsed.scheme.lower() == "file":
            return Path(unquote(parsed.path))
        return Path(url).expanduser()
