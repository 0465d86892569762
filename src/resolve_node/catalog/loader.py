"""Release catalog loader for the official and unofficial Node.js indexes."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import List, Optional, Tuple

import aiohttp

from ..common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from ..constants import Constants
from ..errors import CatalogFetchError
from ..versioning.models import ReleaseRecord

logger = logging.getLogger(__name__)

# Upstream error bodies are echoed into the exception message
_MAX_ERROR_BODY = 500


class CatalogLoader:
    """Fetches both release indexes and turns them into ReleaseRecords."""

    def __init__(
        self,
        official_url: str = Constants.INDEX_URL_OFFICIAL,
        unofficial_url: str = Constants.INDEX_URL_UNOFFICIAL,
        timeout: int = Constants.REQUEST_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the loader.

        Args:
            official_url: URL of the official ``index.json``.
            unofficial_url: URL of the unofficial-builds ``index.json``.
            timeout: Total timeout per fetch in seconds.
            session: Optional externally managed session; it is not closed
                by :meth:`stop`.
        """
        self.official_url = official_url
        self.unofficial_url = unofficial_url
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def start(self) -> None:
        """Open the HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={
                    "User-Agent": Constants.USER_AGENT,
                    "Accept": "application/json",
                },
            )
            self._owns_session = True

    async def stop(self) -> None:
        """Close the HTTP session if this loader opened it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def load_catalog(self, source_url: str, unofficial: bool) -> List[ReleaseRecord]:
        """Fetch one index and stamp every record with ``unofficial``.

        Raises:
            CatalogFetchError: non-2xx status, transport failure or a body
                that is not a JSON array of releases.
        """
        if self._session is None or self._session.closed:
            await self.start()
        assert self._session is not None

        target = safe_url(source_url)
        with Timer() as t:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request",
                    extra=extra_context(
                        event="http_request",
                        component="catalog_loader",
                        action="GET",
                        target=target,
                    ),
                )
            try:
                async with self._session.get(source_url) as response:
                    status = response.status
                    body = await response.text()
            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                logger.error("Catalog fetch failed for %s: %s", target, exc)
                raise CatalogFetchError(source_url, None, str(exc) or type(exc).__name__) from exc

            if not 200 <= status < 300:
                logger.error("Catalog %s returned HTTP %s", target, status)
                raise CatalogFetchError(source_url, status, body[:_MAX_ERROR_BODY])

            records = self._parse_catalog(source_url, status, body, unofficial)

            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response ok",
                    extra=extra_context(
                        event="http_response",
                        component="catalog_loader",
                        action="GET",
                        outcome="success",
                        status_code=status,
                        duration_ms=t.duration_ms(),
                        target=target,
                        releases=len(records),
                    ),
                )
        return records

    @staticmethod
    def _parse_catalog(
        source_url: str, status: int, body: str, unofficial: bool
    ) -> List[ReleaseRecord]:
        """Decode an index body into records."""
        try:
            data = json.loads(body)
        except ValueError as exc:
            raise CatalogFetchError(source_url, status, f"Malformed JSON: {exc}") from exc

        if not isinstance(data, list):
            raise CatalogFetchError(
                source_url, status, f"Expected a JSON array, got {type(data).__name__}"
            )

        try:
            return [ReleaseRecord.from_index_entry(entry, unofficial) for entry in data]
        except ValueError as exc:
            raise CatalogFetchError(source_url, status, f"Malformed release entry: {exc}") from exc

    async def load_all_catalogs(self) -> Tuple[List[ReleaseRecord], List[ReleaseRecord]]:
        """Fetch both indexes concurrently.

        Returns:
            ``(official, unofficial)`` record lists.

        Raises:
            CatalogFetchError: either fetch failed; the other is cancelled.
        """
        tasks = [
            asyncio.ensure_future(self.load_catalog(self.official_url, False)),
            asyncio.ensure_future(self.load_catalog(self.unofficial_url, True)),
        ]
        try:
            official, unofficial = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        return official, unofficial

    async def __aenter__(self) -> "CatalogLoader":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.stop()
