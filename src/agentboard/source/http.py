"""
Network-backed snapshot source.

Fetches a Snapshot JSON document from a backend over HTTP. Every failure
mode (connection error, timeout, non-200 status, malformed body) surfaces
as SourceUnavailable so the scheduler can skip the tick.
"""

from __future__ import annotations

import asyncio
from urllib.parse import urlsplit

import aiohttp
from pydantic import ValidationError

from agentboard.contracts.models import Snapshot
from agentboard.errors import SourceUnavailable


class HttpSnapshotSource:
    """
    Async HTTP client returning Snapshots.

    The session is created lazily on first fetch and reused.
    """

    def __init__(self, url: str, *, timeout_s: float = 5.0) -> None:
        """
        Args:
            url: Full URL of the snapshot endpoint.
            timeout_s: Total request timeout in seconds.
        """
        if timeout_s <= 0:
            raise ValueError(f"timeout_s must be > 0, got {timeout_s}")
        self._url = url
        self._timeout_s = timeout_s
        self._session: aiohttp.ClientSession | None = None

    @property
    def engine(self) -> None:
        return None

    @property
    def endpoint(self) -> str:
        """URL path only, safe to log."""
        return urlsplit(self._url).path or "/"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def fetch_snapshot(self) -> Snapshot:
        """
        Fetch and validate one snapshot.

        Raises:
            SourceUnavailable: On network errors, timeouts, non-200
                responses or bodies that do not validate as a Snapshot.
        """
        session = await self._get_session()
        try:
            async with session.get(self._url) as resp:
                if resp.status != 200:
                    raise SourceUnavailable(
                        f"Snapshot endpoint {self.endpoint} returned HTTP {resp.status}",
                        status=resp.status,
                    )
                body = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SourceUnavailable(
                f"Snapshot endpoint {self.endpoint} unreachable: {type(e).__name__}"
            ) from e

        try:
            return Snapshot.from_json(body)
        except (ValidationError, ValueError) as e:
            raise SourceUnavailable(f"Malformed snapshot from {self.endpoint}") from e
