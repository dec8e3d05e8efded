"""
HTTP transport used by every probe.

All HTTP work goes through a single ``aiohttp.ClientSession`` managed via
async-context-manager protocol (``async with HttpTransport() as http: ...``).
Probes only rely on the coroutines ``get``, ``post`` and ``ping``, so tests
can hand in any object that provides them.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from .constants import COMMON_HEADERS

LOGGER = logging.getLogger(__name__)


class TransportError(Exception):
    """Connection, timeout, or read failure while talking to an endpoint."""


class HttpTransport:
    """Async context-manager wrapping an ``aiohttp`` session.

    HTTP error statuses are not treated as failures: the response body is
    still returned so that probes measure what actually crossed the wire.
    """

    def __init__(self, headers: Optional[dict] = None) -> None:
        self._headers = dict(COMMON_HEADERS if headers is None else headers)
        self._session: Optional[aiohttp.ClientSession] = None

    # -- Context manager ----------------------------------------------------

    async def __aenter__(self) -> HttpTransport:
        self._session = aiohttp.ClientSession(headers=self._headers)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._session:
            await self._session.close()
            self._session = None

    # -- Internal helpers ---------------------------------------------------

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError(
                "HttpTransport must be used as an async context manager "
                "(async with HttpTransport() as http: ...)"
            )
        return self._session

    # -- Public methods -----------------------------------------------------

    async def get(self, url: str, timeout: float) -> bytes:
        """GET *url* and return the complete response body."""
        session = self._ensure_session()
        try:
            async with session.get(url, timeout=aiohttp.ClientTimeout(total=timeout)) as resp:
                body = await resp.read()
        except asyncio.TimeoutError as exc:
            raise TransportError(f"GET {url} timed out after {timeout:g}s") from exc
        except (aiohttp.ClientError, OSError) as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc

        if resp.status >= 400:
            LOGGER.debug("GET %s returned HTTP %d", url, resp.status)
        return body

    async def ping(self, url: str, timeout: float) -> int:
        """GET *url* and return the status as soon as the headers arrive.

        The body is never read; leaving the response context drops the
        connection, so round-trip samples exclude body transfer time.
        """
        session = self._ensure_session()
        try:
            async with session.get(url, timeout=aiohttp.ClientTimeout(total=timeout)) as resp:
                status = resp.status
        except asyncio.TimeoutError as exc:
            raise TransportError(f"GET {url} timed out after {timeout:g}s") from exc
        except (aiohttp.ClientError, OSError) as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc

        if status >= 400:
            LOGGER.debug("GET %s returned HTTP %d", url, status)
        return status

    async def post(self, url: str, body: bytes, timeout: float) -> int:
        """POST *body* to *url*, drain the response, and return the status."""
        session = self._ensure_session()
        headers = {"Content-Type": "application/octet-stream"}
        try:
            async with session.post(
                url,
                data=body,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                await resp.read()
        except asyncio.TimeoutError as exc:
            raise TransportError(f"POST {url} timed out after {timeout:g}s") from exc
        except (aiohttp.ClientError, OSError) as exc:
            raise TransportError(f"POST {url} failed: {exc}") from exc

        if resp.status >= 400:
            LOGGER.debug("POST %s returned HTTP %d", url, resp.status)
        return resp.status
