"""
ClickHouse result export.

Talks to the ClickHouse HTTP interface with ``aiohttp``: the table is
created on first use (``CREATE TABLE IF NOT EXISTS``) and each result is
inserted as one ``JSONEachRow`` record, so no values are spliced into SQL.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Dict, Optional

import aiohttp

from .runner import MeasurementResult

LOGGER = logging.getLogger(__name__)

TABLE_NAME = "internet_speed"

CREATE_TABLE_SQL = f"""CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    id UUID DEFAULT generateUUIDv4(),
    timestamp DateTime DEFAULT now(),
    download_speed_mbps Float32,
    upload_speed_mbps Float32,
    ping_ms Float32,
    server_id String,
    jitter_ms Float32
) ENGINE = MergeTree()
PARTITION BY toYYYYMM(timestamp)
ORDER BY (timestamp, id)
SETTINGS index_granularity = 8192"""

INSERT_SQL = (
    f"INSERT INTO {TABLE_NAME} "
    "(timestamp, download_speed_mbps, upload_speed_mbps, ping_ms, server_id, jitter_ms) "
    "FORMAT JSONEachRow"
)

_EXPORT_TIMEOUT = 30.0


class ExportError(Exception):
    """The result could not be written to ClickHouse."""


def result_row(result: MeasurementResult) -> Dict[str, object]:
    """Map a result onto the table columns (DateTime wants second precision)."""
    return {
        "timestamp": result.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
        "download_speed_mbps": result.download_speed_mbps,
        "upload_speed_mbps": result.upload_speed_mbps,
        "ping_ms": result.ping_ms,
        "server_id": result.server_id,
        "jitter_ms": result.jitter_ms,
    }


class ClickHouseExporter:
    """Writes measurement results to a ClickHouse server over HTTP."""

    def __init__(
        self,
        url: str,
        database: str = "default",
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = _EXPORT_TIMEOUT,
    ) -> None:
        self.url = url
        self.database = database
        self.user = user
        self.password = password
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {}
        if self.user:
            headers["X-ClickHouse-User"] = self.user
        if self.password:
            headers["X-ClickHouse-Key"] = self.password
        return headers

    async def _execute(
        self,
        session: aiohttp.ClientSession,
        body: str,
        query: Optional[str] = None,
    ) -> None:
        params = {"database": self.database}
        if query:
            params["query"] = query

        try:
            async with session.post(self.url, params=params, data=body.encode("utf-8")) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise ExportError(f"ClickHouse returned HTTP {resp.status}: {text.strip()[:200]}")
        except asyncio.TimeoutError as exc:
            raise ExportError(f"ClickHouse request timed out after {self.timeout:g}s") from exc
        except aiohttp.ClientError as exc:
            raise ExportError(f"ClickHouse request failed: {exc}") from exc

    async def export(self, result: MeasurementResult) -> None:
        """Create the table if needed and insert *result*."""
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(headers=self._headers(), timeout=timeout) as session:
            await self._execute(session, CREATE_TABLE_SQL)
            await self._execute(session, json.dumps(result_row(result)), query=INSERT_SQL)

        LOGGER.info("Successfully exported results to Clickhouse")
