"""
Download speed test module.

One timed GET against a size-parameterised endpoint.  The clock starts
before the request goes out and stops once the whole body has been read;
throughput is derived from the bytes actually received, so a truncated
transfer reports a lower figure instead of failing.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .config import ProbeConfig
from .stats import throughput_mbps
from .transport import TransportError

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass
class TransferResult:
    """Outcome of one timed transfer (download or upload)."""

    bytes_total: int = 0
    duration_ms: float = 0.0
    speed_mbps: float = 0.0
    success: bool = True
    error: Optional[str] = None

    def calculate(self) -> None:
        """Derive speed from total bytes and wall-clock duration."""
        self.speed_mbps = throughput_mbps(self.bytes_total, self.duration_ms / 1000)

    def to_dict(self) -> dict:
        return {
            "bytes_total": self.bytes_total,
            "duration_ms": round(self.duration_ms, 2),
            "speed_mbps": round(self.speed_mbps, 2),
            "success": self.success,
            "error": self.error,
        }


# ---------------------------------------------------------------------------
# Tester
# ---------------------------------------------------------------------------

class DownloadTester:
    """Single-request download throughput probe."""

    def __init__(
        self,
        transport,  # noqa: ANN001 (anything with async get/post)
        config: ProbeConfig,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.transport = transport
        self.config = config
        self.clock = clock

    async def test(self) -> TransferResult:
        result = TransferResult()
        url = self.config.endpoints.download_for(self.config.download_size_bytes)

        start = self.clock()
        try:
            body = await self.transport.get(url, self.config.request_timeout)
        except TransportError as exc:
            LOGGER.info("Error during download test: %s", exc)
            result.success = False
            result.error = str(exc)
            return result

        result.duration_ms = (self.clock() - start) * 1000
        result.bytes_total = len(body)
        result.calculate()

        LOGGER.debug(
            "Downloaded %d bytes in %.1f ms", result.bytes_total, result.duration_ms
        )
        return result


async def measure_download(transport, config: ProbeConfig, **kwargs) -> float:  # noqa: ANN001
    """Download throughput in Mbps, 0.0 if the transfer failed."""
    result = await DownloadTester(transport, config, **kwargs).test()
    return result.speed_mbps
