"""
Measurement orchestration.

Runs the four probes strictly one after another -- download, upload,
latency, jitter -- so that no two transfers ever compete for the link,
then packages their scalars into a ``MeasurementResult``.  Every probe
degrades to 0.0 on failure, so ``run`` always returns a complete record.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from .config import ProbeConfig
from .download import DownloadTester
from .jitter import JitterTester
from .latency import LatencyTester
from .stats import format_latency, format_speed
from .upload import UploadTester

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MeasurementResult:
    """Final, immutable record of one measurement run."""

    timestamp: datetime
    download_speed_mbps: float
    upload_speed_mbps: float
    ping_ms: float
    jitter_ms: float
    server_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "download_speed_mbps": self.download_speed_mbps,
            "upload_speed_mbps": self.upload_speed_mbps,
            "ping_ms": self.ping_ms,
            "jitter_ms": self.jitter_ms,
            "server_id": self.server_id,
        }


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

class MeasurementRunner:
    """Sequences the probes against one transport and one configuration."""

    def __init__(
        self,
        transport,  # noqa: ANN001
        config: Optional[ProbeConfig] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.transport = transport
        self.config = config or ProbeConfig()
        self.clock = clock
        self.sleep = sleep
        self.on_stage: Optional[Callable[[str], None]] = None

    def _stage(self, message: str) -> None:
        if self.on_stage:
            self.on_stage(message)

    async def run(self) -> MeasurementResult:
        cfg = self.config

        self._stage("Testing download speed...")
        download = await DownloadTester(self.transport, cfg, clock=self.clock).test()
        LOGGER.info("Download: %s", format_speed(download.speed_mbps))
        LOGGER.debug("Download details: %s", download.to_dict())

        self._stage("Testing upload speed...")
        upload = await UploadTester(self.transport, cfg, clock=self.clock).test()
        LOGGER.info("Upload: %s", format_speed(upload.speed_mbps))
        LOGGER.debug("Upload details: %s", upload.to_dict())

        self._stage("Testing latency...")
        latency = await LatencyTester(self.transport, cfg, clock=self.clock).test()
        LOGGER.info("Ping: %s", format_latency(latency.latency_ms))
        LOGGER.debug("Latency details: %s", latency.to_dict())

        self._stage("Testing jitter...")
        jitter = await JitterTester(
            self.transport, cfg, clock=self.clock, sleep=self.sleep
        ).test()
        LOGGER.info("Jitter: %.2f ms", jitter.jitter_ms)
        LOGGER.debug("Jitter details: %s", jitter.to_dict())

        return MeasurementResult(
            timestamp=datetime.now(timezone.utc),
            download_speed_mbps=download.speed_mbps,
            upload_speed_mbps=upload.speed_mbps,
            ping_ms=latency.latency_ms,
            jitter_ms=jitter.jitter_ms,
            server_id=cfg.endpoints.server_id,
        )


async def run_measurement(
    transport,  # noqa: ANN001
    config: Optional[ProbeConfig] = None,
    **kwargs,
) -> MeasurementResult:
    """Convenience wrapper: one full run with default hooks."""
    return await MeasurementRunner(transport, config, **kwargs).run()
