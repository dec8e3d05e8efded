"""
HTTP round-trip latency measurement.

Sequential GET requests against a lightweight page, each timed until the
response headers arrive.  A successful request contributes its elapsed
time in milliseconds; failed requests are dropped from the sample set.
The reported latency is the mean of what survived.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .config import ProbeConfig
from .stats import calculate_mean
from .transport import TransportError

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------

@dataclass
class LatencyResult:
    """Aggregated latency data for one sampler run."""

    pings: List[float] = field(default_factory=list)
    attempts: int = 0
    latency_ms: float = 0.0     # mean of successful pings
    success: bool = True
    error: Optional[str] = None

    @property
    def failures(self) -> int:
        return self.attempts - len(self.pings)

    def calculate(self) -> None:
        """Derive mean latency from collected pings."""
        self.latency_ms = calculate_mean(self.pings)
        if not self.pings:
            self.success = False
            self.error = self.error or "All latency tests failed"

    def to_dict(self) -> dict:
        return {
            "pings": [round(p, 1) for p in self.pings],
            "attempts": self.attempts,
            "latency_ms": round(self.latency_ms, 1),
            "success": self.success,
        }


# ---------------------------------------------------------------------------
# Tester
# ---------------------------------------------------------------------------

class LatencyTester:
    """Measure request round-trip time with plain HTTP GETs."""

    def __init__(
        self,
        transport,  # noqa: ANN001
        config: ProbeConfig,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.transport = transport
        self.config = config
        self.clock = clock

    async def test(self) -> LatencyResult:
        result = LatencyResult()
        url = self.config.endpoints.latency_url

        for i in range(self.config.latency_sample_count):
            result.attempts += 1
            elapsed = await self._ping_once(url, i + 1, result)
            if elapsed is not None:
                result.pings.append(elapsed)

        result.calculate()
        if not result.success:
            LOGGER.info("All latency tests failed")
        return result

    # -- Internals ----------------------------------------------------------

    async def _ping_once(self, url: str, number: int, result: LatencyResult) -> Optional[float]:
        """One GET timed to the response headers; elapsed ms, or None on failure."""
        start = self.clock()
        try:
            await self.transport.ping(url, self.config.request_timeout)
        except TransportError as exc:
            LOGGER.info("Error during ping test #%d: %s", number, exc)
            result.error = str(exc)
            return None

        elapsed = (self.clock() - start) * 1000
        LOGGER.debug("Ping #%d: %.1f ms", number, elapsed)
        return elapsed


async def measure_latency(transport, config: ProbeConfig, **kwargs) -> float:  # noqa: ANN001
    """Mean round-trip time in ms, 0.0 if every sample failed."""
    result = await LatencyTester(transport, config, **kwargs).test()
    return result.latency_ms
