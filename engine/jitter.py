"""
Jitter measurement.

Issues a fixed number of GETs against a diagnostic endpoint, pausing
between samples, and reports the mean absolute difference between
consecutive round-trip times.  A failed sample is skipped and logged the
same way the latency sampler does it; the remaining samples keep their
order.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

from .config import ProbeConfig
from .stats import calculate_jitter
from .transport import TransportError

LOGGER = logging.getLogger(__name__)


@dataclass
class JitterResult:
    """Round-trip samples and the jitter derived from them."""

    samples: List[float] = field(default_factory=list)
    attempts: int = 0
    jitter_ms: float = 0.0
    success: bool = True
    error: Optional[str] = None

    def calculate(self) -> None:
        # Fewer than two samples have no consecutive pair to compare.
        self.jitter_ms = calculate_jitter(self.samples)
        if not self.samples:
            self.success = False
            self.error = self.error or "All jitter tests failed"

    def to_dict(self) -> dict:
        return {
            "samples": [round(s, 3) for s in self.samples],
            "attempts": self.attempts,
            "jitter_ms": round(self.jitter_ms, 3),
            "success": self.success,
        }


class JitterTester:
    """Sequential round-trip sampler with a fixed inter-sample delay."""

    def __init__(
        self,
        transport,  # noqa: ANN001
        config: ProbeConfig,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.transport = transport
        self.config = config
        self.clock = clock
        self.sleep = sleep

    async def test(self) -> JitterResult:
        result = JitterResult()
        url = self.config.endpoints.jitter_url
        delay = self.config.jitter_delay_ms / 1000

        for i in range(self.config.jitter_sample_count):
            if i > 0 and delay > 0:
                await self.sleep(delay)

            result.attempts += 1
            start = self.clock()
            try:
                await self.transport.ping(url, self.config.request_timeout)
            except TransportError as exc:
                LOGGER.info("Error during jitter sample #%d: %s", i + 1, exc)
                result.error = str(exc)
                continue

            result.samples.append((self.clock() - start) * 1000)

        result.calculate()
        if not result.success:
            LOGGER.info("All jitter tests failed")
        else:
            LOGGER.debug("Jitter: %.2f ms over %d samples", result.jitter_ms, len(result.samples))
        return result


async def measure_jitter(transport, config: ProbeConfig, **kwargs) -> float:  # noqa: ANN001
    """Mean absolute deviation between consecutive samples in ms."""
    result = await JitterTester(transport, config, **kwargs).test()
    return result.jitter_ms
