"""
Upload speed test module.
Uses a single HTTPS POST of a zero-filled body to measure upload speed.
"""
import logging
import time
from typing import Callable

from .config import ProbeConfig
from .download import TransferResult
from .transport import TransportError

LOGGER = logging.getLogger(__name__)


class UploadTester:
    """
    Upload speed tester.
    Times the full request/response round trip of one POST and credits
    the requested payload size, since only the client-side send is measured.
    """

    def __init__(self, transport, config: ProbeConfig, clock: Callable[[], float] = time.perf_counter):
        self.transport = transport
        self.config = config
        self.clock = clock

    def _payload(self) -> bytes:
        # Content is irrelevant to the server, only its length matters
        return bytes(self.config.upload_size_bytes)

    async def test(self) -> TransferResult:
        """Perform upload speed test."""
        result = TransferResult()
        data = self._payload()

        start = self.clock()
        try:
            status = await self.transport.post(
                self.config.endpoints.upload_url,
                data,
                self.config.request_timeout,
            )
        except TransportError as e:
            LOGGER.info("Error during upload test: %s", e)
            result.success = False
            result.error = str(e)
            return result

        result.duration_ms = (self.clock() - start) * 1000
        result.bytes_total = len(data)
        result.calculate()

        LOGGER.debug("Uploaded %d bytes in %.1f ms (HTTP %s)", result.bytes_total, result.duration_ms, status)
        return result


async def measure_upload(transport, config: ProbeConfig, **kwargs) -> float:
    """Upload throughput in Mbps, 0.0 if the transfer failed."""
    result = await UploadTester(transport, config, **kwargs).test()
    return result.speed_mbps
