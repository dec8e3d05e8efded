"""Deterministic stand-ins for the HTTP transport, the clock, and sleep."""

from typing import Dict, List, Tuple

from engine.config import Endpoints, ProbeConfig
from engine.transport import TransportError

TEST_ENDPOINTS = Endpoints(
    download_url="http://probe.test/down",
    upload_url="http://probe.test/up",
    latency_url="http://probe.test/",
    jitter_url="http://probe.test/trace",
    server_id="test-server",
)

DOWN = TEST_ENDPOINTS.download_url
UP = TEST_ENDPOINTS.upload_url
PING = TEST_ENDPOINTS.latency_url
TRACE = TEST_ENDPOINTS.jitter_url


def make_config(**overrides) -> ProbeConfig:
    values = dict(
        download_size_bytes=1_000,
        upload_size_bytes=1_000,
        request_timeout=5.0,
        latency_sample_count=3,
        jitter_sample_count=3,
        jitter_delay_ms=100,
        endpoints=TEST_ENDPOINTS,
    )
    values.update(overrides)
    return ProbeConfig(**values)


def ms(*values: float) -> List[Tuple[float, bytes]]:
    """GET steps that take the given number of milliseconds each."""
    return [(v / 1000, b"ok") for v in values]


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSleep:
    """Records requested delays without waiting."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class ScriptedTransport:
    """
    Replays canned responses per URL (query string ignored).

    A GET step is ``(seconds, body)``, a POST step ``(seconds, status)``.
    ``ping`` consumes GET steps too and ignores the body;
    either payload may be an exception instance, which is raised after the
    clock has advanced.  Every call is recorded in ``calls``.
    """

    def __init__(
        self,
        clock: FakeClock,
        gets: Dict[str, list] = None,
        posts: Dict[str, list] = None,
    ) -> None:
        self.clock = clock
        self.gets = {k: list(v) for k, v in (gets or {}).items()}
        self.posts = {k: list(v) for k, v in (posts or {}).items()}
        self.calls: List[tuple] = []

    def _next(self, table: Dict[str, list], url: str):
        key = url.split("?")[0]
        steps = table.get(key)
        if not steps:
            raise AssertionError(f"unexpected request to {url}")
        seconds, payload = steps.pop(0)
        self.clock.advance(seconds)
        if isinstance(payload, Exception):
            raise payload
        return payload

    async def get(self, url: str, timeout: float) -> bytes:
        self.calls.append(("GET", url, timeout))
        return self._next(self.gets, url)

    async def ping(self, url: str, timeout: float) -> int:
        self.calls.append(("GET", url, timeout))
        self._next(self.gets, url)
        return 200

    async def post(self, url: str, body: bytes, timeout: float) -> int:
        self.calls.append(("POST", url, len(body), timeout))
        return self._next(self.posts, url)


def failing(message: str = "connection refused") -> TransportError:
    return TransportError(message)
