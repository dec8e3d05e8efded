"""Tests for engine.latency -- HTTP round-trip sampling."""

import unittest

from engine.latency import LatencyResult, LatencyTester, measure_latency

from fakes import PING, FakeClock, ScriptedTransport, failing, make_config, ms


class TestLatencyResult(unittest.TestCase):
    def test_calculate_mean(self):
        r = LatencyResult(pings=[10.0, 20.0, 30.0], attempts=3)
        r.calculate()
        self.assertAlmostEqual(r.latency_ms, 20.0)
        self.assertTrue(r.success)
        self.assertEqual(r.failures, 0)

    def test_all_lost(self):
        r = LatencyResult(pings=[], attempts=3)
        r.calculate()
        self.assertEqual(r.latency_ms, 0.0)
        self.assertFalse(r.success)
        self.assertEqual(r.failures, 3)
        self.assertEqual(r.error, "All latency tests failed")

    def test_to_dict(self):
        r = LatencyResult(pings=[12.34, 15.0], attempts=3)
        r.calculate()
        d = r.to_dict()
        self.assertEqual(d["pings"], [12.3, 15.0])
        self.assertEqual(d["attempts"], 3)


class TestLatencyTester(unittest.IsolatedAsyncioTestCase):
    async def test_mean_of_samples(self):
        clock = FakeClock()
        transport = ScriptedTransport(clock, gets={PING: ms(10, 20, 30)})

        result = await LatencyTester(transport, make_config(), clock=clock).test()

        self.assertEqual(len(result.pings), 3)
        self.assertAlmostEqual(result.latency_ms, 20.0, places=6)

    async def test_sample_count_respected(self):
        clock = FakeClock()
        transport = ScriptedTransport(clock, gets={PING: ms(*[5] * 7)})
        config = make_config(latency_sample_count=7)

        result = await LatencyTester(transport, config, clock=clock).test()

        self.assertEqual(result.attempts, 7)
        self.assertEqual(len(transport.calls), 7)
        self.assertTrue(all(call[1] == PING for call in transport.calls))

    async def test_partial_failure_uses_survivors(self):
        clock = FakeClock()
        steps = [(0.5, failing()), (0.042, b"ok"), (0.5, failing())]
        transport = ScriptedTransport(clock, gets={PING: steps})

        with self.assertLogs("engine.latency", level="INFO") as logs:
            result = await LatencyTester(transport, make_config(), clock=clock).test()

        self.assertTrue(result.success)
        self.assertEqual(result.attempts, 3)
        self.assertEqual(result.failures, 2)
        self.assertAlmostEqual(result.latency_ms, 42.0, places=6)
        self.assertTrue(any("ping test #1" in line for line in logs.output))
        self.assertTrue(any("ping test #3" in line for line in logs.output))

    async def test_all_failed_returns_zero(self):
        clock = FakeClock()
        transport = ScriptedTransport(clock, gets={PING: [(0.1, failing())] * 3})

        with self.assertLogs("engine.latency", level="INFO") as logs:
            latency = await measure_latency(transport, make_config(), clock=clock)

        self.assertEqual(latency, 0.0)
        self.assertIn("All latency tests failed", logs.output[-1])

    async def test_failed_requests_not_retried(self):
        clock = FakeClock()
        transport = ScriptedTransport(clock, gets={PING: [(0.1, failing())] * 3 + ms(10)})

        await LatencyTester(transport, make_config(), clock=clock).test()

        self.assertEqual(len(transport.calls), 3)


if __name__ == "__main__":
    unittest.main()
