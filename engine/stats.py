"""
Network measurement statistics.

Pure functions -- no I/O, no side effects.  Everything here is
deterministic and easy to unit-test.
"""
from __future__ import annotations

import statistics
from typing import List


# ---------------------------------------------------------------------------
# Reductions
# ---------------------------------------------------------------------------

def throughput_mbps(byte_count: int, elapsed_seconds: float) -> float:
    """Megabits per second for *byte_count* bytes moved in *elapsed_seconds*."""
    if elapsed_seconds <= 0:
        return 0.0
    return (byte_count * 8) / elapsed_seconds / 1_000_000


def calculate_mean(samples: List[float]) -> float:
    """Arithmetic mean, 0.0 for an empty list."""
    if not samples:
        return 0.0
    return statistics.mean(samples)


def calculate_jitter(samples: List[float]) -> float:
    """Mean absolute difference between consecutive samples."""
    if len(samples) < 2:
        return 0.0
    diffs = [abs(samples[i] - samples[i - 1]) for i in range(1, len(samples))]
    return statistics.mean(diffs)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_speed(speed_mbps: float) -> str:
    """Human-readable speed string."""
    if speed_mbps >= 1000:
        return f"{speed_mbps / 1000:.2f} Gbps"
    return f"{speed_mbps:.2f} Mbps"


def format_latency(latency_ms: float) -> str:
    """Human-readable latency string."""
    if latency_ms >= 1000:
        return f"{latency_ms / 1000:.2f} s"
    return f"{latency_ms:.1f} ms"
