"""Measurement engine -- transport, probes, statistics, and result export."""

from .clickhouse import ClickHouseExporter, ExportError
from .config import Endpoints, ProbeConfig, probe_config_from_settings
from .download import DownloadTester, TransferResult, measure_download
from .jitter import JitterResult, JitterTester, measure_jitter
from .latency import LatencyResult, LatencyTester, measure_latency
from .runner import MeasurementResult, MeasurementRunner, run_measurement
from .stats import (
    calculate_jitter,
    calculate_mean,
    format_latency,
    format_speed,
    throughput_mbps,
)
from .transport import HttpTransport, TransportError
from .upload import UploadTester, measure_upload

__all__ = [
    "ClickHouseExporter",
    "DownloadTester",
    "Endpoints",
    "ExportError",
    "HttpTransport",
    "JitterResult",
    "JitterTester",
    "LatencyResult",
    "LatencyTester",
    "MeasurementResult",
    "MeasurementRunner",
    "ProbeConfig",
    "TransferResult",
    "TransportError",
    "UploadTester",
    "calculate_jitter",
    "calculate_mean",
    "format_latency",
    "format_speed",
    "measure_download",
    "measure_jitter",
    "measure_latency",
    "measure_upload",
    "probe_config_from_settings",
    "run_measurement",
    "throughput_mbps",
]
