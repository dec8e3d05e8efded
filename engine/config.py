"""
Probe configuration and user configuration file support.

``ProbeConfig`` is the immutable value handed to the measurement runner.
User defaults are read from ``~/.netspeed/config.json`` and layered under
the command line flags.

Supported keys::

    download_size = 100        # MB requested from the download endpoint
    upload_size = 20           # MB posted to the upload endpoint
    timeout = 30.0             # per-request timeout in seconds
    latency_samples = 3
    jitter_samples = 10
    jitter_delay = 100         # ms between jitter samples
    format = "text"            # text, json, yaml or csv
    clickhouse_url = ""        # export target, empty disables export
    clickhouse_db = "default"
    clickhouse_user = ""
    clickhouse_password = ""
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

from .constants import (
    BYTES_PER_MB,
    DEFAULT_DOWNLOAD_MB,
    DEFAULT_FORMAT,
    DEFAULT_JITTER_DELAY_MS,
    DEFAULT_JITTER_SAMPLES,
    DEFAULT_LATENCY_SAMPLES,
    DEFAULT_TIMEOUT,
    DEFAULT_UPLOAD_MB,
    DOWNLOAD_URL,
    JITTER_URL,
    LATENCY_URL,
    SERVER_ID,
    UPLOAD_URL,
)

_CONFIG_DIR = os.path.join(Path.home(), ".netspeed")
_CONFIG_FILE = "config.json"


def _config_path() -> str:
    return os.path.join(_CONFIG_DIR, _CONFIG_FILE)


# ---------------------------------------------------------------------------
# Immutable run configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Endpoints:
    """Remote endpoints used by the four probes."""

    download_url: str = DOWNLOAD_URL
    upload_url: str = UPLOAD_URL
    latency_url: str = LATENCY_URL
    jitter_url: str = JITTER_URL
    server_id: str = SERVER_ID

    def download_for(self, size_bytes: int) -> str:
        """Download URL asking the server to stream back *size_bytes* bytes."""
        return f"{self.download_url}?bytes={size_bytes}"


@dataclass(frozen=True)
class ProbeConfig:
    """Parameters for one measurement run.  Read-only while the run is active."""

    download_size_bytes: int = DEFAULT_DOWNLOAD_MB * BYTES_PER_MB
    upload_size_bytes: int = DEFAULT_UPLOAD_MB * BYTES_PER_MB
    request_timeout: float = DEFAULT_TIMEOUT
    latency_sample_count: int = DEFAULT_LATENCY_SAMPLES
    jitter_sample_count: int = DEFAULT_JITTER_SAMPLES
    jitter_delay_ms: int = DEFAULT_JITTER_DELAY_MS
    endpoints: Endpoints = field(default_factory=Endpoints)


def probe_config_from_settings(settings: Mapping[str, Any]) -> ProbeConfig:
    """Build a ``ProbeConfig`` from MB-denominated user settings."""
    return ProbeConfig(
        download_size_bytes=int(settings["download_size"]) * BYTES_PER_MB,
        upload_size_bytes=int(settings["upload_size"]) * BYTES_PER_MB,
        request_timeout=float(settings["timeout"]),
        latency_sample_count=int(settings["latency_samples"]),
        jitter_sample_count=int(settings["jitter_samples"]),
        jitter_delay_ms=int(settings["jitter_delay"]),
    )


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULTS: Dict[str, Any] = {
    "download_size": DEFAULT_DOWNLOAD_MB,
    "upload_size": DEFAULT_UPLOAD_MB,
    "timeout": DEFAULT_TIMEOUT,
    "latency_samples": DEFAULT_LATENCY_SAMPLES,
    "jitter_samples": DEFAULT_JITTER_SAMPLES,
    "jitter_delay": DEFAULT_JITTER_DELAY_MS,
    "format": DEFAULT_FORMAT,
    "clickhouse_url": "",
    "clickhouse_db": "default",
    "clickhouse_user": "",
    "clickhouse_password": "",
}


# ---------------------------------------------------------------------------
# Read / Write
# ---------------------------------------------------------------------------

def load_config() -> Dict[str, Any]:
    """Load config from disk, returning defaults for missing keys."""
    path = _config_path()
    config = dict(DEFAULTS)

    if not os.path.isfile(path):
        return config

    try:
        with open(path, encoding="utf-8") as fh:
            user = json.load(fh)
        if isinstance(user, dict):
            config.update(user)
    except (json.JSONDecodeError, IOError):
        pass  # corrupt file; use defaults

    return config


def save_config(config: Dict[str, Any]) -> str:
    """Write *config* to disk.  Returns the file path."""
    path = _config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as fh:
        json.dump(config, fh, indent=2, ensure_ascii=False)

    return path


def config_path() -> str:
    """Return the config file path (for display purposes)."""
    return _config_path()
