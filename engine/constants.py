"""
Shared constants used across all engine modules.

Centralises endpoints, default probe parameters, and validation limits so
they live in exactly one place.
"""

# ---------------------------------------------------------------------------
# HTTP headers
# ---------------------------------------------------------------------------

USER_AGENT = "netspeed/0.1 (+https://speed.cloudflare.com)"

COMMON_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "*/*",
    # Compressed bodies would skew the received byte count.
    "Accept-Encoding": "identity",
}

# ---------------------------------------------------------------------------
# Cloudflare endpoints
# ---------------------------------------------------------------------------

DOWNLOAD_URL = "https://speed.cloudflare.com/__down"
UPLOAD_URL = "https://speed.cloudflare.com/__up"
LATENCY_URL = "https://www.cloudflare.com"
JITTER_URL = "https://1.1.1.1/cdn-cgi/trace"
SERVER_ID = "cloudflare"

# ---------------------------------------------------------------------------
# Transfer sizes (CLI and config file speak megabytes, the engine bytes)
# ---------------------------------------------------------------------------

BYTES_PER_MB = 1_000_000

DEFAULT_DOWNLOAD_MB = 100
DEFAULT_UPLOAD_MB = 20
MIN_TRANSFER_MB = 1
MAX_TRANSFER_MB = 1000

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------

DEFAULT_TIMEOUT = 30.0           # seconds, per request
MIN_TIMEOUT = 1.0
MAX_TIMEOUT = 600.0

DEFAULT_LATENCY_SAMPLES = 3
DEFAULT_JITTER_SAMPLES = 10
MIN_SAMPLES = 1
MAX_SAMPLES = 100

DEFAULT_JITTER_DELAY_MS = 100    # pause before every jitter sample but the first
MIN_JITTER_DELAY_MS = 0
MAX_JITTER_DELAY_MS = 10_000

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

OUTPUT_FORMATS = ("text", "json", "yaml", "csv")
DEFAULT_FORMAT = "text"
