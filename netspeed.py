#!/usr/bin/env python3
"""
netspeed -- download, upload, latency and jitter from the terminal.

Usage::

    python netspeed.py                          # plain text summary
    python netspeed.py -f json                  # JSON to stdout
    python netspeed.py -f yaml -o result.yaml   # save to file
    python netspeed.py -f csv                   # header + one row
    python netspeed.py --download-size 25 --upload-size 10
    python netspeed.py -v                       # per-probe diagnostics
    python netspeed.py --clickhouse-url http://localhost:8123
    python netspeed.py --upload-size 10 --save-config   # remember settings
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, Optional

from engine.clickhouse import ClickHouseExporter, ExportError
from engine.config import config_path, load_config, probe_config_from_settings, save_config
from engine.constants import (
    MAX_JITTER_DELAY_MS,
    MAX_SAMPLES,
    MAX_TIMEOUT,
    MAX_TRANSFER_MB,
    MIN_JITTER_DELAY_MS,
    MIN_SAMPLES,
    MIN_TIMEOUT,
    MIN_TRANSFER_MB,
    OUTPUT_FORMATS,
)
from engine.runner import MeasurementResult, MeasurementRunner
from engine.transport import HttpTransport
from ui.dashboard import ProgressDisplay, console
from ui.logging_setup import configure_logging
from ui.output import format_result, save_output

LOGGER = logging.getLogger("netspeed")


# ---------------------------------------------------------------------------
# Parameter validation
# ---------------------------------------------------------------------------

def _validate(
    download_size: int,
    upload_size: int,
    timeout: float,
    latency_samples: int,
    jitter_samples: int,
    jitter_delay: int,
    format: str = "text",
) -> None:
    """Raise ``ValueError`` if any parameter is out of range."""
    for name, value in (
        ("Download size", download_size),
        ("Upload size", upload_size),
        ("Latency samples", latency_samples),
        ("Jitter samples", jitter_samples),
        ("Jitter delay", jitter_delay),
    ):
        # Config-file values bypass argparse's type=int
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be a whole number, got {value!r}")
    if not MIN_TRANSFER_MB <= download_size <= MAX_TRANSFER_MB:
        raise ValueError(f"Download size must be between {MIN_TRANSFER_MB} and {MAX_TRANSFER_MB} MB")
    if not MIN_TRANSFER_MB <= upload_size <= MAX_TRANSFER_MB:
        raise ValueError(f"Upload size must be between {MIN_TRANSFER_MB} and {MAX_TRANSFER_MB} MB")
    if not MIN_TIMEOUT <= timeout <= MAX_TIMEOUT:
        raise ValueError(f"Timeout must be between {MIN_TIMEOUT:g} and {MAX_TIMEOUT:g} s")
    if not MIN_SAMPLES <= latency_samples <= MAX_SAMPLES:
        raise ValueError(f"Latency samples must be between {MIN_SAMPLES} and {MAX_SAMPLES}")
    if not MIN_SAMPLES <= jitter_samples <= MAX_SAMPLES:
        raise ValueError(f"Jitter samples must be between {MIN_SAMPLES} and {MAX_SAMPLES}")
    if not MIN_JITTER_DELAY_MS <= jitter_delay <= MAX_JITTER_DELAY_MS:
        raise ValueError(f"Jitter delay must be between {MIN_JITTER_DELAY_MS} and {MAX_JITTER_DELAY_MS} ms")
    if format not in OUTPUT_FORMATS:
        raise ValueError(f"Format must be one of: {', '.join(OUTPUT_FORMATS)}")


_PROBE_KEYS = (
    "download_size",
    "upload_size",
    "timeout",
    "latency_samples",
    "jitter_samples",
    "jitter_delay",
    "format",
)

_SETTING_KEYS = _PROBE_KEYS + (
    "clickhouse_url",
    "clickhouse_db",
    "clickhouse_user",
    "clickhouse_password",
)


def _resolve_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Config-file values overridden by any flag given on the command line."""
    settings = load_config()
    for key in _SETTING_KEYS:
        value = getattr(args, key, None)
        if value is not None:
            settings[key] = value
    return settings


# ---------------------------------------------------------------------------
# Core test runner
# ---------------------------------------------------------------------------

async def run_speedtest(
    settings: Dict[str, Any],
    *,
    output_file: Optional[str] = None,
    transport=None,  # noqa: ANN001
) -> MeasurementResult:
    """Measure, export if configured, and emit the formatted result."""
    fmt = settings["format"]
    config = probe_config_from_settings(settings)

    if fmt == "text" and not output_file:
        print("Starting speed test...")

    progress = ProgressDisplay() if console.is_terminal else None

    async def _measure(http) -> MeasurementResult:  # noqa: ANN001
        runner = MeasurementRunner(http, config)
        if progress:
            progress.start("Starting...")
            runner.on_stage = progress.update
        try:
            return await runner.run()
        finally:
            if progress:
                progress.stop()

    if transport is None:
        async with HttpTransport() as http:
            result = await _measure(http)
    else:
        result = await _measure(transport)

    # -- Export ---------------------------------------------------------------
    if settings.get("clickhouse_url"):
        exporter = ClickHouseExporter(
            settings["clickhouse_url"],
            database=settings.get("clickhouse_db") or "default",
            user=settings.get("clickhouse_user") or None,
            password=settings.get("clickhouse_password") or None,
        )
        try:
            await exporter.export(result)
        except ExportError as exc:
            LOGGER.error("Failed to export to Clickhouse: %s", exc)

    # -- Output ---------------------------------------------------------------
    output = format_result(result, fmt)
    if output_file:
        save_output(output, output_file)
    else:
        print(output, end="" if output.endswith("\n") else "\n")

    return result


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="netspeed -- download, upload, latency and jitter measurement",
    )
    # Output
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed information")
    parser.add_argument("--format", "-f", choices=OUTPUT_FORMATS, default=None, help="Output format (default: text)")
    parser.add_argument("--output", "-o", type=str, metavar="FILE", help="Write results to FILE instead of stdout")

    # Test parameters
    parser.add_argument("--download-size", type=int, default=None, metavar="MB", help="Download size in MB (default: 100)")
    parser.add_argument("--upload-size", type=int, default=None, metavar="MB", help="Upload size in MB (default: 20)")
    parser.add_argument("--timeout", type=float, default=None, metavar="SECS", help="Per-request timeout in seconds (default: 30)")
    parser.add_argument("--latency-samples", type=int, default=None, metavar="N", help="Number of latency samples (default: 3)")
    parser.add_argument("--jitter-samples", type=int, default=None, metavar="N", help="Number of jitter samples (default: 10)")
    parser.add_argument("--jitter-delay", type=int, default=None, metavar="MS", help="Delay between jitter samples in ms (default: 100)")

    # Export
    parser.add_argument("--clickhouse-url", type=str, default=None, metavar="URL", help="ClickHouse HTTP URL for result export")
    parser.add_argument("--clickhouse-db", type=str, default=None, metavar="NAME", help="ClickHouse database name (default: default)")
    parser.add_argument("--clickhouse-user", type=str, default=None, metavar="USER", help="ClickHouse user")
    parser.add_argument("--clickhouse-password", type=str, default=None, metavar="PASSWORD", help="ClickHouse password")

    # Config file
    parser.add_argument("--save-config", action="store_true", help="Store the effective settings as defaults and exit")
    parser.add_argument("--show-config", action="store_true", help="Print the effective settings and exit")
    return parser


def main(argv: Optional[list] = None) -> None:
    args = _build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    settings = _resolve_settings(args)

    # Validate
    try:
        _validate(**{key: settings[key] for key in _PROBE_KEYS})
    except (ValueError, TypeError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    if args.show_config:
        console.print(f"[bold]Config file:[/bold] {config_path()}")
        for key in _SETTING_KEYS:
            value = "****" if key == "clickhouse_password" and settings[key] else settings[key]
            console.print(f"  {key:<20} {value}")
        return

    if args.save_config:
        path = save_config(settings)
        console.print(f"[green]Settings saved to:[/green] {path}")
        return

    try:
        asyncio.run(run_speedtest(settings, output_file=args.output))
    except KeyboardInterrupt:
        console.print("\n[yellow]Test cancelled by user[/yellow]")
        sys.exit(1)
    except (IOError, OSError) as exc:
        console.print(f"\n[red]Error: {exc}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
