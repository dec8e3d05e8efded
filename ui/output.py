"""
Output formatting -- plain text, JSON, YAML, and CSV.
"""
from __future__ import annotations

import csv
import io
import json
import os
from typing import Callable, Dict

import yaml

from engine.runner import MeasurementResult


def format_text_result(result: MeasurementResult) -> str:
    return (
        f"Results:\n"
        f"Download: {result.download_speed_mbps:.2f} Mbps\n"
        f"Upload: {result.upload_speed_mbps:.2f} Mbps\n"
        f"Ping: {result.ping_ms:.0f}ms\n"
        f"Jitter: {result.jitter_ms:.2f}ms"
    )


def format_json_result(result: MeasurementResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def format_yaml_result(result: MeasurementResult) -> str:
    return yaml.safe_dump(result.to_dict(), sort_keys=False)


def format_csv_result(result: MeasurementResult) -> str:
    """Header plus one data row, columns in result field order."""
    row = result.to_dict()
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(row), lineterminator="\n")
    writer.writeheader()
    writer.writerow(row)
    return buffer.getvalue()


_FORMATTERS: Dict[str, Callable[[MeasurementResult], str]] = {
    "text": format_text_result,
    "json": format_json_result,
    "yaml": format_yaml_result,
    "csv": format_csv_result,
}


def format_result(result: MeasurementResult, fmt: str) -> str:
    """Render *result* in *fmt*; unknown formats fall back to plain text."""
    return _FORMATTERS.get(fmt, format_text_result)(result)


def save_output(text: str, filepath: str) -> None:
    """Write *text* to *filepath* atomically (write-tmp then rename)."""
    dir_path = os.path.dirname(filepath) or "."
    tmp = os.path.join(dir_path, f".tmp_{os.path.basename(filepath)}")

    try:
        with open(tmp, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp, filepath)
    except (IOError, OSError) as exc:
        # Clean up partial temp file
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise IOError(f"Failed to write output to {filepath}: {exc}") from exc
