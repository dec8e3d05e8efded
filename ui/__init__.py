"""UI layer -- Rich progress spinner, logging, and output formatters."""

from .dashboard import ProgressDisplay, console
from .logging_setup import configure_logging
from .output import (
    format_csv_result,
    format_json_result,
    format_result,
    format_text_result,
    format_yaml_result,
    save_output,
)

__all__ = [
    "ProgressDisplay",
    "configure_logging",
    "console",
    "format_csv_result",
    "format_json_result",
    "format_result",
    "format_text_result",
    "format_yaml_result",
    "save_output",
]
