"""Centralized logging configuration."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from .dashboard import console


def configure_logging(verbose: bool = False) -> None:
    """Route all records through a ``RichHandler`` on the stderr console.

    Probe failures are logged at INFO and per-sample timings at DEBUG, so
    they only show up with ``--verbose``.
    """
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)

    root_logger.addHandler(handler)

    # aiohttp/asyncio chatter is not useful even in verbose mode
    logging.getLogger("asyncio").setLevel(logging.WARNING)
