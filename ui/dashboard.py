"""
Rich-based terminal feedback while a measurement runs.

Everything here writes to stderr so that stdout carries only the
formatted result.
"""
from __future__ import annotations

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

console = Console(stderr=True)


class ProgressDisplay:
    """A ``rich`` spinner whose label follows the current probe."""

    def __init__(self) -> None:
        self.progress = Progress(
            SpinnerColumn(style="green"),
            TextColumn("{task.description}"),
            console=console,
            transient=True,
        )
        self._task_id = None

    def start(self, description: str = "") -> None:
        self.progress.start()
        self._task_id = self.progress.add_task(description, total=None)

    def update(self, description: str) -> None:
        if self._task_id is None:
            return
        self.progress.update(self._task_id, description=description)

    def stop(self) -> None:
        self.progress.stop()
        self._task_id = None
