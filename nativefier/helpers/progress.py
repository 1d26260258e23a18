"""
Progress reporting for packaging runs.

Stage durations are unknown up front, so the bar does not track real work:
each tick jumps half a stage ahead of the stages actually finished. The
value only ever grows.
"""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn


class ProgressReporter(Protocol):
    """One tick per pipeline stage, in stage order."""

    def tick(self, label: str) -> None:
        ...

    def done(self) -> None:
        ...


class DishonestProgress:
    """Smooth, monotonic progress bar over a fixed number of stages."""

    def __init__(self, total: int, console: Console | None = None) -> None:
        self.total = total
        self.ticks = 0
        self.labels: list[str] = []
        self._progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            console=console or Console(stderr=True),
            transient=True,
        )
        self._task: TaskID | None = None

    @property
    def completed(self) -> float:
        """Fabricated completion, in stages."""
        if self.ticks == 0:
            return 0.0
        return min(float(self.total), self.ticks - 0.5)

    def tick(self, label: str) -> None:
        if self._task is None:
            self._progress.start()
            self._task = self._progress.add_task(label, total=self.total)
        self.ticks += 1
        self.labels.append(label)
        self._progress.update(self._task, description=label, completed=self.completed)

    def done(self) -> None:
        if self._task is None:
            return
        self._progress.update(self._task, completed=self.total)
        self._progress.stop()
        self._task = None
