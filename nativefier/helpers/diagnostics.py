"""
Diagnostic sinks for packaging engine output.

The engine writes its console output to whichever sink it is handed. While a
BufferingSink is capturing, lines are queued instead of emitted; playback()
flushes the queue to the real sink once, at the end of the run.
"""

from __future__ import annotations

from typing import Protocol

from ..core.logging import get_logger

logger = get_logger(__name__)


class DiagnosticSink(Protocol):
    """Anything that accepts diagnostic lines."""

    def emit(self, line: str) -> None:
        ...


class LoggingSink:
    """Forward diagnostic lines to the structured logger."""

    def __init__(self, source: str = "packager") -> None:
        self.source = source

    def emit(self, line: str) -> None:
        logger.info(line, source=self.source)


class MemorySink:
    """Collect diagnostic lines in a list."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def emit(self, line: str) -> None:
        self.lines.append(line)


class BufferingSink:
    """Queue diagnostics while capturing and replay them later."""

    def __init__(self, target: DiagnosticSink) -> None:
        self.target = target
        self._queue: list[str] = []
        self._capturing = False
        self._played_back = False

    @property
    def capturing(self) -> bool:
        return self._capturing

    @property
    def pending(self) -> int:
        return len(self._queue)

    def override(self) -> None:
        """Start capturing."""
        self._capturing = True

    def restore(self) -> None:
        """Stop capturing; new lines go straight to the target again."""
        self._capturing = False

    def emit(self, line: str) -> None:
        if self._capturing:
            self._queue.append(line)
        else:
            self.target.emit(line)

    def playback(self) -> None:
        """Flush captured lines to the target. Only the first call flushes."""
        if self._played_back:
            return
        self._played_back = True
        self._capturing = False
        queued, self._queue = self._queue, []
        for line in queued:
            self.target.emit(line)
