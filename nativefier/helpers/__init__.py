"""Host, diagnostics and progress helpers."""

from .diagnostics import BufferingSink, DiagnosticSink, LoggingSink
from .host import HostProbe
from .progress import DishonestProgress, ProgressReporter

__all__ = [
    "BufferingSink",
    "DiagnosticSink",
    "LoggingSink",
    "HostProbe",
    "DishonestProgress",
    "ProgressReporter",
]
