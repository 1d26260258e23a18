"""Data models for nativefier."""

from .options import SNAPSHOT_FILE_NAME, AppArgsSnapshot, BuildConfiguration
from .result import BuildResult

__all__ = [
    "SNAPSHOT_FILE_NAME",
    "AppArgsSnapshot",
    "BuildConfiguration",
    "BuildResult",
]
