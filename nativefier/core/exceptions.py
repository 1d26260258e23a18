"""
Custom exception hierarchy for nativefier.

All exceptions inherit from NativefierError so the packaging pipeline can
tag and report failures uniformly. Each exception carries context for
debugging and logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class NativefierError(Exception):
    """Base exception for all nativefier errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class InferenceError(NativefierError):
    """Raised when the user configuration is invalid or contradictory."""

    field_name: str | None = None

    def __str__(self) -> str:
        base = super().__str__()
        if self.field_name:
            return f"Invalid option '{self.field_name}': {base}"
        return f"Invalid options: {base}"


@dataclass
class StagingError(NativefierError):
    """Raised when the app cannot be staged into the scratch directory."""

    source: str = ""
    destination: str = ""


@dataclass
class IconError(NativefierError):
    """Raised when an icon cannot be built or copied into the bundle.

    Never fatal to a packaging run: the bundle is still produced, only
    without the custom icon.
    """

    icon_path: str = ""


@dataclass
class PackagingEngineError(NativefierError):
    """Raised when the external packaging engine fails."""

    returncode: int | None = None

    def __str__(self) -> str:
        base = super().__str__()
        if self.returncode is not None:
            return f"[packager exit {self.returncode}] {base}"
        return f"[packager] {base}"


@dataclass
class UnexpectedResultShape(NativefierError):
    """Raised (and logged, never propagated) when the engine returns several paths."""

    paths: list[str] = field(default_factory=list)


@dataclass
class PipelineError(NativefierError):
    """Raised when a pipeline stage fails."""

    stage: str = ""
    run_id: str = ""

    def __str__(self) -> str:
        base = super().__str__()
        return f"Build failed at stage '{self.stage}' (run: {self.run_id}): {base}"
