"""Result of a packaging run."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from ..core.types import StageResult


class BuildResult(BaseModel):
    """Outcome of a complete packaging run.

    ``app_path`` is None both on failure and when the bundle already existed
    and overwriting was not requested; ``success`` tells the two apart.
    """

    run_id: str
    success: bool
    started_at: datetime
    completed_at: datetime

    app_path: Path | None = None
    stages: list[StageResult] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    error: str | None = None
    failed_stage: str | None = None

    @property
    def already_packaged(self) -> bool:
        """True when the engine skipped an existing bundle."""
        return self.success and self.app_path is None

    @property
    def duration_seconds(self) -> float:
        return (self.completed_at - self.started_at).total_seconds()
