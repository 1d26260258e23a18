"""Core infrastructure components for nativefier."""

from .config import Config, get_config
from .exceptions import (
    IconError,
    InferenceError,
    NativefierError,
    PackagingEngineError,
    PipelineError,
    StagingError,
    UnexpectedResultShape,
)
from .logging import get_logger, setup_logging
from .types import ServiceResult, StageResult, StageStatus

__all__ = [
    "Config",
    "get_config",
    "IconError",
    "InferenceError",
    "NativefierError",
    "PackagingEngineError",
    "PipelineError",
    "StagingError",
    "UnexpectedResultShape",
    "get_logger",
    "setup_logging",
    "ServiceResult",
    "StageResult",
    "StageStatus",
]
