"""
Configuration management for nativefier.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults for the packaging pipeline and its external tools.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()

# Electron app template shipped as package data
DEFAULT_APP_DIR = Path(__file__).resolve().parent.parent / "app"


class ToolsConfig(BaseModel):
    """External tools configuration."""

    packager_command: str = Field(
        default="npx electron-packager",
        description="Command line used to invoke electron-packager",
    )
    compat_binary: str = Field(
        default="wine",
        description="Windows compatibility layer needed to edit win32 resources elsewhere",
    )
    icon_converter: str = Field(
        default="convert", description="ImageMagick binary used to convert icon formats"
    )
    electron_version: str | None = Field(
        default=None, description="Electron version passed to the packager"
    )


class BuildDefaults(BaseModel):
    """Filesystem defaults for packaging runs."""

    app_dir: Path = Field(
        default=DEFAULT_APP_DIR, description="Electron app template copied into every bundle"
    )
    out_dir: Path = Field(default=Path("."), description="Where produced bundles are written")
    scratch_dir: Path | None = Field(
        default=None, description="Parent of per-run staging directories (system temp if unset)"
    )
    keep_staging: bool = Field(
        default=False, description="Keep the staging directory after a run for inspection"
    )


class InferenceConfig(BaseModel):
    """Option inference configuration."""

    fetch_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout when fetching the page title"
    )
    fetch_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
        ),
        description="User agent used when fetching the page title",
    )
    default_name: str = Field(default="APP", description="Name used when none can be inferred")


class Config(BaseModel):
    """Root configuration for nativefier."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    build: BuildDefaults = Field(default_factory=BuildDefaults)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        scratch = os.environ.get("NATIVEFIER_SCRATCH_DIR")
        return cls(
            log_level=os.environ.get("NATIVEFIER_LOG_LEVEL", "INFO"),  # type: ignore
            tools=ToolsConfig(
                packager_command=os.environ.get(
                    "NATIVEFIER_PACKAGER_COMMAND", "npx electron-packager"
                ),
                compat_binary=os.environ.get("NATIVEFIER_COMPAT_BINARY", "wine"),
                icon_converter=os.environ.get("NATIVEFIER_ICON_CONVERTER", "convert"),
                electron_version=os.environ.get("NATIVEFIER_ELECTRON_VERSION"),
            ),
            build=BuildDefaults(
                app_dir=Path(os.environ.get("NATIVEFIER_APP_DIR", str(DEFAULT_APP_DIR))),
                out_dir=Path(os.environ.get("NATIVEFIER_OUT_DIR", ".")),
                scratch_dir=Path(scratch) if scratch else None,
                keep_staging=os.environ.get("NATIVEFIER_KEEP_STAGING", "false").lower() == "true",
            ),
            inference=InferenceConfig(
                fetch_timeout_seconds=float(os.environ.get("NATIVEFIER_FETCH_TIMEOUT", "10")),
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
