"""
Build option models.

AppArgsSnapshot declares the options that travel inside the packaged app as
``nativefier.json``; BuildConfiguration extends it with the options that only
matter while building. Both serialize under the camelCase keys the packaged
Electron app reads.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SNAPSHOT_FILE_NAME = "nativefier.json"


class AppArgsSnapshot(BaseModel):
    """Options persisted into the packaged app.

    The declared fields are the allow-list: nothing outside them is ever
    written to the snapshot, and readers ignore unknown keys.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    name: str | None = Field(default=None, description="Display name of the app")
    target_url: str | None = Field(default=None, description="URL the app wraps")
    counter: bool = Field(default=False, description="Show a badge counter from the page title")
    bounce: bool = Field(default=False, description="Bounce the dock icon on notifications")
    width: int = Field(default=1280, description="Initial window width")
    height: int = Field(default=800, description="Initial window height")
    min_width: int | None = Field(default=None)
    min_height: int | None = Field(default=None)
    max_width: int | None = Field(default=None)
    max_height: int | None = Field(default=None)
    x: int | None = Field(default=None, description="Initial window x position")
    y: int | None = Field(default=None, description="Initial window y position")
    show_menu_bar: bool = Field(default=False)
    fast_quit: bool = Field(default=False, description="Quit when the last window closes")
    user_agent: str | None = Field(default=None)
    nativefier_version: str | None = Field(default=None)
    ignore_certificate: bool = Field(default=False)
    disable_gpu: bool = Field(default=False)
    ignore_gpu_blacklist: bool = Field(default=False)
    enable_es3_apis: bool = Field(default=False, alias="enableEs3Apis")
    insecure: bool = Field(default=False)
    flash_plugin_dir: str | None = Field(default=None)
    disk_cache_size: int | None = Field(default=None)
    full_screen: bool = Field(default=False)
    hide_window_frame: bool = Field(default=False)
    maximize: bool = Field(default=False)
    disable_context_menu: bool = Field(default=False)
    disable_dev_tools: bool = Field(default=False)
    zoom: float = Field(default=1.0)
    internal_urls: str | None = Field(default=None, description="Regex of URLs kept in-app")
    crash_reporter: str | None = Field(default=None)
    single_instance: bool = Field(default=False)
    clear_cache: bool = Field(default=False)
    app_copyright: str | None = Field(default=None)
    app_version: str | None = Field(default=None)
    build_version: str | None = Field(default=None)
    win32metadata: dict[str, str] | None = Field(default=None, alias="win32metadata")
    version_string: dict[str, str] | None = Field(default=None)
    process_envs: dict[str, str] | None = Field(default=None)
    file_download_options: dict[str, Any] | None = Field(default=None)
    tray: bool | str = Field(default=False, description="True, False or 'start-in-tray'")
    basic_auth_username: str | None = Field(default=None)
    basic_auth_password: str | None = Field(default=None)
    always_on_top: bool = Field(default=False)
    title_bar_style: str | None = Field(default=None)
    global_shortcuts: list[dict[str, Any]] | None = Field(default=None)

    @classmethod
    def field_names(cls) -> set[str]:
        """Python names of the allow-listed fields."""
        return set(AppArgsSnapshot.model_fields)

    def to_document(self) -> dict[str, Any]:
        """Flat key/value document written into the bundle."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def load(cls, path: Path) -> AppArgsSnapshot:
        """Read a snapshot file; unknown keys are ignored, missing keys default."""
        return cls.model_validate(json.loads(path.read_text(encoding="utf-8")))


class BuildConfiguration(AppArgsSnapshot):
    """Full set of build-time options."""

    dir: Path | None = Field(default=None, description="Electron app source directory")
    out: Path = Field(default=Path("."), description="Directory the bundle is written to")
    platform: str | None = Field(default=None, description="Target platform (linux, win32, darwin, mas)")
    arch: str | None = Field(default=None, description="Target architecture (x64, ia32, arm64, armv7l)")
    icon: Path | None = Field(default=None, description="Icon file for the bundle")
    inject: list[Path] = Field(default_factory=list, description="JS/CSS files injected into pages")
    overwrite: bool = Field(default=False, description="Replace an existing bundle")
    electron_version: str | None = Field(default=None)
    asar: bool = Field(default=False, description="Package the app source into an asar archive")
