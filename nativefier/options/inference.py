"""
Option inference.

Turns the options a user typed into a complete build configuration: fills
defaults from the host, normalizes the URL and platform aliases, and names
the app after the page title when no name was given.
"""

from __future__ import annotations

import html
import re
from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse

import httpx

from .. import __version__
from ..core.config import InferenceConfig
from ..core.exceptions import InferenceError
from ..core.logging import get_logger
from ..helpers.host import HostProbe
from ..models.options import BuildConfiguration

logger = get_logger(__name__)

SUPPORTED_PLATFORMS = ("linux", "win32", "darwin", "mas")
SUPPORTED_ARCHS = ("ia32", "x64", "armv7l", "arm64")

PLATFORM_ALIASES = {
    "windows": "win32",
    "win": "win32",
    "mac": "darwin",
    "macos": "darwin",
    "osx": "darwin",
}

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)


class OptionsInferenceService(Protocol):
    """Resolves raw user options into a complete configuration."""

    async def infer(self, raw: BuildConfiguration) -> BuildConfiguration:
        ...


def normalize_url(url: str | None) -> str:
    """Prepend https:// when no scheme is given and validate the result.

    Raises:
        InferenceError: If the URL is empty or has no host
    """
    if not url or not url.strip():
        raise InferenceError(message="A target URL is required", field_name="targetUrl")
    url = url.strip()
    if "://" not in url:
        url = f"https://{url}"
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https", "file") or (parsed.scheme != "file" and not parsed.netloc):
        raise InferenceError(message=f"Your url \"{url}\" is invalid", field_name="targetUrl")
    return url


async def infer_title(url: str, client: httpx.AsyncClient) -> str | None:
    """Fetch the page and return its <title>, if any."""
    response = await client.get(url, follow_redirects=True)
    response.raise_for_status()
    match = _TITLE_RE.search(response.text)
    if not match:
        return None
    title = html.unescape(" ".join(match.group(1).split()))
    return title or None


class OptionsInference:
    """Default inference service."""

    def __init__(
        self,
        app_dir: Path,
        probe: HostProbe | None = None,
        settings: InferenceConfig | None = None,
        client: httpx.AsyncClient | None = None,
        electron_version: str | None = None,
    ) -> None:
        """Initialize option inference.

        Args:
            app_dir: Electron app template used when the options name none
            probe: Host probe for platform and arch defaults
            settings: Title fetching settings
            client: HTTP client for title lookups; one is created per call if omitted
            electron_version: Default Electron version
        """
        self.app_dir = app_dir
        self.probe = probe or HostProbe()
        self.settings = settings or InferenceConfig()
        self.client = client
        self.electron_version = electron_version

    def _resolve_platform(self, platform: str | None) -> str:
        value = (platform or self.probe.platform).lower()
        value = PLATFORM_ALIASES.get(value, value)
        if value not in SUPPORTED_PLATFORMS:
            raise InferenceError(
                message=f"Unsupported platform \"{platform}\", expected one of {', '.join(SUPPORTED_PLATFORMS)}",
                field_name="platform",
            )
        return value

    def _resolve_arch(self, arch: str | None) -> str:
        value = (arch or self.probe.arch).lower()
        if value not in SUPPORTED_ARCHS:
            raise InferenceError(
                message=f"Unsupported arch \"{arch}\", expected one of {', '.join(SUPPORTED_ARCHS)}",
                field_name="arch",
            )
        return value

    async def _infer_name(self, url: str) -> str:
        try:
            if self.client is not None:
                title = await infer_title(url, self.client)
            else:
                async with httpx.AsyncClient(
                    timeout=self.settings.fetch_timeout_seconds,
                    headers={"User-Agent": self.settings.fetch_user_agent},
                ) as client:
                    title = await infer_title(url, client)
        except httpx.HTTPError as e:
            logger.warning("Unable to automatically determine app name, falling back to default", error=str(e))
            return self.settings.default_name
        if not title:
            logger.warning("Page has no title, falling back to default name", url=url)
            return self.settings.default_name
        return title

    def _check_geometry(self, config: BuildConfiguration) -> None:
        for low, high in (("min_width", "max_width"), ("min_height", "max_height")):
            low_value, high_value = getattr(config, low), getattr(config, high)
            if low_value is not None and high_value is not None and low_value > high_value:
                raise InferenceError(
                    message=f"{low} ({low_value}) is larger than {high} ({high_value})",
                    field_name=low,
                )
        if config.width <= 0 or config.height <= 0:
            raise InferenceError(message="Window size must be positive", field_name="width")

    async def infer(self, raw: BuildConfiguration) -> BuildConfiguration:
        """Resolve a complete configuration; ``raw`` is left untouched.

        Args:
            raw: Options as given by the user

        Returns:
            Fully populated configuration

        Raises:
            InferenceError: If the options are invalid or contradictory
        """
        target_url = normalize_url(raw.target_url)
        platform = self._resolve_platform(raw.platform)
        arch = self._resolve_arch(raw.arch)
        self._check_geometry(raw)

        name = raw.name.strip() if raw.name and raw.name.strip() else await self._infer_name(target_url)

        app_dir = Path(raw.dir) if raw.dir else self.app_dir
        resolved = raw.model_copy(
            deep=True,
            update={
                "target_url": target_url,
                "platform": platform,
                "arch": arch,
                "name": name,
                "dir": app_dir,
                "out": Path(raw.out).resolve(),
                "nativefier_version": raw.nativefier_version or __version__,
                "electron_version": raw.electron_version or self.electron_version,
            },
        )
        logger.debug("package name", stage="inferring", name=name)
        return resolved
