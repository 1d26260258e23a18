"""
Platform capability guard.

electron-packager edits Windows executable resources through rcedit, which
needs Wine when the build does not run on Windows. Without it, the options
that touch those resources are dropped instead of failing the build.
"""

from __future__ import annotations

from ..core.logging import get_logger
from ..core.types import ServiceResult
from ..helpers.host import HostProbe
from ..models.options import BuildConfiguration

logger = get_logger(__name__)

# Python field name -> option name shown to the user
WIN32_RESOURCE_OPTIONS: dict[str, str] = {
    "icon": "icon",
    "app_copyright": "appCopyright",
    "app_version": "appVersion",
    "build_version": "buildVersion",
    "version_string": "versionString",
    "win32metadata": "win32metadata",
}


class PlatformCapabilityGuard:
    """Strip options the host cannot honor for the target platform."""

    def __init__(self, probe: HostProbe | None = None, compat_binary: str = "wine") -> None:
        self.probe = probe or HostProbe()
        self.compat_binary = compat_binary

    def needs_compat_layer(self, config: BuildConfiguration) -> bool:
        """Whether building this config requires the compatibility layer."""
        return config.platform == "win32" and not self.probe.is_windows()

    def apply(self, config: BuildConfiguration) -> ServiceResult[BuildConfiguration]:
        """Return a sanitized copy of ``config``; the input is left untouched.

        Args:
            config: Resolved build configuration

        Returns:
            ServiceResult with the sanitized configuration and one warning per
            removed option
        """
        sanitized = config.model_copy(deep=True)
        if not self.needs_compat_layer(config):
            return ServiceResult.ok(sanitized)

        if self.probe.has_executable(self.compat_binary):
            return ServiceResult.ok(sanitized)

        warnings: list[str] = []
        for field_name, option in WIN32_RESOURCE_OPTIONS.items():
            setattr(sanitized, field_name, None)
            message = (
                f"{self.compat_binary.capitalize()} is required to use the \"{option}\" option "
                "for a Windows app when packaging on non-windows platforms"
            )
            logger.warning(message, option=option)
            warnings.append(message)

        return ServiceResult.with_warnings(sanitized, warnings, removed=list(WIN32_RESOURCE_OPTIONS))
