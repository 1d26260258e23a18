"""
Host capability probe.

Answers which platform the build runs on and whether cross-tooling is
available on PATH. Lookups are never cached: the environment of a
long-lived process may change between builds.
"""

from __future__ import annotations

import platform as _platform
import shutil
import sys

_MACHINE_TO_ARCH = {
    "x86_64": "x64",
    "amd64": "x64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "arm64": "arm64",
    "aarch64": "arm64",
    "armv7l": "armv7l",
}


class HostProbe:
    """Inspect the machine running the packaging pipeline."""

    def __init__(self, platform: str | None = None, machine: str | None = None) -> None:
        """Initialize the probe.

        Args:
            platform: Override the detected platform (win32, darwin, linux)
            machine: Override the detected machine name (e.g. x86_64)
        """
        self._platform = platform
        self._machine = machine

    @property
    def platform(self) -> str:
        if self._platform:
            return self._platform
        if sys.platform.startswith("win"):
            return "win32"
        if sys.platform == "darwin":
            return "darwin"
        return "linux"

    @property
    def arch(self) -> str:
        machine = (self._machine or _platform.machine()).lower()
        return _MACHINE_TO_ARCH.get(machine, "x64")

    def is_host_platform(self, name: str) -> bool:
        return self.platform == name

    def is_windows(self) -> bool:
        return self.is_host_platform("win32")

    def has_executable(self, name: str) -> bool:
        """Search PATH for an executable."""
        return shutil.which(name) is not None
