"""
Packaging engine adapter.

Runs electron-packager as a subprocess. Everything the packager prints goes
to the diagnostic sink handed in by the caller rather than to the console.
"""

from __future__ import annotations

import asyncio
import re
import shlex
from pathlib import Path
from typing import Protocol

from ..core.exceptions import PackagingEngineError
from ..core.logging import get_logger
from ..helpers.diagnostics import DiagnosticSink
from ..models.options import BuildConfiguration

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


class PackagingEngine(Protocol):
    """Produces platform bundles from a staged app."""

    async def pack(self, config: BuildConfiguration, sink: DiagnosticSink) -> list[Path]:
        ...


def bundle_dir_name(name: str, platform: str, arch: str) -> str:
    """Directory name electron-packager gives a bundle."""
    safe_name = _UNSAFE_FILENAME_CHARS.sub("-", name).strip() or "app"
    return f"{safe_name}-{platform}-{arch}"


class ElectronPackager:
    """electron-packager command line wrapper."""

    def __init__(self, command: str = "npx electron-packager") -> None:
        self.command = shlex.split(command)

    def build_args(self, config: BuildConfiguration) -> list[str]:
        """Translate a build configuration into packager arguments.

        Args:
            config: Sanitized build configuration

        Returns:
            Full command line, command included
        """
        args = [
            *self.command,
            str(config.dir),
            config.name or "",
            f"--platform={config.platform}",
            f"--arch={config.arch}",
            f"--out={config.out}",
        ]
        if config.overwrite:
            args.append("--overwrite")
        if config.asar:
            args.append("--asar")
        if config.icon:
            args.append(f"--icon={config.icon}")
        if config.electron_version:
            args.append(f"--electron-version={config.electron_version}")
        if config.app_copyright:
            args.append(f"--app-copyright={config.app_copyright}")
        if config.app_version:
            args.append(f"--app-version={config.app_version}")
        if config.build_version:
            args.append(f"--build-version={config.build_version}")
        for key, value in (config.win32metadata or {}).items():
            args.append(f"--win32metadata.{key}={value}")
        for key, value in (config.version_string or {}).items():
            args.append(f"--version-string.{key}={value}")
        return args

    def expected_output(self, config: BuildConfiguration) -> Path:
        return Path(config.out) / bundle_dir_name(config.name or "", config.platform or "", config.arch or "")

    async def pack(self, config: BuildConfiguration, sink: DiagnosticSink) -> list[Path]:
        """Package the staged app.

        Args:
            config: Sanitized build configuration
            sink: Receives every line the packager prints

        Returns:
            Produced bundle paths; empty if the bundle exists and overwrite is off

        Raises:
            PackagingEngineError: If the packager cannot run or fails
        """
        missing = [name for name in ("dir", "name", "platform", "arch") if not getattr(config, name)]
        if missing:
            raise PackagingEngineError(
                message=f"Missing packager options: {', '.join(missing)}",
                context={"missing": missing},
            )

        output = self.expected_output(config)
        if output.exists() and not config.overwrite:
            sink.emit(
                f"Skipping {config.platform} {config.arch} "
                "(output dir already exists, use --overwrite to force)"
            )
            return []

        args = self.build_args(config)
        logger.debug("Running packager", args=args)
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError as e:
            raise PackagingEngineError(
                message=f"Packager command not found: {self.command[0]}",
                cause=e,
            )

        tail: list[str] = []
        async for raw in process.stdout:
            line = raw.decode(errors="replace").rstrip()
            if not line:
                continue
            sink.emit(line)
            tail = (tail + [line])[-20:]
        returncode = await process.wait()

        if returncode != 0:
            raise PackagingEngineError(
                message="electron-packager failed",
                context={"output": "\n".join(tail)},
                returncode=returncode,
            )

        if not output.exists():
            raise PackagingEngineError(
                message=f"Packager finished but no bundle was found at {output}",
                returncode=returncode,
            )
        return [output]
