"""
Icon handling.

IconBuilder converts the configured icon into the format the target platform
expects before packaging. maybe_copy_icons places the icon inside the
produced bundle afterwards, for the platforms where the Electron window reads
it from the app resources instead of the packager embedding it.
"""

from __future__ import annotations

import asyncio
import shlex
import shutil
from pathlib import Path

from ..core.exceptions import IconError
from ..core.logging import get_logger
from ..helpers.host import HostProbe
from ..models.options import BuildConfiguration

logger = get_logger(__name__)

PREFERRED_ICON_FORMATS = {
    "win32": ".ico",
    "darwin": ".icns",
    "mas": ".icns",
    "linux": ".png",
}

# The packager embeds icons itself on these platforms.
NATIVE_ICON_PLATFORMS = frozenset({"darwin", "mas"})


class IconBuilder:
    """Produce a platform-appropriate icon for a build."""

    def __init__(self, probe: HostProbe | None = None, converter: str = "convert") -> None:
        """Initialize the icon builder.

        Args:
            probe: Host probe used to look up the converter
            converter: ImageMagick command line, called as `<converter> SRC DEST`
        """
        self.probe = probe or HostProbe()
        self.converter = converter
        self.command = shlex.split(converter)

    async def _convert(self, src: Path, dest: Path) -> None:
        process = await asyncio.create_subprocess_exec(
            *self.command,
            str(src),
            str(dest),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await process.communicate()
        if process.returncode != 0:
            raise IconError(
                message=f"Icon conversion failed: {stderr.decode(errors='replace').strip()}",
                icon_path=str(src),
            )

    async def build(self, config: BuildConfiguration) -> BuildConfiguration:
        """Attach a platform-appropriate icon to a copy of ``config``.

        Args:
            config: Build configuration, already pointing at the staged app

        Returns:
            Configuration whose ``icon`` points at the usable icon file

        Raises:
            IconError: If the icon is missing or conversion fails
        """
        if config.icon is None:
            return config

        icon = Path(config.icon)
        if not icon.is_file():
            raise IconError(message=f"Icon file not found: {icon}", icon_path=str(icon))

        wanted = PREFERRED_ICON_FORMATS.get(config.platform or "")
        if wanted is None or icon.suffix.lower() == wanted:
            return config

        if not self.probe.has_executable(self.command[0]):
            logger.warning(
                "Icon is not in the preferred format and no converter is available",
                icon=str(icon),
                preferred=wanted,
                converter=self.converter,
            )
            return config

        workdir = Path(config.dir) if config.dir else icon.parent
        converted = workdir / f"icon{wanted}"
        await self._convert(icon, converted)
        logger.info("Converted icon", source=str(icon), icon=str(converted))
        return config.model_copy(update={"icon": converted})


async def maybe_copy_icons(config: BuildConfiguration, app_path: Path) -> None:
    """Copy the icon into ``resources/app`` of a produced bundle.

    Windows and Linux windows load their icon from the app resources, so the
    file has to be there under a fixed name.

    Args:
        config: Build configuration holding the icon
        app_path: Bundle produced by the packager

    Raises:
        IconError: If the icon cannot be copied
    """
    if not config.icon:
        return

    if config.platform in NATIVE_ICON_PLATFORMS:
        return

    icon = Path(config.icon)
    dest = Path(app_path) / "resources" / "app" / f"icon{icon.suffix}"
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(shutil.copy2, icon, dest)
    except OSError as e:
        raise IconError(message=f"Error copying icon into bundle: {e}", icon_path=str(icon), cause=e)
    logger.debug("Copied icon into bundle", icon=str(dest))
