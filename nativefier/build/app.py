"""
App staging.

Copies the Electron app template into a scratch directory, writes the
persisted options next to it, drops in the injected script and stylesheet,
and renames the staged package so every build gets its own identity.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import re
import shutil
from pathlib import Path

import aiofiles

from ..core.exceptions import StagingError
from ..core.logging import get_logger
from ..models.options import SNAPSHOT_FILE_NAME, AppArgsSnapshot, BuildConfiguration

logger = get_logger(__name__)

INJECT_DIR = "inject"
# Injected assets are renamed by role, not by their original file name.
INJECT_TARGETS = {
    ".js": "inject.js",
    ".css": "inject.css",
}

_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def select_app_args(config: BuildConfiguration) -> AppArgsSnapshot:
    """Pick the options that travel with the packaged app.

    Args:
        config: Full build configuration

    Returns:
        Snapshot holding copies of exactly the allow-listed options
    """
    values = config.model_dump(include=AppArgsSnapshot.field_names())
    return AppArgsSnapshot.model_validate(values)


def kebab_case(value: str) -> str:
    """Split on separators, camelCase and letter/digit boundaries, join with hyphens."""
    return "-".join(word.lower() for word in _WORD_RE.findall(value))


def normalize_app_name(app_name: str, url: str) -> str:
    """Derive a collision-resistant package name.

    A 3 byte digest of the URL keeps builds of the same display name for
    different sites apart.

    Args:
        app_name: User-facing app name
        url: Target URL of the app

    Returns:
        Name such as ``my-app-nativefier-1a2b3c``
    """
    digest = hashlib.md5(url.encode("utf-8")).hexdigest()[:6]
    normalized = kebab_case(app_name) or "app"
    return f"{normalized}-nativefier-{digest}"


async def _copy_tree(src: Path, dest: Path) -> None:
    await asyncio.to_thread(shutil.copytree, src, dest, dirs_exist_ok=True)


async def write_app_args(dest: Path, app_args: AppArgsSnapshot) -> Path:
    """Write the options snapshot into the staged app."""
    path = dest / SNAPSHOT_FILE_NAME
    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(json.dumps(app_args.to_document()))
    return path


async def maybe_copy_scripts(sources: list[Path], dest: Path) -> list[Path]:
    """Copy injected JS/CSS into ``dest/inject``.

    Files with other extensions are skipped. A later file of the same kind
    replaces an earlier one, so at most one script and one stylesheet end up
    in the bundle.

    Args:
        sources: Configured injection files
        dest: Staging directory

    Returns:
        Paths of the injected files

    Raises:
        StagingError: If a configured file is missing or cannot be copied
    """
    injected: dict[str, Path] = {}
    for src in sources:
        src = Path(src)
        if not src.exists():
            raise StagingError(
                message="Error copying injection files: file not found",
                source=str(src),
                destination=str(dest),
            )

        target_name = INJECT_TARGETS.get(src.suffix.lower())
        if target_name is None:
            logger.debug("Skipping injection file with unknown extension", path=str(src))
            continue

        target = dest / INJECT_DIR / target_name
        if target_name in injected:
            logger.warning("Replacing previously injected file", previous=str(injected[target_name]), path=str(src))
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copy2, src, target)
        except OSError as e:
            raise StagingError(
                message=f"Error copying injection files: {e}",
                source=str(src),
                destination=str(target),
                cause=e,
            )
        injected[target_name] = src

    return [dest / INJECT_DIR / name for name in injected]


async def change_app_package_json_name(app_path: Path, name: str) -> None:
    """Overwrite the ``name`` of the staged package.json."""
    package_json_path = app_path / "package.json"
    try:
        async with aiofiles.open(package_json_path, "r", encoding="utf-8") as f:
            package_json = json.loads(await f.read())
        package_json["name"] = name
        logger.debug("package name", name=name)
        async with aiofiles.open(package_json_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(package_json))
    except (OSError, ValueError) as e:
        raise StagingError(
            message=f"Error renaming staged package: {e}",
            destination=str(package_json_path),
            cause=e,
        )


async def build_app(src: Path, dest: Path, config: BuildConfiguration) -> None:
    """Stage the app for packaging.

    Steps run strictly in order; each one relies on the files the previous
    one left behind.

    Args:
        src: Electron app template directory
        dest: Fresh scratch directory
        config: Resolved build configuration

    Raises:
        StagingError: If the tree copy, the snapshot write or the rename fails
    """
    app_args = select_app_args(config)

    if not src.is_dir():
        raise StagingError(
            message=f"Error copying temporary directory: source not found: {src}",
            source=str(src),
            destination=str(dest),
        )
    try:
        await _copy_tree(src, dest)
    except OSError as e:
        raise StagingError(
            message=f"Error copying temporary directory: {e}",
            source=str(src),
            destination=str(dest),
            cause=e,
        )

    try:
        await write_app_args(dest, app_args)
    except (OSError, TypeError, ValueError) as e:
        raise StagingError(
            message=f"Error writing {SNAPSHOT_FILE_NAME}: {e}",
            destination=str(dest),
            cause=e,
        )

    try:
        await maybe_copy_scripts(config.inject, dest)
    except StagingError as e:
        logger.warning(str(e), source=e.source)

    package_name = normalize_app_name(app_args.name or "", app_args.target_url or "")
    await change_app_package_json_name(dest, package_name)
    logger.info("App staged", destination=str(dest), package_name=package_name)
