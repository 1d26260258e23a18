"""Packaging pipeline for nativefier."""

from .app import build_app, normalize_app_name, select_app_args
from .engine import ElectronPackager, PackagingEngine
from .guard import PlatformCapabilityGuard
from .icons import IconBuilder, maybe_copy_icons
from .main import STAGES, Packager, run_build

__all__ = [
    "build_app",
    "normalize_app_name",
    "select_app_args",
    "ElectronPackager",
    "PackagingEngine",
    "PlatformCapabilityGuard",
    "IconBuilder",
    "maybe_copy_icons",
    "STAGES",
    "Packager",
    "run_build",
]
