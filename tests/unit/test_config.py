"""Unit tests for configuration."""

from pathlib import Path

import nativefier
from nativefier.core.config import DEFAULT_APP_DIR, Config


class TestConfig:
    """Tests for Config.from_env."""

    def test_defaults(self, monkeypatch):
        for key in ("NATIVEFIER_PACKAGER_COMMAND", "NATIVEFIER_COMPAT_BINARY", "NATIVEFIER_KEEP_STAGING", "NATIVEFIER_SCRATCH_DIR"):
            monkeypatch.delenv(key, raising=False)
        config = Config.from_env()
        assert config.tools.packager_command == "npx electron-packager"
        assert config.tools.compat_binary == "wine"
        assert config.build.keep_staging is False
        assert config.build.scratch_dir is None

    def test_environment_overrides(self, monkeypatch, temp_dir):
        monkeypatch.setenv("NATIVEFIER_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("NATIVEFIER_COMPAT_BINARY", "wine64")
        monkeypatch.setenv("NATIVEFIER_APP_DIR", str(temp_dir))
        monkeypatch.setenv("NATIVEFIER_SCRATCH_DIR", str(temp_dir / "scratch"))
        monkeypatch.setenv("NATIVEFIER_KEEP_STAGING", "true")

        config = Config.from_env()

        assert config.log_level == "DEBUG"
        assert config.tools.compat_binary == "wine64"
        assert config.build.app_dir == Path(temp_dir)
        assert config.build.scratch_dir == temp_dir / "scratch"
        assert config.build.keep_staging is True

    def test_default_app_dir_ships_with_package(self, monkeypatch):
        monkeypatch.delenv("NATIVEFIER_APP_DIR", raising=False)
        package_dir = Path(nativefier.__file__).resolve().parent

        assert DEFAULT_APP_DIR == package_dir / "app"
        assert (DEFAULT_APP_DIR / "package.json").is_file()
        assert (DEFAULT_APP_DIR / "main.js").is_file()
        assert Config.from_env().build.app_dir == DEFAULT_APP_DIR
