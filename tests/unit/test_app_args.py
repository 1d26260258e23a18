"""Unit tests for the persisted app options."""

import json

from nativefier.build.app import select_app_args
from nativefier.models.options import AppArgsSnapshot, BuildConfiguration

ALLOW_LIST = {
    "name", "targetUrl", "counter", "bounce", "width", "height", "minWidth",
    "minHeight", "maxWidth", "maxHeight", "x", "y", "showMenuBar", "fastQuit",
    "userAgent", "nativefierVersion", "ignoreCertificate", "disableGpu",
    "ignoreGpuBlacklist", "enableEs3Apis", "insecure", "flashPluginDir",
    "diskCacheSize", "fullScreen", "hideWindowFrame", "maximize",
    "disableContextMenu", "disableDevTools", "zoom", "internalUrls",
    "crashReporter", "singleInstance", "clearCache", "appCopyright",
    "appVersion", "buildVersion", "win32metadata", "versionString",
    "processEnvs", "fileDownloadOptions", "tray", "basicAuthUsername",
    "basicAuthPassword", "alwaysOnTop", "titleBarStyle", "globalShortcuts",
}


class TestSelectAppArgs:
    """Tests for select_app_args."""

    def test_document_has_exactly_allow_listed_keys(self):
        config = BuildConfiguration(
            name="My App",
            target_url="https://example.com",
            platform="linux",
            icon="/tmp/icon.png",
            inject=["/tmp/inject.js"],
            overwrite=True,
        )
        document = select_app_args(config).to_document()
        assert set(document) == ALLOW_LIST
        assert document["name"] == "My App"
        assert document["targetUrl"] == "https://example.com"

    def test_build_only_options_do_not_leak(self):
        config = BuildConfiguration(name="x", icon="/tmp/icon.png", dir="/tmp/app", arch="x64")
        document = select_app_args(config).to_document()
        for key in ("icon", "dir", "arch", "platform", "inject", "out", "overwrite"):
            assert key not in document

    def test_total_on_empty_configuration(self):
        snapshot = select_app_args(BuildConfiguration())
        document = snapshot.to_document()
        assert set(document) == ALLOW_LIST
        assert document["name"] is None
        assert document["width"] == 1280

    def test_idempotent(self):
        config = BuildConfiguration(name="App", tray="start-in-tray", zoom=1.5)
        first = select_app_args(config)
        second = select_app_args(BuildConfiguration(**first.model_dump()))
        assert first == second
        assert first.tray == "start-in-tray"

    def test_values_are_copied(self):
        config = BuildConfiguration(name="App", win32metadata={"CompanyName": "Acme"})
        snapshot = select_app_args(config)
        config.win32metadata["CompanyName"] = "Changed"
        assert snapshot.win32metadata == {"CompanyName": "Acme"}

    def test_selection_does_not_mutate_config(self):
        config = BuildConfiguration(name="App", process_envs={"A": "1"})
        before = config.model_dump()
        select_app_args(config)
        assert config.model_dump() == before


class TestSnapshotReader:
    """Tests for reading nativefier.json back."""

    def test_unknown_and_missing_keys(self, temp_dir):
        path = temp_dir / "nativefier.json"
        path.write_text(json.dumps({"name": "App", "someFutureOption": True, "fullScreen": True}))
        snapshot = AppArgsSnapshot.load(path)
        assert snapshot.name == "App"
        assert snapshot.full_screen is True
        assert snapshot.height == 800
        assert "someFutureOption" not in snapshot.to_document()

    def test_camel_case_keys(self):
        config = BuildConfiguration(enable_es3_apis=True, win32metadata={"ProductName": "P"})
        document = select_app_args(config).to_document()
        assert document["enableEs3Apis"] is True
        assert document["win32metadata"] == {"ProductName": "P"}
