"""Unit tests for the electron-packager adapter."""

import shlex
import sys
from pathlib import Path
from textwrap import dedent

import pytest

from nativefier.build.engine import ElectronPackager, bundle_dir_name
from nativefier.core.exceptions import PackagingEngineError
from nativefier.helpers.diagnostics import MemorySink
from nativefier.models.options import BuildConfiguration


def packaged_config(out_dir, **overrides):
    values = dict(
        name="My App",
        target_url="https://example.com",
        dir=Path("/tmp/staged"),
        out=out_dir,
        platform="win32",
        arch="x64",
    )
    values.update(overrides)
    return BuildConfiguration(**values)


def python_packager(source):
    """Packager whose command runs a Python snippet with the packager arguments."""
    return ElectronPackager(shlex.join([sys.executable, "-c", dedent(source)]))


# Mimics electron-packager: `<dir> <name> --platform=.. --arch=.. --out=..`
WRITES_BUNDLE = """
    import sys
    from pathlib import Path

    name = sys.argv[2]
    opts = dict(arg[2:].split("=", 1) for arg in sys.argv[3:] if "=" in arg)
    print("Packaging app for platform", opts["platform"], opts["arch"])
    print()
    bundle = Path(opts["out"]) / f"{name}-{opts['platform']}-{opts['arch']}"
    (bundle / "resources" / "app").mkdir(parents=True)
    print("Wrote new app to", bundle)
"""

FAILS_LOUDLY = """
    import sys

    for i in range(25):
        print(f"line {i}")
    sys.stdout.flush()
    sys.stderr.write("Error: unsupported arch\\n")
    sys.exit(3)
"""

WRITES_NOTHING = """
    print("nothing to do")
"""


class TestBuildArgs:
    """Tests for ElectronPackager.build_args."""

    def test_basic_arguments(self, out_dir):
        args = ElectronPackager("npx electron-packager").build_args(packaged_config(out_dir))
        assert args[:4] == ["npx", "electron-packager", "/tmp/staged", "My App"]
        assert "--platform=win32" in args
        assert "--arch=x64" in args
        assert f"--out={out_dir}" in args
        assert "--overwrite" not in args

    def test_optional_arguments(self, out_dir):
        config = packaged_config(
            out_dir,
            overwrite=True,
            asar=True,
            icon=Path("/tmp/icon.ico"),
            electron_version="28.0.0",
            app_copyright="(c) Acme",
            app_version="1.0.0",
            build_version="1.0.0.1",
            win32metadata={"CompanyName": "Acme"},
        )
        args = ElectronPackager("electron-packager").build_args(config)
        for expected in (
            "--overwrite",
            "--asar",
            "--icon=/tmp/icon.ico",
            "--electron-version=28.0.0",
            "--app-copyright=(c) Acme",
            "--app-version=1.0.0",
            "--build-version=1.0.0.1",
            "--win32metadata.CompanyName=Acme",
        ):
            assert expected in args

    def test_bundle_dir_name(self):
        assert bundle_dir_name("My App", "linux", "x64") == "My App-linux-x64"
        assert bundle_dir_name("a/b:c", "darwin", "arm64") == "a-b-c-darwin-arm64"


@pytest.mark.asyncio
class TestPack:
    """Tests for ElectronPackager.pack."""

    async def test_existing_bundle_without_overwrite(self, out_dir):
        (out_dir / "My App-win32-x64").mkdir()
        sink = MemorySink()
        engine = ElectronPackager("does-not-exist-packager")

        assert await engine.pack(packaged_config(out_dir), sink) == []
        assert "already exists" in sink.lines[0]

    async def test_missing_options(self, out_dir):
        engine = ElectronPackager("does-not-exist-packager")
        with pytest.raises(PackagingEngineError, match="Missing packager options"):
            await engine.pack(packaged_config(out_dir, platform=None), MemorySink())

    async def test_command_not_found(self, out_dir):
        engine = ElectronPackager("nativefier-test-no-such-packager-binary")
        with pytest.raises(PackagingEngineError, match="Packager command not found"):
            await engine.pack(packaged_config(out_dir), MemorySink())

    async def test_output_streamed_into_sink(self, out_dir):
        sink = MemorySink()
        config = packaged_config(out_dir, platform="linux")

        paths = await python_packager(WRITES_BUNDLE).pack(config, sink)

        bundle = out_dir / "My App-linux-x64"
        assert paths == [bundle]
        assert (bundle / "resources" / "app").is_dir()
        assert sink.lines == [
            "Packaging app for platform linux x64",
            f"Wrote new app to {bundle}",
        ]

    async def test_non_zero_exit_keeps_output_tail(self, out_dir):
        sink = MemorySink()

        with pytest.raises(PackagingEngineError, match="electron-packager failed") as excinfo:
            await python_packager(FAILS_LOUDLY).pack(packaged_config(out_dir), sink)

        error = excinfo.value
        tail = error.context["output"].splitlines()
        assert error.returncode == 3
        assert len(tail) == 20
        assert tail[0] == "line 6"
        assert tail[-1] == "Error: unsupported arch"
        assert len(sink.lines) == 26

    async def test_success_without_bundle(self, out_dir):
        sink = MemorySink()

        with pytest.raises(PackagingEngineError, match="no bundle was found") as excinfo:
            await python_packager(WRITES_NOTHING).pack(packaged_config(out_dir), sink)

        assert excinfo.value.returncode == 0
        assert sink.lines == ["nothing to do"]
