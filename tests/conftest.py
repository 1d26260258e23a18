"""Test configuration for nativefier."""

import json
import tempfile
from pathlib import Path

import pytest

from nativefier.core.config import BuildDefaults, Config
from nativefier.helpers.host import HostProbe
from nativefier.models.options import BuildConfiguration


class FakeProbe(HostProbe):
    """Host probe with a fixed platform and a controllable PATH."""

    def __init__(self, platform="linux", executables=()):
        super().__init__(platform=platform, machine="x86_64")
        self.executables = set(executables)
        self.lookups = 0

    def has_executable(self, name):
        self.lookups += 1
        return name in self.executables


class FakeEngine:
    """Packaging engine that records what it was asked to package."""

    def __init__(self, out_dir):
        self.out_dir = out_dir
        self.calls = []
        self.staged_files = []
        self.snapshot = None
        self.package_json = None
        self.lines = ["Packaging app for platform linux x64"]
        self.paths = None
        self.error = None

    async def pack(self, config, sink):
        self.calls.append(config)
        staged = Path(config.dir)
        self.staged_files = sorted(
            str(p.relative_to(staged)) for p in staged.rglob("*") if p.is_file()
        )
        self.snapshot = json.loads((staged / "nativefier.json").read_text())
        self.package_json = json.loads((staged / "package.json").read_text())
        for line in self.lines:
            sink.emit(line)
        if self.error is not None:
            raise self.error
        if self.paths is not None:
            return self.paths
        bundle = self.out_dir / f"{config.name}-{config.platform}-{config.arch}"
        (bundle / "resources" / "app").mkdir(parents=True, exist_ok=True)
        return [bundle]


class RecordingProgress:
    """Progress reporter that remembers its ticks."""

    instances = []

    def __init__(self, total):
        self.total = total
        self.labels = []
        self.finished = False
        RecordingProgress.instances.append(self)

    def tick(self, label):
        self.labels.append(label)

    def done(self):
        self.finished = True


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def app_source(temp_dir):
    """Create a minimal Electron app template.

    Returns:
        Path: Directory holding package.json, main.js and a nested module.
    """
    src = temp_dir / "app"
    (src / "lib").mkdir(parents=True)
    (src / "package.json").write_text(json.dumps({"name": "placeholder", "main": "main.js"}))
    (src / "main.js").write_text("require('./lib/window');\n")
    (src / "lib" / "window.js").write_text("module.exports = {};\n")
    return src


@pytest.fixture
def out_dir(temp_dir):
    path = temp_dir / "out"
    path.mkdir()
    return path


@pytest.fixture
def probe():
    return FakeProbe()


@pytest.fixture
def engine(out_dir):
    return FakeEngine(out_dir)


@pytest.fixture
def settings(temp_dir, app_source):
    """Settings pointing at the test app template and a private scratch dir."""
    return Config(
        build=BuildDefaults(
            app_dir=app_source,
            out_dir=temp_dir / "out",
            scratch_dir=temp_dir / "scratch",
        )
    )


@pytest.fixture
def progress_factory():
    RecordingProgress.instances = []
    return RecordingProgress


@pytest.fixture
def linux_config(out_dir):
    return BuildConfiguration(
        name="My App",
        target_url="https://example.com",
        platform="linux",
        arch="x64",
        out=out_dir,
    )


@pytest.fixture
def make_probe():
    """Factory for host probes with a chosen platform and PATH."""
    return FakeProbe
