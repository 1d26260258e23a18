"""
Packaging orchestration.

A build runs five stages in strict order: inferring, copying, icons,
packaging and finalizing. Each stage takes the accumulated BuildContext and
returns it for the next one; the first fatal error ends the run.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Protocol

from ..core.config import Config, get_config
from ..core.exceptions import IconError, PipelineError, StagingError, UnexpectedResultShape
from ..core.logging import bind_context, clear_context, get_logger
from ..core.types import StageResult
from ..helpers.diagnostics import BufferingSink, DiagnosticSink, LoggingSink
from ..helpers.host import HostProbe
from ..helpers.progress import DishonestProgress, ProgressReporter
from ..models.options import BuildConfiguration
from ..models.result import BuildResult
from ..options.inference import OptionsInference, OptionsInferenceService
from .app import build_app
from .engine import ElectronPackager, PackagingEngine
from .guard import PlatformCapabilityGuard
from .icons import IconBuilder, maybe_copy_icons

logger = get_logger(__name__)

STAGES = ("inferring", "copying", "icons", "packaging", "finalizing")


class IconBuildService(Protocol):
    """Attaches a platform-appropriate icon to a configuration."""

    async def build(self, config: BuildConfiguration) -> BuildConfiguration:
        ...


@dataclass
class BuildContext:
    """State handed from one stage to the next."""

    raw: BuildConfiguration
    options: BuildConfiguration
    staging_dir: Path
    sink: BufferingSink
    app_paths: list[Path] = field(default_factory=list)
    app_path: Path | None = None
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str, **kwargs: Any) -> None:
        logger.warning(message, **kwargs)
        self.warnings.append(message)


Stage = Callable[[BuildContext], Awaitable[BuildContext]]


def get_app_path(app_paths: list[Path]) -> Path | None:
    """Pick the produced bundle out of the packager result.

    Args:
        app_paths: Paths returned by the packaging engine

    Returns:
        The bundle path, or None when the bundle already existed and
        overwriting was not requested
    """
    if not app_paths:
        return None

    if len(app_paths) > 1:
        shape = UnexpectedResultShape(
            message="Packaged app path contains more than one element",
            paths=[str(p) for p in app_paths],
        )
        logger.warning(str(shape), paths=shape.paths)

    return app_paths[0]


class Packager:
    """Runs the packaging pipeline for one configuration at a time per call."""

    def __init__(
        self,
        config: Config | None = None,
        inference: OptionsInferenceService | None = None,
        icon_builder: IconBuildService | None = None,
        engine: PackagingEngine | None = None,
        probe: HostProbe | None = None,
        diagnostics: DiagnosticSink | None = None,
        progress_factory: Callable[[int], ProgressReporter] | None = None,
    ) -> None:
        """Initialize the packager.

        Args:
            config: Settings; loaded from the environment if omitted
            inference: Options inference service
            icon_builder: Icon build service
            engine: Packaging engine
            probe: Host capability probe
            diagnostics: Where captured packager output is replayed
            progress_factory: Builds a reporter for a given number of stages
        """
        self.config = config or get_config()
        self.probe = probe or HostProbe()
        self.inference = inference or OptionsInference(
            app_dir=self.config.build.app_dir,
            probe=self.probe,
            settings=self.config.inference,
            electron_version=self.config.tools.electron_version,
        )
        self.icon_builder = icon_builder or IconBuilder(self.probe, self.config.tools.icon_converter)
        self.engine = engine or ElectronPackager(self.config.tools.packager_command)
        self.guard = PlatformCapabilityGuard(self.probe, self.config.tools.compat_binary)
        self.diagnostics = diagnostics or LoggingSink()
        self.progress_factory = progress_factory or DishonestProgress

    def _stages(self) -> list[tuple[str, Stage]]:
        return list(
            zip(
                STAGES,
                (self._infer, self._copy, self._icons, self._package, self._finalize),
            )
        )

    async def _infer(self, ctx: BuildContext) -> BuildContext:
        logger.debug("package name", stage="inferring", name=ctx.raw.name)
        ctx.options = await self.inference.infer(ctx.raw)
        return ctx

    async def _copy(self, ctx: BuildContext) -> BuildContext:
        if ctx.options.dir is None:
            raise StagingError(message="No app source directory configured")
        await build_app(Path(ctx.options.dir), ctx.staging_dir, ctx.options)
        # Later stages work on the staged copy, never on the original source.
        ctx.options = ctx.options.model_copy(update={"dir": ctx.staging_dir})
        return ctx

    async def _icons(self, ctx: BuildContext) -> BuildContext:
        try:
            ctx.options = await self.icon_builder.build(ctx.options)
        except Exception as e:
            ctx.warn(f"Icon build failed, continuing without a custom icon: {e}")
        return ctx

    async def _package(self, ctx: BuildContext) -> BuildContext:
        guarded = self.guard.apply(ctx.options)
        ctx.warnings.extend(guarded.warnings)

        ctx.sink.override()
        try:
            app_paths = await self.engine.pack(guarded.data, ctx.sink)
        finally:
            ctx.sink.restore()

        # ctx.options still carries the icon for the finalizing stage
        ctx.app_paths = list(app_paths)
        return ctx

    async def _finalize(self, ctx: BuildContext) -> BuildContext:
        if len(ctx.app_paths) > 1:
            ctx.warnings.append(f"Packager returned {len(ctx.app_paths)} paths, using the first")
        app_path = get_app_path(ctx.app_paths)
        if app_path is None:
            logger.info("App already packaged and overwrite is not set, nothing to do")
            return ctx

        try:
            await maybe_copy_icons(ctx.options, app_path)
        except IconError as e:
            ctx.warn(str(e), app_path=str(app_path))
        ctx.app_path = app_path
        return ctx

    def _make_staging_dir(self) -> Path:
        scratch = self.config.build.scratch_dir
        if scratch is not None:
            scratch.mkdir(parents=True, exist_ok=True)
        path = Path(tempfile.mkdtemp(prefix="nativefier-", dir=scratch))
        os.chmod(path, 0o755)
        return path

    async def run(self, config: BuildConfiguration) -> BuildResult:
        """Package one app.

        Args:
            config: Options as given by the user; never modified

        Returns:
            BuildResult with the bundle path, a null path when the bundle
            already existed, or the failing stage and its cause
        """
        run_id = str(uuid.uuid4())[:8]
        started_at = datetime.utcnow()
        sink = BufferingSink(self.diagnostics)
        staging_dir: Path | None = None
        progress: ProgressReporter | None = None
        stage_results: list[StageResult] = []
        finished = False

        try:
            bind_context(run_id=run_id)
            try:
                staging_dir = self._make_staging_dir()
            except OSError as e:
                error = PipelineError(
                    message=f"Cannot create staging directory: {e}",
                    stage=STAGES[1],
                    run_id=run_id,
                    cause=e,
                )
                logger.error("Build failed", stage=STAGES[1], error=str(e))
                return BuildResult(
                    run_id=run_id,
                    success=False,
                    started_at=started_at,
                    completed_at=datetime.utcnow(),
                    error=str(error),
                    failed_stage=STAGES[1],
                )

            ctx = BuildContext(
                raw=config,
                options=config.model_copy(deep=True),
                staging_dir=staging_dir,
                sink=sink,
            )
            progress = self.progress_factory(len(STAGES))
            logger.info("Starting build", target_url=config.target_url, staging_dir=str(staging_dir))

            for name, stage in self._stages():
                progress.tick(name)
                record = StageResult(stage_name=name)
                stage_results.append(record)
                try:
                    ctx = await stage(ctx)
                except Exception as e:
                    record.mark_failed(str(e))
                    error = PipelineError(message=str(e), stage=name, run_id=run_id, cause=e)
                    logger.error("Build failed", stage=name, error=str(e))
                    finished = True
                    return BuildResult(
                        run_id=run_id,
                        success=False,
                        started_at=started_at,
                        completed_at=datetime.utcnow(),
                        stages=stage_results,
                        warnings=ctx.warnings,
                        error=str(error),
                        failed_stage=name,
                    )
                record.mark_completed()

            finished = True
            result = BuildResult(
                run_id=run_id,
                success=True,
                started_at=started_at,
                completed_at=datetime.utcnow(),
                app_path=ctx.app_path,
                stages=stage_results,
                warnings=ctx.warnings,
            )
            logger.info(
                "Build completed",
                app_path=str(ctx.app_path) if ctx.app_path else None,
                duration_seconds=round(result.duration_seconds, 1),
            )
            return result
        finally:
            sink.playback()
            if progress is not None:
                progress.done()
            if staging_dir is not None and (not finished or not self.config.build.keep_staging):
                shutil.rmtree(staging_dir, ignore_errors=True)
            clear_context()


async def run_build(config: BuildConfiguration, **kwargs: Any) -> BuildResult:
    """Convenience function to package one app.

    Args:
        config: Options as given by the user
        **kwargs: Collaborators forwarded to Packager

    Returns:
        BuildResult of the run
    """
    packager = Packager(**kwargs)
    return await packager.run(config)
