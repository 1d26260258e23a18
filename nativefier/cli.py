"""
nativefier CLI.

Command-line interface for packaging a web app into a desktop bundle.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.config import get_config
from .core.logging import setup_logging

app = typer.Typer(
    name="nativefier",
    help="Wrap any web page into a native desktop application",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        console.print(f"nativefier v{__version__}")
        raise typer.Exit()


def _parse_json_option(value: Optional[str], option: str) -> Optional[dict]:
    if value is None:
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"{option} must be a JSON object: {e}")
    if not isinstance(parsed, dict):
        raise typer.BadParameter(f"{option} must be a JSON object")
    return parsed


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """nativefier: web page to desktop app packager."""
    pass


@app.command()
def build(
    target_url: str = typer.Argument(..., help="URL of the web app to wrap"),
    out: Optional[Path] = typer.Argument(None, help="Directory the bundle is written to"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="App name (defaults to the page title)"),
    platform: Optional[str] = typer.Option(None, "--platform", "-p", help="linux, win32, darwin or mas"),
    arch: Optional[str] = typer.Option(None, "--arch", "-a", help="ia32, x64, armv7l or arm64"),
    icon: Optional[Path] = typer.Option(None, "--icon", "-i", help="Icon file for the app"),
    inject: list[Path] = typer.Option([], "--inject", help="JS or CSS file injected into every page"),
    width: int = typer.Option(1280, "--width", help="Initial window width"),
    height: int = typer.Option(800, "--height", help="Initial window height"),
    tray: bool = typer.Option(False, "--tray", help="Keep the app running in the system tray"),
    full_screen: bool = typer.Option(False, "--full-screen", help="Start in full screen"),
    single_instance: bool = typer.Option(False, "--single-instance", help="Allow only one running instance"),
    show_menu_bar: bool = typer.Option(False, "--show-menu-bar", help="Show the menu bar"),
    user_agent: Optional[str] = typer.Option(None, "--user-agent", "-u", help="Custom user agent"),
    internal_urls: Optional[str] = typer.Option(None, "--internal-urls", help="Regex of URLs opened in-app"),
    app_copyright: Optional[str] = typer.Option(None, "--app-copyright", help="Copyright string"),
    app_version: Optional[str] = typer.Option(None, "--app-version", help="App version"),
    build_version: Optional[str] = typer.Option(None, "--build-version", help="Build version"),
    win32metadata: Optional[str] = typer.Option(None, "--win32metadata", help="Windows metadata as JSON"),
    electron_version: Optional[str] = typer.Option(None, "--electron-version", "-e", help="Electron version"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing bundle"),
    asar: bool = typer.Option(False, "--asar", help="Package the app source into an asar archive"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
) -> None:
    """Package TARGET_URL into a desktop app."""
    config = get_config()
    if verbose:
        config.log_level = "DEBUG"
    setup_logging(config)

    from .models.options import BuildConfiguration

    options = BuildConfiguration(
        target_url=target_url,
        out=out or config.build.out_dir,
        name=name,
        platform=platform,
        arch=arch,
        icon=icon,
        inject=inject,
        width=width,
        height=height,
        tray=tray,
        full_screen=full_screen,
        single_instance=single_instance,
        show_menu_bar=show_menu_bar,
        user_agent=user_agent,
        internal_urls=internal_urls,
        app_copyright=app_copyright,
        app_version=app_version,
        build_version=build_version,
        win32metadata=_parse_json_option(win32metadata, "--win32metadata"),
        electron_version=electron_version,
        overwrite=overwrite,
        asar=asar,
    )

    console.print(Panel.fit(
        "[bold blue]nativefier[/bold blue]\n"
        "Web app → Desktop bundle",
        border_style="blue",
    ))
    console.print(f"\n[bold]Target URL:[/bold] {target_url}\n")

    async def run_async() -> None:
        from .build import run_build

        result = await run_build(options, config=config)

        if not result.success:
            console.print("\n[bold red]✗ Build failed![/bold red]")
            console.print(f"Error: {result.error}")
            if result.failed_stage:
                console.print(f"Failed at: {result.failed_stage}")
            raise typer.Exit(1)

        if result.already_packaged:
            console.print("\n[yellow]App already packaged, use --overwrite to replace it[/yellow]")
            return

        console.print("\n[bold green]✓ App built![/bold green]\n")

        table = Table(title="Build Results")
        table.add_column("Stage", style="cyan")
        table.add_column("Status")
        table.add_column("Duration", justify="right")
        for stage in result.stages:
            table.add_row(stage.stage_name, stage.status.value, f"{stage.duration_seconds:.1f}s")
        console.print(table)

        for warning in result.warnings:
            console.print(f"[yellow]Warning:[/yellow] {warning}")
        console.print(f"\n[bold]App built to:[/bold] {result.app_path}")

    asyncio.run(run_async())


@app.command()
def config(
    show: bool = typer.Option(
        True,
        "--show",
        help="Show current configuration",
    ),
) -> None:
    """Show or manage configuration."""
    cfg = get_config()

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", cfg.log_level)
    table.add_row("App Template", str(cfg.build.app_dir))
    table.add_row("Output Directory", str(cfg.build.out_dir))
    table.add_row("Scratch Directory", str(cfg.build.scratch_dir or "system temp"))
    table.add_row("Keep Staging", str(cfg.build.keep_staging))
    table.add_row("Packager Command", cfg.tools.packager_command)
    table.add_row("Compatibility Binary", cfg.tools.compat_binary)
    table.add_row("Icon Converter", cfg.tools.icon_converter)
    table.add_row("Electron Version", cfg.tools.electron_version or "packager default")

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  NATIVEFIER_LOG_LEVEL, NATIVEFIER_APP_DIR, NATIVEFIER_OUT_DIR")
    console.print("  NATIVEFIER_PACKAGER_COMMAND, NATIVEFIER_COMPAT_BINARY")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
