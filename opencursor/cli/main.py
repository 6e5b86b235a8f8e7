"""Main CLI application for opencursor."""

import logging
import tempfile
import time
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from opencursor import __version__
from opencursor.config.parser import ConfigError, load_settings
from opencursor.config.schemas import (
    PROVIDER_KEY,
    InstallerSettings,
    InstallPaths,
    ProviderSpec,
)
from opencursor.config.settings import resolve_paths, resolve_provider
from opencursor.core.context import RunContext, RunMode, Task, TaskStatus
from opencursor.core.pipeline import Pipeline

# Create the main Typer app
app = typer.Typer(
    name="opencursor",
    help="Install or remove the cursor-acp provider plugin for OpenCode",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

# Set up logger for the opencursor package
logger = logging.getLogger("opencursor")


def setup_logging(verbosity: int) -> None:
    """Configure console logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger.setLevel(level)

    console_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
    if not console_handlers:
        handler = RichHandler(
            console=error_console,
            show_time=verbosity >= 2,
            show_path=verbosity >= 3,
            rich_tracebacks=True,
        )
        handler.setLevel(level)
        logger.addHandler(handler)
    else:
        # Update existing handler level
        for h in console_handlers:
            h.setLevel(level)


def attach_log_file(path: Path) -> logging.Handler:
    """Send everything, including captured command output, to a log file.

    Args:
        path: Log file location

    Returns:
        The attached handler, to be detached with detach_log_file()
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
    )
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    return handler


def detach_log_file(handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    handler.close()


def default_log_path(mode: RunMode) -> Path:
    """Get a fresh log file path in the system temp directory."""
    stamp = time.strftime("%Y%m%d-%H%M%S")
    return Path(tempfile.gettempdir()) / f"opencursor-{mode}-{stamp}.log"


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def print_failure(message: str) -> None:
    console.print(f"[red]✗[/red] {escape(message)}")


def get_settings(path: Path | None) -> InstallerSettings | None:
    """Load the settings file if one was given, exiting on error."""
    if path is None:
        return None
    try:
        return load_settings(path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


def get_provider(
    settings: InstallerSettings | None, base_url: str | None = None
) -> ProviderSpec:
    """Build the provider entry, exiting on an invalid base URL."""
    try:
        return resolve_provider(settings, base_url)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


def print_paths(paths: InstallPaths) -> None:
    console.print(f"  Config:      {paths.config_path}")
    console.print(f"  Plugin link: {paths.link_path}")
    console.print(f"  Project:     {paths.project_dir}")


def run_pipeline(context: RunContext, log_path: Path) -> RunContext:
    """Run a pipeline with progress output and a diagnostic log file."""
    handler = attach_log_file(log_path)
    context.log_reference = str(log_path)

    try:
        with console.status("Starting...") as status:

            def on_update(task: Task) -> None:
                if task.status is TaskStatus.RUNNING:
                    status.update(f"{task.description}...")
                elif task.status is TaskStatus.COMPLETE:
                    print_success(task.name)
                elif task.optional:
                    print_warning(f"{task.name} (optional): {task.error.message}")
                else:
                    print_failure(f"{task.name}: {task.error.message}")

            Pipeline(context, listener=on_update).run()
    finally:
        detach_log_file(handler)

    return context


def report(context: RunContext, log_path: Path) -> None:
    """Print the run outcome and exit non-zero if a required step failed."""
    console.print()
    if context.errors:
        for error in context.errors:
            print_error(error)
        error_console.print(f"See log for details: {log_path}")
        raise typer.Exit(1)

    done = "Installed" if context.mode == "install" else "Uninstalled"
    print_success(f"{done} {PROVIDER_KEY}")
    console.print(f"[dim]Log: {escape(str(log_path))}[/dim]")


@app.callback()
def callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v info, -vv debug)",
        ),
    ] = 0,
) -> None:
    """opencursor - connect OpenCode to cursor-agent."""
    setup_logging(verbose)


@app.command()
def version() -> None:
    """Show the opencursor version."""
    console.print(f"opencursor {__version__}")


@app.command()
def install(
    project_dir: Annotated[
        Path | None,
        typer.Option(
            "--project-dir",
            "-p",
            help="Plugin checkout to build (defaults to current directory)",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to opencode.json"),
    ] = None,
    plugin_dir: Annotated[
        Path | None,
        typer.Option("--plugin-dir", help="OpenCode plugin directory"),
    ] = None,
    host_dir: Annotated[
        Path | None,
        typer.Option("--host-dir", help="OpenCode config directory"),
    ] = None,
    base_url: Annotated[
        str | None,
        typer.Option("--base-url", help="Base URL of the local ACP proxy"),
    ] = None,
    settings_file: Annotated[
        Path | None,
        typer.Option("--settings", help="YAML file overriding installer defaults"),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Where to write the diagnostic log"),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """Build the plugin and register it with OpenCode.

    Files changed by a failed step are restored to their previous state.
    """
    settings = get_settings(settings_file)
    paths = resolve_paths(
        settings,
        host_dir=host_dir,
        config_path=config,
        plugin_dir=plugin_dir,
        project_dir=project_dir,
    )
    provider = get_provider(settings, base_url)

    console.print(f"[bold]Installing {PROVIDER_KEY}[/bold]")
    print_paths(paths)
    if not yes and not typer.confirm("Continue with installation?", default=True):
        raise typer.Exit(1)

    log_path = log_file or default_log_path("install")
    context = RunContext(mode="install", paths=paths, provider=provider)
    run_pipeline(context, log_path)
    report(context, log_path)


@app.command()
def uninstall(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to opencode.json"),
    ] = None,
    plugin_dir: Annotated[
        Path | None,
        typer.Option("--plugin-dir", help="OpenCode plugin directory"),
    ] = None,
    host_dir: Annotated[
        Path | None,
        typer.Option("--host-dir", help="OpenCode config directory"),
    ] = None,
    settings_file: Annotated[
        Path | None,
        typer.Option("--settings", help="YAML file overriding installer defaults"),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Where to write the diagnostic log"),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """Remove the plugin link, provider entry and ACP SDK from OpenCode.

    Removal is not rolled back: if a step fails, the remaining steps are
    skipped and the run can be repeated.
    """
    settings = get_settings(settings_file)
    paths = resolve_paths(
        settings, host_dir=host_dir, config_path=config, plugin_dir=plugin_dir
    )

    console.print(f"[bold]Uninstalling {PROVIDER_KEY}[/bold]")
    print_paths(paths)
    if not yes and not typer.confirm("Continue with uninstall?", default=True):
        raise typer.Exit(1)

    log_path = log_file or default_log_path("uninstall")
    context = RunContext(
        mode="uninstall", paths=paths, provider=get_provider(settings)
    )
    run_pipeline(context, log_path)
    report(context, log_path)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
