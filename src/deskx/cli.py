"""DeskX CLI - workstation chores driven by the batch runner."""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from deskx import __version__
from deskx.batch import RunPolicy, RunResult, run
from deskx.batch.confirm import make_confirmer, prompt_yes_no
from deskx.cleanup import CleanupPolicy, Distro, build_cleanup_targets, detect_distro
from deskx.errors import DeskxError
from deskx.exec import ensure_privileges, require_commands
from deskx.extract import build_extract_target, default_destination
from deskx.mount import (
    build_mount_targets,
    configured_remotes,
    load_automount_config,
    prepare_directories,
    validate_remotes,
)
from deskx.perms import build_reset_targets
from deskx.project import build_project_targets, check_project_dir
from deskx.ui import (
    NeonSpinner,
    err_console,
    error,
    heading,
    hr,
    render_banner,
    render_run_result,
    should_show_banner,
)

cli = typer.Typer(
    name="deskx",
    help="DeskX - Linux workstation automation",
    no_args_is_help=True,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class DistroChoice(str, Enum):
    """Cleanup backend selection."""

    AUTO = "auto"
    ARCH = "arch"
    DEBIAN = "debian"


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        if should_show_banner(sys.argv):
            render_banner()
        typer.echo(__version__)
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Route library logging through rich on stderr."""
    name = level.upper()
    if name not in LOG_LEVELS:
        raise typer.BadParameter(f"log level must be one of {', '.join(LOG_LEVELS)}")
    logging.basicConfig(
        level=name,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show DeskX version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar="DESKX_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Workstation chores: mounts, cleanup, permissions, archives, projects."""
    _ = version
    configure_logging(log_level)


def _refuse(exc: Exception) -> typer.Exit:
    error(str(exc))
    return typer.Exit(1)


def _finish(result: RunResult, *, ok: str, failed: str, show_freed: bool = False) -> None:
    render_run_result(result, show_freed=show_freed)
    if result.exit_code != 0:
        error(failed)
        raise typer.Exit(result.exit_code)
    heading(ok)


@cli.command()
def mount(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Automount config file."),
) -> None:
    """Mount every configured rclone remote."""
    try:
        require_commands("rclone")
        cfg = load_automount_config(config)
        known = NeonSpinner("Checking rclone remotes").run(configured_remotes)
        validate_remotes(cfg, known)
        prepare_directories(cfg)
    except DeskxError as exc:
        raise _refuse(exc) from exc

    heading("🚀 Starting rclone automount...")
    result = run(build_mount_targets(cfg), RunPolicy(assume_yes=True))
    _finish(result, ok="🎉 Mount script completed successfully!", failed="Mount script completed with errors")


@cli.command()
def cleanup(
    aggressive: bool = typer.Option(False, "--aggressive", "-a", help="Run with more severe removal settings."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompts."),
    distro: DistroChoice = typer.Option(DistroChoice.AUTO, "--distro", help="Package manager family."),
) -> None:
    """Clean caches, Trash, temp files, logs, journals and package leftovers."""
    try:
        backend = detect_distro() if distro is DistroChoice.AUTO else Distro(distro.value)
    except RuntimeError as exc:
        raise _refuse(exc) from exc

    policy = CleanupPolicy(aggressive=aggressive)
    heading(f"🧹 Smart Cleanup ({backend.value})")
    if aggressive:
        heading("   ⚠️ Running in AGGRESSIVE mode")
        question = "This will remove more data than normal mode. Continue?"
    else:
        heading("   Running in normal mode")
        question = "Proceed with normal cleanup?"
    if not yes and not prompt_yes_no(question):
        raise typer.Exit(1)

    try:
        ensure_privileges()
    except DeskxError as exc:
        raise _refuse(exc) from exc
    hr()

    result = run(
        build_cleanup_targets(policy, backend),
        RunPolicy(assume_yes=yes, confirm=make_confirmer()),
    )
    _finish(result, ok="✅ Cleanup complete", failed="Cleanup completed with errors", show_freed=True)


@cli.command()
def perms(
    paths: list[Path] = typer.Argument(..., help="Files and directories to reset."),
    executables: bool = typer.Option(False, "--executables", "-e", help="Keep permissions for executables."),
) -> None:
    """Reset permissions recursively to the umask defaults."""
    result = run(build_reset_targets(paths, keep_executables=executables), RunPolicy(assume_yes=True))
    _finish(result, ok="✅ Process completed successfully", failed="Process completed with above errors")


@cli.command()
def extract(
    archive: Path = typer.Argument(..., help="Archive filename."),
    destination: Optional[Path] = typer.Argument(None, help="Directory to extract to."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show extractor output."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompts."),
) -> None:
    """Extract any supported archive type with a single command."""
    if verbose:
        target_dir = destination or default_destination(archive.resolve())
        heading(f"Extracting: '{archive}'\ninto '{target_dir}/'")
    target = build_extract_target(archive, destination, verbose=verbose)
    result = run([target], RunPolicy(assume_yes=yes, confirm=make_confirmer()))
    _finish(result, ok="✅ Completed successfully", failed="Extraction failed")


@cli.command(name="init-project")
def init_project(
    project_dir: Optional[Path] = typer.Argument(None, help="Target project directory (default: cwd)."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Use an existing directory without asking."),
) -> None:
    """Create a boilerplate git project directory."""
    try:
        root = check_project_dir(project_dir or Path.cwd())
        require_commands("git")
    except DeskxError as exc:
        raise _refuse(exc) from exc

    if root.is_dir():
        heading(f"📁 '{root}' already exists.")
        if not yes and not prompt_yes_no("Create project in this directory?"):
            raise typer.Exit(1)
    else:
        root.mkdir(parents=True)

    result = run(build_project_targets(root), RunPolicy(assume_yes=True))
    _finish(result, ok=f"✅ Project initialized at {root}", failed="Project initialized with errors")


def main() -> None:
    if should_show_banner(sys.argv):
        render_banner()
    cli()
