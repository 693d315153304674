"""Mount configured rclone remotes through the batch runner."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from deskx.batch import ActionResult, Precheck, Target
from deskx.errors import ConfigError
from deskx.exec import run_command
from deskx.mount.config import AutomountConfig, RemoteSpec

logger = logging.getLogger(__name__)


def configured_remotes() -> set[str]:
    """Return remote names known to rclone (without trailing colon)."""
    out = run_command(["rclone", "listremotes"], check=True)
    return {line.strip().rstrip(":") for line in out.stdout.splitlines() if line.strip()}


def validate_remotes(config: AutomountConfig, known: set[str]) -> None:
    """Refuse the run if any configured remote is unknown to rclone."""
    for spec in config.remotes:
        if spec.remote_name not in known:
            raise ConfigError(f"Remote '{spec.remote_name}' not configured in rclone")


def prepare_directories(config: AutomountConfig) -> None:
    """Create the log directory and every mount directory."""
    try:
        config.log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Failed to create log directory: {config.log_dir}: {exc}") from exc
    for spec in config.remotes:
        path = config.mount_path(spec)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"Failed to create mount directory: {path}: {exc}") from exc


def build_mount_argv(config: AutomountConfig, spec: RemoteSpec) -> list[str]:
    return [
        "rclone",
        "mount",
        spec.remote,
        str(config.mount_path(spec)),
        "--log-file",
        str(config.log_path(spec)),
        *config.rclone_args,
        *spec.args,
    ]


def mount_state(path: Path) -> Precheck:
    if os.path.ismount(path):
        return Precheck.already_done("already mounted")
    if path.is_dir() and any(path.iterdir()):
        return Precheck.blocked(f"mount dir not empty: {path}")
    return Precheck.ready()


def build_mount_targets(config: AutomountConfig) -> list[Target]:
    """Map each configured remote to a target, in declaration order."""
    targets: list[Target] = []
    for spec in config.remotes:
        path = config.mount_path(spec)
        argv = build_mount_argv(config, spec)

        def _precondition(path: Path = path) -> Precheck:
            return mount_state(path)

        def _action(argv: list[str] = argv) -> ActionResult:
            logger.debug("running %s", " ".join(argv))
            result = run_command(argv)
            if not result.ok:
                return ActionResult.failure(result.diagnostic or f"rclone exited with {result.returncode}")
            return ActionResult.success("mounted")

        targets.append(Target(name=spec.mount, precondition=_precondition, action=_action))
    return targets
