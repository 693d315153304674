"""Automount configuration loader.

Reads a YAML file describing where remotes are mounted and which rclone
flags to pass. Every remote carries its own mount name, log file and extra
arguments, so there is no positional alignment to validate.
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from deskx.errors import ConfigError

DEFAULT_CONFIG_PATH = Path("~/.config/rclone/automount.yaml")
DEFAULT_RCLONE_ARGS: tuple[str, ...] = ("--vfs-cache-mode", "full", "--links", "--daemon")


@dataclass(frozen=True)
class RemoteSpec:
    """One rclone remote to mount."""

    remote: str
    mount: str
    log_file: str
    args: tuple[str, ...] = ()

    @property
    def remote_name(self) -> str:
        return self.remote.split(":", 1)[0]


@dataclass(frozen=True)
class AutomountConfig:
    """Validated automount configuration."""

    cloud_dir: Path
    log_dir: Path
    remotes: tuple[RemoteSpec, ...]
    rclone_args: tuple[str, ...] = field(default=DEFAULT_RCLONE_ARGS)

    def mount_path(self, spec: RemoteSpec) -> Path:
        return self.cloud_dir / spec.mount

    def log_path(self, spec: RemoteSpec) -> Path:
        return self.log_dir / spec.log_file

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AutomountConfig:
        """Parse and validate config dict into AutomountConfig."""
        cloud_dir = _require_str(data, "cloud_dir")
        log_dir = _require_str(data, "log_dir")

        raw_remotes = data.get("remotes")
        if not isinstance(raw_remotes, list):
            raise ConfigError("Missing remotes list in config")
        if not raw_remotes:
            raise ConfigError("No remotes defined")

        remotes = tuple(_parse_remote(entry, index) for index, entry in enumerate(raw_remotes))

        rclone_args = DEFAULT_RCLONE_ARGS
        if "rclone_args" in data and data["rclone_args"] is not None:
            rclone_args = _parse_args(data["rclone_args"], "rclone_args")

        return cls(
            cloud_dir=_expand(cloud_dir),
            log_dir=_expand(log_dir),
            remotes=remotes,
            rclone_args=rclone_args,
        )


def resolve_config_path(path: Path | None = None) -> Path:
    """Pick the config path from the argument, the environment, or the default."""
    if path is not None:
        return _expand(str(path))
    env_path = os.getenv("DESKX_AUTOMOUNT_CONFIG")
    if env_path:
        return _expand(env_path)
    return _expand(str(DEFAULT_CONFIG_PATH))


def load_automount_config(path: Path | None = None) -> AutomountConfig:
    """Load automount configuration.

    Raises:
        ConfigError: If the file is missing, malformed, or incomplete
    """
    config_path = resolve_config_path(path)
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML config at {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config structure in {config_path}: expected a mapping")
    return AutomountConfig.from_dict(data)


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Missing {key} in config")
    return value


def _parse_remote(entry: Any, index: int) -> RemoteSpec:
    if not isinstance(entry, dict):
        raise ConfigError(f"remotes[{index}] must be a mapping")
    remote = entry.get("remote")
    mount = entry.get("mount")
    if not isinstance(remote, str) or not remote:
        raise ConfigError(f"remotes[{index}] is missing 'remote'")
    if not isinstance(mount, str) or not mount:
        raise ConfigError(f"remotes[{index}] is missing 'mount'")
    log_file = entry.get("log_file") or f"{mount}.log"
    args = _parse_args(entry.get("args"), f"remotes[{index}].args")
    return RemoteSpec(remote=remote, mount=mount, log_file=str(log_file), args=args)


def _parse_args(value: Any, label: str) -> tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        return tuple(shlex.split(value))
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise ConfigError(f"{label} must be a string or a list of strings")


def _expand(raw: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(raw)))
