"""rclone automount package."""

from deskx.mount.automount import build_mount_targets, configured_remotes, prepare_directories, validate_remotes
from deskx.mount.config import AutomountConfig, RemoteSpec, load_automount_config

__all__ = [
    "AutomountConfig",
    "RemoteSpec",
    "build_mount_targets",
    "configured_remotes",
    "load_automount_config",
    "prepare_directories",
    "validate_remotes",
]
