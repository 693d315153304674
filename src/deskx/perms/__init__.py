"""Permissions reset package."""

from deskx.perms.reset import PermissionDefaults, build_reset_targets, current_umask, reset_tree

__all__ = ["PermissionDefaults", "build_reset_targets", "current_umask", "reset_tree"]
