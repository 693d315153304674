"""Exception types raised by deskx callers before a batch starts."""

from __future__ import annotations


class DeskxError(RuntimeError):
    """Base class for refusals surfaced by the CLI as exit code 1."""


class ConfigError(DeskxError):
    """Raised when a configuration file is missing or malformed."""


class MissingDependencyError(DeskxError):
    """Raised when required system commands are not on PATH."""

    def __init__(self, missing: list[str]):
        super().__init__(f"Missing required commands: {' '.join(missing)}")
        self.missing = missing


class UnsafeTargetError(DeskxError):
    """Raised when a tool refuses to operate on a protected location."""
