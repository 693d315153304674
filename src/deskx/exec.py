"""Command runners for deskx tools."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from deskx.errors import DeskxError, MissingDependencyError

COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    cwd: Path | None
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def diagnostic(self) -> str:
        return (self.stderr or self.stdout).strip()


class ExecError(DeskxError):
    """Raised when a command returns non-zero in check mode."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = result.diagnostic
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{detail}")
        self.result = result


def run_command(
    argv: list[str],
    *,
    cwd: Path | None = None,
    check: bool = False,
) -> ExecResult:
    """Run command and return structured result."""
    try:
        completed = subprocess.run(argv, cwd=cwd, capture_output=True, text=True, check=False)
    except FileNotFoundError as exc:
        result = ExecResult(
            argv=tuple(argv),
            cwd=cwd,
            returncode=COMMAND_NOT_FOUND,
            stdout="",
            stderr=f"{argv[0]}: {exc.strerror or 'command not found'}",
        )
        raise ExecError(result) from exc
    result = ExecResult(
        argv=tuple(argv),
        cwd=cwd.resolve() if cwd is not None else None,
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
    if check and result.returncode != 0:
        raise ExecError(result)
    return result


def missing_commands(*names: str) -> list[str]:
    """Return the subset of ``names`` that cannot be found on PATH."""
    return [name for name in names if shutil.which(name) is None]


def require_commands(*names: str) -> None:
    """Raise MissingDependencyError unless every command is on PATH."""
    missing = missing_commands(*names)
    if missing:
        raise MissingDependencyError(missing)


def privileged(argv: list[str]) -> list[str]:
    """Prefix ``sudo`` unless already running as root."""
    if os.geteuid() == 0:
        return list(argv)
    return ["sudo", *argv]


def ensure_privileges() -> None:
    """Refresh cached sudo credentials up front so later steps do not prompt."""
    if os.geteuid() == 0:
        return
    completed = subprocess.run(["sudo", "-v"], check=False)
    if completed.returncode != 0:
        raise DeskxError("sudo authentication failed")
