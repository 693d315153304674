"""Reset filesystem permissions to the umask defaults."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from pathlib import Path

from deskx.batch import ActionResult, Precheck, Target

EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


@dataclass(frozen=True)
class PermissionDefaults:
    """Target modes for directories and regular files."""

    dir_mode: int
    file_mode: int

    @classmethod
    def from_umask(cls, umask: int) -> PermissionDefaults:
        return cls(dir_mode=0o777 & ~umask, file_mode=0o666 & ~umask)


def current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


@dataclass
class ResetReport:
    changed: int = 0
    failures: list[str] = field(default_factory=list)

    def fail(self, path: Path, exc: OSError) -> None:
        self.failures.append(f"{path.resolve()}: {exc.strerror or exc}")


def _apply(path: Path, mode: int, report: ResetReport, *, keep_executables: bool) -> None:
    try:
        st = path.lstat()
    except OSError as exc:
        report.fail(path, exc)
        return
    if stat.S_ISLNK(st.st_mode):
        return
    if stat.S_ISREG(st.st_mode) and keep_executables and st.st_mode & EXECUTABLE_BITS:
        return
    if not (stat.S_ISDIR(st.st_mode) or stat.S_ISREG(st.st_mode)):
        return
    if stat.S_IMODE(st.st_mode) == mode:
        return
    try:
        path.chmod(mode)
    except OSError as exc:
        report.fail(path, exc)
        return
    report.changed += 1


def reset_tree(root: Path, defaults: PermissionDefaults, *, keep_executables: bool = False) -> ResetReport:
    """Recursively apply the defaults under ``root``; symlinks are not followed."""
    report = ResetReport()
    if root.is_file():
        _apply(root, defaults.file_mode, report, keep_executables=keep_executables)
        return report

    def _walk_error(exc: OSError) -> None:
        report.fail(Path(exc.filename or root), exc)

    # chmod the directory before descending so an unreadable one can be opened
    _apply(root, defaults.dir_mode, report, keep_executables=keep_executables)
    for current, dirnames, filenames in os.walk(root, onerror=_walk_error):
        base = Path(current)
        for name in dirnames:
            _apply(base / name, defaults.dir_mode, report, keep_executables=keep_executables)
        for name in filenames:
            _apply(base / name, defaults.file_mode, report, keep_executables=keep_executables)
    return report


def build_reset_targets(
    paths: list[Path],
    *,
    keep_executables: bool = False,
    defaults: PermissionDefaults | None = None,
) -> list[Target]:
    """One target per path argument, in the order given."""
    modes = defaults or PermissionDefaults.from_umask(current_umask())
    targets: list[Target] = []
    for path in paths:

        def _precondition(path: Path = path) -> Precheck:
            if not path.is_file() and not path.is_dir():
                return Precheck.blocked(f"'{path}' is not a valid file or directory")
            return Precheck.ready()

        def _action(path: Path = path) -> ActionResult:
            report = reset_tree(path, modes, keep_executables=keep_executables)
            if report.failures:
                return ActionResult.failure(
                    f"Failed to change permissions for {len(report.failures)} path(s); first: {report.failures[0]}"
                )
            return ActionResult.success(f"{report.changed} mode(s) changed")

        targets.append(Target(name=str(path), precondition=_precondition, action=_action))
    return targets
