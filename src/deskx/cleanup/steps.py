"""Cleanup steps for Arch- and Debian-based systems.

Each step becomes one batch target. Steps run in a fixed order: user cache
first, then system temp and logs, then package manager state.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from deskx.batch import ActionResult, Precheck, Readiness, Target
from deskx.cleanup.sizes import journal_usage, size_of
from deskx.exec import ExecResult, missing_commands, privileged, run_command

logger = logging.getLogger(__name__)

NORMAL_DAY_LIMIT = 14
AGGRESSIVE_DAY_LIMIT = 7

OS_RELEASE_PATH = Path("/etc/os-release")


class Distro(str, Enum):
    """Supported package-manager families."""

    ARCH = "arch"
    DEBIAN = "debian"


@dataclass(frozen=True)
class CleanupPolicy:
    """Severity settings for one cleanup run."""

    aggressive: bool = False
    home: Path = field(default_factory=Path.home)

    @property
    def day_limit(self) -> int:
        return AGGRESSIVE_DAY_LIMIT if self.aggressive else NORMAL_DAY_LIMIT

    @property
    def cache_dir(self) -> Path:
        return self.home / ".cache"

    @property
    def trash_dir(self) -> Path:
        return self.home / ".local" / "share" / "Trash"


def detect_distro(os_release: Path = OS_RELEASE_PATH) -> Distro:
    """Pick the backend from ``ID`` and ``ID_LIKE`` in os-release."""
    fields: dict[str, str] = {}
    try:
        text = os_release.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"unable to detect distribution from {os_release}: {exc}") from exc
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            fields[key.strip()] = value.strip().strip('"')

    ids = [fields.get("ID", ""), *fields.get("ID_LIKE", "").split()]
    if "arch" in ids:
        return Distro.ARCH
    if "debian" in ids or "ubuntu" in ids:
        return Distro.DEBIAN
    raise RuntimeError(f"unsupported distribution: {fields.get('ID', 'unknown')}; pass --distro")


def _ignoring_find_errors(*commands: list[str]) -> ActionResult:
    """Run find commands, tolerating permission noise on individual entries."""
    for argv in commands:
        result = run_command(argv)
        if not result.ok:
            logger.debug("%s exited %d: %s", argv[0], result.returncode, result.diagnostic)
    return ActionResult.success()


def _checked(result: ExecResult, what: str) -> ActionResult:
    if result.ok:
        return ActionResult.success()
    return ActionResult.failure(result.diagnostic or f"{what} exited with {result.returncode}")


def _requires(*commands: str) -> Callable[[], Precheck]:
    """Skip the step, rather than fail it, when one of its tools is not installed."""

    def _precondition() -> Precheck:
        missing = missing_commands(*commands)
        if missing:
            return Precheck.already_done(f"Missing required commands: {' '.join(missing)}")
        return Precheck.ready()

    return _precondition


def _dir_exists(path: Path, label: str) -> Callable[[], Precheck]:
    def _precondition() -> Precheck:
        if not path.is_dir():
            return Precheck.already_done(f"{label} does not exist")
        return Precheck.ready()

    return _precondition


def _always_ready() -> Precheck:
    return Precheck.ready()


def cache_target(policy: CleanupPolicy) -> Target:
    cache = policy.cache_dir
    days = policy.day_limit

    def _action() -> ActionResult:
        return _ignoring_find_errors(
            ["find", str(cache), "-mindepth", "1", "-type", "f", "-mtime", f"+{days}", "-delete"],
            ["find", str(cache), "-mindepth", "1", "-type", "d", "-empty", "-delete"],
        )

    return Target(
        name="cache",
        precondition=_dir_exists(cache, "~/.cache"),
        action=_action,
        measurement=lambda: size_of(cache),
        confirm_prompt="Clean the cache?",
    )


def empty_trash(trash: Path) -> ActionResult:
    failures: list[str] = []
    for sub in ("files", "info"):
        folder = trash / sub
        if not folder.is_dir():
            continue
        for entry in folder.iterdir():
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as exc:
                failures.append(f"{entry}: {exc.strerror or exc}")
    if failures:
        return ActionResult.failure(f"failed to remove {len(failures)} item(s); first: {failures[0]}")
    return ActionResult.success()


def trash_target(policy: CleanupPolicy) -> Target:
    trash = policy.trash_dir
    return Target(
        name="trash",
        precondition=_dir_exists(trash, "Trash directory"),
        action=lambda: empty_trash(trash),
        measurement=lambda: size_of(trash),
        confirm_prompt="Empty the Trash?",
    )


def tmp_target(policy: CleanupPolicy) -> Target:
    days = policy.day_limit

    def _action() -> ActionResult:
        return _ignoring_find_errors(
            privileged(
                ["find", "/tmp", "-mindepth", "1", "-type", "f", "!", "-xtype", "s",
                 "-mtime", f"+{days}", "-delete"]
            ),
            privileged(["find", "/tmp", "-mindepth", "1", "-type", "d", "-empty", "-delete"]),
        )

    return Target(
        name="tmp",
        precondition=_always_ready,
        action=_action,
        measurement=lambda: size_of(Path("/tmp"), sudo=True),
        confirm_prompt="Clean the temp directory?",
    )


def logs_target(policy: CleanupPolicy) -> Target:
    days = policy.day_limit

    def _action() -> ActionResult:
        return _ignoring_find_errors(
            privileged(["find", "/var/log", "-type", "f", "-mtime", f"+{days}", "-delete"]),
        )

    return Target(
        name="logs",
        precondition=_always_ready,
        action=_action,
        measurement=lambda: size_of(Path("/var/log"), sudo=True),
        confirm_prompt="Clean the logs?",
    )


def journals_target(policy: CleanupPolicy) -> Target:
    days = policy.day_limit

    def _action() -> ActionResult:
        return _checked(run_command(privileged(["journalctl", f"--vacuum-time={days}d"])), "journalctl")

    return Target(
        name="journals",
        precondition=_requires("journalctl"),
        action=_action,
        measurement=journal_usage,
        confirm_prompt="Vacuum the journals?",
    )


PACMAN_CACHE_DIR = Path("/var/cache/pacman/pkg")
APT_CACHE_DIR = Path("/var/cache/apt/archives")


def pacman_cache_target(policy: CleanupPolicy) -> Target:
    keep = "0" if policy.aggressive else "3"

    def _action() -> ActionResult:
        if policy.aggressive:
            logger.info("removing ALL cached packages")
        return _checked(run_command(privileged(["paccache", f"-rk{keep}"])), "paccache")

    return Target(
        name="package cache",
        precondition=_requires("paccache"),
        action=_action,
        measurement=lambda: size_of(PACMAN_CACHE_DIR, sudo=True),
        confirm_prompt="Clean the pacman cache?",
    )


def apt_cache_target(policy: CleanupPolicy) -> Target:
    verb = "clean" if policy.aggressive else "autoclean"

    def _action() -> ActionResult:
        return _checked(run_command(privileged(["apt-get", verb])), f"apt-get {verb}")

    return Target(
        name="package cache",
        precondition=_requires("apt-get"),
        action=_action,
        measurement=lambda: size_of(APT_CACHE_DIR, sudo=True),
        confirm_prompt="Clean the APT cache?",
    )


def list_pacman_orphans() -> list[str]:
    # pacman exits 1 when there is nothing to list
    result = run_command(["pacman", "-Qtdq"])
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def pacman_orphans_target(policy: CleanupPolicy) -> Target:
    _ = policy

    def _precondition() -> Precheck:
        check = _requires("pacman")()
        if check.state is not Readiness.READY:
            return check
        if not list_pacman_orphans():
            return Precheck.already_done("No orphans found")
        return Precheck.ready()

    def _action() -> ActionResult:
        found = list_pacman_orphans()
        if not found:
            return ActionResult.success("No orphans found")
        result = run_command(privileged(["pacman", "-Rns", "--noconfirm", *found]))
        if not result.ok:
            return ActionResult.failure(
                f"Failed to remove some orphaned packages; they may have dependencies: {result.diagnostic}"
            )
        return ActionResult.success(f"removed {len(found)} package(s): {' '.join(found)}")

    return Target(
        name="orphans",
        precondition=_precondition,
        action=_action,
        confirm_prompt="Remove orphaned packages?",
    )


def apt_orphans_target(policy: CleanupPolicy) -> Target:
    _ = policy

    def _action() -> ActionResult:
        problems: list[str] = []
        purged = 0
        if not missing_commands("deborphan"):
            orphans = [
                line.strip()
                for line in run_command(privileged(["deborphan"])).stdout.splitlines()
                if line.strip()
            ]
            if orphans:
                purge = run_command(privileged(["apt-get", "purge", "--yes", *orphans]))
                if purge.ok:
                    purged = len(orphans)
                else:
                    problems.append(f"Failed to remove some orphaned packages: {purge.diagnostic}")
        autoremove = run_command(privileged(["apt-get", "autoremove", "--yes"]))
        if not autoremove.ok:
            problems.append(f"autoremove encountered issues: {autoremove.diagnostic}")
        if problems:
            return ActionResult.failure("; ".join(problems))
        if purged:
            return ActionResult.success(f"purged {purged} package(s) via deborphan")
        return ActionResult.success()

    return Target(
        name="orphans",
        precondition=_requires("apt-get"),
        action=_action,
        confirm_prompt="Remove orphaned packages?",
    )


_PACKAGE_STEPS: dict[Distro, tuple[Callable[[CleanupPolicy], Target], ...]] = {
    Distro.ARCH: (pacman_cache_target, pacman_orphans_target),
    Distro.DEBIAN: (apt_cache_target, apt_orphans_target),
}


def build_cleanup_targets(policy: CleanupPolicy, distro: Distro) -> list[Target]:
    """Ordered cleanup targets for ``distro``."""
    common = (cache_target, trash_target, tmp_target, logs_target, journals_target)
    return [factory(policy) for factory in (*common, *_PACKAGE_STEPS[distro])]
