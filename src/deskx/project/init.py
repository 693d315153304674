"""Scaffold a new git project directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from deskx.batch import ActionResult, Precheck, Target
from deskx.errors import UnsafeTargetError
from deskx.exec import ExecResult, run_command

SUBDIRS: tuple[str, ...] = ("bin", "docs", "src", "tests")

GITIGNORE = """\
.idea/
.vscode/
temp/
*.swp
*.log
.env
.venv
"""

INITIAL_COMMIT_MESSAGE = "Initial project structure"


@dataclass(frozen=True)
class ManagedFile:
    """File written once at project creation, never overwritten."""

    relative_path: str
    content: str


MANAGED_FILES: tuple[ManagedFile, ...] = (ManagedFile(relative_path=".gitignore", content=GITIGNORE),)


def check_project_dir(project_dir: Path, *, home: Path | None = None) -> Path:
    """Resolve ``project_dir``, refusing the filesystem root and the home directory."""
    resolved = project_dir.expanduser().resolve()
    if resolved == Path("/"):
        raise UnsafeTargetError("Refusing to run in root directory")
    if resolved == (home or Path.home()).resolve():
        raise UnsafeTargetError("Refusing to run in home directory")
    if resolved.exists() and not resolved.is_dir():
        raise UnsafeTargetError(f"'{project_dir}' exists but is not a directory")
    return resolved


def run_git(args: list[str], *, repo_root: Path) -> ExecResult:
    """Run git command rooted at repo."""
    return run_command(["git", *args], cwd=repo_root)


def _failed(result: ExecResult) -> ActionResult:
    return ActionResult.failure(result.diagnostic or f"git exited with {result.returncode}")


def _subdirs_target(root: Path) -> Target:
    def _precondition() -> Precheck:
        if all((root / name).is_dir() for name in SUBDIRS):
            return Precheck.already_done("directories exist")
        return Precheck.ready()

    def _action() -> ActionResult:
        for name in SUBDIRS:
            (root / name).mkdir(parents=True, exist_ok=True)
        return ActionResult.success(", ".join(SUBDIRS))

    return Target(name="directories", precondition=_precondition, action=_action)


def _managed_file_target(root: Path, spec: ManagedFile) -> Target:
    target = root / spec.relative_path

    def _precondition() -> Precheck:
        if target.exists():
            return Precheck.already_done(f"{spec.relative_path} exists")
        return Precheck.ready()

    def _action() -> ActionResult:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(spec.content, encoding="utf-8")
        return ActionResult.success()

    return Target(name=spec.relative_path, precondition=_precondition, action=_action)


def _git_init_target(root: Path) -> Target:
    def _precondition() -> Precheck:
        if (root / ".git").exists():
            return Precheck.already_done("already a git repository")
        return Precheck.ready()

    def _action() -> ActionResult:
        result = run_git(["init"], repo_root=root)
        return ActionResult.success() if result.ok else _failed(result)

    return Target(name="git init", precondition=_precondition, action=_action)


def _initial_commit_target(root: Path) -> Target:
    def _precondition() -> Precheck:
        if (root / ".git").exists() and run_git(["rev-parse", "--verify", "--quiet", "HEAD"], repo_root=root).ok:
            return Precheck.already_done("repository already has commits")
        return Precheck.ready()

    def _action() -> ActionResult:
        added = run_git(["add", "."], repo_root=root)
        if not added.ok:
            return _failed(added)
        # diff --cached --quiet exits 0 when nothing is staged
        if run_git(["diff", "--cached", "--quiet"], repo_root=root).ok:
            return ActionResult.success("nothing to commit")
        commit = run_git(
            ["-c", "commit.gpgsign=false", "commit", "-m", INITIAL_COMMIT_MESSAGE],
            repo_root=root,
        )
        if not commit.ok:
            return ActionResult.failure(
                f"Git commit failed (user.name / user.email not set?): {commit.diagnostic}"
            )
        return ActionResult.success(INITIAL_COMMIT_MESSAGE)

    return Target(name="initial commit", precondition=_precondition, action=_action)


def build_project_targets(root: Path) -> list[Target]:
    """Ordered scaffolding targets for an existing project directory."""
    return [
        _subdirs_target(root),
        *(_managed_file_target(root, spec) for spec in MANAGED_FILES),
        _git_init_target(root),
        _initial_commit_target(root),
    ]
