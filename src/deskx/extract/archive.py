"""Unified archive extraction by mime type."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from deskx.batch import ActionResult, Precheck, Target
from deskx.exec import missing_commands, run_command


class UnsupportedArchiveError(ValueError):
    """Raised when no extractor handles a mime type."""


@dataclass(frozen=True)
class ExtractPlan:
    """Resolved extractor invocation for one archive."""

    mime: str
    tool: str
    argv: tuple[str, ...]


def _tar(flags: str, verbose_flags: str, *, zstd: bool = False) -> Callable[[Path, Path, bool], list[str]]:
    def _build(archive: Path, dest: Path, verbose: bool) -> list[str]:
        argv = ["tar"]
        if zstd:
            argv.append("--zstd")
        argv.extend([verbose_flags if verbose else flags, str(archive), "-C", str(dest)])
        return argv

    return _build


def _sevenzip(archive: Path, dest: Path, verbose: bool) -> list[str]:
    argv = ["7z", "x", str(archive), f"-o{dest}"]
    if not verbose:
        argv.extend(["-bso0", "-bsp0"])
    return argv


def _unrar(archive: Path, dest: Path, verbose: bool) -> list[str]:
    if verbose:
        return ["unrar", "x", str(archive), f"{dest}/"]
    return ["unrar", "x", "-inul", str(archive), f"{dest}/"]


def _unzip(archive: Path, dest: Path, verbose: bool) -> list[str]:
    # unzip is verbose by default; its -v flag lists instead of extracting
    if verbose:
        return ["unzip", str(archive), "-d", str(dest)]
    return ["unzip", "-qq", str(archive), "-d", str(dest)]


EXTRACTORS: dict[str, tuple[str, Callable[[Path, Path, bool], list[str]]]] = {
    "application/x-7z-compressed": ("7z", _sevenzip),
    "application/x-bzip2": ("tar", _tar("-xjf", "-xvjf")),
    "application/gzip": ("tar", _tar("-xzf", "-xvzf")),
    "application/x-gzip": ("tar", _tar("-xzf", "-xvzf")),
    "application/vnd.rar": ("unrar", _unrar),
    "application/x-rar": ("unrar", _unrar),
    "application/x-tar": ("tar", _tar("-xf", "-xvf")),
    "application/x-gtar": ("tar", _tar("-xf", "-xvf")),
    "application/x-xz": ("tar", _tar("-xJf", "-xvJf")),
    "application/zip": ("unzip", _unzip),
    "application/zstd": ("tar", _tar("-xf", "-xvf", zstd=True)),
}


def detect_mime(archive: Path) -> str:
    result = run_command(["file", "--mime-type", "-b", str(archive)], check=True)
    return result.stdout.strip()


def plan_extraction(mime: str, archive: Path, dest: Path, *, verbose: bool = False) -> ExtractPlan:
    try:
        tool, build = EXTRACTORS[mime]
    except KeyError as exc:
        raise UnsupportedArchiveError(f"Unsupported archive type ({mime})") from exc
    return ExtractPlan(mime=mime, tool=tool, argv=tuple(build(archive, dest, verbose)))


def default_destination(archive: Path) -> Path:
    """Archive path minus its extension; ``.tar.*`` counts as one extension."""
    name = archive.name
    marker = name.find(".tar.")
    if marker > 0:
        return archive.with_name(name[:marker])
    if not archive.suffix:
        return archive.with_name(f"{name}.d")
    return archive.with_name(archive.stem)


def build_extract_target(
    archive: Path,
    dest: Path | None = None,
    *,
    verbose: bool = False,
    mime_probe: Callable[[Path], str] = detect_mime,
) -> Target:
    """Single extraction target; confirmable only when ``dest`` already exists."""
    source = archive.resolve()
    destination = (dest or default_destination(source)).resolve()
    plan: list[ExtractPlan] = []

    def _precondition() -> Precheck:
        if not source.is_file():
            return Precheck.blocked(f"'{archive}' is not a file")
        try:
            resolved = plan_extraction(mime_probe(source), source, destination, verbose=verbose)
        except UnsupportedArchiveError as exc:
            return Precheck.blocked(str(exc))
        if missing_commands(resolved.tool):
            return Precheck.blocked(f"Required command '{resolved.tool}' not found")
        plan[:] = [resolved]
        return Precheck.ready()

    def _action() -> ActionResult:
        destination.mkdir(parents=True, exist_ok=True)
        result = run_command(list(plan[0].argv))
        if not result.ok:
            return ActionResult.failure(result.diagnostic or f"{plan[0].tool} exited with {result.returncode}")
        return ActionResult.success(f"extracted into {destination}/")

    prompt = None
    if dest is None and destination.exists():
        prompt = f"Directory '{destination.name}' already exists. Continue anyway?"

    return Target(
        name=archive.name,
        precondition=_precondition,
        action=_action,
        confirm_prompt=prompt,
    )
