from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from itertools import cycle
from typing import TypeVar

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text

from deskx.batch.types import OutcomeKind, OutcomeRecord, RunResult
from deskx.cleanup.sizes import to_megabytes

_T = TypeVar("_T")

console = Console()
err_console = Console(stderr=True)

NEON_LINES: list[str] = [
    "██████╗ ███████╗███████╗██╗  ██╗██╗  ██╗",
    "██╔══██╗██╔════╝██╔════╝██║ ██╔╝╚██╗██╔╝",
    "██║  ██║█████╗  ███████╗█████╔╝  ╚███╔╝ ",
    "██║  ██║██╔══╝  ╚════██║██╔═██╗  ██╔██╗ ",
    "██████╔╝███████╗███████║██║  ██╗██╔╝ ██╗",
    "╚═════╝ ╚══════╝╚══════╝╚═╝  ╚═╝╚═╝  ╚═╝",
]

THEMES: dict[str, list[str]] = {
    "mintwave": [
        "bright_cyan",
        "cyan",
        "bright_blue",
        "blue",
        "bright_green",
        "green",
    ],
    "magma": [
        "bright_red",
        "red",
        "bright_yellow",
        "yellow",
        "bright_magenta",
        "magenta",
    ],
    "toxic_lime": [
        "bright_green",
        "green",
        "bright_yellow",
        "yellow",
        "bright_cyan",
        "cyan",
    ],
}

_GLYPHS: dict[OutcomeKind, tuple[str, str, str]] = {
    OutcomeKind.COMPLETED: ("✅", "[ok]", "bold bright_green"),
    OutcomeKind.ALREADY_DONE: ("⚠️ ", "[skip]", "bold yellow"),
    OutcomeKind.DECLINED: ("⏭️ ", "[skip]", "yellow"),
    OutcomeKind.BLOCKED: ("❌", "[fail]", "bold bright_red"),
    OutcomeKind.ACTION_FAILED: ("❌", "[fail]", "bold bright_red"),
}


def neon_enabled() -> bool:
    return os.getenv("DESKX_NEON", "1") == "1"


def get_theme_name() -> str:
    return os.getenv("DESKX_THEME", "mintwave")


def get_theme_palette(theme: str | None = None) -> list[str]:
    name = theme or get_theme_name()
    return THEMES.get(name, THEMES["mintwave"])


def should_show_banner(argv: Sequence[str]) -> bool:
    if not neon_enabled():
        return False
    if len(argv) <= 1:
        return True
    return any(a in ("--help", "-h", "--version") for a in argv[1:])


def render_banner(theme: str | None = None) -> None:
    if not neon_enabled():
        return

    palette = get_theme_palette(theme)
    colors = cycle(palette)
    for line in NEON_LINES:
        t = Text()
        for ch in line:
            t.append(ch, style=f"bold {next(colors)}")
        console.print(t)

    console.print()
    console.print(Text("WORKSTATION CHORES, ONE TARGET AT A TIME.", style="bold bright_white on blue"))
    console.print(Text(f"Theme: {theme or get_theme_name()}  Toggle: DESKX_NEON=0", style="dim"))
    console.print()


@dataclass(frozen=True)
class NeonSpinner:
    message: str

    def run(self, fn: Callable[[], _T]) -> _T:
        if not neon_enabled():
            return fn()

        with Progress(
            SpinnerColumn(style="bright_magenta"),
            TextColumn("[bold bright_cyan]{task.description}[/bold bright_cyan]"),
            transient=True,
            console=console,
        ) as prog:
            task_id = prog.add_task(self.message, total=None)
            try:
                return fn()
            finally:
                prog.update(task_id, completed=1)


def heading(title: str) -> None:
    if neon_enabled():
        console.print(Text(title, style="bold bright_cyan"))
    else:
        print(title)


def hr() -> None:
    line = "-" * 60
    if neon_enabled():
        console.print(Text(line, style="dim"))
    else:
        print(line)


def error(msg: str) -> None:
    if neon_enabled():
        err_console.print(Text(f"❌ {msg}", style="bold bright_red"))
    else:
        err_console.print(f"ERROR: {msg}", markup=False, highlight=False)


def format_record(entry: OutcomeRecord, *, show_freed: bool = False) -> str:
    glyph, plain, _ = _GLYPHS[entry.kind]
    marker = glyph if neon_enabled() else plain
    line = f"{marker} {entry.name}"
    if entry.message:
        line = f"{line}: {entry.message}"
    if show_freed and entry.freed is not None:
        line = f"{line} (freed {to_megabytes(entry.freed)} MB)"
    return line


def render_run_result(result: RunResult, *, show_freed: bool = False) -> None:
    """Print every outcome line followed by the summary counters."""
    for entry in result.records:
        line = format_record(entry, show_freed=show_freed)
        if neon_enabled():
            console.print(Text(line, style=_GLYPHS[entry.kind][2]))
        else:
            print(line)

    lines = [
        "Summary:",
        f"   Succeeded: {result.succeeded}",
        f"   Skipped: {result.skipped}",
        f"   Failed: {result.failed}",
    ]
    if show_freed and result.total_freed > 0:
        lines.append(f"   Total freed: {to_megabytes(result.total_freed)} MB")

    if neon_enabled():
        console.print()
        console.print(Text(lines[0], style="bold"))
        for s in lines[1:]:
            console.print(s, markup=False, highlight=False)
    else:
        print()
        for s in lines:
            print(s)
