"""Interactive yes/no confirmation with a bounded wait."""

from __future__ import annotations

import os
import select
import sys
from collections.abc import Callable
from typing import TextIO

from rich.console import Console

DEFAULT_TIMEOUT_SECONDS = 30.0

LineReader = Callable[[float], str | None]


def confirm_timeout() -> float:
    raw = os.getenv("DESKX_CONFIRM_TIMEOUT", "")
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_TIMEOUT_SECONDS


def stdin_reader(stream: TextIO | None = None) -> LineReader:
    """Build a reader that waits up to ``timeout`` seconds for one line.

    Returns None on timeout. EOF and a non-terminal stream return ``""``.
    """
    source = stream or sys.stdin

    def _read(timeout: float) -> str | None:
        if not source.isatty():
            return ""
        ready, _, _ = select.select([source], [], [], timeout)
        if not ready:
            return None
        return source.readline()

    return _read


def prompt_yes_no(
    prompt: str,
    *,
    timeout: float | None = None,
    reader: LineReader | None = None,
    console: Console | None = None,
) -> bool:
    """Ask a Y/N question; only ``y``/``Y`` accepts, silence declines."""
    out = console or Console()
    read_line = reader or stdin_reader()
    wait = confirm_timeout() if timeout is None else timeout

    out.print(f"{prompt} (Y/N): ", end="", markup=False, highlight=False)
    reply = read_line(wait)
    if reply is None:
        out.print()
        out.print("Timed out waiting for response", style="yellow")
        return False
    if not reply:
        out.print()
        out.print("No interactive input available", style="yellow")
        return False
    return reply.strip() in ("y", "Y")


def make_confirmer(
    *,
    timeout: float | None = None,
    reader: LineReader | None = None,
    console: Console | None = None,
) -> Callable[[str], bool]:
    """Bind prompt_yes_no into the ``confirm(prompt) -> bool`` policy hook."""

    def _confirm(prompt: str) -> bool:
        return prompt_yes_no(prompt, timeout=timeout, reader=reader, console=console)

    return _confirm
