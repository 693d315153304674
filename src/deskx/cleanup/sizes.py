"""Disk usage probes used to report space freed by cleanup steps."""

from __future__ import annotations

import re
from pathlib import Path

from deskx.exec import privileged, run_command

BYTES_PER_MB = 1048576

_UNIT_MULTIPLIERS: dict[str, int] = {
    "B": 1,
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
}

_JOURNAL_SIZE_RE = re.compile(r"([0-9]+(?:\.[0-9]+)?)\s*([BKMGT])")


def size_of(path: Path, *, sudo: bool = False) -> int:
    """Apparent size of ``path`` in bytes via ``du -sb``.

    A missing path measures as 0. Unparseable output raises ValueError.
    """
    if not path.exists():
        return 0
    argv = ["du", "-sb", str(path)]
    result = run_command(privileged(argv) if sudo else argv)
    first = result.stdout.splitlines()[0] if result.stdout else ""
    token = first.split()[0] if first.split() else ""
    if not token.isdigit():
        raise ValueError(f"unable to measure {path}: {result.diagnostic or 'no output'}")
    return int(token)


def parse_journal_usage(text: str) -> int:
    """Convert ``journalctl --disk-usage`` output into bytes.

    >>> parse_journal_usage("Archived and active journals take up 1.5M in the file system.")
    1572864
    """
    match = _JOURNAL_SIZE_RE.search(text)
    if match is None:
        raise ValueError(f"no size found in journalctl output: {text.strip()!r}")
    number, unit = match.groups()
    return round(float(number) * _UNIT_MULTIPLIERS[unit])


def journal_usage() -> int:
    result = run_command(privileged(["journalctl", "--disk-usage"]))
    return parse_journal_usage(result.stdout)


def to_megabytes(size: int) -> int:
    return size // BYTES_PER_MB
