"""Tests for cleanup disk usage probes."""

from __future__ import annotations

from pathlib import Path

import pytest

from deskx.cleanup.sizes import BYTES_PER_MB, parse_journal_usage, size_of, to_megabytes
from deskx.exec import ExecResult


def _du(stdout: str, code: int = 0):
    calls: list[list[str]] = []

    def _run(argv: list[str], *, cwd: Path | None = None, check: bool = False) -> ExecResult:
        _ = (cwd, check)
        calls.append(argv)
        return ExecResult(argv=tuple(argv), cwd=None, returncode=code, stdout=stdout, stderr="du: denied")

    return _run, calls


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Archived and active journals take up 24B in the file system.", 24),
        ("Archived and active journals take up 512.0K in the file system.", 524288),
        ("Archived and active journals take up 1.5M in the file system.", 1572864),
        ("Archived and active journals take up 2G in the file system.", 2 * 1024**3),
        ("Archived and active journals take up 1T in the file system.", 1024**4),
    ],
)
def test_parse_journal_usage(text: str, expected: int) -> None:
    assert parse_journal_usage(text) == expected


def test_parse_journal_usage_without_size() -> None:
    with pytest.raises(ValueError, match="no size found"):
        parse_journal_usage("No journal files were found.")


def test_size_of_missing_path_is_zero(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    run, calls = _du("")
    monkeypatch.setattr("deskx.cleanup.sizes.run_command", run)

    assert size_of(tmp_path / "missing") == 0
    assert calls == []


def test_size_of_parses_du(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    run, calls = _du(f"4096\t{tmp_path}\n")
    monkeypatch.setattr("deskx.cleanup.sizes.run_command", run)

    assert size_of(tmp_path) == 4096
    assert calls == [["du", "-sb", str(tmp_path)]]


def test_size_of_with_sudo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    run, calls = _du(f"10\t{tmp_path}\n")
    monkeypatch.setattr("deskx.cleanup.sizes.run_command", run)
    monkeypatch.setattr("deskx.exec.os.geteuid", lambda: 1000)

    size_of(tmp_path, sudo=True)
    assert calls[0][:2] == ["sudo", "du"]


def test_size_of_garbage_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    run, _ = _du("", code=1)
    monkeypatch.setattr("deskx.cleanup.sizes.run_command", run)

    with pytest.raises(ValueError, match="du: denied"):
        size_of(tmp_path)


def test_to_megabytes_truncates() -> None:
    assert to_megabytes(BYTES_PER_MB * 3 - 1) == 2
    assert to_megabytes(0) == 0
