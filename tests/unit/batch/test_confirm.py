"""Tests for the bounded yes/no prompt."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from deskx.batch.confirm import (
    DEFAULT_TIMEOUT_SECONDS,
    confirm_timeout,
    make_confirmer,
    prompt_yes_no,
    stdin_reader,
)


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, force_terminal=False, width=120), buf


def _reply(value: str | None):
    seen: list[float] = []

    def _read(timeout: float) -> str | None:
        seen.append(timeout)
        return value

    return _read, seen


@pytest.mark.parametrize("answer", ["y\n", "Y\n", "  y  \n"])
def test_yes_answers_accept(answer: str) -> None:
    console, _ = _console()
    reader, _ = _reply(answer)
    assert prompt_yes_no("Continue?", timeout=1, reader=reader, console=console) is True


@pytest.mark.parametrize("answer", ["n\n", "yes\n", "\n", "N\n"])
def test_anything_else_declines(answer: str) -> None:
    console, _ = _console()
    reader, _ = _reply(answer)
    assert prompt_yes_no("Continue?", timeout=1, reader=reader, console=console) is False


def test_timeout_declines_and_says_so() -> None:
    console, buf = _console()
    reader, seen = _reply(None)

    assert prompt_yes_no("Empty the Trash?", timeout=5, reader=reader, console=console) is False
    assert seen == [5]
    output = buf.getvalue()
    assert "Empty the Trash? (Y/N): " in output
    assert "Timed out waiting for response" in output


def test_timeout_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DESKX_CONFIRM_TIMEOUT", "2.5")
    assert confirm_timeout() == 2.5

    monkeypatch.setenv("DESKX_CONFIRM_TIMEOUT", "soon")
    assert confirm_timeout() == DEFAULT_TIMEOUT_SECONDS

    monkeypatch.setenv("DESKX_CONFIRM_TIMEOUT", "0")
    assert confirm_timeout() == DEFAULT_TIMEOUT_SECONDS


def test_prompt_uses_environment_timeout_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DESKX_CONFIRM_TIMEOUT", "7")
    console, _ = _console()
    reader, seen = _reply("y")

    prompt_yes_no("Go?", reader=reader, console=console)
    assert seen == [7.0]


def test_non_tty_stdin_never_waits() -> None:
    read = stdin_reader(io.StringIO("y\n"))
    assert read(30) == ""


def test_missing_input_is_not_reported_as_timeout() -> None:
    console, buf = _console()

    assert prompt_yes_no("Clean the logs?", timeout=5, reader=stdin_reader(io.StringIO("")), console=console) is False
    output = buf.getvalue()
    assert "No interactive input available" in output
    assert "Timed out" not in output


def test_make_confirmer_binds_hook() -> None:
    console, _ = _console()
    reader, _ = _reply("y")
    confirm = make_confirmer(timeout=1, reader=reader, console=console)

    assert confirm("Clean the logs?") is True
