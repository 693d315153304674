from __future__ import annotations

import pytest

from deskx import ui
from deskx.batch import OutcomeKind, OutcomeRecord, RunResult


def _result(*records: OutcomeRecord) -> RunResult:
    result = RunResult()
    for entry in records:
        result.record(entry)
    return result.finalize()


def test_neon_toggle(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DESKX_NEON", raising=False)
    assert ui.neon_enabled() is True
    monkeypatch.setenv("DESKX_NEON", "0")
    assert ui.neon_enabled() is False


def test_unknown_theme_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DESKX_THEME", "nope")
    assert ui.get_theme_palette() == ui.THEMES["mintwave"]
    assert ui.get_theme_palette("magma") == ui.THEMES["magma"]


def test_banner_only_for_bare_help_and_version(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DESKX_NEON", "1")
    assert ui.should_show_banner(["deskx"]) is True
    assert ui.should_show_banner(["deskx", "--version"]) is True
    assert ui.should_show_banner(["deskx", "cleanup"]) is False
    monkeypatch.setenv("DESKX_NEON", "0")
    assert ui.should_show_banner(["deskx"]) is False


@pytest.mark.parametrize(
    ("kind", "marker"),
    [
        (OutcomeKind.COMPLETED, "[ok]"),
        (OutcomeKind.ALREADY_DONE, "[skip]"),
        (OutcomeKind.DECLINED, "[skip]"),
        (OutcomeKind.BLOCKED, "[fail]"),
        (OutcomeKind.ACTION_FAILED, "[fail]"),
    ],
)
def test_plain_markers(monkeypatch: pytest.MonkeyPatch, kind: OutcomeKind, marker: str) -> None:
    monkeypatch.setenv("DESKX_NEON", "0")
    assert ui.format_record(OutcomeRecord("cache", kind, "why")) == f"{marker} cache: why"


def test_freed_shown_in_megabytes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DESKX_NEON", "0")
    entry = OutcomeRecord("trash", OutcomeKind.COMPLETED, None, 5 * 1048576 + 10)
    assert ui.format_record(entry, show_freed=True) == "[ok] trash (freed 5 MB)"
    assert ui.format_record(entry) == "[ok] trash"


def test_plain_summary(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("DESKX_NEON", "0")
    result = _result(
        OutcomeRecord("cache", OutcomeKind.COMPLETED, None, 3 * 1048576),
        OutcomeRecord("trash", OutcomeKind.DECLINED, "declined"),
        OutcomeRecord("journals", OutcomeKind.BLOCKED, "Missing required commands: journalctl"),
    )

    ui.render_run_result(result, show_freed=True)

    out = capsys.readouterr().out.splitlines()
    assert out[:3] == [
        "[ok] cache (freed 3 MB)",
        "[skip] trash: declined",
        "[fail] journals: Missing required commands: journalctl",
    ]
    assert out[-5:] == ["Summary:", "   Succeeded: 1", "   Skipped: 1", "   Failed: 1", "   Total freed: 3 MB"]


def test_total_freed_hidden_when_nothing_freed(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("DESKX_NEON", "0")
    ui.render_run_result(_result(OutcomeRecord("tmp", OutcomeKind.COMPLETED, None, 0)), show_freed=True)
    assert "Total freed" not in capsys.readouterr().out
