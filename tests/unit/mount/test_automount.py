"""Unit tests for rclone automount targets."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from deskx.batch import OutcomeKind, RunPolicy, run
from deskx.errors import ConfigError
from deskx.exec import ExecResult
from deskx.mount.automount import (
    build_mount_argv,
    build_mount_targets,
    configured_remotes,
    prepare_directories,
    validate_remotes,
)
from deskx.mount.config import AutomountConfig, RemoteSpec


class _RcloneStub:
    def __init__(self, codes: dict[str, int] | None = None, listing: str = ""):
        self.codes = codes or {}
        self.listing = listing
        self.calls: list[list[str]] = []

    def __call__(self, argv: list[str], *, cwd: Path | None = None, check: bool = False) -> ExecResult:
        _ = (cwd, check)
        self.calls.append(argv)
        if argv[:2] == ["rclone", "listremotes"]:
            return ExecResult(argv=tuple(argv), cwd=None, returncode=0, stdout=self.listing, stderr="")
        remote = argv[2]
        code = self.codes.get(remote, 0)
        stderr = "" if code == 0 else f"Fatal error: failed to mount {remote}"
        return ExecResult(argv=tuple(argv), cwd=None, returncode=code, stdout="", stderr=stderr)


def _config(tmp_path: Path, *mounts: str) -> AutomountConfig:
    return AutomountConfig(
        cloud_dir=tmp_path / "Cloud",
        log_dir=tmp_path / "logs",
        remotes=tuple(RemoteSpec(remote=f"{m}:/", mount=m, log_file=f"{m}.log") for m in mounts),
    )


def test_mount_argv_layout(tmp_path: Path) -> None:
    cfg = AutomountConfig(
        cloud_dir=tmp_path,
        log_dir=tmp_path / "logs",
        remotes=(RemoteSpec(remote="MEGA:/", mount="MEGA", log_file="mega.log", args=("--read-only",)),),
    )

    argv = build_mount_argv(cfg, cfg.remotes[0])

    assert argv == [
        "rclone",
        "mount",
        "MEGA:/",
        str(tmp_path / "MEGA"),
        "--log-file",
        str(tmp_path / "logs" / "mega.log"),
        "--vfs-cache-mode",
        "full",
        "--links",
        "--daemon",
        "--read-only",
    ]


def test_configured_remotes_strips_colons(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("deskx.mount.automount.run_command", _RcloneStub(listing="MEGA:\nGoogleDrive:\n\n"))
    assert configured_remotes() == {"MEGA", "GoogleDrive"}


def test_validate_remotes_rejects_unknown(tmp_path: Path) -> None:
    cfg = _config(tmp_path, "MEGA", "OneDrive")
    with pytest.raises(ConfigError, match="Remote 'OneDrive' not configured in rclone"):
        validate_remotes(cfg, {"MEGA"})


def test_prepare_directories_creates_everything(tmp_path: Path) -> None:
    cfg = _config(tmp_path, "MEGA", "Drive")
    prepare_directories(cfg)

    assert (tmp_path / "logs").is_dir()
    assert (tmp_path / "Cloud" / "MEGA").is_dir()
    assert (tmp_path / "Cloud" / "Drive").is_dir()


def test_mounts_in_declaration_order_and_continues_past_failure(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    stub = _RcloneStub(codes={"B:/": 1})
    monkeypatch.setattr("deskx.mount.automount.run_command", stub)
    cfg = _config(tmp_path, "A", "B", "C")
    prepare_directories(cfg)

    result = run(build_mount_targets(cfg), RunPolicy(assume_yes=True))

    assert [call[2] for call in stub.calls] == ["A:/", "B:/", "C:/"]
    assert [(r.name, r.kind) for r in result.records] == [
        ("A", OutcomeKind.COMPLETED),
        ("B", OutcomeKind.ACTION_FAILED),
        ("C", OutcomeKind.COMPLETED),
    ]
    assert "failed to mount B:/" in (result.records[1].message or "")
    assert result.exit_code == 1


def test_already_mounted_is_skipped(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    stub = _RcloneStub()
    monkeypatch.setattr("deskx.mount.automount.run_command", stub)
    cfg = _config(tmp_path, "A", "B")
    prepare_directories(cfg)
    mounted = str(tmp_path / "Cloud" / "A")
    real_ismount = os.path.ismount
    monkeypatch.setattr(os.path, "ismount", lambda p: str(p) == mounted or real_ismount(p))

    result = run(build_mount_targets(cfg), RunPolicy(assume_yes=True))

    assert [call[2] for call in stub.calls] == ["B:/"]
    assert result.records[0].kind is OutcomeKind.ALREADY_DONE
    assert result.counts() == {"succeeded": 1, "skipped": 1, "failed": 0}
    assert result.exit_code == 0


def test_non_empty_mount_dir_is_blocked(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    stub = _RcloneStub()
    monkeypatch.setattr("deskx.mount.automount.run_command", stub)
    cfg = _config(tmp_path, "A")
    prepare_directories(cfg)
    (tmp_path / "Cloud" / "A" / "stray.txt").write_text("x", encoding="utf-8")

    result = run(build_mount_targets(cfg), RunPolicy(assume_yes=True))

    assert stub.calls == []
    assert result.records[0].kind is OutcomeKind.BLOCKED
    assert "mount dir not empty" in (result.records[0].message or "")
