"""Pytest configuration and fixtures for DeskX tests."""
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep user-level DeskX settings out of the test run."""
    for name in ("DESKX_AUTOMOUNT_CONFIG", "DESKX_CONFIRM_TIMEOUT", "DESKX_LOG_LEVEL", "DESKX_THEME"):
        monkeypatch.delenv(name, raising=False)


def pytest_sessionfinish(session, exitstatus):
    """Fail the run when --cov was requested but nothing was measured.

    This catches tests that import from the filesystem path instead of the
    installed package, which otherwise reports 0% coverage silently.
    """
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    coverage_files = list(Path.cwd().glob(".coverage*"))
    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'deskx' (the package) not 'src/deskx' (filesystem path).",
            returncode=1,
        )
