"""Configuration-driven batch operation runner."""

from deskx.batch.runner import run
from deskx.batch.types import (
    ActionResult,
    Outcome,
    OutcomeKind,
    OutcomeRecord,
    Precheck,
    Readiness,
    RunPolicy,
    RunResult,
    Target,
)

__all__ = [
    "ActionResult",
    "Outcome",
    "OutcomeKind",
    "OutcomeRecord",
    "Precheck",
    "Readiness",
    "RunPolicy",
    "RunResult",
    "Target",
    "run",
]
