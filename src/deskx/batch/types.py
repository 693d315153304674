"""Batch runner types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class Readiness(str, Enum):
    """Precondition verdict for a single target."""

    READY = "ready"
    ALREADY_DONE = "already_done"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class Precheck:
    """Result of evaluating a target precondition."""

    state: Readiness
    reason: str | None = None

    @classmethod
    def ready(cls) -> Precheck:
        return cls(Readiness.READY)

    @classmethod
    def already_done(cls, reason: str | None = None) -> Precheck:
        return cls(Readiness.ALREADY_DONE, reason)

    @classmethod
    def blocked(cls, reason: str) -> Precheck:
        return cls(Readiness.BLOCKED, reason)


@dataclass(frozen=True)
class ActionResult:
    """Outcome reported by a target action."""

    ok: bool
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> ActionResult:
        return cls(True, message)

    @classmethod
    def failure(cls, message: str) -> ActionResult:
        return cls(False, message)


@dataclass(frozen=True)
class Target:
    """One unit of batch work.

    A target with ``confirm_prompt`` set is confirmable: when the run policy
    asks for confirmation, the prompt is shown before the action runs.
    """

    name: str
    precondition: Callable[[], Precheck]
    action: Callable[[], ActionResult]
    measurement: Callable[[], int] | None = None
    confirm_prompt: str | None = None


class Outcome(str, Enum):
    """Counter a target outcome is recorded under."""

    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


class OutcomeKind(str, Enum):
    """Finer classification kept in the outcome log."""

    COMPLETED = "completed"
    ALREADY_DONE = "already_done"
    DECLINED = "declined"
    BLOCKED = "blocked"
    ACTION_FAILED = "action_failed"


_KIND_TO_OUTCOME: dict[OutcomeKind, Outcome] = {
    OutcomeKind.COMPLETED: Outcome.SUCCEEDED,
    OutcomeKind.ALREADY_DONE: Outcome.SKIPPED,
    OutcomeKind.DECLINED: Outcome.SKIPPED,
    OutcomeKind.BLOCKED: Outcome.FAILED,
    OutcomeKind.ACTION_FAILED: Outcome.FAILED,
}


@dataclass(frozen=True)
class OutcomeRecord:
    """Log entry for one processed target."""

    name: str
    kind: OutcomeKind
    message: str | None = None
    freed: int | None = None

    @property
    def outcome(self) -> Outcome:
        return _KIND_TO_OUTCOME[self.kind]


class ResultFinalizedError(RuntimeError):
    """Raised when recording into a finalized RunResult."""


@dataclass
class RunResult:
    """Append-only accumulator for one batch run."""

    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    total_freed: int = 0
    records: list[OutcomeRecord] = field(default_factory=list)
    finalized: bool = False

    def record(self, entry: OutcomeRecord) -> None:
        if self.finalized:
            raise ResultFinalizedError(f"cannot record {entry.name!r}: run result is finalized")
        outcome = entry.outcome
        if outcome is Outcome.SUCCEEDED:
            self.succeeded += 1
        elif outcome is Outcome.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
        if entry.freed:
            self.total_freed += entry.freed
        self.records.append(entry)

    def finalize(self) -> RunResult:
        self.finalized = True
        return self

    @property
    def exit_code(self) -> int:
        return 1 if self.failed > 0 else 0

    def counts(self) -> dict[str, int]:
        return {
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "failed": self.failed,
        }


def _never_confirm(prompt: str) -> bool:
    _ = prompt
    return False


@dataclass(frozen=True)
class RunPolicy:
    """Global flags for one runner invocation.

    ``confirm`` defaults to declining everything so a policy built without a
    prompt hook never blocks on stdin.
    """

    assume_yes: bool = False
    skip_satisfied: bool = True
    confirm: Callable[[str], bool] = _never_confirm

    def confirmation_active(self) -> bool:
        return not self.assume_yes
