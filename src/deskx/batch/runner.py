"""Sequential batch runner shared by every deskx tool."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from deskx.batch.types import (
    ActionResult,
    OutcomeKind,
    OutcomeRecord,
    Precheck,
    Readiness,
    RunPolicy,
    RunResult,
    Target,
)

logger = logging.getLogger(__name__)


def run(targets: Sequence[Target], policy: RunPolicy | None = None) -> RunResult:
    """Process every target in order and return the finalized result.

    Per-target failures are recorded and never stop the batch. Nothing is
    rolled back.
    """
    policy = policy or RunPolicy()
    result = RunResult()
    for target in targets:
        result.record(_process(target, policy))
    return result.finalize()


def _process(target: Target, policy: RunPolicy) -> OutcomeRecord:
    check = _evaluate(target)

    if check.state is Readiness.ALREADY_DONE and policy.skip_satisfied:
        logger.info("%s: already done%s", target.name, f" ({check.reason})" if check.reason else "")
        return OutcomeRecord(target.name, OutcomeKind.ALREADY_DONE, check.reason)

    if check.state is Readiness.BLOCKED:
        logger.warning("%s: blocked: %s", target.name, check.reason)
        return OutcomeRecord(target.name, OutcomeKind.BLOCKED, check.reason)

    if target.confirm_prompt and policy.confirmation_active():
        if not _ask(target.name, target.confirm_prompt, policy.confirm):
            logger.info("%s: declined", target.name)
            return OutcomeRecord(target.name, OutcomeKind.DECLINED, "declined")

    before = _measure(target.name, target.measurement) if target.measurement else 0

    outcome = _invoke(target)
    if not outcome.ok:
        logger.warning("%s: action failed: %s", target.name, outcome.message)
        return OutcomeRecord(target.name, OutcomeKind.ACTION_FAILED, outcome.message)

    freed: int | None = None
    if target.measurement:
        after = _measure(target.name, target.measurement)
        freed = max(0, before - after)

    return OutcomeRecord(target.name, OutcomeKind.COMPLETED, outcome.message or None, freed)


def _evaluate(target: Target) -> Precheck:
    try:
        return target.precondition()
    except Exception as exc:
        return Precheck.blocked(f"precondition error: {exc}")


def _ask(name: str, prompt: str, confirm: Callable[[str], bool]) -> bool:
    # an unusable prompt hook declines
    try:
        return bool(confirm(prompt))
    except Exception as exc:
        logger.debug("%s: confirmation unavailable: %s", name, exc)
        return False


def _invoke(target: Target) -> ActionResult:
    try:
        return target.action()
    except Exception as exc:
        return ActionResult.failure(str(exc))


def _measure(name: str, probe: Callable[[], int]) -> int:
    try:
        value = int(probe())
    except Exception as exc:
        logger.debug("%s: measurement unavailable: %s", name, exc)
        return 0
    return value
