"""Flatten a Playwright JSON report into a :class:`RunSummary`.

Playwright nests ``describe`` blocks as ``suites[].suites[]``; specs at any
depth are collected in document order.  Only the first test entry of each
spec (``tests[0]``) is considered, and its ``results`` list holds one element
per attempt.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Mapping, Sequence

from repo_qa.domain.entities import OutcomeStatus, RunSummary, TestOutcome

logger = logging.getLogger(__name__)

SUITE_SEPARATOR = " › "

# Attempt statuses other than "passed" and "skipped" that count as a failure.
_FAILING_STATUSES = frozenset({"failed", "timedOut", "interrupted"})


def derive_status(attempts: Sequence[Mapping[str, Any]]) -> OutcomeStatus:
    """``passed`` iff every attempt passed, else ``failed`` iff any failed."""
    if not attempts:
        return OutcomeStatus.SKIPPED
    statuses = [a.get("status") for a in attempts]
    if all(s == "passed" for s in statuses):
        return OutcomeStatus.PASSED
    if any(s in _FAILING_STATUSES for s in statuses):
        return OutcomeStatus.FAILED
    return OutcomeStatus.SKIPPED


def _first_error(attempts: Sequence[Mapping[str, Any]]) -> str | None:
    for attempt in attempts:
        if attempt.get("status") in _FAILING_STATUSES:
            error = attempt.get("error") or {}
            message = error.get("message") if isinstance(error, Mapping) else None
            if message:
                return str(message)
            return None
    return None


def _attempts_of(spec: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    tests = spec.get("tests") or []
    if not tests:
        return []
    return list(tests[0].get("results") or [])


def _walk_specs(
    suites: Sequence[Mapping[str, Any]], parents: tuple[str, ...] = ()
) -> Iterator[tuple[str, Mapping[str, Any]]]:
    for suite in suites:
        path = (*parents, str(suite.get("title", "")))
        label = SUITE_SEPARATOR.join(p for p in path if p)
        for spec in suite.get("specs") or []:
            yield label, spec
        yield from _walk_specs(suite.get("suites") or [], path)


def to_outcome(suite_label: str, spec: Mapping[str, Any]) -> TestOutcome:
    attempts = _attempts_of(spec)
    return TestOutcome(
        name=str(spec.get("title", "")),
        suite=suite_label,
        status=derive_status(attempts),
        duration=sum(int(a.get("duration") or 0) for a in attempts),
        error=_first_error(attempts),
    )


def aggregate_report(raw: Mapping[str, Any], duration_ms: int = 0) -> RunSummary:
    """Build a summary from a raw report; counts come from the outcome tally."""
    outcomes = [to_outcome(label, spec) for label, spec in _walk_specs(raw.get("suites") or [])]
    summary = RunSummary.from_outcomes(outcomes, duration=duration_ms)
    logger.debug(
        "Aggregated %d specs: %d passed, %d failed, %d skipped",
        summary.total,
        summary.passed,
        summary.failed,
        summary.skipped,
    )
    return summary


def recover_partial(stdout: str, duration_ms: int = 0) -> RunSummary | None:
    """Aggregate the JSON report left on stdout by a failed run, if any."""
    if not stdout.strip():
        return None
    try:
        raw = json.loads(stdout)
    except json.JSONDecodeError:
        logger.warning("Captured runner output is not a JSON report")
        return None
    if not isinstance(raw, dict):
        return None
    return aggregate_report(raw, duration_ms)
