"""Flat-file storage for analyses, test plans, risk reports and run results.

Timestamped files follow one naming contract shared by writer and reader:
``<prefix>-<slug>.<ext>`` where the slug is a UTC timestamp of fixed width
(``2024-01-02T03-04-05.678Z``).  Fixed width and zero padding make the
lexicographic order of names equal to chronological order, which is how the
latest result file is picked.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from repo_qa.domain.entities import RepositorySnapshot, RiskReport, RunSummary, TestSuitePlan
from repo_qa.domain.exceptions import AnalysisFileError, ResultsNotFoundError
from repo_qa.infrastructure.schemas import (
    DescriptorModel,
    RepositorySnapshotModel,
    RiskReportModel,
    RunResultsModel,
)

logger = logging.getLogger(__name__)

RESULTS_PREFIX = "test-results-"
REPORT_PREFIX = "test-report-"

_SLUG_PATTERN = r"\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}\.\d{3}Z"
RESULTS_FILE_RE = re.compile(rf"^{RESULTS_PREFIX}(?P<slug>{_SLUG_PATTERN})\.json$")


def timestamp_slug(moment: datetime | None = None) -> str:
    """Return a filename-safe, fixed-width UTC timestamp."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    millis = moment.microsecond // 1000
    return f"{moment:%Y-%m-%dT%H-%M-%S}.{millis:03d}Z"


def iso_timestamp(moment: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def write_json(payload: Any, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return out


# ── Analysis ────────────────────────────────────────────────────────────────


def save_analysis(snapshot: RepositorySnapshot, path: str | Path) -> Path:
    out = write_json(RepositorySnapshotModel.from_entity(snapshot).to_json_dict(), path)
    logger.info("Analysis saved to %s", out)
    return out


def load_analysis(path: str | Path) -> RepositorySnapshot:
    """Read an ``analyze`` output file back into a snapshot."""
    analysis_path = Path(path)
    logger.info("Loading analysis from %s", analysis_path)
    try:
        raw = analysis_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AnalysisFileError(f"Cannot read analysis file {analysis_path}: {exc}") from exc
    try:
        return RepositorySnapshotModel.model_validate_json(raw).to_entity()
    except ValueError as exc:
        raise AnalysisFileError(f"Invalid analysis file {analysis_path}: {exc}") from exc


# ── Test plan ───────────────────────────────────────────────────────────────


def save_test_plan(plan: TestSuitePlan, output_dir: str | Path) -> list[Path]:
    """Write one ``<category>.json`` per category plus ``all-tests.json``."""
    directory = Path(output_dir)
    written: list[Path] = []
    combined: dict[str, list[dict[str, Any]]] = {}

    for category, tests in plan.by_category().items():
        payload = [DescriptorModel.from_entity(t).to_json_dict(exclude_none=True) for t in tests]
        combined[category] = payload
        out = write_json(payload, directory / f"{category}.json")
        logger.info("Saved %d %s to %s", len(tests), category, out)
        written.append(out)

    summary_path = write_json(combined, directory / "all-tests.json")
    logger.info("Saved test case summary to %s", summary_path)
    written.append(summary_path)
    return written


# ── Risk report ─────────────────────────────────────────────────────────────


def save_risk_report(report: RiskReport, path: str | Path) -> Path:
    out = write_json(RiskReportModel.from_entity(report).to_json_dict(exclude_none=True), path)
    logger.info("Risk analysis saved to %s", out)
    return out


# ── Run results ─────────────────────────────────────────────────────────────


def save_run_results(
    run: RunSummary, results_dir: str | Path, moment: datetime | None = None
) -> Path:
    """Persist *run* as ``test-results-<slug>.json`` and return the path."""
    out = Path(results_dir) / f"{RESULTS_PREFIX}{timestamp_slug(moment)}.json"
    write_json(RunResultsModel.from_entity(run).to_json_dict(), out)
    logger.info("Test results saved to %s", out)
    return out


def find_latest_results(results_dir: str | Path) -> Path:
    """Return the newest ``test-results-*.json`` file in *results_dir*.

    Only names matching the exact writer format are considered.
    """
    directory = Path(results_dir)
    try:
        names = [p.name for p in directory.iterdir() if p.is_file()]
    except OSError as exc:
        raise ResultsNotFoundError(f"Cannot read results directory {directory}: {exc}") from exc

    candidates = sorted((n for n in names if RESULTS_FILE_RE.match(n)), reverse=True)
    if not candidates:
        raise ResultsNotFoundError(f"No test result files found in {directory}")
    return directory / candidates[0]


def load_run_results(path: str | Path) -> RunSummary:
    result_path = Path(path)
    try:
        raw = result_path.read_text(encoding="utf-8")
        return RunResultsModel.model_validate_json(raw).to_entity()
    except (OSError, ValueError) as exc:
        raise ResultsNotFoundError(f"Cannot load test results {result_path}: {exc}") from exc


def report_path(output_dir: str | Path, extension: str, slug: str) -> Path:
    return Path(output_dir) / f"{REPORT_PREFIX}{slug}.{extension}"
