"""Render a run summary as a self-contained HTML page and/or a JSON report.

The HTML page carries its stylesheet inline and needs no network access.
Every string that comes from test output is escaped before it is embedded.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Any, Callable

from repo_qa.domain.entities import RunSummary, TestOutcome
from repo_qa.domain.exceptions import ReportRenderError
from repo_qa.infrastructure.schemas import RunResultsModel
from repo_qa.infrastructure.storage import iso_timestamp, report_path, timestamp_slug

logger = logging.getLogger(__name__)

REPORT_TITLE = "Test Execution Report"

FORMATS_BY_OPTION: dict[str, tuple[str, ...]] = {
    "html": ("html",),
    "json": ("json",),
    "all": ("html", "json"),
}


def pass_rate(summary: RunSummary) -> str:
    """Percentage of passed tests with two decimals; ``"0.00"`` for an empty run."""
    if summary.total <= 0:
        return "0.00"
    return f"{summary.passed / summary.total * 100:.2f}"


def _seconds(ms: int) -> str:
    return f"{ms / 1000:.2f}"


# ── HTML ────────────────────────────────────────────────────────────────────

_STYLE = """\
    body {
      font-family: Arial, sans-serif;
      line-height: 1.6;
      max-width: 1200px;
      margin: 0 auto;
      padding: 20px;
      color: #333;
    }
    h1, h2, h3 { color: #222; }
    .summary {
      background-color: #f5f5f5;
      padding: 20px;
      border-radius: 5px;
      margin-bottom: 20px;
    }
    .stats {
      display: flex;
      flex-wrap: wrap;
      gap: 20px;
      margin-bottom: 20px;
    }
    .stat-box {
      padding: 15px;
      border-radius: 5px;
      min-width: 150px;
      box-shadow: 0 2px 5px rgba(0,0,0,0.1);
    }
    .total { background-color: #e3f2fd; border-left: 5px solid #2196f3; }
    .passed { background-color: #e8f5e9; border-left: 5px solid #4caf50; }
    .failed { background-color: #ffebee; border-left: 5px solid #f44336; }
    .skipped { background-color: #fff8e1; border-left: 5px solid #ffc107; }
    .tests { margin-top: 30px; }
    table { width: 100%; border-collapse: collapse; }
    th, td { padding: 12px; text-align: left; border-bottom: 1px solid #ddd; }
    th { background-color: #f8f8f8; }
    tr:hover { background-color: #f5f5f5; }
    .status-passed { color: #4caf50; font-weight: bold; }
    .status-failed { color: #f44336; font-weight: bold; }
    .status-skipped { color: #ff9800; font-weight: bold; }
    .error-message {
      background-color: #ffebee;
      padding: 10px;
      border-left: 5px solid #f44336;
      font-family: monospace;
      white-space: pre-wrap;
      margin-top: 10px;
    }
    .run-error { margin-bottom: 20px; }
    .test-duration { color: #777; font-size: 0.9em; }
    .timestamp { color: #777; font-size: 0.9em; margin-bottom: 20px; }
    .progress-bar {
      height: 20px;
      background-color: #e0e0e0;
      border-radius: 10px;
      margin: 20px 0;
      overflow: hidden;
    }
    .progress-fill { height: 100%; background-color: #4caf50; }
"""


def _stat_box(css_class: str, label: str, value: int) -> str:
    return (
        f'      <div class="stat-box {css_class}">\n'
        f"        <h3>{label}</h3>\n"
        f'        <div class="stat-value">{value}</div>\n'
        f"      </div>"
    )


def _test_rows(test: TestOutcome) -> str:
    status = test.status.value
    row = (
        "        <tr>\n"
        f"          <td>{escape(test.name)}</td>\n"
        f"          <td>{escape(test.suite)}</td>\n"
        f'          <td class="status-{status}">{status.upper()}</td>\n'
        f'          <td class="test-duration">{_seconds(test.duration)}s</td>\n'
        "        </tr>"
    )
    if test.error:
        row += (
            "\n        <tr>\n"
            '          <td colspan="4">\n'
            f'            <div class="error-message">{escape(test.error)}</div>\n'
            "          </td>\n"
            "        </tr>"
        )
    return row


def render_html(summary: RunSummary, generated_at: datetime) -> str:
    """Return the full HTML document for *summary*."""
    rate = pass_rate(summary)
    boxes = "\n".join(
        [
            _stat_box("total", "Total Tests", summary.total),
            _stat_box("passed", "Passed", summary.passed),
            _stat_box("failed", "Failed", summary.failed),
            _stat_box("skipped", "Skipped", summary.skipped),
        ]
    )
    rows = "\n".join(_test_rows(t) for t in summary.tests)
    run_error = (
        f'  <div class="error-message run-error">{escape(summary.error)}</div>\n'
        if summary.error
        else ""
    )
    generated = generated_at.strftime("%Y-%m-%d %H:%M:%S")

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Test Report - {escape(timestamp_slug(generated_at))}</title>
  <style>
{_STYLE}  </style>
</head>
<body>
  <h1>{REPORT_TITLE}</h1>
  <div class="timestamp">Generated on: {generated}</div>
{run_error}
  <div class="summary">
    <h2>Summary</h2>
    <div class="progress-bar">
      <div class="progress-fill" style="width: {rate}%"></div>
    </div>
    <p>Pass Rate: <strong>{rate}%</strong></p>

    <div class="stats">
{boxes}
    </div>

    <p>Total Duration: {_seconds(summary.duration)} seconds</p>
  </div>

  <div class="tests">
    <h2>Test Results</h2>
    <table>
      <thead>
        <tr>
          <th>Test Name</th>
          <th>Suite</th>
          <th>Status</th>
          <th>Duration</th>
        </tr>
      </thead>
      <tbody>
{rows}
      </tbody>
    </table>
  </div>
</body>
</html>
"""


# ── JSON ────────────────────────────────────────────────────────────────────


def build_json_report(summary: RunSummary, generated_at: datetime) -> dict[str, Any]:
    return {
        "metadata": {
            "generated": iso_timestamp(generated_at),
            "title": REPORT_TITLE,
            "format": "json",
        },
        "results": RunResultsModel.from_entity(summary).to_json_dict(),
    }


def _render(report_format: str, summary: RunSummary, generated_at: datetime) -> str:
    if report_format == "html":
        return render_html(summary, generated_at)
    return json.dumps(build_json_report(summary, generated_at), indent=2)


# ── Orchestration ───────────────────────────────────────────────────────────


def generate_reports(
    summary: RunSummary,
    output_dir: str | Path,
    report_format: str = "html",
    now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
) -> dict[str, Path]:
    """Write one report file per requested format and return their paths.

    Formats are rendered independently.  If any of them fails, the others are
    still written and :class:`ReportRenderError` is raised at the end naming
    the failed formats.
    """
    try:
        formats = FORMATS_BY_OPTION[report_format]
    except KeyError:
        raise ReportRenderError(
            f"Unsupported report format {report_format!r}; "
            f"expected one of {', '.join(FORMATS_BY_OPTION)}"
        ) from None

    directory = Path(output_dir)
    logger.info("Generating %s reports in %s", report_format, directory)

    generated_at = now()
    slug = timestamp_slug(generated_at)
    written: dict[str, Path] = {}
    failures: dict[str, str] = {}

    for fmt in formats:
        logger.info("Generating %s report...", fmt.upper())
        out = report_path(directory, fmt, slug)
        try:
            content = _render(fmt, summary, generated_at)
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(content, encoding="utf-8")
        except Exception as exc:
            logger.exception("Error generating %s report: %s", fmt.upper(), exc)
            failures[fmt] = str(exc)
            continue
        logger.info("%s report generated: %s", fmt.upper(), out)
        written[fmt] = out

    if failures:
        detail = "; ".join(f"{fmt}: {err}" for fmt, err in failures.items())
        raise ReportRenderError(f"Failed to generate {', '.join(failures)} report(s): {detail}")

    logger.info("Reports generated: %s", ", ".join(written))
    return written
