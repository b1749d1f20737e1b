"""Tests for services/report_renderer.py."""

import json
from datetime import datetime, timezone

import pytest

from repo_qa.domain.entities import RunSummary
from repo_qa.domain.exceptions import ReportRenderError
from repo_qa.services import report_renderer
from repo_qa.services.report_renderer import (
    build_json_report,
    generate_reports,
    pass_rate,
    render_html,
)

MOMENT = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


class TestPassRate:
    def test_empty_run(self):
        assert pass_rate(RunSummary.empty()) == "0.00"

    def test_three_of_four(self, mixed_run):
        assert pass_rate(mixed_run) == "75.00"


class TestRenderHtml:
    def test_summary_section(self, mixed_run):
        page = render_html(mixed_run, MOMENT)
        assert page.startswith("<!DOCTYPE html>")
        assert "Pass Rate: <strong>75.00%</strong>" in page
        assert 'style="width: 75.00%"' in page
        assert "Total Duration: 5.00 seconds" in page
        assert '<div class="stat-value">4</div>' in page

    def test_user_text_is_escaped(self, mixed_run):
        page = render_html(mixed_run, MOMENT)
        assert "checkout &lt;completes&gt;" in page
        assert "expected &lt;b&gt;Thank you&lt;/b&gt; &amp; got nothing" in page
        assert "<b>Thank you</b>" not in page

    def test_error_row_follows_failed_test_only(self, mixed_run):
        page = render_html(mixed_run, MOMENT)
        assert page.count('class="error-message"') == 1
        failed_row = page.index("checkout &lt;completes&gt;")
        assert page.index('class="error-message"') > failed_row

    def test_run_level_error_is_shown(self):
        page = render_html(RunSummary.empty(error="npx <missing>"), MOMENT)
        assert "npx &lt;missing&gt;" in page
        assert "Pass Rate: <strong>0.00%</strong>" in page

    def test_per_test_duration_in_seconds(self, mixed_run):
        assert '<td class="test-duration">2.30s</td>' in render_html(mixed_run, MOMENT)


class TestJsonReport:
    def test_shape(self, mixed_run):
        report = build_json_report(mixed_run, MOMENT)
        assert report["metadata"] == {
            "generated": "2024-01-02T03:04:05.678Z",
            "title": "Test Execution Report",
            "format": "json",
        }
        assert report["results"]["summary"] == {
            "total": 4,
            "passed": 3,
            "failed": 1,
            "skipped": 0,
            "duration": 5000,
        }
        assert [t["status"] for t in report["results"]["tests"]] == [
            "passed",
            "passed",
            "passed",
            "failed",
        ]
        assert "error" not in report["results"]


class TestGenerateReports:
    def test_all_writes_html_and_json(self, tmp_path, mixed_run):
        paths = generate_reports(mixed_run, tmp_path / "reports", "all", now=lambda: MOMENT)
        assert set(paths) == {"html", "json"}
        assert paths["html"].name == "test-report-2024-01-02T03-04-05.678Z.html"
        assert paths["json"].name == "test-report-2024-01-02T03-04-05.678Z.json"
        data = json.loads(paths["json"].read_text(encoding="utf-8"))
        assert data["results"]["summary"]["total"] == 4

    def test_single_format(self, tmp_path, mixed_run):
        paths = generate_reports(mixed_run, tmp_path, "json", now=lambda: MOMENT)
        assert list(paths) == ["json"]
        assert list(tmp_path.glob("*.html")) == []

    def test_unknown_format(self, tmp_path, mixed_run):
        with pytest.raises(ReportRenderError):
            generate_reports(mixed_run, tmp_path, "pdf")

    def test_one_failing_format_does_not_block_the_other(self, tmp_path, mixed_run, monkeypatch):
        def broken(summary, generated_at):
            raise ValueError("template exploded")

        monkeypatch.setattr(report_renderer, "render_html", broken)
        with pytest.raises(ReportRenderError, match="html"):
            generate_reports(mixed_run, tmp_path, "all", now=lambda: MOMENT)
        assert [p.suffix for p in tmp_path.iterdir()] == [".json"]

    def test_unexpected_error_in_one_format_is_isolated(self, tmp_path, mixed_run, monkeypatch):
        def broken(summary, generated_at):
            raise TypeError("unsupported operand")

        monkeypatch.setattr(report_renderer, "build_json_report", broken)
        with pytest.raises(ReportRenderError, match="json: unsupported operand"):
            generate_reports(mixed_run, tmp_path, "all", now=lambda: MOMENT)
        assert [p.suffix for p in tmp_path.iterdir()] == [".html"]
