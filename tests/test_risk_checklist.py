"""Tests for services/risk_checklist.py against temporary repositories."""

from pathlib import Path

import pytest

from repo_qa.domain.entities import RiskLevel
from repo_qa.domain.exceptions import RepositoryPathNotFoundError
from repo_qa.services import risk_checklist
from repo_qa.services.demo_site import demo_site_findings
from repo_qa.services.risk_checklist import (
    RiskChecklistEvaluator,
    find_root_files,
    scan_for_secrets,
)


def _types(findings):
    return [f.type for f in findings]


class TestEmptyRepository:
    """An empty directory triggers the "missing" checks only."""

    def test_generic_findings(self, tmp_path):
        report = RiskChecklistEvaluator().evaluate(tmp_path)
        assert report.security_risks == []
        assert _types(report.code_quality_risks) == ["no_linting", "no_tests"]
        assert _types(report.configuration_risks) == ["no_ci_cd"]
        assert report.summary.total_risks >= 3

    def test_summary_counts(self, tmp_path):
        summary = RiskChecklistEvaluator().evaluate(tmp_path).summary
        assert summary.total_risks == 3
        assert summary.high_risks == 0
        assert summary.medium_risks == 1
        assert summary.low_risks == 2

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(RepositoryPathNotFoundError):
            RiskChecklistEvaluator().evaluate(tmp_path / "nope")


class TestSecurityPass:
    def test_env_file_is_secret_exposure(self, tmp_path):
        (tmp_path / ".env").write_text("TOKEN=1")
        (tmp_path / "prod.env").write_text("TOKEN=2")
        report = RiskChecklistEvaluator().evaluate(tmp_path)
        finding = report.security_risks[0]
        assert finding.type == "secret_exposure"
        assert finding.level is RiskLevel.HIGH
        assert finding.files == [str(tmp_path / ".env"), str(tmp_path / "prod.env")]

    def test_env_suffix_is_literal(self, tmp_path):
        """``config.xenv`` does not end with ``.env``."""
        (tmp_path / "config.xenv").write_text("x")
        report = RiskChecklistEvaluator().evaluate(tmp_path)
        assert "secret_exposure" not in _types(report.security_risks)

    def test_hardcoded_secret_lists_all_matching_files(self, tmp_path):
        (tmp_path / "settings.py").write_text("API_KEY = 'abc'\n")
        (tmp_path / "db.config").write_text("Password=hunter2\n")
        (tmp_path / "clean.js").write_text("console.log('hi')\n")
        (tmp_path / "notes.txt").write_text("password\n")
        report = RiskChecklistEvaluator().evaluate(tmp_path)
        finding = next(f for f in report.security_risks if f.type == "hardcoded_secrets")
        assert finding.files == [str(tmp_path / "db.config"), str(tmp_path / "settings.py")]

    def test_nested_files_are_not_scanned(self, tmp_path):
        nested = tmp_path / "src"
        nested.mkdir()
        (nested / "secrets.py").write_text("secret = 1")
        report = RiskChecklistEvaluator().evaluate(tmp_path)
        assert "hardcoded_secrets" not in _types(report.security_risks)

    def test_package_json_and_auth_dir(self, tmp_path):
        (tmp_path / "package.json").write_text("{}")
        (tmp_path / "auth").mkdir()
        report = RiskChecklistEvaluator().evaluate(tmp_path)
        assert _types(report.security_risks) == ["dependency_check", "auth_review"]
        assert all(f.level is RiskLevel.MEDIUM for f in report.security_risks)


class TestQualityAndConfigurationPasses:
    def test_well_configured_repository(self, tmp_path):
        (tmp_path / ".eslintrc").write_text("{}")
        (tmp_path / "specs").mkdir()
        (tmp_path / "Jenkinsfile").write_text("pipeline {}")
        (tmp_path / "package.json").write_text("{}")
        (tmp_path / "yarn.lock").write_text("")
        report = RiskChecklistEvaluator().evaluate(tmp_path)
        assert report.code_quality_risks == []
        assert report.configuration_risks == []

    def test_nested_ci_config(self, tmp_path):
        (tmp_path / ".github" / "workflows").mkdir(parents=True)
        report = RiskChecklistEvaluator().evaluate(tmp_path)
        assert "no_ci_cd" not in _types(report.configuration_risks)

    def test_package_json_without_lock(self, tmp_path):
        (tmp_path / "package.json").write_text("{}")
        report = RiskChecklistEvaluator().evaluate(tmp_path)
        assert "no_package_lock" in _types(report.configuration_risks)


class TestAlwaysRunFindings:
    def test_appended_after_generic_findings(self, tmp_path):
        evaluator = RiskChecklistEvaluator(always_run=demo_site_findings())
        report = evaluator.evaluate(tmp_path)
        assert _types(report.security_risks) == ["login_security", "checkout_security"]
        assert _types(report.code_quality_risks) == ["no_linting", "no_tests", "web_accessibility"]
        assert _types(report.configuration_risks) == ["no_ci_cd", "browser_compatibility"]
        assert report.summary.total_risks == 7
        assert report.summary.high_risks == 2
        assert report.summary.medium_risks == 3
        assert report.summary.low_risks == 2

    def test_checkout_url_is_joined(self):
        findings = demo_site_findings("https://shop.example/")
        assert findings.security[1].url == "https://shop.example/checkout-step-one.html"


class TestPassIsolation:
    """An I/O failure inside one pass becomes a single analysis_error finding."""

    def test_security_failure_does_not_stop_other_passes(self, tmp_path, monkeypatch):
        def broken(repo_path):
            raise PermissionError("denied")

        monkeypatch.setattr(
            risk_checklist,
            "_PASSES",
            (
                risk_checklist._PassSpec("security", broken, RiskLevel.MEDIUM),
                *risk_checklist._PASSES[1:],
            ),
        )
        report = RiskChecklistEvaluator(always_run=demo_site_findings()).evaluate(tmp_path)

        error = report.security_risks[0]
        assert error.type == "analysis_error"
        assert error.level is RiskLevel.MEDIUM
        assert error.description == "Error during security analysis: denied"
        assert error.remediation == "Review repository manually for security issues"
        assert _types(report.security_risks)[1:] == ["login_security", "checkout_security"]
        assert _types(report.code_quality_risks)[:2] == ["no_linting", "no_tests"]

    def test_unreadable_file_only_skips_that_file(self, tmp_path, monkeypatch):
        """Other security checks and other scanned files still report."""
        (tmp_path / ".env").write_text("TOKEN=1")
        (tmp_path / "package.json").write_text("{}")
        (tmp_path / "mem.js").write_text("x")
        (tmp_path / "keys.py").write_text("api_key = 1")
        original_read = Path.read_text

        def read_text(self, *args, **kwargs):
            if self.name == "mem.js":
                raise OSError(5, "Input/output error")
            return original_read(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", read_text)
        report = RiskChecklistEvaluator().evaluate(tmp_path)

        assert _types(report.security_risks) == [
            "secret_exposure",
            "hardcoded_secrets",
            "dependency_check",
        ]
        assert report.security_risks[1].files == [str(tmp_path / "keys.py")]


class TestHelpers:
    def test_find_root_files_skips_directories(self, tmp_path):
        (tmp_path / "a.py").write_text("")
        (tmp_path / "pkg.py").mkdir()
        assert find_root_files(tmp_path, (".py",)) == [str(tmp_path / "a.py")]

    def test_scan_tolerates_binary_content(self, tmp_path):
        blob = tmp_path / "blob.js"
        blob.write_bytes(b"\xff\xfe credential")
        assert scan_for_secrets([str(blob)]) == [str(blob)]
