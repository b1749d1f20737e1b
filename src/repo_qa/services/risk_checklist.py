"""Risk checklist: fixed existence / content checks against a local clone.

File discovery only looks at the repository root; nested directories are
never scanned.  Each of the three passes is isolated: an I/O failure inside a
pass becomes a single ``analysis_error`` finding for that pass and the other
passes still run.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from repo_qa.domain.entities import RiskFinding, RiskLevel, RiskReport, RiskSummary
from repo_qa.domain.exceptions import RepositoryPathNotFoundError
from repo_qa.services.demo_site import AlwaysRunFindings

logger = logging.getLogger(__name__)

# ── Checklist constants ─────────────────────────────────────────────────────

ENV_SUFFIXES: tuple[str, ...] = (".env",)

SECRET_SCAN_SUFFIXES: tuple[str, ...] = (".js", ".py", ".java", ".rb", ".config")

SECRET_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"api[_-]?key", re.IGNORECASE),
    re.compile(r"auth[_-]?token", re.IGNORECASE),
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"credential", re.IGNORECASE),
)

AUTH_ENTRIES: tuple[str, ...] = ("auth", "authentication")

LINT_CONFIGS: tuple[str, ...] = (".eslintrc", ".prettierrc")

TEST_DIRS: tuple[str, ...] = ("test", "tests", "__tests__", "spec", "specs")

CI_CONFIGS: tuple[str, ...] = (
    ".github/workflows",
    ".gitlab-ci.yml",
    ".travis.yml",
    ".circleci/config.yml",
    "Jenkinsfile",
)

LOCK_FILES: tuple[str, ...] = ("package-lock.json", "yarn.lock")


# ── Result type ─────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PassResult:
    """Outcome of one checklist pass: either findings, or the error that stopped it."""

    findings: list[RiskFinding] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ── File helpers ────────────────────────────────────────────────────────────


def find_root_files(repo_path: Path, suffixes: tuple[str, ...]) -> list[str]:
    """Return root-level regular files whose name ends with one of *suffixes*."""
    return [
        str(child)
        for child in sorted(repo_path.iterdir())
        if child.is_file() and child.name.endswith(suffixes)
    ]


def scan_for_secrets(files: list[str]) -> list[str]:
    """Return the files whose full text matches at least one secret pattern.

    A file that cannot be read is logged and skipped; the remaining files are
    still scanned.
    """
    flagged: list[str] = []
    for file in files:
        try:
            content = Path(file).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("Skipping unreadable file %s: %s", file, exc)
            continue
        if any(pattern.search(content) for pattern in SECRET_PATTERNS):
            flagged.append(file)
    return flagged


def _exists(repo_path: Path, *names: str) -> bool:
    return any((repo_path / name).exists() for name in names)


# ── Passes ──────────────────────────────────────────────────────────────────


def check_security(repo_path: Path) -> list[RiskFinding]:
    findings: list[RiskFinding] = []

    env_files = find_root_files(repo_path, ENV_SUFFIXES)
    if env_files:
        findings.append(
            RiskFinding(
                type="secret_exposure",
                description="Environment files (.env) found which may contain secrets",
                level=RiskLevel.HIGH,
                files=env_files,
                remediation="Ensure .env files are added to .gitignore and use .env.example instead",
            )
        )

    secret_files = scan_for_secrets(find_root_files(repo_path, SECRET_SCAN_SUFFIXES))
    if secret_files:
        findings.append(
            RiskFinding(
                type="hardcoded_secrets",
                description="Potential hardcoded secrets detected in code files",
                level=RiskLevel.HIGH,
                files=secret_files,
                remediation="Remove hardcoded secrets and use environment variables instead",
            )
        )

    if _exists(repo_path, "package.json"):
        findings.append(
            RiskFinding(
                type="dependency_check",
                description="Node.js project: Dependencies should be scanned for vulnerabilities",
                level=RiskLevel.MEDIUM,
                remediation="Run npm audit or yarn audit to check for vulnerable dependencies",
            )
        )

    if _exists(repo_path, *AUTH_ENTRIES):
        findings.append(
            RiskFinding(
                type="auth_review",
                description="Authentication mechanisms should be reviewed for security",
                level=RiskLevel.MEDIUM,
                remediation="Ensure proper authentication practices like password hashing, rate limiting",
            )
        )

    return findings


def check_code_quality(repo_path: Path) -> list[RiskFinding]:
    findings: list[RiskFinding] = []

    if not _exists(repo_path, *LINT_CONFIGS):
        findings.append(
            RiskFinding(
                type="no_linting",
                description="No linting or code formatting configuration found",
                level=RiskLevel.LOW,
                remediation="Add ESLint and/or Prettier for consistent code quality",
            )
        )

    if not _exists(repo_path, *TEST_DIRS):
        findings.append(
            RiskFinding(
                type="no_tests",
                description="No test directory found in the repository",
                level=RiskLevel.MEDIUM,
                remediation="Add unit and integration tests to ensure code quality",
            )
        )

    return findings


def check_configuration(repo_path: Path) -> list[RiskFinding]:
    findings: list[RiskFinding] = []

    if not _exists(repo_path, *CI_CONFIGS):
        findings.append(
            RiskFinding(
                type="no_ci_cd",
                description="No CI/CD configuration found",
                level=RiskLevel.LOW,
                remediation="Add CI/CD configuration for automated testing and deployment",
            )
        )

    if _exists(repo_path, "package.json") and not _exists(repo_path, *LOCK_FILES):
        findings.append(
            RiskFinding(
                type="no_package_lock",
                description="package.json exists but no lock file found",
                level=RiskLevel.LOW,
                remediation="Add package-lock.json or yarn.lock for dependency consistency",
            )
        )

    return findings


def run_pass(check: Callable[[Path], list[RiskFinding]], repo_path: Path) -> PassResult:
    """Run one pass, converting I/O failures into an error result."""
    try:
        return PassResult(findings=check(repo_path))
    except OSError as exc:
        logger.error("Error during %s: %s", check.__name__, exc)
        return PassResult(error=str(exc))


def count_by_level(findings: list[RiskFinding], level: RiskLevel) -> int:
    return sum(1 for f in findings if f.level.value.lower() == level.value)


# ── Evaluator ───────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class _PassSpec:
    label: str
    check: Callable[[Path], list[RiskFinding]]
    error_level: RiskLevel


_PASSES: tuple[_PassSpec, ...] = (
    _PassSpec("security", check_security, RiskLevel.MEDIUM),
    _PassSpec("code quality", check_code_quality, RiskLevel.LOW),
    _PassSpec("configuration", check_configuration, RiskLevel.LOW),
)


class RiskChecklistEvaluator:
    """Runs the three checklist passes and builds a :class:`RiskReport`.

    Parameters
    ----------
    always_run:
        Findings appended after each pass's generic findings, whatever the
        repository contains (typically :func:`~repo_qa.services.demo_site.demo_site_findings`).
    """

    def __init__(self, always_run: AlwaysRunFindings | None = None) -> None:
        self._always_run = always_run or AlwaysRunFindings()

    def evaluate(self, repo_path: str | Path) -> RiskReport:
        path = Path(repo_path)
        logger.info("Analyzing risks in repository: %s", path)
        if not path.exists():
            raise RepositoryPathNotFoundError(f"Repository path does not exist: {path}")

        extras = (
            self._always_run.security,
            self._always_run.code_quality,
            self._always_run.configuration,
        )
        sections: list[list[RiskFinding]] = []
        for spec, always in zip(_PASSES, extras):
            logger.info("Analyzing %s...", spec.label)
            result = run_pass(spec.check, path)
            findings = result.findings if result.ok else [self._error_finding(spec, result.error)]
            sections.append([*findings, *always])

        security, quality, configuration = sections
        combined = [*security, *quality, *configuration]
        report = RiskReport(
            security_risks=security,
            code_quality_risks=quality,
            configuration_risks=configuration,
            summary=RiskSummary(
                total_risks=len(combined),
                high_risks=count_by_level(combined, RiskLevel.HIGH),
                medium_risks=count_by_level(combined, RiskLevel.MEDIUM),
                low_risks=count_by_level(combined, RiskLevel.LOW),
            ),
        )
        logger.info(
            "Risk analysis complete. Found %d potential risks.", report.summary.total_risks
        )
        return report

    @staticmethod
    def _error_finding(spec: _PassSpec, error: str | None) -> RiskFinding:
        return RiskFinding(
            type="analysis_error",
            description=f"Error during {spec.label} analysis: {error}",
            level=spec.error_level,
            remediation=f"Review repository manually for {spec.label} issues",
        )
