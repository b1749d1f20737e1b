"""Shared fixtures for repo-qa tests."""

import pytest

from repo_qa.domain.entities import OutcomeStatus, RunSummary, TestOutcome
from repo_qa.infrastructure.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a throwaway log directory and drop the cached instance."""
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mixed_run():
    """Four outcomes: three passed, one failed with an error."""
    outcomes = [
        TestOutcome(name="login works", suite="login.spec.js", status=OutcomeStatus.PASSED, duration=1200),
        TestOutcome(name="cart adds item", suite="cart.spec.js", status=OutcomeStatus.PASSED, duration=800),
        TestOutcome(name="cart removes item", suite="cart.spec.js", status=OutcomeStatus.PASSED, duration=700),
        TestOutcome(
            name="checkout <completes>",
            suite="checkout.spec.js",
            status=OutcomeStatus.FAILED,
            duration=2300,
            error="expected <b>Thank you</b> & got nothing",
        ),
    ]
    return RunSummary.from_outcomes(outcomes, duration=5000, timestamp="2024-01-02T03:04:05.678Z")


@pytest.fixture
def make_spec():
    """Build one Playwright spec entry from ``(status, duration[, message])`` tuples."""

    def build(title, *attempts):
        results = []
        for attempt in attempts:
            status, duration = attempt[0], attempt[1]
            result = {"status": status, "duration": duration}
            if len(attempt) > 2:
                result["error"] = {"message": attempt[2]}
            results.append(result)
        return {"title": title, "tests": [{"results": results}]}

    return build
