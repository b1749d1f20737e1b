"""Tests for services/result_aggregator.py."""

import json

from repo_qa.domain.entities import OutcomeStatus
from repo_qa.services.result_aggregator import aggregate_report, derive_status, recover_partial


def _attempts(*statuses):
    return [{"status": s, "duration": 1} for s in statuses]


class TestDeriveStatus:
    def test_all_passed(self):
        assert derive_status(_attempts("passed", "passed")) is OutcomeStatus.PASSED

    def test_retry_after_failure_is_failed(self):
        assert derive_status(_attempts("failed", "passed")) is OutcomeStatus.FAILED

    def test_all_skipped(self):
        assert derive_status(_attempts("skipped")) is OutcomeStatus.SKIPPED

    def test_timed_out_counts_as_failed(self):
        assert derive_status(_attempts("timedOut")) is OutcomeStatus.FAILED
        assert derive_status(_attempts("passed", "interrupted")) is OutcomeStatus.FAILED

    def test_passed_and_skipped_is_skipped(self):
        assert derive_status(_attempts("passed", "skipped")) is OutcomeStatus.SKIPPED

    def test_no_attempts_is_skipped(self):
        assert derive_status([]) is OutcomeStatus.SKIPPED


class TestAggregateReport:
    def test_retried_spec(self, make_spec):
        """One spec failing then passing is failed, with summed duration."""
        raw = {
            "suites": [
                {
                    "title": "checkout.spec.js",
                    "specs": [make_spec("pays", ("failed", 100, "boom"), ("passed", 50))],
                }
            ]
        }
        summary = aggregate_report(raw, duration_ms=1234)
        outcome = summary.tests[0]
        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.duration == 150
        assert outcome.error == "boom"
        assert outcome.suite == "checkout.spec.js"
        assert (summary.total, summary.failed, summary.duration) == (1, 1, 1234)

    def test_counts_always_add_up(self, make_spec):
        raw = {
            "suites": [
                {
                    "title": "a.spec.js",
                    "specs": [
                        make_spec("one", ("passed", 10)),
                        make_spec("two", ("skipped", 0)),
                        make_spec("three", ("passed", 5), ("skipped", 0)),
                        make_spec("four", ("timedOut", 30000, "Timeout")),
                    ],
                }
            ]
        }
        summary = aggregate_report(raw)
        assert summary.total == summary.passed + summary.failed + summary.skipped == 4
        assert (summary.passed, summary.failed, summary.skipped) == (1, 1, 2)

    def test_nested_suites_are_walked(self, make_spec):
        raw = {
            "suites": [
                {
                    "title": "login.spec.js",
                    "specs": [make_spec("top level", ("passed", 1))],
                    "suites": [
                        {
                            "title": "Login",
                            "specs": [make_spec("valid user", ("passed", 2))],
                            "suites": [
                                {"title": "locked", "specs": [make_spec("is refused", ("passed", 3))]}
                            ],
                        }
                    ],
                }
            ]
        }
        summary = aggregate_report(raw)
        assert [(t.suite, t.name) for t in summary.tests] == [
            ("login.spec.js", "top level"),
            ("login.spec.js › Login", "valid user"),
            ("login.spec.js › Login › locked", "is refused"),
        ]

    def test_only_first_test_entry_is_used(self):
        spec = {
            "title": "multi project",
            "tests": [
                {"results": [{"status": "passed", "duration": 5}]},
                {"results": [{"status": "failed", "duration": 7}]},
            ],
        }
        summary = aggregate_report({"suites": [{"title": "s", "specs": [spec]}]})
        assert summary.tests[0].status is OutcomeStatus.PASSED
        assert summary.tests[0].duration == 5

    def test_spec_without_tests_is_skipped(self):
        summary = aggregate_report({"suites": [{"title": "s", "specs": [{"title": "empty", "tests": []}]}]})
        assert summary.skipped == 1
        assert summary.tests[0].error is None

    def test_empty_report(self):
        summary = aggregate_report({})
        assert summary.total == 0
        assert summary.tests == []

    def test_failed_attempt_without_message(self, make_spec):
        raw = {"suites": [{"title": "s", "specs": [make_spec("x", ("failed", 1))]}]}
        assert aggregate_report(raw).tests[0].error is None


class TestRecoverPartial:
    def test_valid_report(self, make_spec):
        stdout = json.dumps({"suites": [{"title": "s", "specs": [make_spec("x", ("failed", 9, "no"))]}]})
        summary = recover_partial(stdout, 77)
        assert summary.failed == 1
        assert summary.duration == 77

    def test_garbage_output(self):
        assert recover_partial("Error: no tests found") is None
        assert recover_partial("") is None
        assert recover_partial("[1, 2]") is None
