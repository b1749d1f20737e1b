"""Port: external test executor, runs one suite and returns its raw JSON report."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol


class TestExecutor(Protocol):
    """Abstract contract for an external browser-automation test runner.

    Implementations raise :class:`~repo_qa.domain.exceptions.TestExecutionError`
    on failure, carrying any captured stdout.
    """

    __test__ = False

    async def run_suite(self, suite_dir: Path) -> dict[str, Any]:
        """Run every test under *suite_dir* and return the parsed JSON report."""
        ...
