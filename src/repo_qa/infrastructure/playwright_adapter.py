"""Playwright subprocess adapter: implements the TestExecutor port."""

from __future__ import annotations

import asyncio
import json
import logging
import shlex
from pathlib import Path
from typing import Any

from repo_qa.domain.exceptions import TestExecutionError

logger = logging.getLogger(__name__)


class PlaywrightAdapter:
    """Runs ``playwright test <dir> --reporter=json`` and parses its stdout."""

    def __init__(
        self,
        command: str = "npx playwright test",
        timeout_seconds: float | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._command = shlex.split(command)
        self._timeout = timeout_seconds
        self._cwd = cwd

    async def run_suite(self, suite_dir: Path) -> dict[str, Any]:
        """Run every spec under *suite_dir* and return the JSON report."""
        argv = [*self._command, str(suite_dir), "--reporter=json"]
        logger.debug("Executing %s", " ".join(argv))

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self._cwd,
            )
        except OSError as exc:
            raise TestExecutionError(f"Could not start test runner: {exc}") from exc

        try:
            stdout_raw, stderr_raw = await asyncio.wait_for(
                proc.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError as exc:
            proc.kill()
            await proc.wait()
            raise TestExecutionError(
                f"Test runner timed out after {self._timeout} seconds"
            ) from exc

        stdout = stdout_raw.decode("utf-8", errors="replace")
        stderr = stderr_raw.decode("utf-8", errors="replace")

        if proc.returncode != 0:
            detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no stderr"
            raise TestExecutionError(
                f"Command failed with exit code {proc.returncode}: {detail}",
                stdout=stdout,
            )

        try:
            report: dict[str, Any] = json.loads(stdout)
        except json.JSONDecodeError as exc:
            raise TestExecutionError(
                f"Test runner produced invalid JSON: {exc}", stdout=stdout
            ) from exc
        return report
