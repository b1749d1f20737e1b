"""``repo-qa`` command-line interface.

Each command wires settings, adapters and services together, runs one stage
of the pipeline and writes its output file(s).  This module is the only place
where exceptions become an exit code.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console

from repo_qa import __version__
from repo_qa.domain.entities import RepositorySnapshot
from repo_qa.domain.exceptions import RepoQaError
from repo_qa.domain.ports.test_executor import TestExecutor
from repo_qa.infrastructure.config import Settings, get_settings
from repo_qa.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_qa.infrastructure.logging_config import setup_logging
from repo_qa.infrastructure.playwright_adapter import PlaywrightAdapter
from repo_qa.infrastructure.storage import (
    find_latest_results,
    load_analysis,
    load_run_results,
    save_analysis,
    save_risk_report,
    save_run_results,
    save_test_plan,
)
from repo_qa.services.analyze_repo import AnalyzeRepoUseCase
from repo_qa.services.demo_site import demo_site_descriptors, demo_site_findings
from repo_qa.services.report_renderer import FORMATS_BY_OPTION, generate_reports
from repo_qa.services.risk_checklist import RiskChecklistEvaluator
from repo_qa.services.run_tests import TEST_TYPES, RunTestsUseCase
from repo_qa.services.test_generator import generate_test_plan

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="repo-qa",
    help="Automated QA toolchain: analyze a GitHub repository, plan and run tests, report.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# ── Wiring ──────────────────────────────────────────────────────────────────


async def fetch_snapshot(repo_url: str, token: str | None, settings: Settings) -> RepositorySnapshot:
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        fetcher = GitHubRestAdapter(client, token=token, api_url=settings.github_api_url)
        return await AnalyzeRepoUseCase(fetcher).execute(repo_url)


def make_executor(settings: Settings) -> TestExecutor:
    return PlaywrightAdapter(
        command=settings.playwright_command,
        timeout_seconds=settings.runner_timeout_seconds,
    )


def _resolve_token(token: str | None, settings: Settings) -> str | None:
    if token:
        return token
    if settings.github_token is not None:
        return settings.github_token.get_secret_value()
    return None


@contextmanager
def _command(description: str) -> Iterator[None]:
    """Turn any failure inside a command into one error line and exit code 1."""
    try:
        yield
    except typer.Exit:
        raise
    except RepoQaError as exc:
        logger.error("Error %s: %s", description, exc)
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc
    except Exception as exc:
        logger.exception("Unexpected error %s", description)
        console.print(f"[red]Unexpected error:[/red] {exc}")
        raise typer.Exit(1) from exc


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]repo-qa[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


# ── Commands ────────────────────────────────────────────────────────────────


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Automated QA toolchain for GitHub repositories."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)


@app.command()
def analyze(
    repo_url: str = typer.Argument(..., help="GitHub repository URL or owner/repo"),
    output: Path = typer.Option(
        Path("./results/analysis.json"), "--output", "-o", help="Output file for analysis results"
    ),
    token: Optional[str] = typer.Option(
        None, "--token", "-t", help="GitHub personal access token"
    ),
) -> None:
    """Analyze a GitHub repository's structure, languages and frameworks."""
    logger.info("Analyzing repository: %s", repo_url)
    with _command("analyzing repository"):
        settings = get_settings()
        snapshot = asyncio.run(
            fetch_snapshot(repo_url, _resolve_token(token, settings), settings)
        )
        save_analysis(snapshot, output)
        console.print(f"Analysis saved to: [bold green]{output}[/bold green]")


@app.command("generate-tests")
def generate_tests(
    analysis_path: Path = typer.Argument(..., help="Path to an analysis JSON file"),
    output: Path = typer.Option(
        Path("./test_cases"), "--output", "-o", help="Output directory for test cases"
    ),
) -> None:
    """Generate test-case descriptors from an analysis file."""
    logger.info("Generating test cases from %s", analysis_path)
    with _command("generating test cases"):
        settings = get_settings()
        snapshot = load_analysis(analysis_path)
        plan = generate_test_plan(
            snapshot.languages,
            snapshot.frameworks,
            fixture_suite=demo_site_descriptors(settings.demo_site_url),
        )
        save_test_plan(plan, output)
        logger.info("Generated %d test cases", plan.total)
        console.print(f"{plan.total} test cases saved to: [bold green]{output}[/bold green]")


@app.command("analyze-risks")
def analyze_risks(
    repo_path: Path = typer.Argument(..., help="Path to a local clone of the repository"),
    output: Path = typer.Option(
        Path("./results/risks.json"), "--output", "-o", help="Output file for risk analysis"
    ),
) -> None:
    """Run the risk checklist against a local repository."""
    with _command("analyzing risks"):
        settings = get_settings()
        evaluator = RiskChecklistEvaluator(always_run=demo_site_findings(settings.demo_site_url))
        report = evaluator.evaluate(repo_path)
        save_risk_report(report, output)
        console.print(
            f"{report.summary.total_risks} risks "
            f"([red]{report.summary.high_risks} high[/red]) "
            f"saved to: [bold green]{output}[/bold green]"
        )


def _check_choice(choices: tuple[str, ...]) -> Callable[[str], str]:
    def validate(value: str) -> str:
        if value not in choices:
            raise typer.BadParameter(f"must be one of: {', '.join(choices)}")
        return value

    return validate


@app.command("run-tests")
def run_tests(
    test_dir: Path = typer.Argument(..., help="Directory holding one subdirectory per test type"),
    test_type: str = typer.Option(
        "all",
        "--test-type",
        "--type",
        "-t",
        help=f"Test type to run: {' | '.join(TEST_TYPES)}",
        callback=_check_choice(TEST_TYPES),
    ),
    results_dir: Path = typer.Option(
        Path("./results"), "--results", "-r", help="Directory for test results"
    ),
) -> None:
    """Execute test suites through Playwright and save the aggregated results."""
    with _command("running tests"):
        settings = get_settings()
        use_case = RunTestsUseCase(make_executor(settings))
        summary = asyncio.run(use_case.execute(test_dir, test_type))
        path = save_run_results(summary, results_dir)
        console.print(
            f"Total: {summary.total}  "
            f"[green]Passed: {summary.passed}[/green]  "
            f"[red]Failed: {summary.failed}[/red]  "
            f"[yellow]Skipped: {summary.skipped}[/yellow]"
        )
        if summary.error:
            console.print(f"[yellow]Warning:[/yellow] {summary.error}")
        console.print(f"Results saved to: [bold green]{path}[/bold green]")


@app.command("generate-report")
def generate_report(
    results_dir: Path = typer.Argument(..., help="Directory holding test-results-*.json files"),
    output: Path = typer.Option(
        Path("./results/reports"), "--output", "-o", help="Output directory for reports"
    ),
    report_format: str = typer.Option(
        "html",
        "--format",
        "-f",
        help=f"Report format: {' | '.join(FORMATS_BY_OPTION)}",
        callback=_check_choice(tuple(FORMATS_BY_OPTION)),
    ),
) -> None:
    """Render the latest test results as HTML and/or JSON."""
    logger.info("Generating %s reports from %s to %s", report_format, results_dir, output)
    with _command("generating reports"):
        latest = find_latest_results(results_dir)
        logger.info("Using results file %s", latest)
        paths = generate_reports(load_run_results(latest), output, report_format)
        for fmt, path in paths.items():
            console.print(f"{fmt.upper()} report: [bold green]{path}[/bold green]")
