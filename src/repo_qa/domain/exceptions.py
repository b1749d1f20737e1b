"""Domain exception hierarchy.

Inner layers raise these; the CLI is the single place that turns them into a
logged error line and a non-zero exit code.
"""

from __future__ import annotations


class RepoQaError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidGitHubUrlError(RepoQaError):
    """The supplied URL does not point to a valid GitHub repository."""


class RepositoryPathNotFoundError(RepoQaError):
    """The local repository path given to the risk checklist does not exist."""


class AnalysisFileError(RepoQaError):
    """An analysis JSON file is missing or cannot be parsed."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class RepositoryNotFoundError(RepoQaError):
    """The repository does not exist or is not accessible (404)."""


class RepositoryAccessDeniedError(RepoQaError):
    """Access to the repository was denied (403)."""


class GitHubRateLimitError(RepoQaError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class GitHubApiError(RepoQaError):
    """Network failure or unexpected response from the GitHub API."""


# ── Test execution and reporting ────────────────────────────────────────────


class TestExecutionError(RepoQaError):
    """The external test runner failed.

    ``stdout`` keeps whatever the process printed before failing so that a
    partial JSON report can still be recovered.
    """

    __test__ = False

    def __init__(self, message: str, stdout: str = "") -> None:
        super().__init__(message)
        self.stdout = stdout


class ResultsNotFoundError(RepoQaError):
    """No persisted test-result file was found in the results directory."""


class ReportRenderError(RepoQaError):
    """One or more requested report formats could not be generated."""
