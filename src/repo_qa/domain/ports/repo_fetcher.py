"""Port: repository fetcher, defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_qa.domain.entities import CommitInfo, RepoMetadata, RootEntry
from repo_qa.domain.value_objects import GitHubUrl


class RepoFetcher(Protocol):
    """Abstract contract for fetching GitHub repository data."""

    async def fetch_metadata(self, url: GitHubUrl) -> RepoMetadata:
        """Return high-level repository metadata."""
        ...

    async def fetch_languages(self, url: GitHubUrl) -> dict[str, int]:
        """Return language → byte-count mapping from the GitHub Languages API."""
        ...

    async def fetch_root_entries(self, url: GitHubUrl) -> list[RootEntry]:
        """Return the files and directories directly under the repository root."""
        ...

    async def fetch_commits(self, url: GitHubUrl, limit: int = 10) -> list[CommitInfo]:
        """Return the most recent commits on the default branch."""
        ...
