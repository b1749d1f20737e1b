"""Analyze-repository use case: metadata, languages, structure and commits."""

from __future__ import annotations

import logging

from repo_qa.domain.entities import RepositorySnapshot
from repo_qa.domain.ports.repo_fetcher import RepoFetcher
from repo_qa.domain.value_objects import GitHubUrl
from repo_qa.services.framework_detector import detect_frameworks
from repo_qa.services.structure_classifier import classify_structure

logger = logging.getLogger(__name__)

COMMIT_LIMIT = 10


class AnalyzeRepoUseCase:
    """Builds a :class:`RepositorySnapshot` from the GitHub API.

    Calls are awaited one after another; any adapter error propagates.
    """

    def __init__(self, repo_fetcher: RepoFetcher, commit_limit: int = COMMIT_LIMIT) -> None:
        self._fetcher = repo_fetcher
        self._commit_limit = commit_limit

    async def execute(self, repo_url: str) -> RepositorySnapshot:
        url = GitHubUrl.from_string(repo_url)
        logger.info("Parsed owner: %s, repo: %s", url.owner, url.repo)

        metadata = await self._fetcher.fetch_metadata(url)
        languages = await self._fetcher.fetch_languages(url)
        entries = await self._fetcher.fetch_root_entries(url)
        structure = classify_structure(entries)
        commits = await self._fetcher.fetch_commits(url, limit=self._commit_limit)

        snapshot = RepositorySnapshot(
            metadata=metadata,
            languages=dict(languages),
            structure=structure,
            frameworks=detect_frameworks(structure, languages),
            commits=commits,
        )
        logger.info("Analysis complete for %s", url.full_name)
        return snapshot
