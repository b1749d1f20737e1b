"""GitHub REST API adapter: implements the RepoFetcher port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from repo_qa.domain.entities import CommitInfo, EntryKind, RepoMetadata, RootEntry
from repo_qa.domain.exceptions import (
    GitHubApiError,
    GitHubRateLimitError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
)
from repo_qa.domain.value_objects import GitHubUrl

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_USER_AGENT = "repo-qa/1.0"


class GitHubRestAdapter:
    """Concrete RepoFetcher backed by the GitHub v3 REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        api_url: str = _GITHUB_API,
    ) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": _USER_AGENT,
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_metadata(self, url: GitHubUrl) -> RepoMetadata:
        """GET /repos/{owner}/{repo} → RepoMetadata."""
        data = await self._api_get_json(f"/repos/{url.owner}/{url.repo}")
        return RepoMetadata(
            name=data.get("name", url.repo),
            full_name=data.get("full_name", url.full_name),
            description=data.get("description"),
            url=data.get("html_url"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            stars=data.get("stargazers_count", 0),
            forks=data.get("forks_count", 0),
        )

    async def fetch_languages(self, url: GitHubUrl) -> dict[str, int]:
        """GET /repos/{owner}/{repo}/languages → {lang: bytes}."""
        data: dict[str, int] = await self._api_get_json(
            f"/repos/{url.owner}/{url.repo}/languages"
        )
        return data

    async def fetch_root_entries(self, url: GitHubUrl) -> list[RootEntry]:
        """GET /repos/{owner}/{repo}/contents/ → [RootEntry] (root only)."""
        data = await self._api_get_json(f"/repos/{url.owner}/{url.repo}/contents/")
        if not isinstance(data, list):
            raise GitHubApiError(
                f"Expected a directory listing for the root of {url.full_name}."
            )

        entries: list[RootEntry] = []
        for item in data:
            kind = item.get("type")
            if kind == EntryKind.FILE.value:
                entries.append(RootEntry(name=item["name"], kind=EntryKind.FILE))
            elif kind == EntryKind.DIR.value:
                entries.append(RootEntry(name=item["name"], kind=EntryKind.DIR))
            else:
                logger.debug("Ignoring %s entry %s", kind, item.get("name"))
        return entries

    async def fetch_commits(self, url: GitHubUrl, limit: int = 10) -> list[CommitInfo]:
        """GET /repos/{owner}/{repo}/commits?per_page=N → [CommitInfo]."""
        data = await self._api_get_json(
            f"/repos/{url.owner}/{url.repo}/commits",
            params={"per_page": str(limit)},
        )
        commits: list[CommitInfo] = []
        for item in data:
            commit = item.get("commit", {})
            author = commit.get("author") or {}
            commits.append(
                CommitInfo(
                    sha=item.get("sha", ""),
                    message=commit.get("message", ""),
                    author=author.get("name"),
                    date=author.get("date"),
                )
            )
        return commits

    async def _api_get_json(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        resp = await self._api_get(endpoint, params=params)
        try:
            return resp.json()
        except ValueError as exc:
            raise GitHubApiError(f"GitHub API returned invalid JSON for {endpoint}") from exc

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{self._api_url}{endpoint}"
        try:
            resp = await self._client.get(
                url, headers=self._api_headers, params=params
            )
        except httpx.HTTPError as exc:
            raise GitHubApiError(
                f"Network error fetching {url}: {exc}"
            ) from exc

        if resp.status_code == 200:
            return resp

        if resp.status_code == 404:
            raise RepositoryNotFoundError(
                "Repository not found. Check the URL, or pass a token for private repositories."
            )

        if resp.status_code == 403:
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}. "
                    "Set the GITHUB_TOKEN environment variable to increase the limit."
                )
            raise RepositoryAccessDeniedError(
                "Access denied. The repository may be private."
            )

        if resp.status_code == 429:
            raise GitHubRateLimitError("GitHub API rate limit exceeded (HTTP 429).")

        raise GitHubApiError(
            f"GitHub API returned HTTP {resp.status_code} for {url}"
        )
