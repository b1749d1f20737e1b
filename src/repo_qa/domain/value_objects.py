"""Value objects: self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

from repo_qa.domain.exceptions import InvalidGitHubUrlError

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9\-_.]+$")


@dataclass(frozen=True, slots=True)
class GitHubUrl:
    """Validated GitHub repository reference.

    Accepts ``https://github.com/psf/requests`` (optionally with ``.git``,
    a trailing slash or deeper path segments such as ``/tree/main``), any
    ``*.github.com`` host, and the bare ``owner/repo`` shorthand.
    """

    owner: str
    repo: str
    raw: str

    @classmethod
    def from_string(cls, url: str) -> GitHubUrl:
        """Parse and validate a raw URL string."""
        url = url.strip()
        parsed = urlparse(url)

        if parsed.scheme and parsed.netloc:
            host = parsed.hostname or ""
            if host != "github.com" and not host.endswith(".github.com"):
                raise InvalidGitHubUrlError(
                    f"Invalid GitHub URL: '{url}'. Only github.com URLs are supported."
                )
            path = parsed.path
        else:
            path = url

        parts = [p for p in path.strip("/").split("/") if p]
        if len(parts) < 2:
            raise InvalidGitHubUrlError(
                f"Invalid GitHub URL: '{url}'. "
                "Expected format: https://github.com/<owner>/<repo> or <owner>/<repo>"
            )

        owner = parts[0]
        repo = parts[1].removesuffix(".git")
        if not _SEGMENT_RE.match(owner) or not repo or not _SEGMENT_RE.match(repo):
            raise InvalidGitHubUrlError(f"Invalid GitHub URL: '{url}'.")

        return cls(owner=owner, repo=repo, raw=url)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
