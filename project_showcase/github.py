"""Minimal GitHub REST API client for repository listings and READMEs."""

import base64
import binascii
import logging
import os
import re
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from .models import GitHubRepo
from .renderer_timings import README_FETCH_TIMINGS, timing_stat

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SEC = 20.0
REPOS_PER_PAGE = 100

_WHITESPACE = re.compile(r"\s")


class GitHubError(Exception):
    """Raised when the GitHub API cannot be reached or returns bad data."""


class ReadmeNotFoundError(GitHubError):
    """Raised when a repository has no README."""


def decode_readme_content(content: str) -> str:
    """Decode the base64 ``content`` field of a README API response.

    GitHub wraps the base64 payload with newlines; all whitespace is removed
    before decoding. Invalid UTF-8 sequences are replaced.
    """
    try:
        raw = base64.b64decode(_WHITESPACE.sub("", content), validate=True)
    except (binascii.Error, ValueError) as e:
        raise GitHubError(f"README content is not valid base64: {e}") from e
    return raw.decode("utf-8", errors="replace")


class GitHubClient:
    """Synchronous GitHub API client.

    Args:
        token: Personal access token; defaults to the GITHUB_TOKEN environment
            variable. Needed only for private repositories or higher rate limits.
        timeout: Request timeout in seconds
        base_url: API root, overridable for GitHub Enterprise
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        base_url: str = DEFAULT_API_URL,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.token = token or os.getenv("GITHUB_TOKEN") or None
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        try:
            resp = self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise GitHubError(f"Request to {path} failed: {e}") from e

        if resp.status_code == 404 and path.endswith("/readme"):
            raise ReadmeNotFoundError(f"No README found: {path}")
        if resp.is_error:
            raise GitHubError(
                f"GitHub API returned {resp.status_code} for {path}: {resp.text[:200]}"
            )
        try:
            return resp.json()
        except ValueError as e:
            raise GitHubError(f"Invalid JSON from {path}: {e}") from e

    def list_repos(self, username: str) -> list[GitHubRepo]:
        """List a user's public repositories, most recently updated first."""
        data = self._get_json(
            f"/users/{username}/repos",
            params={"sort": "updated", "per_page": REPOS_PER_PAGE},
        )
        if not isinstance(data, list):
            raise GitHubError(f"Expected a list of repositories for {username}")

        repos: list[GitHubRepo] = []
        for item in data:
            try:
                repos.append(GitHubRepo.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping malformed repository entry: %s", e)
        logger.debug("Fetched %d repositories for %s", len(repos), username)
        return repos

    def fetch_readme(self, full_name: str) -> str:
        """Fetch and decode the README of ``owner/name``.

        Raises:
            ReadmeNotFoundError: The repository has no README
            GitHubError: Any other API or decoding failure
        """
        with timing_stat(README_FETCH_TIMINGS):
            data = self._get_json(f"/repos/{full_name}/readme")
        if not isinstance(data, dict) or not isinstance(data.get("content"), str):
            raise GitHubError(f"README response for {full_name} has no content")
        return decode_readme_content(data["content"])
