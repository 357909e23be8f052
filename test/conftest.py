"""Pytest configuration and shared fixtures."""

import base64
from typing import Any, Callable, Iterator

import httpx
import pytest

from project_showcase.github import GitHubClient


def _encode_readme(text: str, line_length: int = 60) -> str:
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return "\n".join(
        encoded[i : i + line_length] for i in range(0, len(encoded), line_length)
    )


@pytest.fixture(autouse=True)
def _no_github_token(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's GITHUB_TOKEN out of the tests."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("PROJECT_SHOWCASE_USERNAME", raising=False)


@pytest.fixture
def sample_repos() -> list[dict[str, Any]]:
    """Repository objects as returned by GET /users/{user}/repos."""
    return [
        {
            "id": 1,
            "name": "breakthrough_2025-08-28_payments_flow",
            "full_name": "vibespin/breakthrough_2025-08-28_payments_flow",
            "html_url": "https://github.com/vibespin/breakthrough_2025-08-28_payments_flow",
            "description": "Checkout experiments",
            "language": "TypeScript",
            "stargazers_count": 3,
            "updated_at": "2025-08-28T10:00:00Z",
            "topics": ["payments"],
            "private": False,
        },
        {
            "id": 2,
            "name": "dotfiles",
            "full_name": "vibespin/dotfiles",
            "html_url": "https://github.com/vibespin/dotfiles",
            "description": None,
            "language": "Shell",
            "stargazers_count": 0,
            "updated_at": "2025-09-05T10:00:00Z",
        },
        {
            "id": 3,
            "name": "breakthrough_2025-09-02_support_ab_testing",
            "full_name": "vibespin/breakthrough_2025-09-02_support_ab_testing",
            "html_url": "https://github.com/vibespin/breakthrough_2025-09-02_support_ab_testing",
            "description": None,
            "language": None,
            "stargazers_count": 0,
            "updated_at": "2025-09-02T10:00:00Z",
        },
    ]


@pytest.fixture
def make_client() -> Iterator[Callable[..., GitHubClient]]:
    """Build a GitHubClient whose requests are answered by ``handler``."""
    clients: list[GitHubClient] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any
    ) -> GitHubClient:
        client = GitHubClient(transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def encode_readme() -> Callable[[str], str]:
    """Base64-encode text the way the GitHub API does (newline-wrapped)."""
    return _encode_readme
