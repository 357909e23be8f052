"""Pydantic models for GitHub API payloads and showcase projects."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GitHubRepo(BaseModel):
    """Subset of a repository object from the GitHub REST API.

    Fields not listed here are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    full_name: str
    html_url: str
    description: Optional[str] = None
    language: Optional[str] = None
    stargazers_count: int = 0
    updated_at: Optional[str] = None
    topics: list[str] = Field(default_factory=list)


class Project(BaseModel):
    """A project card shown on the showcase page.

    Accepts both snake_case field names and the camelCase ``githubUrl`` key
    used by fallback ``projects.json`` files.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Union[int, str]
    title: str
    tagline: str = "No description available"
    category: str = "Development"
    github_url: str = Field(alias="githubUrl")
    image: Optional[str] = None
    updated_at: Optional[str] = None
    language: Optional[str] = None
    stars: int = 0
    topics: list[str] = Field(default_factory=list)

    @property
    def repo(self) -> str:
        """``owner/name`` taken from the last two segments of the GitHub URL."""
        return "/".join(self.github_url.rstrip("/").split("/")[-2:])


class Readme(BaseModel):
    """A project README, rendered or marked unavailable."""

    repo: str
    markdown: str = ""
    html: str = ""
    available: bool = True
