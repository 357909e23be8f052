"""Project conversion, categorisation and filtering."""

import json
import logging
import math
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import dateparser
from pydantic import ValidationError

from .github import GitHubClient, GitHubError
from .models import GitHubRepo, Project

logger = logging.getLogger(__name__)

DEFAULT_NAME_FILTER = "breakthrough"
REPO_NAME_PREFIX = "breakthrough_"
ALL_CATEGORIES = "all"
DEFAULT_CATEGORY = "Development"

# Repository names with hand-picked categories
CATEGORY_MAP: dict[str, str] = {
    "breakthrough_2025-09-02_support_ab_testing": "Analytics & Testing",
    "breakthrough_2025-08-28_payments_flow": "E-commerce",
    "breakthrough_2025-08-29_isometric_imagen": "AI Generative Media",
    "breakthrough_2025-08-26-user-analytics-v2": "User Research",
    "breakthrough_2025-08-27-user-analytics": "User Research",
    "breakthrough_2025-08-25-landing-onboarding-flow": "User Experience",
}

# Keyword fallbacks, checked in order
CATEGORY_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("support", "ab_testing", "analytics"), "Analytics & Testing"),
    (("payment", "commerce"), "E-commerce"),
    (("user", "feedback"), "User Research"),
    (("ai", "image", "gen", "isometric"), "AI Generative Media"),
    (("landing", "onboarding"), "User Experience"),
]

DATE_PREFIX_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}[-_]")

TITLE_FIXES: list[tuple[str, str]] = [
    ("Ab Testing", "A/B Testing"),
    ("Ai ", "AI "),
    ("Api", "API"),
    ("Ui", "UI"),
    ("Ux", "UX"),
]


def extract_category(repo_name: str) -> str:
    """Pick a showcase category from a repository name."""
    if repo_name in CATEGORY_MAP:
        return CATEGORY_MAP[repo_name]

    for keywords, category in CATEGORY_KEYWORDS:
        if any(keyword in repo_name for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def format_title(repo_name: str) -> str:
    """Turn a repository name into a display title.

    ``breakthrough_2025-09-02_support_ab_testing`` becomes
    ``Support A/B Testing``.
    """
    title = repo_name.replace(REPO_NAME_PREFIX, "", 1)
    title = DATE_PREFIX_PATTERN.sub("", title)
    title = re.sub(r"[-_]", " ", title)
    title = re.sub(r"\b\w", lambda m: m.group(0).upper(), title)

    for old, new in TITLE_FIXES:
        title = title.replace(old, new)
    return title


def convert_github_repo(repo: GitHubRepo) -> Project:
    """Convert an API repository into a showcase project."""
    return Project(
        id=repo.id,
        title=format_title(repo.name),
        tagline=repo.description or "No description available",
        category=extract_category(repo.name),
        github_url=repo.html_url,
        image=f"https://opengraph.githubassets.com/1/{repo.full_name}",
        updated_at=repo.updated_at,
        language=repo.language,
        stars=repo.stargazers_count,
        topics=repo.topics,
    )


def parse_timestamp(timestamp: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp into an aware UTC datetime."""
    if not timestamp:
        return None
    try:
        dt = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _sort_key(project: Project) -> datetime:
    return parse_timestamp(project.updated_at) or datetime.min.replace(
        tzinfo=timezone.utc
    )


def sort_by_updated(projects: list[Project]) -> list[Project]:
    """Most recently updated first; projects without a date go last."""
    return sorted(projects, key=_sort_key, reverse=True)


def load_fallback_projects(path: Path) -> list[Project]:
    """Load projects from a static ``projects.json`` file.

    Raises:
        FileNotFoundError: The file does not exist
        ValueError: The file is not a JSON list of valid projects
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of projects")
    try:
        return [Project.model_validate(item) for item in data]
    except ValidationError as e:
        raise ValueError(f"Invalid project entry in {path}: {e}") from e


def load_projects(
    client: GitHubClient,
    username: str,
    name_filter: str = DEFAULT_NAME_FILTER,
    fallback_path: Optional[Path] = None,
) -> list[Project]:
    """Load showcase projects for a user.

    Repositories whose name contains ``name_filter`` are converted and sorted
    by update time. If the API fails, projects are read from
    ``fallback_path``; if that fails too, an empty list is returned.
    """
    try:
        repos = client.list_repos(username)
    except GitHubError as e:
        logger.warning("Failed to load projects from GitHub: %s", e)
        if fallback_path is None:
            return []
        try:
            projects = load_fallback_projects(fallback_path)
        except (OSError, ValueError) as fallback_error:
            logger.error(
                "Failed to load fallback projects from %s: %s",
                fallback_path,
                fallback_error,
            )
            return []
        logger.info("Loaded %d fallback projects", len(projects))
        return projects

    logger.debug("All repos: %s", [repo.name for repo in repos])
    projects = [
        convert_github_repo(repo) for repo in repos if name_filter in repo.name
    ]
    return sort_by_updated(projects)


def collect_categories(projects: list[Project]) -> list[str]:
    """Sorted unique categories across projects."""
    return sorted({project.category for project in projects})


def filter_projects(projects: list[Project], category: str) -> list[Project]:
    if category == ALL_CATEGORIES:
        return list(projects)
    return [project for project in projects if project.category == category]


def filter_updated_since(projects: list[Project], since: str) -> list[Project]:
    """Keep projects updated at or after ``since``.

    Args:
        projects: Projects to filter
        since: Natural language or absolute date, e.g. "2 weeks ago" or
            "2025-08-01"

    Raises:
        ValueError: ``since`` cannot be parsed as a date
    """
    since_dt = dateparser.parse(
        since, settings={"TIMEZONE": "UTC", "RETURN_AS_TIMEZONE_AWARE": True}
    )
    if since_dt is None:
        raise ValueError(f"Could not parse date: {since}")

    result: list[Project] = []
    for project in projects:
        updated = parse_timestamp(project.updated_at)
        if updated is not None and updated >= since_dt:
            result.append(project)
    return result


def format_relative_date(
    updated_at: Optional[str], now: Optional[datetime] = None
) -> str:
    """Describe how long ago a timestamp was, e.g. "3 weeks ago".

    Returns an empty string for missing or unparsable timestamps.
    """
    dt = parse_timestamp(updated_at)
    if dt is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    diff_days = math.ceil(abs((now - dt).total_seconds()) / 86400)

    if diff_days == 1:
        return "yesterday"
    if diff_days < 7:
        return f"{diff_days} days ago"
    if diff_days < 30:
        return f"{math.ceil(diff_days / 7)} weeks ago"
    if diff_days < 365:
        return f"{math.ceil(diff_days / 30)} months ago"
    return f"{math.ceil(diff_days / 365)} years ago"
