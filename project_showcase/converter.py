#!/usr/bin/env python3
"""Build showcase pages and convert Markdown files to HTML."""

import logging
import time
from pathlib import Path
from typing import Optional

from .github import GitHubClient, GitHubError, ReadmeNotFoundError
from .models import Project, Readme
from .projects import (
    ALL_CATEGORIES,
    DEFAULT_NAME_FILTER,
    filter_projects,
    filter_updated_since,
    load_projects,
)
from .renderer import (
    DEFAULT_TITLE,
    build_readme,
    generate_readme_html,
    generate_showcase_html,
)
from .renderer_timings import (
    log_timing,
    report_timing_statistics,
    set_current_repo,
    start_timing_collection,
)

logger = logging.getLogger(__name__)

DEFAULT_SHOWCASE_FILENAME = "showcase.html"


def fetch_readmes(client: GitHubClient, projects: list[Project]) -> dict[str, Readme]:
    """Fetch and render READMEs, keyed by ``owner/name``.

    A README that cannot be fetched is marked unavailable rather than
    failing the build.
    """
    readmes: dict[str, Readme] = {}
    for project in projects:
        set_current_repo(project.repo)
        try:
            markdown_text: Optional[str] = client.fetch_readme(project.repo)
        except ReadmeNotFoundError:
            logger.info("No README for %s", project.repo)
            markdown_text = None
        except GitHubError as e:
            logger.warning("Failed to fetch README for %s: %s", project.repo, e)
            markdown_text = None
        readmes[project.repo] = build_readme(project.repo, markdown_text)
    return readmes


def build_showcase(
    username: str,
    output: Optional[Path] = None,
    *,
    client: Optional[GitHubClient] = None,
    token: Optional[str] = None,
    name_filter: str = DEFAULT_NAME_FILTER,
    category: str = ALL_CATEGORIES,
    updated_since: Optional[str] = None,
    fallback_path: Optional[Path] = None,
    include_readmes: bool = True,
    title: Optional[str] = None,
) -> Path:
    """Fetch a user's projects and write the showcase page.

    Args:
        username: GitHub user whose repositories are listed
        output: Output file (default: showcase.html in the working directory)
        client: Existing client to use; one is created (and closed) otherwise
        token: GitHub token for a newly created client
        name_filter: Substring repository names must contain
        category: Initially selected category filter
        updated_since: Only keep projects updated since this date
            (natural language accepted, e.g. "1 month ago")
        fallback_path: projects.json used when the API is unavailable
        include_readmes: Fetch and embed each project's README
        title: Page title (default: "<username> projects")

    Returns:
        Path of the written file
    """
    t_start = time.time()
    start_timing_collection()
    output = output or Path(DEFAULT_SHOWCASE_FILENAME)
    own_client = client is None
    active_client = client or GitHubClient(token=token)

    try:
        with log_timing("Load projects", t_start):
            projects = load_projects(
                active_client, username, name_filter, fallback_path
            )

        if updated_since:
            projects = filter_updated_since(projects, updated_since)

        readmes: dict[str, Readme] = {}
        if include_readmes:
            with log_timing(
                lambda: f"Fetch READMEs ({len(readmes)} repos)", t_start
            ):
                readmes = fetch_readmes(active_client, projects)
    finally:
        if own_client:
            active_client.close()

    if category != ALL_CATEGORIES and not filter_projects(projects, category):
        logger.warning("No projects in category %r", category)

    with log_timing("Render HTML", t_start):
        html_content = generate_showcase_html(
            projects,
            readmes,
            title=title or f"{username} {DEFAULT_TITLE}",
            current_filter=category,
        )

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html_content, encoding="utf-8")
    report_timing_statistics()
    logger.debug("Wrote %d projects to %s", len(projects), output)
    return output


def convert_markdown_file(input_path: Path, output: Optional[Path] = None) -> Path:
    """Render a local Markdown file as a standalone HTML page.

    Raises:
        FileNotFoundError: ``input_path`` does not exist
    """
    if not input_path.is_file():
        raise FileNotFoundError(f"Markdown file not found: {input_path}")

    start_timing_collection()
    markdown_text = input_path.read_text(encoding="utf-8", errors="replace")
    output = output or input_path.with_suffix(".html")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        generate_readme_html(input_path.name, markdown_text), encoding="utf-8"
    )
    report_timing_statistics()
    return output
