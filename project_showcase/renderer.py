"""Render showcase and README pages from projects."""

from typing import Mapping, Optional

from .html import get_template_environment, render_markdown
from .models import Project, Readme
from .projects import ALL_CATEGORIES, collect_categories

DEFAULT_TITLE = "projects"

BUTTON_CLASS = (
    "px-4 py-2 bg-gray-200 text-gray-700 rounded-full text-sm font-medium "
    "transition-all hover:bg-gray-300"
)
ACTIVE_BUTTON_CLASS = (
    "px-4 py-2 bg-blue-600 text-white rounded-full text-sm font-medium "
    "transition-all hover:bg-blue-700 active"
)


def build_readme(repo: str, markdown_text: Optional[str]) -> Readme:
    """Render a README, or mark it unavailable when there is no text."""
    if markdown_text is None:
        return Readme(repo=repo, available=False)
    return Readme(repo=repo, markdown=markdown_text, html=render_markdown(markdown_text))


def generate_showcase_html(
    projects: list[Project],
    readmes: Optional[Mapping[str, Readme]] = None,
    title: str = DEFAULT_TITLE,
    current_filter: str = ALL_CATEGORIES,
) -> str:
    """Render the showcase page.

    Args:
        projects: Projects to show, in display order
        readmes: READMEs keyed by ``owner/name``; projects without an entry
            get no README section
        title: Page title
        current_filter: Initially selected category; cards in other
            categories start hidden

    Returns:
        A complete HTML document
    """
    template = get_template_environment().get_template("showcase.html")
    return str(
        template.render(
            title=title,
            projects=projects,
            readmes=dict(readmes or {}),
            categories=[ALL_CATEGORIES, *collect_categories(projects)],
            current_filter=current_filter,
            button_class=BUTTON_CLASS,
            active_button_class=ACTIVE_BUTTON_CLASS,
        )
    )


def generate_readme_html(title: str, markdown_text: str) -> str:
    """Render a single Markdown document as a standalone page."""
    template = get_template_environment().get_template("readme.html")
    return str(
        template.render(title=title, content_html=render_markdown(markdown_text))
    )
