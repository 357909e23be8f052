"""HTML-specific rendering utilities.

This module contains the glue between the Markdown renderer and the Jinja2
templates:
- Markdown rendering with timing stats
- Template environment management
"""

import functools
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..markdown import MarkdownRenderer
from ..projects import format_relative_date
from ..renderer_timings import MARKDOWN_TIMINGS, timing_stat


@functools.lru_cache(maxsize=1)
def _get_markdown_renderer() -> MarkdownRenderer:
    return MarkdownRenderer()


def render_markdown(text: str) -> str:
    """Convert README markdown to HTML."""
    with timing_stat(MARKDOWN_TIMINGS):
        return _get_markdown_renderer().render(text)


@functools.lru_cache(maxsize=1)
def get_template_environment() -> Environment:
    """Get cached Jinja2 template environment for HTML rendering.

    Creates a Jinja2 environment configured with:
    - Template loading from the templates directory
    - HTML auto-escaping
    - The ``relative_date`` filter
    """
    templates_dir = Path(__file__).parent / "templates"
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["relative_date"] = format_relative_date  # type: ignore[index]
    return env
