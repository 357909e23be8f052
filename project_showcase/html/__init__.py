"""HTML-specific rendering utilities package."""

from .utils import get_template_environment, render_markdown

__all__ = [
    "get_template_environment",
    "render_markdown",
]
