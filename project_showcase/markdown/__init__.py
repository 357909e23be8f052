"""Hand-rolled Markdown to HTML rendering for README documents."""

from .inline import Link, ProtectionTable, format_inline
from .renderer import (
    ListKind,
    MarkdownRenderer,
    RenderState,
    classify_line,
    finish,
    render,
    transition,
)

__all__ = [
    "Link",
    "ListKind",
    "MarkdownRenderer",
    "ProtectionTable",
    "RenderState",
    "classify_line",
    "finish",
    "format_inline",
    "render",
    "transition",
]
