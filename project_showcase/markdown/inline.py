"""Inline Markdown formatting for a single line of text.

Formatting runs as a fixed sequence of rewrite passes:

1. Extract inline code spans into a protection table
2. Extract ``[text](url)`` links into the protection table
3. Escape the remaining text
4. Rewrite bold spans (``**text**`` / ``__text__``)
5. Rewrite italic spans (``*text*`` / ``_text_``)
6. Restore links as anchors
7. Restore code spans as ``<code>`` elements

Extracted content is replaced by positional placeholder tokens, so emphasis
markers inside code spans or URLs are never rewritten. Restoration runs in
reverse order of extraction: a code span inside a link label is restored
after the link that contains it.
"""

import html
import re
from dataclasses import dataclass, field
from typing import NamedTuple

# Placeholder tokens are wrapped in STX/ETX; both are stripped from input.
_TOKEN_START = "\x02"
_TOKEN_END = "\x03"

CODE_SPAN_PATTERN = re.compile(r"`([^`]+)`")
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

BOLD_PATTERNS = (
    re.compile(r"\*\*([^*]+?)\*\*"),
    re.compile(r"__([^_]+?)__"),
)
ITALIC_PATTERNS = (
    re.compile(r"(?<![*\w])\*([^*\n]+?)\*(?!\*)"),
    re.compile(r"(?<![_\w])_([^_\n]+?)_(?!_)"),
)

_CODE_TOKEN_PATTERN = re.compile(f"{_TOKEN_START}C(\\d+){_TOKEN_END}")
_LINK_TOKEN_PATTERN = re.compile(f"{_TOKEN_START}L(\\d+){_TOKEN_END}")

CODE_SPAN_CLASS = "bg-gray-100 text-gray-800 px-1.5 py-0.5 rounded text-sm font-mono"
LINK_CLASS = "text-blue-600 hover:text-blue-800 underline"


class Link(NamedTuple):
    """A link captured from ``[text](url)`` syntax."""

    text: str
    url: str


@dataclass
class ProtectionTable:
    """Content extracted from one line, indexed by extraction position."""

    code_spans: list[str] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)


def escape_text(text: str) -> str:
    """Escape HTML special characters, including quotes."""
    return html.escape(text, quote=True)


def _code_token(index: int) -> str:
    return f"{_TOKEN_START}C{index}{_TOKEN_END}"


def _link_token(index: int) -> str:
    return f"{_TOKEN_START}L{index}{_TOKEN_END}"


def extract_code_spans(text: str) -> tuple[str, list[str]]:
    """Replace each back-tick code span with a placeholder token.

    Returns:
        The rewritten text and the extracted span contents, in order
    """
    spans: list[str] = []

    def _protect(match: re.Match[str]) -> str:
        spans.append(match.group(1))
        return _code_token(len(spans) - 1)

    return CODE_SPAN_PATTERN.sub(_protect, text), spans


def extract_links(text: str) -> tuple[str, list[Link]]:
    """Replace each ``[text](url)`` link with a placeholder token.

    Returns:
        The rewritten text and the extracted links, in order
    """
    links: list[Link] = []

    def _protect(match: re.Match[str]) -> str:
        links.append(Link(match.group(1), match.group(2)))
        return _link_token(len(links) - 1)

    return LINK_PATTERN.sub(_protect, text), links


def apply_bold(text: str) -> str:
    for pattern in BOLD_PATTERNS:
        text = pattern.sub(r"<strong>\1</strong>", text)
    return text


def apply_italic(text: str) -> str:
    # Must run after apply_bold so "**" delimiters are already consumed
    for pattern in ITALIC_PATTERNS:
        text = pattern.sub(r"<em>\1</em>", text)
    return text


def apply_emphasis(text: str) -> str:
    """Apply bold then italic rewriting."""
    return apply_italic(apply_bold(text))


def restore_links(text: str, links: list[Link]) -> str:
    """Replace link placeholders with anchor elements.

    Link labels are escaped and receive emphasis formatting. URLs are
    emitted as captured; callers embedding output in a trust-sensitive
    context must sanitise hrefs themselves.
    """

    def _restore(match: re.Match[str]) -> str:
        link = links[int(match.group(1))]
        label = apply_emphasis(escape_text(link.text))
        return (
            f'<a href="{link.url}" class="{LINK_CLASS}" '
            f'target="_blank" rel="noopener noreferrer">{label}</a>'
        )

    return _LINK_TOKEN_PATTERN.sub(_restore, text)


def restore_code_spans(text: str, code_spans: list[str]) -> str:
    """Replace code placeholders with escaped ``<code>`` elements."""

    def _restore(match: re.Match[str]) -> str:
        code = code_spans[int(match.group(1))]
        return f'<code class="{CODE_SPAN_CLASS}">{escape_text(code)}</code>'

    return _CODE_TOKEN_PATTERN.sub(_restore, text)


def protect(line: str) -> tuple[str, ProtectionTable]:
    """Run both extraction passes over a line.

    Code spans are extracted before links so link syntax inside a code
    span is never parsed as a link.
    """
    text = line.replace(_TOKEN_START, "").replace(_TOKEN_END, "")
    text, code_spans = extract_code_spans(text)
    text, links = extract_links(text)
    return text, ProtectionTable(code_spans=code_spans, links=links)


def restore(text: str, table: ProtectionTable) -> str:
    """Undo `protect`, restoring links first and code spans last."""
    text = restore_links(text, table.links)
    return restore_code_spans(text, table.code_spans)


def format_inline(line: str) -> str:
    """Convert inline Markdown in a single line to HTML.

    STX and ETX control characters in the input are dropped before
    formatting; they delimit the internal placeholder tokens.

    Args:
        line: One line of Markdown text (no line breaks)

    Returns:
        HTML with code spans, links, bold and italic rendered and all other
        text escaped
    """
    text, table = protect(line)
    text = apply_emphasis(escape_text(text))
    return restore(text, table)
