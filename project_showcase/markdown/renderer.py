"""Line-oriented Markdown to HTML renderer approximating GitHub README output.

The renderer is a finite state machine over the lines of a document. Each
line is classified (see `classify_line`) and fed to `transition`, which
returns the next `RenderState` together with the HTML fragments to emit.

Supported block syntax: fenced code blocks, ATX headings (levels 1-4),
task lists, unordered lists, ordered lists and paragraphs. Lists are flat:
one container is open at a time and nesting is approximated by a left margin
on each item proportional to its leading whitespace. Tables, blockquotes,
footnotes, reference-style links and raw HTML are not supported.
"""

import html
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Optional

from .inline import escape_text, format_inline

FENCE_MARKER = "```"

TASK_ITEM_PATTERN = re.compile(r"^(\s*)- \[([ xX])\]\s*(.*)$")
UNORDERED_ITEM_PATTERN = re.compile(r"^(\s*)[-*+]\s+(.*)$")
ORDERED_ITEM_PATTERN = re.compile(r"^(\s*)\d+\.\s+(.*)$")

# Heading prefixes, longest first; "##### " and beyond are paragraphs
HEADING_PREFIXES = (("#### ", 4), ("### ", 3), ("## ", 2), ("# ", 1))

# Left margin in pixels for every two characters of leading whitespace
INDENT_STEP_PX = 20

CODE_BLOCK_CLASS = "bg-gray-900 text-gray-100 rounded-lg p-4 my-4 overflow-x-auto"
PARAGRAPH_CLASS = "my-2 leading-relaxed"
HEADING_CLASSES = {
    1: "text-3xl font-bold mt-8 mb-4",
    2: "text-2xl font-semibold mt-6 mb-3",
    3: "text-xl font-medium mt-4 mb-2",
    4: "text-lg font-medium mt-3 mb-2",
}
CHECKBOX_CLASS = (
    "mt-1 mr-2 h-4 w-4 text-blue-600 bg-gray-100 border-gray-300 rounded "
    "focus:ring-blue-500"
)
CHECKED_LABEL_CLASS = "line-through text-gray-500"
BLANK_LINE_HTML = "<br>"


class ListKind(str, Enum):
    """Kind of list container. Only one can be open at a time."""

    UNORDERED = "unordered"
    ORDERED = "ordered"
    TASK = "task"


_LIST_OPEN_TAGS = {
    ListKind.UNORDERED: '<ul class="list-disc ml-6 my-3">',
    ListKind.ORDERED: '<ol class="list-decimal ml-6 my-3">',
    ListKind.TASK: '<ul class="task-list my-3">',
}
_LIST_CLOSE_TAGS = {
    ListKind.UNORDERED: "</ul>",
    ListKind.ORDERED: "</ol>",
    ListKind.TASK: "</ul>",
}


class LineKind(str, Enum):
    """Block-level classification of a single line."""

    FENCE = "fence"
    CODE = "code"
    BLANK = "blank"
    HEADING = "heading"
    TASK_ITEM = "task_item"
    UNORDERED_ITEM = "unordered_item"
    ORDERED_ITEM = "ordered_item"
    PARAGRAPH = "paragraph"


_LIST_LINE_KINDS = {
    LineKind.TASK_ITEM: ListKind.TASK,
    LineKind.UNORDERED_ITEM: ListKind.UNORDERED,
    LineKind.ORDERED_ITEM: ListKind.ORDERED,
}


class ClassifiedLine(NamedTuple):
    """A line together with what the classifier captured from it.

    ``text`` is the content left after stripping block syntax (heading
    prefix, list marker, checkbox); for fences it is the info string.
    """

    kind: LineKind
    text: str = ""
    level: int = 0
    indent: int = 0
    checked: bool = False

    @property
    def list_kind(self) -> Optional[ListKind]:
        return _LIST_LINE_KINDS.get(self.kind)


class BlockContext(str, Enum):
    """The state machine context a `RenderState` is in."""

    PARAGRAPH = "paragraph"
    IN_CODE_BLOCK = "in_code_block"
    IN_LIST = "in_list"


@dataclass(frozen=True)
class RenderState:
    """Transient renderer state for one `render` call."""

    in_code_block: bool = False
    code_block_language: str = ""
    current_list: Optional[ListKind] = None

    @property
    def context(self) -> BlockContext:
        if self.in_code_block:
            return BlockContext.IN_CODE_BLOCK
        if self.current_list is not None:
            return BlockContext.IN_LIST
        return BlockContext.PARAGRAPH


def _indent_px(leading_whitespace: str) -> int:
    return len(leading_whitespace) * INDENT_STEP_PX // 2


def classify_line(line: str, in_code_block: bool = False) -> ClassifiedLine:
    """Assign a line to its block-level kind.

    Args:
        line: A single line without its line ending
        in_code_block: Whether a fenced code block is currently open

    Returns:
        The classification and any captured parts of the line
    """
    stripped = line.strip()
    if stripped.startswith(FENCE_MARKER):
        return ClassifiedLine(
            LineKind.FENCE, text=stripped[len(FENCE_MARKER) :].strip()
        )
    if in_code_block:
        return ClassifiedLine(LineKind.CODE, text=line)
    if not stripped:
        return ClassifiedLine(LineKind.BLANK)

    for prefix, level in HEADING_PREFIXES:
        if line.startswith(prefix):
            return ClassifiedLine(
                LineKind.HEADING, text=line[len(prefix) :], level=level
            )

    if match := TASK_ITEM_PATTERN.match(line):
        return ClassifiedLine(
            LineKind.TASK_ITEM,
            text=match.group(3),
            indent=_indent_px(match.group(1)),
            checked=match.group(2) in ("x", "X"),
        )
    if match := UNORDERED_ITEM_PATTERN.match(line):
        return ClassifiedLine(
            LineKind.UNORDERED_ITEM,
            text=match.group(2),
            indent=_indent_px(match.group(1)),
        )
    if match := ORDERED_ITEM_PATTERN.match(line):
        return ClassifiedLine(
            LineKind.ORDERED_ITEM,
            text=match.group(2),
            indent=_indent_px(match.group(1)),
        )
    return ClassifiedLine(LineKind.PARAGRAPH, text=line)


def _render_list_item(line: ClassifiedLine) -> str:
    content = format_inline(line.text)
    style = f'style="margin-left: {line.indent}px;"'
    if line.kind is not LineKind.TASK_ITEM:
        return f"<li {style}>{content}</li>"

    checked_attr = "checked " if line.checked else ""
    label_class = CHECKED_LABEL_CLASS if line.checked else ""
    return (
        f'<li class="flex items-start" {style}>'
        f'<input type="checkbox" {checked_attr}disabled class="{CHECKBOX_CLASS}">'
        f'<span class="{label_class}">{content}</span>'
        f"</li>"
    )


def _open_code_block(language: str) -> str:
    return (
        f'<pre class="{CODE_BLOCK_CLASS}">'
        f'<code class="language-{html.escape(language, quote=True)}">'
    )


def transition(state: RenderState, raw_line: str) -> tuple[RenderState, list[str]]:
    """Consume one line and return the next state and emitted fragments.

    Transition table (first matching row wins):

    ============== =================== ===============================
    context        line                effect
    ============== =================== ===============================
    any            fence               toggle code block
    IN_CODE_BLOCK  any                 emit escaped line verbatim
    IN_LIST        blank               emit nothing, list stays open
    PARAGRAPH      blank               emit ``<br>``
    IN_LIST        item of same kind   emit item
    IN_LIST        item of other kind  close list, open new, emit item
    PARAGRAPH      item                open list, emit item
    IN_LIST        heading/paragraph   close list, emit block
    PARAGRAPH      heading/paragraph   emit block
    ============== =================== ===============================

    A fence inside an open list does not close the list.
    """
    line = classify_line(raw_line, state.in_code_block)

    if line.kind is LineKind.FENCE:
        if state.in_code_block:
            return replace(state, in_code_block=False), ["</code></pre>"]
        return (
            replace(state, in_code_block=True, code_block_language=line.text),
            [_open_code_block(line.text)],
        )

    if line.kind is LineKind.CODE:
        return state, [escape_text(line.text) + "\n"]

    if line.kind is LineKind.BLANK:
        if state.current_list is not None:
            return state, []
        return state, [BLANK_LINE_HTML]

    fragments: list[str] = []
    list_kind = line.list_kind

    if state.current_list is not None and state.current_list is not list_kind:
        fragments.append(_LIST_CLOSE_TAGS[state.current_list])
        state = replace(state, current_list=None)

    if list_kind is not None:
        if state.current_list is None:
            fragments.append(_LIST_OPEN_TAGS[list_kind])
            state = replace(state, current_list=list_kind)
        fragments.append(_render_list_item(line))
        return state, fragments

    if line.kind is LineKind.HEADING:
        level = line.level
        fragments.append(
            f'<h{level} class="{HEADING_CLASSES[level]}">'
            f"{format_inline(line.text)}</h{level}>"
        )
        return state, fragments

    content = format_inline(line.text)
    if content.strip():
        fragments.append(f'<p class="{PARAGRAPH_CLASS}">{content}</p>')
    return state, fragments


def finish(state: RenderState) -> list[str]:
    """Fragments to emit at end of input.

    An open list is closed. An unterminated code block is left open.
    """
    if state.current_list is not None:
        return [_LIST_CLOSE_TAGS[state.current_list]]
    return []


def split_lines(document: str) -> list[str]:
    """Split a document into lines, normalising CRLF and CR endings."""
    return document.replace("\r\n", "\n").replace("\r", "\n").split("\n")


class MarkdownRenderer:
    """Render Markdown documents to HTML.

    Instances hold no state between calls; `render` may be called
    concurrently from several threads.
    """

    def render(self, document: str) -> str:
        """Convert a Markdown document to an HTML fragment."""
        state = RenderState()
        parts: list[str] = []
        for raw_line in split_lines(document):
            state, fragments = transition(state, raw_line)
            parts.extend(fragments)
        parts.extend(finish(state))
        return "".join(parts)


def render(document: str) -> str:
    """Convert a Markdown document to an HTML fragment."""
    return MarkdownRenderer().render(document)
