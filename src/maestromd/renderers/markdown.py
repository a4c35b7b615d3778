#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/renderers/markdown.py
"""Markdown serialization from the tree.

This module provides the MarkdownRenderer class which turns a parsed note
back into CommonMark with the GFM extensions the parser understands
(tables, strikethrough, task lists). Styled code spans are emitted in their
encoded form and the marker codec's ``restore`` runs as the final pass, so
they come back out as ``` ``content`` ```.

The serializer aims at re-parse fidelity rather than byte fidelity: the
output of ``serialize(parse(md))`` parses to the same tree, but spacing,
list markers and escapes may differ from the original source.

"""

from __future__ import annotations

import re
from typing import Optional, Union

from maestromd.ast.nodes import (
    BlockQuote,
    BulletedList,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    ListItem,
    Node,
    NumberedList,
    Paragraph,
    SoftBreak,
    Strikethrough,
    Strong,
    StyledCode,
    Table,
    TableCell,
    TableRow,
    TaskList,
    TaskListItem,
    Text,
    ThematicBreak,
)
from maestromd.ast.utils import extract_text
from maestromd.ast.visitors import NodeVisitor
from maestromd.markers import DEFAULT_CODEC, MarkerCodec
from maestromd.options.markdown import MarkdownRendererOptions
from maestromd.renderers.base import BaseRenderer, InlineContentMixin, RenderInput

ListNode = Union[BulletedList, NumberedList, TaskList]

_ALWAYS_ESCAPE = "\\`*{}[]<>~|&"

# Constructs that would change meaning at the start of a paragraph line
_LINE_START_BULLET_RE = re.compile(r"^([ \t]*)([-+])(?=[ \t]|$)", re.MULTILINE)
_LINE_START_ORDERED_RE = re.compile(r"^([ \t]*\d{1,9})([.)])(?=[ \t]|$)", re.MULTILINE)
_LINE_START_HEADING_RE = re.compile(r"^([ \t]*)(#{1,6})(?=[ \t]|$)", re.MULTILINE)
_LINE_START_SETEXT_RE = re.compile(r"^([ \t]*)([=-])(?=[=-]*[ \t]*$)", re.MULTILINE)
_UNESCAPED_PIPE_RE = re.compile(r"(?<!\\)\|")
_BLANK_LINE_RUN_RE = re.compile(r"\n{3,}")

_ALIGNMENT_ROW = {None: "---", "left": ":--", "center": ":-:", "right": "--:"}


def _longest_run(text: str, char: str) -> int:
    """Length of the longest run of ``char`` in ``text``."""
    runs = re.findall(f"{re.escape(char)}+", text)
    return max((len(run) for run in runs), default=0)


def _needs_code_padding(content: str) -> bool:
    """Whether a code span literal needs one space of padding on each side.

    Content that starts or ends with a backtick would merge with the
    delimiter, and content wrapped in spaces would lose one space on each
    side when re-parsed.
    """
    if content.startswith("`") or content.endswith("`"):
        return True
    return bool(content.strip(" ")) and content.startswith(" ") and content.endswith(" ")


def _indent_lines(text: str, prefix: str) -> str:
    """Prefix every non-empty line of ``text`` except the first."""
    lines = text.split("\n")
    return "\n".join([lines[0], *(f"{prefix}{line}" if line else line for line in lines[1:])])


class MarkdownRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render tree nodes to CommonMark/GFM markdown.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown serialization options
    codec : MarkerCodec or None, default = None
        Codec used to emit and restore styled code spans

    Examples
    --------
        >>> from maestromd.ast import Document, Paragraph, Text, StyledCode
        >>> doc = Document(children=[
        ...     Paragraph(content=[Text("Use "), StyledCode("SELECT *"), Text(" here")])
        ... ])
        >>> MarkdownRenderer().render_to_string(doc)
        'Use ``SELECT *`` here'

    """

    def __init__(self, options: MarkdownRendererOptions | None = None, codec: MarkerCodec | None = None):
        """Initialize the markdown renderer with options."""
        BaseRenderer._validate_options_type(options, MarkdownRendererOptions, "markdown")
        options = options or MarkdownRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MarkdownRendererOptions = options
        self.codec = codec or DEFAULT_CODEC
        self._output: list[str] = []

    def render_to_string(self, doc: RenderInput) -> str:
        """Render a tree to a markdown string.

        Parameters
        ----------
        doc : Document or iterable of BlockNode
            Tree to render

        Returns
        -------
        str
            Markdown text with styled code spans restored

        """
        self._output = []
        self._coerce_document(doc).accept(self)
        result = "".join(self._output)
        self._output = []
        return self.codec.restore(self._cleanup_output(result))

    def _cleanup_output(self, text: str) -> str:
        """Collapse blank line runs outside fenced code and trim the end."""
        if self.options.collapse_blank_lines:
            parts: list[str] = []
            position = 0
            for region_start, region_end in self.codec.find_fenced_regions(text):
                parts.append(_BLANK_LINE_RUN_RE.sub("\n\n", text[position:region_start]))
                parts.append(text[region_start:region_end])
                position = region_end
            parts.append(_BLANK_LINE_RUN_RE.sub("\n\n", text[position:]))
            text = "".join(parts)
        return text.rstrip()

    def _render_to_string(self, node: Node) -> str:
        saved_output = self._output
        self._output = []
        node.accept(self)
        result = "".join(self._output)
        self._output = saved_output
        return result

    def _render_blocks(self, children: tuple[Node, ...], separator: str = "\n\n") -> str:
        """Render sibling blocks, alternating list markers between adjacent lists.

        Two lists of the same kind with nothing in between would merge into
        one list when re-parsed unless their markers differ.
        """
        rendered: list[str] = []
        previous: Optional[Node] = None
        previous_marker: Optional[str] = None
        for index, child in enumerate(children):
            marker = None
            if isinstance(child, (BulletedList, NumberedList, TaskList)):
                avoid = previous_marker if self._same_list_kind(previous, child) else None
                marker = self._list_marker_char(child, avoid)
                block = self._render_list(child, marker)
            else:
                block = self._render_to_string(child)

            if block:
                if rendered:
                    # Paragraphs never merge across a tight-item separator
                    joiner = "\n\n" if isinstance(previous, Paragraph) and isinstance(child, Paragraph) else separator
                    rendered.append(joiner)
                rendered.append(block)
            previous = child
            previous_marker = marker
        return "".join(rendered)

    @staticmethod
    def _is_ordered(node: ListNode) -> bool:
        if isinstance(node, NumberedList):
            return True
        if isinstance(node, TaskList):
            return bool(node.metadata.get("ordered"))
        return False

    def _same_list_kind(self, previous: Optional[Node], current: ListNode) -> bool:
        if not isinstance(previous, (BulletedList, NumberedList, TaskList)):
            return False
        return self._is_ordered(previous) == self._is_ordered(current)

    def _list_marker_char(self, node: ListNode, avoid: Optional[str] = None) -> str:
        """Pick the bullet character or ordered delimiter for a list."""
        recorded = node.metadata.get("bullet") if self.options.use_recorded_markers else None
        if self._is_ordered(node):
            choices = [recorded] if recorded in (".", ")") else []
            choices += [".", ")"]
        else:
            choices = [recorded] if recorded and recorded in "-*+" else []
            choices += list(self.options.bullet_symbols) + ["-", "*", "+"]
        return next(choice for choice in choices if choice != avoid)

    def _escape_text(self, text: str) -> str:
        """Escape markdown punctuation in a text run.

        ``#`` is only escaped at the start of the run and ``_`` only at word
        boundaries, so ``snake_case`` and ``issue #12`` stay readable.
        """
        if not self.options.escape_special:
            return text

        escaped: list[str] = []
        for i, char in enumerate(text):
            if char in _ALWAYS_ESCAPE:
                escaped.append("\\" + char)
            elif char == "#" and i == 0:
                escaped.append("\\#")
            elif char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
                escaped.append(char if prev_alnum and next_alnum else "\\_")
            else:
                escaped.append(char)
        return "".join(escaped)

    def _escape_line_starts(self, text: str) -> str:
        """Escape block syntax at the start of paragraph lines."""
        if not self.options.escape_special:
            return text
        text = _LINE_START_BULLET_RE.sub(r"\1\\\2", text)
        text = _LINE_START_ORDERED_RE.sub(r"\1\\\2", text)
        text = _LINE_START_HEADING_RE.sub(r"\1\\\2", text)
        text = _LINE_START_SETEXT_RE.sub(r"\1\\\2", text)
        return text

    @staticmethod
    def _link_destination(url: str) -> str:
        if not url or any(char in url for char in " ()<>"):
            return "<" + url.replace("<", "\\<").replace(">", "\\>") + ">"
        return url

    @staticmethod
    def _link_title(title: Optional[str]) -> str:
        if not title:
            return ""
        return ' "' + title.replace("\\", "\\\\").replace('"', '\\"') + '"'

    # Block nodes

    def visit_document(self, node: Document) -> None:
        """Render the Document root with blank lines between blocks."""
        self._output.append(self._render_blocks(node.children))

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node as an ATX heading."""
        content = self._render_inline_content(node.content)
        content = content.replace("\\\n", " ").replace("\n", " ").strip()
        if content.endswith("#"):
            content = content[:-1] + "\\#"
        marker = "#" * node.level
        self._output.append(f"{marker} {content}" if content else marker)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        content = self._render_inline_content(node.content)
        if content.endswith("\\\n"):
            content = content[:-2]
        self._output.append(self._escape_line_starts(content))

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node as a fenced block."""
        fence_char = self.options.code_fence_char
        recorded = node.metadata.get("marker") if self.options.use_recorded_markers else None
        if recorded and recorded[0] in "`~":
            fence_char = recorded[0]

        info = node.fence_info or ""
        if fence_char == "`" and "`" in info:
            fence_char = "~"

        fence = fence_char * max(self.options.code_fence_min, _longest_run(node.content, fence_char) + 1)
        content = node.content
        if content and not content.endswith("\n"):
            content += "\n"
        self._output.append(f"{fence}{info}\n{content}{fence}")

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node with ``>`` on every line."""
        content = self._render_blocks(node.children)
        lines = content.split("\n") if content else [""]
        self._output.append("\n".join(f"> {line}" if line else ">" for line in lines))

    def visit_bulleted_list(self, node: BulletedList) -> None:
        """Render a BulletedList node."""
        self._output.append(self._render_list(node, self._list_marker_char(node)))

    def visit_numbered_list(self, node: NumberedList) -> None:
        """Render a NumberedList node."""
        self._output.append(self._render_list(node, self._list_marker_char(node)))

    def visit_task_list(self, node: TaskList) -> None:
        """Render a TaskList node, keeping recorded numbering."""
        self._output.append(self._render_list(node, self._list_marker_char(node)))

    def _render_list(self, node: ListNode, marker_char: str) -> str:
        """Render list items with the given bullet character or delimiter.

        Parameters
        ----------
        node : BulletedList, NumberedList or TaskList
            List to render
        marker_char : str
            Bullet character (``-*+``) or ordered delimiter (``.`` / ``)``)

        Returns
        -------
        str
            Rendered list

        """
        if isinstance(node, NumberedList):
            start = node.start
        else:
            start = node.metadata.get("start", 1)
        ordered = self._is_ordered(node)

        rendered_items = []
        for index, item in enumerate(node.items):
            marker = f"{start + index}{marker_char} " if ordered else f"{marker_char} "
            rendered_items.append(self._render_list_item(item, marker, node.tight))
        return ("\n" if node.tight else "\n\n").join(rendered_items)

    def _render_list_item(self, item: Union[ListItem, TaskListItem], marker: str, tight: bool) -> str:
        body = self._render_blocks(item.children, "\n" if tight else "\n\n")
        checkbox = ""
        if isinstance(item, TaskListItem):
            checkbox = "[x] " if item.completed else "[ ] "
        if not body:
            return f"{marker}{checkbox}" if checkbox else marker.rstrip()
        # Continuation lines align with the content after the list marker
        return f"{marker}{checkbox}{_indent_lines(body, ' ' * len(marker))}"

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem node outside a list, as a bullet item."""
        self._output.append(self._render_list_item(node, f"{self.options.bullet_symbols[0]} ", True))

    def visit_task_list_item(self, node: TaskListItem) -> None:
        """Render a TaskListItem node outside a list, as a bullet item."""
        self._output.append(self._render_list_item(node, f"{self.options.bullet_symbols[0]} ", True))

    def visit_table(self, node: Table) -> None:
        """Render a Table node as a GFM pipe table."""
        column_count = node.column_count
        if column_count == 0:
            return

        header = node.header
        header_cells = self._render_row_cells(header, column_count) if header else [""] * column_count
        alignments = list(node.alignments) + [None] * (column_count - len(node.alignments))

        lines = [
            self._format_row(header_cells),
            self._format_row([_ALIGNMENT_ROW.get(alignment, "---") for alignment in alignments]),
        ]
        lines.extend(self._format_row(self._render_row_cells(row, column_count)) for row in node.body)
        self._output.append("\n".join(lines))

    def _render_row_cells(self, row: TableRow, column_count: int) -> list[str]:
        cells = [self._render_to_string(cell) for cell in row.cells]
        return cells + [""] * (column_count - len(cells))

    @staticmethod
    def _format_row(cells: list[str]) -> str:
        return "| " + " | ".join(cells) + " |"

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow node on its own."""
        self._output.append(self._format_row(self._render_row_cells(node, len(node.cells))))

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell node with pipes escaped and breaks flattened."""
        content = self._render_inline_content(node.content)
        content = content.replace("\\\n", " ").replace("\n", " ").strip()
        self._output.append(_UNESCAPED_PIPE_RE.sub(r"\\|", content))

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        # Never "---": directly under a paragraph line it is a setext underline
        self._output.append("***")

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Render an HTMLBlock node verbatim."""
        self._output.append(node.content.rstrip("\n"))

    # Inline nodes

    def visit_text(self, node: Text) -> None:
        """Render a Text node with markdown punctuation escaped."""
        self._output.append(self._escape_text(node.content))

    def visit_soft_break(self, node: SoftBreak) -> None:
        """Render a SoftBreak node."""
        self._output.append("\n")

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node as a backslash hard break."""
        self._output.append("\\\n")

    def visit_code(self, node: Code) -> None:
        """Render a Code node.

        The delimiter is the shortest backtick run that does not occur in
        the content. Two backticks are skipped: that delimiter marks styled
        code.
        """
        if not node.content:
            return
        runs = {len(run) for run in re.findall(r"`+", node.content)}
        length = 1
        while length in runs or length == 2:
            length += 1
        fence = "`" * length
        content = f" {node.content} " if _needs_code_padding(node.content) else node.content
        self._output.append(f"{fence}{content}{fence}")

    def visit_styled_code(self, node: StyledCode) -> None:
        """Render a StyledCode node in encoded form (restored at the end)."""
        if not node.content:
            return
        content = f" {node.content} " if _needs_code_padding(node.content) else node.content
        self._output.append(self.codec.wrap(content))

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Render an HTMLInline node verbatim."""
        self._output.append(node.content)

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        symbol = self.options.emphasis_symbol
        self._output.append(f"{symbol}{self._render_inline_content(node.content)}{symbol}")

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        symbol = self.options.emphasis_symbol * 2
        self._output.append(f"{symbol}{self._render_inline_content(node.content)}{symbol}")

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render a Strikethrough node."""
        self._output.append(f"~~{self._render_inline_content(node.content)}~~")

    def visit_link(self, node: Link) -> None:
        """Render a Link node.

        Links whose text is their own destination are written as autolinks.
        """
        text = extract_text(node.content)
        is_autolink = (
            len(node.content) == 1
            and isinstance(node.content[0], Text)
            and node.url
            and node.url in (text, f"mailto:{text}")
            and not node.title
            and not any(char in node.url for char in " <>")
        )
        if is_autolink:
            self._output.append(f"<{text}>")
            return

        content = self._render_inline_content(node.content)
        destination = self._link_destination(node.url)
        self._output.append(f"[{content}]({destination}{self._link_title(node.title)})")

    def visit_image(self, node: Image) -> None:
        """Render an Image node."""
        alt = self._render_inline_content(node.content)
        destination = self._link_destination(node.url)
        self._output.append(f"![{alt}]({destination}{self._link_title(node.title)})")
