#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/renderers/plaintext.py
"""Plain text rendering from the tree.

The renderer strips all styling and keeps only literal text: text runs, and
the literal contents of both ordinary and styled code spans. Block structure
is flattened to separator-joined text, which is what search indexing and
copy-as-text need.

"""

from __future__ import annotations

import textwrap
from typing import Iterable, Union

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
from maestromd.ast.visitors import NodeVisitor
from maestromd.options.plaintext import PlainTextOptions
from maestromd.renderers.base import BaseRenderer, InlineContentMixin, RenderInput


class PlainTextRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render tree nodes to plain, unformatted text.

    Parameters
    ----------
    options : PlainTextOptions or None, default = None
        Plain text rendering options

    Examples
    --------
        >>> from maestromd.ast import Document, Paragraph, Text, StyledCode
        >>> doc = Document(children=[
        ...     Paragraph(content=[Text("Use "), StyledCode("SELECT *"), Text(" here")])
        ... ])
        >>> PlainTextRenderer().render_to_string(doc)
        'Use SELECT * here'

    """

    def __init__(self, options: PlainTextOptions | None = None):
        """Initialize the plain text renderer with options."""
        BaseRenderer._validate_options_type(options, PlainTextOptions, "plaintext")
        options = options or PlainTextOptions()
        BaseRenderer.__init__(self, options)
        self.options: PlainTextOptions = options
        self._output: list[str] = []

    def render_to_string(self, doc: RenderInput) -> str:
        """Render a tree to a plain text string.

        Parameters
        ----------
        doc : Document or iterable of BlockNode
            Tree to render

        Returns
        -------
        str
            Plain text output

        """
        self._output = []
        self._coerce_document(doc).accept(self)
        return "".join(self._output).rstrip()

    def _render_to_string(self, node: Node) -> str:
        saved_output = self._output
        self._output = []
        node.accept(self)
        result = "".join(self._output)
        self._output = saved_output
        return result

    def _render_blocks(self, children: Iterable[Node], separator: str) -> str:
        parts = [self._render_to_string(child) for child in children]
        return separator.join(part for part in parts if part)

    def _wrap(self, text: str) -> str:
        """Wrap each line of a paragraph at max_line_width, if set."""
        width = self.options.max_line_width
        if width is None:
            return text
        return "\n".join(
            textwrap.fill(line, width=width, break_long_words=False, break_on_hyphens=False) if line.strip() else line
            for line in text.split("\n")
        )

    # Block nodes

    def visit_document(self, node: Document) -> None:
        """Render the Document root."""
        self._output.append(self._render_blocks(node.children, self.options.paragraph_separator))

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node (text only)."""
        self._output.append(self._render_blocks(node.children, self.options.paragraph_separator))

    def visit_bulleted_list(self, node: BulletedList) -> None:
        """Render a BulletedList node."""
        self._render_list_items(node.items, [self.options.list_item_prefix] * len(node.items), node.tight)

    def visit_numbered_list(self, node: NumberedList) -> None:
        """Render a NumberedList node."""
        prefixes = [f"{node.start + index}. " for index in range(len(node.items))]
        self._render_list_items(node.items, prefixes, node.tight)

    def visit_task_list(self, node: TaskList) -> None:
        """Render a TaskList node with ``[x]`` / ``[ ]`` markers."""
        prefixes = []
        for item in node.items:
            if isinstance(item, TaskListItem):
                prefixes.append("[x] " if item.completed else "[ ] ")
            else:
                prefixes.append(self.options.list_item_prefix)
        self._render_list_items(node.items, prefixes, node.tight)

    def _render_list_items(self, items: Iterable[Union[ListItem, TaskListItem]], prefixes: list[str], tight: bool) -> None:
        separator = "\n" if tight else "\n\n"
        rendered = []
        for prefix, item in zip(prefixes, items):
            body = self._render_to_string(item)
            indent = " " * len(prefix)
            lines = body.split("\n")
            continuation = [f"{indent}{line}" if line else line for line in lines[1:]]
            rendered.append("\n".join([f"{prefix}{lines[0]}", *continuation]))
        self._output.append(separator.join(rendered))

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem node (prefix is added by the list)."""
        self._output.append(self._render_blocks(node.children, "\n"))

    def visit_task_list_item(self, node: TaskListItem) -> None:
        """Render a TaskListItem node (checkbox is added by the list)."""
        self._output.append(self._render_blocks(node.children, "\n"))

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node."""
        if self.options.preserve_code_blocks:
            self._output.append(node.content.rstrip("\n"))
        else:
            self._output.append(self._wrap(node.content.strip()))

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Skip raw HTML blocks."""

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        self._output.append(self._wrap(self._render_inline_content(node.content)))

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node (text only)."""
        self._output.append(self._render_inline_content(node.content))

    def visit_table(self, node: Table) -> None:
        """Render a Table node as separator-joined rows."""
        rows = [
            self._render_to_string(row)
            for row in node.rows
            if self.options.include_table_headers or not row.is_header
        ]
        self._output.append("\n".join(rows))

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow node."""
        cells = [self._render_to_string(cell) for cell in node.cells]
        self._output.append(self.options.table_cell_separator.join(cells))

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell node on a single line."""
        self._output.append(self._render_inline_content(node.content).replace("\n", " "))

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Skip thematic breaks."""

    # Inline nodes

    def visit_text(self, node: Text) -> None:
        """Render a Text node."""
        self._output.append(node.content)

    def visit_soft_break(self, node: SoftBreak) -> None:
        """Render a SoftBreak node as a space."""
        self._output.append(" ")

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node as a newline."""
        self._output.append("\n")

    def visit_code(self, node: Code) -> None:
        """Render a Code node as its literal content."""
        self._output.append(node.content)

    def visit_styled_code(self, node: StyledCode) -> None:
        """Render a StyledCode node as its literal content."""
        self._output.append(node.content)

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Skip inline HTML."""

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node (text only)."""
        self._output.append(self._render_inline_content(node.content))

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node (text only)."""
        self._output.append(self._render_inline_content(node.content))

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render a Strikethrough node (text only)."""
        self._output.append(self._render_inline_content(node.content))

    def visit_link(self, node: Link) -> None:
        """Render a Link node as its text."""
        self._output.append(self._render_inline_content(node.content))

    def visit_image(self, node: Image) -> None:
        """Render an Image node as its alt text."""
        self._output.append(self._render_inline_content(node.content))
