#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/renderers/richtext.py
"""Rich text rendering from the tree.

This module provides the RichTextRenderer class which renders a parsed note
to a :class:`rich.text.Text` for terminal display. Inline content of
paragraphs, headings and table cells goes through the
:class:`~maestromd.composer.InlineViewComposer`, so styled code appears as
chips and is never split when a width is set.

"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from rich.cells import cell_len
from rich.text import Text

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
    InlineNode,
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
    Text as TextNode,
    ThematicBreak,
)
from maestromd.ast.visitors import NodeVisitor
from maestromd.composer import InlineViewComposer
from maestromd.constants import DEFAULT_RULE_CHAR
from maestromd.options.richtext import RichTextOptions
from maestromd.renderers.base import BaseRenderer, RenderInput

logger = logging.getLogger(__name__)

_CELL_SEPARATOR = " │ "
_HEADER_SEPARATOR = "─┼─"


def _prefix_lines(text: Text, first_prefix: Text, rest_prefix: Text) -> Text:
    """Prefix the first line and every following line of a multi-line Text."""
    lines = text.split("\n", allow_blank=True)
    result = Text()
    for index, line in enumerate(lines):
        if index:
            result.append("\n")
        result.append_text(first_prefix if index == 0 else rest_prefix)
        result.append_text(line)
    return result


class RichTextRenderer(NodeVisitor, BaseRenderer):
    """Render tree nodes to styled terminal text.

    Every visit method returns a :class:`rich.text.Text`; containers join
    and prefix the Text of their children.

    Parameters
    ----------
    options : RichTextOptions or None, default = None
        Rich text rendering options
    images : Mapping[str, Any] or None, default = None
        Resolved images keyed by source, as returned by
        :func:`~maestromd.images.resolve_images`

    Examples
    --------
        >>> from maestromd import parse
        >>> text = RichTextRenderer().render_to_text(parse("# Title\\n\\n- one\\n- two"))
        >>> print(text.plain)
        Title
        <BLANKLINE>
        • one
        • two

    """

    def __init__(self, options: RichTextOptions | None = None, images: Optional[Mapping[str, Any]] = None):
        """Initialize the rich text renderer with options."""
        BaseRenderer._validate_options_type(options, RichTextOptions, "richtext")
        options = options or RichTextOptions()
        BaseRenderer.__init__(self, options)
        self.options: RichTextOptions = options
        self.images = images
        self._composer = InlineViewComposer(options, images)
        self._width: Optional[int] = options.width

    def render_to_text(self, doc: RenderInput) -> Text:
        """Render a tree to a :class:`rich.text.Text`.

        Parameters
        ----------
        doc : Document or iterable of BlockNode
            Tree to render

        Returns
        -------
        Text
            Styled text, ready to print with a rich Console

        """
        self._width = self.options.width
        return self._coerce_document(doc).accept(self)

    def render_to_string(self, doc: RenderInput) -> str:
        """Render a tree to the plain string of its rich text."""
        return self.render_to_text(doc).plain

    def _render_blocks(self, children: Iterable[Node], separator: str = "\n\n") -> Text:
        parts = [part for part in (child.accept(self) for child in children) if part.plain]
        return Text(separator).join(parts)

    def _render_inline(self, content: Iterable[InlineNode], style: str = "") -> Text:
        """Compose inline content and wrap it when a width is set."""
        composed = self._composer.compose(content)
        if self._width is None:
            text = composed.text
        else:
            text = Text("\n").join(composed.wrap(self._width))
        if style:
            text.stylize_before(style)
        return text

    def _narrowed(self, indent: int) -> Optional[int]:
        if self._width is None:
            return None
        return max(self._width - indent, 1)

    # Block nodes

    def visit_document(self, node: Document) -> Text:
        """Render the Document root."""
        return self._render_blocks(node.children)

    def visit_paragraph(self, node: Paragraph) -> Text:
        """Render a Paragraph node."""
        return self._render_inline(node.content)

    def visit_heading(self, node: Heading) -> Text:
        """Render a Heading node in its level style."""
        return self._render_inline(node.content, self.options.theme.heading_style(node.level))

    def visit_block_quote(self, node: BlockQuote) -> Text:
        """Render a BlockQuote node with a gutter on every line."""
        gutter = Text(self.options.quote_gutter, style=self.options.theme.block_quote)
        saved_width = self._width
        self._width = self._narrowed(gutter.cell_len)
        try:
            body = self._render_blocks(node.children)
        finally:
            self._width = saved_width
        return _prefix_lines(body, gutter, gutter)

    def visit_bulleted_list(self, node: BulletedList) -> Text:
        """Render a BulletedList node."""
        markers = [f"{self.options.bullet} "] * len(node.items)
        return self._render_list(node.items, markers, node.tight)

    def visit_numbered_list(self, node: NumberedList) -> Text:
        """Render a NumberedList node with right-aligned numbers."""
        numbers = [f"{node.start + index}." for index in range(len(node.items))]
        widest = max((len(number) for number in numbers), default=0)
        markers = [f"{number.rjust(widest)} " for number in numbers]
        return self._render_list(node.items, markers, node.tight)

    def visit_task_list(self, node: TaskList) -> Text:
        """Render a TaskList node with checkbox glyphs."""
        ordered = bool(node.metadata.get("ordered"))
        start = node.metadata.get("start", 1)
        markers = []
        for index, item in enumerate(node.items):
            prefix = f"{start + index}. " if ordered else ""
            if isinstance(item, TaskListItem):
                glyph = self.options.task_checked if item.completed else self.options.task_unchecked
            else:
                glyph = self.options.bullet
            markers.append(f"{prefix}{glyph} ")
        return self._render_list(node.items, markers, node.tight)

    def _render_list(self, items: Iterable[Union[ListItem, TaskListItem]], markers: list[str], tight: bool) -> Text:
        rendered = []
        for marker, item in zip(markers, items):
            marker_width = cell_len(marker)
            saved_width = self._width
            self._width = self._narrowed(marker_width)
            try:
                body = item.accept(self)
            finally:
                self._width = saved_width
            rendered.append(_prefix_lines(body, Text(marker), Text(" " * marker_width)))
        return Text("\n" if tight else "\n\n").join(rendered)

    def visit_list_item(self, node: ListItem) -> Text:
        """Render the blocks of a ListItem node (markers are added by the list)."""
        return self._render_blocks(node.children, "\n")

    def visit_task_list_item(self, node: TaskListItem) -> Text:
        """Render the blocks of a TaskListItem node (glyphs are added by the list)."""
        return self._render_blocks(node.children, "\n")

    def visit_code_block(self, node: CodeBlock) -> Text:
        """Render a CodeBlock node verbatim in the code block style."""
        return Text(node.content.rstrip("\n"), style=self.options.theme.code_block)

    def visit_html_block(self, node: HTMLBlock) -> Text:
        """Render an HTMLBlock node as literal text."""
        return Text(node.content.rstrip("\n"))

    def visit_table(self, node: Table) -> Text:
        """Render a Table node as an aligned grid."""
        column_count = node.column_count
        if column_count == 0:
            return Text()

        rows: list[tuple[bool, list[Text]]] = []
        for row in node.rows:
            cells = [self.visit_table_cell(cell) for cell in row.cells]
            cells += [Text()] * (column_count - len(cells))
            rows.append((row.is_header, cells))

        widths = [max(cells[column].cell_len for _, cells in rows) for column in range(column_count)]
        alignments = list(node.alignments) + [None] * (column_count - len(node.alignments))

        lines = []
        for is_header, cells in rows:
            aligned = []
            for cell, width, alignment in zip(cells, widths, alignments):
                cell = cell.copy()
                cell.align(alignment or "left", width)
                aligned.append(cell)
            line = Text(_CELL_SEPARATOR).join(aligned)
            if is_header:
                line.stylize_before(self.options.theme.table_header)
            lines.append(line)
            if is_header:
                rule = _HEADER_SEPARATOR.join("─" * width for width in widths)
                lines.append(Text(rule, style=self.options.theme.rule))
        return Text("\n").join(lines)

    def visit_table_row(self, node: TableRow) -> Text:
        """Render a TableRow node on its own, unaligned."""
        return Text(_CELL_SEPARATOR).join(self.visit_table_cell(cell) for cell in node.cells)

    def visit_table_cell(self, node: TableCell) -> Text:
        """Render a TableCell node on a single line."""
        text = self._composer.compose(node.content).text
        return Text(" ").join(text.split("\n"))

    def visit_thematic_break(self, node: ThematicBreak) -> Text:
        """Render a ThematicBreak node as a horizontal rule."""
        width = self.options.rule_width if self._width is None else min(self.options.rule_width, self._width)
        return Text(DEFAULT_RULE_CHAR * width, style=self.options.theme.rule)

    # Inline nodes outside a container are composed on their own

    def _render_lone_inline(self, node: InlineNode) -> Text:
        return self._render_inline((node,))

    def visit_text(self, node: TextNode) -> Text:
        """Render a lone Text node."""
        return self._render_lone_inline(node)

    def visit_soft_break(self, node: SoftBreak) -> Text:
        """Render a lone SoftBreak node."""
        return self._render_lone_inline(node)

    def visit_line_break(self, node: LineBreak) -> Text:
        """Render a lone LineBreak node."""
        return self._render_lone_inline(node)

    def visit_code(self, node: Code) -> Text:
        """Render a lone Code node."""
        return self._render_lone_inline(node)

    def visit_styled_code(self, node: StyledCode) -> Text:
        """Render a lone StyledCode node as a chip."""
        return self._render_lone_inline(node)

    def visit_html_inline(self, node: HTMLInline) -> Text:
        """Render a lone HTMLInline node."""
        return self._render_lone_inline(node)

    def visit_emphasis(self, node: Emphasis) -> Text:
        """Render a lone Emphasis node."""
        return self._render_lone_inline(node)

    def visit_strong(self, node: Strong) -> Text:
        """Render a lone Strong node."""
        return self._render_lone_inline(node)

    def visit_strikethrough(self, node: Strikethrough) -> Text:
        """Render a lone Strikethrough node."""
        return self._render_lone_inline(node)

    def visit_link(self, node: Link) -> Text:
        """Render a lone Link node."""
        return self._render_lone_inline(node)

    def visit_image(self, node: Image) -> Text:
        """Render a lone Image node."""
        return self._render_lone_inline(node)
