#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/renderers/html.py
"""HTML rendering from the tree.

This module provides the HtmlRenderer class which converts a parsed note
into an HTML fragment, or into a complete HTML document when standalone
output is requested. Styled code spans become ``<code>`` elements with a
dedicated CSS class so a stylesheet can give them the same chip treatment
as the terminal view.

"""

from __future__ import annotations

import logging

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
from maestromd.options.html import HtmlRendererOptions
from maestromd.renderers.base import BaseRenderer, InlineContentMixin, RenderInput
from maestromd.utils.html_utils import escape_html, sanitize_html_content, sanitize_inline_html
from maestromd.utils.urls import resolve_url, sanitize_url

logger = logging.getLogger(__name__)


class HtmlRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render tree nodes to HTML.

    Parameters
    ----------
    options : HtmlRendererOptions or None, default = None
        HTML rendering options

    Examples
    --------
        >>> from maestromd.ast import Document, Paragraph, Text, StyledCode
        >>> doc = Document(children=[Paragraph(content=[Text("Run "), StyledCode("SELECT 1")])])
        >>> HtmlRenderer().render_to_string(doc)
        '<p>Run <code class="styled-code">SELECT 1</code></p>\\n'

    """

    def __init__(self, options: HtmlRendererOptions | None = None):
        """Initialize the HTML renderer with options."""
        BaseRenderer._validate_options_type(options, HtmlRendererOptions, "html")
        options = options or HtmlRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: HtmlRendererOptions = options
        self._output: list[str] = []
        self._tight_stack: list[bool] = []

    def render_to_string(self, doc: RenderInput) -> str:
        """Render a tree to an HTML string.

        Parameters
        ----------
        doc : Document or iterable of BlockNode
            Tree to render

        Returns
        -------
        str
            HTML fragment, or a full document when ``standalone`` is set

        """
        self._output = []
        self._tight_stack = []

        self._coerce_document(doc).accept(self)
        content = "".join(self._output)

        if self.options.standalone:
            return self._wrap_in_document(content)
        return content

    def _wrap_in_document(self, content: str) -> str:
        """Wrap content in a complete HTML document."""
        title = escape_html(self.options.title)
        parts = [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="UTF-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
            f"<title>{title}</title>",
            "</head>",
            "<body>",
            content.rstrip("\n"),
            "</body>",
            "</html>",
        ]
        return "\n".join(parts) + "\n"

    def _class_attr(self, element: str, *classes: str) -> str:
        """Build a class attribute from fixed classes and ``css_class_map``.

        Parameters
        ----------
        element : str
            Element name looked up in ``css_class_map`` (e.g. ``"table"``)
        *classes : str
            Classes always present on the element

        Returns
        -------
        str
            Attribute string such as ``' class="a b"'``, or an empty string

        """
        names = [name for name in classes if name]
        if self.options.css_class_map and self.options.css_class_map.get(element):
            names.append(self.options.css_class_map[element])
        if not names:
            return ""
        return f' class="{escape_html(" ".join(names))}"'

    def _url(self, url: str) -> str:
        """Resolve, sanitize and attribute-escape a link or image URL."""
        resolved = resolve_url(url, self.options.base_url)
        if self.options.sanitize_urls:
            resolved = sanitize_url(resolved) or "#"
        return escape_html(resolved)

    def _text(self, text: str) -> str:
        return escape_html(text, enabled=self.options.escape_html)

    # Block nodes

    def visit_document(self, node: Document) -> None:
        """Render a Document node."""
        for child in node.children:
            child.accept(self)

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node."""
        tag = f"h{node.level}"
        content = self._render_inline_content(node.content)
        self._output.append(f"<{tag}{self._class_attr(tag)}>{content}</{tag}>\n")

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node.

        Paragraphs directly inside a tight list item are emitted without
        ``<p>`` tags.
        """
        content = self._render_inline_content(node.content)
        if self._tight_stack and self._tight_stack[-1]:
            self._output.append(content)
            return
        self._output.append(f"<p{self._class_attr('p')}>{content}</p>\n")

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node."""
        language_class = f"language-{node.language}" if node.language else ""
        class_attr = self._class_attr("code", language_class)
        content = escape_html(node.content)
        self._output.append(f"<pre{self._class_attr('pre')}><code{class_attr}>{content}</code></pre>\n")

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node."""
        self._output.append(f"<blockquote{self._class_attr('blockquote')}>\n")
        # Quotes inside a tight list item still get paragraph tags
        self._tight_stack.append(False)
        for child in node.children:
            child.accept(self)
        self._tight_stack.pop()
        self._output.append("</blockquote>\n")

    def visit_bulleted_list(self, node: BulletedList) -> None:
        """Render a BulletedList node."""
        self._render_list("ul", "", node.items, node.tight)

    def visit_numbered_list(self, node: NumberedList) -> None:
        """Render a NumberedList node."""
        start_attr = f' start="{node.start}"' if node.start != 1 else ""
        self._render_list("ol", start_attr, node.items, node.tight)

    def visit_task_list(self, node: TaskList) -> None:
        """Render a TaskList node.

        Numbering recorded by the parser is kept, so an ordered task list
        stays an ``<ol>``.
        """
        if node.metadata.get("ordered"):
            start = node.metadata.get("start", 1)
            start_attr = f' start="{start}"' if start != 1 else ""
            self._render_list("ol", start_attr, node.items, node.tight, "contains-task-list")
        else:
            self._render_list("ul", "", node.items, node.tight, "contains-task-list")

    def _render_list(self, tag: str, extra_attrs: str, items: tuple[Node, ...], tight: bool, list_class: str = "") -> None:
        self._output.append(f"<{tag}{extra_attrs}{self._class_attr(tag, list_class)}>\n")
        self._tight_stack.append(tight)
        for item in items:
            item.accept(self)
        self._tight_stack.pop()
        self._output.append(f"</{tag}>\n")

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem node."""
        self._output.append(f"<li{self._class_attr('li')}>")
        self._render_item_children(node.children)
        self._output.append("</li>\n")

    def visit_task_list_item(self, node: TaskListItem) -> None:
        """Render a TaskListItem node with a disabled checkbox."""
        checked = " checked" if node.completed else ""
        self._output.append(f"<li{self._class_attr('li', 'task-list-item')}>")
        self._output.append(f'<input type="checkbox" disabled{checked}> ')
        self._render_item_children(node.children)
        self._output.append("</li>\n")

    def _render_item_children(self, children: tuple[Node, ...]) -> None:
        for index, child in enumerate(children):
            # Block children after inline text of a tight item start on a new line
            if index and self._tight_stack and self._tight_stack[-1] and not self._output[-1].endswith("\n"):
                self._output.append("\n")
            child.accept(self)

    def visit_table(self, node: Table) -> None:
        """Render a Table node with ``<thead>`` and ``<tbody>`` sections."""
        self._output.append(f"<table{self._class_attr('table')}>\n")

        header = node.header
        if header is not None:
            self._output.append("<thead>\n")
            self._render_table_row(header, node, "th")
            self._output.append("</thead>\n")

        body = node.body
        if body:
            self._output.append("<tbody>\n")
            for row in body:
                self._render_table_row(row, node, "td")
            self._output.append("</tbody>\n")

        self._output.append("</table>\n")

    def _render_table_row(self, row: TableRow, table: Table, cell_tag: str) -> None:
        self._output.append("<tr>\n")
        for index, cell in enumerate(row.cells):
            alignment = table.alignments[index] if index < len(table.alignments) else None
            align_attr = f' style="text-align: {alignment}"' if alignment else ""
            content = self._render_inline_content(cell.content)
            self._output.append(f"<{cell_tag}{align_attr}>{content}</{cell_tag}>\n")
        self._output.append("</tr>\n")

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow node (handled by visit_table)."""

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell node (handled by visit_table)."""

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        self._output.append(f"<hr{self._class_attr('hr')}>\n")

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Render an HTMLBlock node according to ``html_passthrough_mode``."""
        processed = sanitize_html_content(node.content, mode=self.options.html_passthrough_mode)
        if processed:
            self._output.append(processed if processed.endswith("\n") else processed + "\n")

    # Inline nodes

    def visit_text(self, node: Text) -> None:
        """Render a Text node."""
        self._output.append(self._text(node.content))

    def visit_soft_break(self, node: SoftBreak) -> None:
        """Render a SoftBreak node."""
        self._output.append("\n")

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node."""
        self._output.append("<br>\n")

    def visit_code(self, node: Code) -> None:
        """Render a Code node."""
        self._output.append(f"<code>{escape_html(node.content)}</code>")

    def visit_styled_code(self, node: StyledCode) -> None:
        """Render a StyledCode node as a classed ``<code>`` element."""
        class_attr = f' class="{escape_html(self.options.styled_code_class)}"'
        self._output.append(f"<code{class_attr}>{escape_html(node.content)}</code>")

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Render an HTMLInline node according to ``html_passthrough_mode``."""
        if self.options.html_passthrough_mode == "sanitize":
            self._output.append(sanitize_inline_html(node.content))
        else:
            self._output.append(sanitize_html_content(node.content, mode=self.options.html_passthrough_mode))

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        self._output.append(f"<em>{self._render_inline_content(node.content)}</em>")

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        self._output.append(f"<strong>{self._render_inline_content(node.content)}</strong>")

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render a Strikethrough node."""
        self._output.append(f"<del>{self._render_inline_content(node.content)}</del>")

    def visit_link(self, node: Link) -> None:
        """Render a Link node."""
        content = self._render_inline_content(node.content)
        title_attr = f' title="{escape_html(node.title)}"' if node.title else ""
        self._output.append(f'<a href="{self._url(node.url)}"{title_attr}{self._class_attr("a")}>{content}</a>')

    def visit_image(self, node: Image) -> None:
        """Render an Image node."""
        alt = escape_html(node.alt_text)
        title_attr = f' title="{escape_html(node.title)}"' if node.title else ""
        self._output.append(f'<img src="{self._url(node.url)}" alt="{alt}"{title_attr}{self._class_attr("img")}>')
