#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/renderers/rich_inline.py
"""Inline layer of the rich text renderer.

:class:`RichTextInlineRenderer` turns a sequence of inline nodes into one
:class:`rich.text.Text`. Emphasis, strong emphasis, strikethrough and links
are scoped styles: each scope saves the current style, layers its theme
style on top, renders its children and restores the saved style.

Inline HTML is not rendered as markup. Only a small whitelist is
interpreted (``<br>`` and the ``<mark data-sqlmaestro="...">`` search
highlight markers), every other fragment appears as literal text.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Mapping, Optional

from rich.style import Style
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
from maestromd.constants import HIGHLIGHT_ACTIVE, HIGHLIGHT_ATTRIBUTE, IMAGE_LINK_SUFFIX
from maestromd.exceptions import InvalidOptionsError, RenderingError
from maestromd.options.richtext import RichTextOptions
from maestromd.utils.urls import resolve_url

logger = logging.getLogger(__name__)

_BR_RE = re.compile(r"^<br\s*/?>$", re.IGNORECASE)
_MARK_OPEN_RE = re.compile(r"^<mark(?P<attrs>\s[^<>]*)?>$", re.IGNORECASE)
_HIGHLIGHT_ATTR_RE = re.compile(
    rf"""(?:^|\s){HIGHLIGHT_ATTRIBUTE}\s*=\s*(["']?)(?P<kind>[a-z]+)\1(?=[\s/]|$)""",
    re.IGNORECASE,
)
_MARK_CLOSE_RE = re.compile(r"^</mark\s*>$", re.IGNORECASE)


class RichTextInlineRenderer(NodeVisitor):
    """Render inline nodes to a single :class:`rich.text.Text`.

    Parameters
    ----------
    options : RichTextOptions or None, default = None
        Rich text options (theme, soft break mode, base URL)
    images : Mapping[str, Any] or None, default = None
        Resolved images keyed by source as written in the note. ``None``
        means images are not available yet and are skipped silently.

    Examples
    --------
        >>> from maestromd.ast import Emphasis, Text
        >>> renderer = RichTextInlineRenderer()
        >>> renderer.render_inlines([Text("a "), Emphasis(content=[Text("b")])]).plain
        'a b'

    """

    def __init__(self, options: RichTextOptions | None = None, images: Optional[Mapping[str, Any]] = None):
        if options is not None and not isinstance(options, RichTextOptions):
            raise InvalidOptionsError(
                converter_name="richtext",
                expected_type=RichTextOptions,
                received_type=type(options),
            )
        self.options: RichTextOptions = options or RichTextOptions()
        self.images = images

        theme = self.options.theme
        self._code_style = Style.parse(theme.code)
        self._emphasis_style = Style.parse(theme.emphasis)
        self._strong_style = Style.parse(theme.strong)
        self._strikethrough_style = Style.parse(theme.strikethrough)
        self._link_style = Style.parse(theme.link)
        self._highlight_styles = {
            HIGHLIGHT_ACTIVE: Style.parse(theme.highlight_active),
            "match": Style.parse(theme.highlight_match),
        }
        self._image_style = Style.parse(theme.image)

        self._text = Text()
        self._style = Style()
        self._style_stack: list[Style] = []
        self._highlight_stack: list[Style] = []
        self._skip_whitespace = False

    def render_inlines(self, nodes: Iterable[Node], *, skip_leading_whitespace: bool = False) -> Text:
        """Render a sequence of inline nodes.

        Parameters
        ----------
        nodes : iterable of Node
            Inline nodes in order
        skip_leading_whitespace : bool, default False
            Start with leading whitespace suppression active, as if the
            sequence followed a line break

        Returns
        -------
        Text
            Styled text for the whole sequence

        """
        self._text = Text()
        self._style = Style()
        self._style_stack = []
        self._highlight_stack = []
        self._skip_whitespace = skip_leading_whitespace

        for node in nodes:
            node.accept(self)
        return self._text

    def _append(self, text: str, style: Optional[Style] = None) -> None:
        if text:
            self._text.append(text, style=style if style is not None else self._style)

    def _render_scoped(self, content: Iterable[Node], style: Style) -> None:
        self._style_stack.append(self._style)
        self._style = self._style + style
        try:
            for child in content:
                child.accept(self)
        finally:
            self._style = self._style_stack.pop()

    # Inline nodes

    def visit_text(self, node: TextNode) -> None:
        """Render a Text node, dropping leading whitespace after a break."""
        content = node.content
        if self._skip_whitespace:
            content = content.lstrip()
            if content:
                self._skip_whitespace = False
        self._append(content)

    def visit_soft_break(self, node: SoftBreak) -> None:
        """Render a SoftBreak node as a space or a line break."""
        if self.options.soft_break_mode == "line_break":
            self._append("\n")
            self._skip_whitespace = True
        elif self._skip_whitespace:
            self._skip_whitespace = False
        else:
            self._append(" ")

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node."""
        self._append("\n")

    def visit_code(self, node: Code) -> None:
        """Render a Code node in the code style."""
        self._append(node.content, self._style + self._code_style)

    def visit_styled_code(self, node: StyledCode) -> None:
        """Render a StyledCode node in the code style (chips belong to the composer)."""
        self._append(node.content, self._style + self._code_style)

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Interpret ``<br>`` and highlight markers; emit anything else literally."""
        fragment = node.content.strip()

        if _BR_RE.match(fragment):
            self._append("\n")
            self._skip_whitespace = True
            return

        mark_match = _MARK_OPEN_RE.match(fragment)
        if mark_match:
            attr_match = _HIGHLIGHT_ATTR_RE.search(mark_match.group("attrs") or "")
            kind = attr_match.group("kind").lower() if attr_match else None
            if kind in self._highlight_styles:
                self._highlight_stack.append(self._style)
                self._style = self._style + self._highlight_styles[kind]
                return

        if _MARK_CLOSE_RE.match(fragment) and self._highlight_stack:
            self._style = self._highlight_stack.pop()
            return

        self._append(node.content)

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        self._render_scoped(node.content, self._emphasis_style)

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        self._render_scoped(node.content, self._strong_style)

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render a Strikethrough node."""
        self._render_scoped(node.content, self._strikethrough_style)

    def visit_link(self, node: Link) -> None:
        """Render a Link node as a colored hyperlink.

        Destinations ending in ``.png`` get the image link color so links to
        attached diagrams stand out from ordinary links.
        """
        theme = self.options.theme
        url = resolve_url(node.url, self.options.base_url)
        color = theme.image_link_color if node.url.lower().endswith(IMAGE_LINK_SUFFIX) else theme.link_color
        style = self._link_style + Style(color=color, link=url or None)
        self._render_scoped(node.content, style)

    def visit_image(self, node: Image) -> None:
        """Render an Image node as a placeholder once its source is resolved.

        Raises
        ------
        RenderingError
            If ``fail_on_resource_errors`` is set and a provided image
            mapping does not contain the source

        """
        if self.images is None:
            return
        if node.url not in self.images:
            if self.options.fail_on_resource_errors:
                raise RenderingError(
                    f"Image not resolved: {node.url}",
                    rendering_stage="image",
                )
            logger.debug("Image not resolved, skipping: %s", node.url)
            return
        placeholder = self.options.image_placeholder.format(alt=node.alt_text, url=node.url)
        self._append(placeholder, self._style + self._image_style)

    # Block nodes cannot appear in inline content

    def _reject_block(self, node: Node) -> None:
        raise RenderingError(
            f"Block node {type(node).__name__} in inline content",
            rendering_stage="inline",
        )

    def visit_document(self, node: Document) -> None:
        """Reject a Document node."""
        self._reject_block(node)

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Reject a BlockQuote node."""
        self._reject_block(node)

    def visit_bulleted_list(self, node: BulletedList) -> None:
        """Reject a BulletedList node."""
        self._reject_block(node)

    def visit_numbered_list(self, node: NumberedList) -> None:
        """Reject a NumberedList node."""
        self._reject_block(node)

    def visit_task_list(self, node: TaskList) -> None:
        """Reject a TaskList node."""
        self._reject_block(node)

    def visit_list_item(self, node: ListItem) -> None:
        """Reject a ListItem node."""
        self._reject_block(node)

    def visit_task_list_item(self, node: TaskListItem) -> None:
        """Reject a TaskListItem node."""
        self._reject_block(node)

    def visit_code_block(self, node: CodeBlock) -> None:
        """Reject a CodeBlock node."""
        self._reject_block(node)

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Reject an HTMLBlock node."""
        self._reject_block(node)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Reject a Paragraph node."""
        self._reject_block(node)

    def visit_heading(self, node: Heading) -> None:
        """Reject a Heading node."""
        self._reject_block(node)

    def visit_table(self, node: Table) -> None:
        """Reject a Table node."""
        self._reject_block(node)

    def visit_table_row(self, node: TableRow) -> None:
        """Reject a TableRow node."""
        self._reject_block(node)

    def visit_table_cell(self, node: TableCell) -> None:
        """Reject a TableCell node."""
        self._reject_block(node)

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Reject a ThematicBreak node."""
        self._reject_block(node)
