#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/parsers/markdown.py
"""Markdown to tree parser.

This module converts markdown text into the maestromd tree model. The
grammar itself is provided by mistune (CommonMark plus the GFM table,
strikethrough, task list and bare-URL extensions); this module wraps it
with the styled code codec and maps mistune's token stream onto the closed
node vocabulary of :mod:`maestromd.ast`.

Pipeline
--------
1. Normalize line endings.
2. :meth:`~maestromd.markers.MarkerCodec.encode` double-backtick spans.
3. Tokenize with mistune (``renderer=None`` returns the token list).
4. Map tokens to nodes, decoding the sentinels back into
   :class:`~maestromd.ast.StyledCode`.

Any token kind without a mapping raises
:class:`~maestromd.exceptions.UnhandledNodeError`. Malformed markdown is
never an error: the grammar always produces some token stream.

"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional
from urllib.parse import unquote

from maestromd.ast import (
    BlockNode,
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
from maestromd.constants import DEPS_MARKDOWN
from maestromd.exceptions import UnhandledNodeError
from maestromd.markers import DEFAULT_CODEC, MarkerCodec
from maestromd.options.markdown import MarkdownParserOptions
from maestromd.parsers.base import BaseParser, ParserInput
from maestromd.utils.decorators import debug_timer, requires_dependencies

logger = logging.getLogger(__name__)

# Block token kinds that carry no content of their own
_IGNORED_BLOCK_TOKENS = frozenset({"blank_line"})

_ALIGNMENTS = {"left", "center", "right"}


class MarkdownParser(BaseParser):
    r"""Parse markdown into a :class:`~maestromd.ast.Document`.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options
    codec : MarkerCodec or None, default = None
        Styled code codec. Defaults to the shared module-level codec.

    Examples
    --------
        >>> parser = MarkdownParser()
        >>> doc = parser.parse("Use ``SELECT *`` here")
        >>> doc.children[0].content
        (Text(content='Use '), StyledCode(content='SELECT *'), Text(content=' here'))

    """

    def __init__(self, options: MarkdownParserOptions | None = None, codec: MarkerCodec | None = None):
        """Initialize the parser with options and a codec."""
        BaseParser._validate_options_type(options, MarkdownParserOptions, "markdown")
        options = options or MarkdownParserOptions()
        super().__init__(options)
        self.options: MarkdownParserOptions = options
        self.codec = codec or DEFAULT_CODEC

        self._block_handlers: dict[str, Callable[[dict[str, Any]], BlockNode]] = {
            "paragraph": self._process_paragraph,
            "block_text": self._process_paragraph,
            "heading": self._process_heading,
            "block_code": self._process_code_block,
            "block_quote": self._process_block_quote,
            "list": self._process_list,
            "table": self._process_table,
            "thematic_break": self._process_thematic_break,
            "block_html": self._process_html_block,
        }
        self._inline_handlers: dict[str, Callable[[dict[str, Any]], InlineNode]] = {
            "codespan": self._handle_codespan_token,
            "softbreak": self._handle_softbreak_token,
            "linebreak": self._handle_linebreak_token,
            "emphasis": self._handle_emphasis_token,
            "strong": self._handle_strong_token,
            "strikethrough": self._handle_strikethrough_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "inline_html": self._handle_inline_html_token,
        }

    @requires_dependencies("markdown", DEPS_MARKDOWN)
    def parse(self, input_data: ParserInput) -> Document:
        """Parse markdown input into a Document.

        Parameters
        ----------
        input_data : str, bytes, Path or file-like
            Markdown to parse

        Returns
        -------
        Document
            Root of the parsed tree

        Raises
        ------
        UnhandledNodeError
            If the grammar produces a token kind with no tree mapping

        """
        import mistune

        markdown_content = self._load_text_content(input_data)
        markdown_content = markdown_content.replace("\r\n", "\n").replace("\r", "\n")

        if self.options.styled_code:
            markdown_content = self.codec.encode(markdown_content)

        markdown = mistune.create_markdown(renderer=None, plugins=self._plugins())

        with debug_timer(logger, "Parsing (markdown)"):
            tokens, _state = markdown.parse(markdown_content)
            children = self._process_tokens(tokens)

        logger.debug("Parsed %d top-level blocks", len(children))
        return Document(children=children)

    def _plugins(self) -> list[str]:
        plugins = []
        if self.options.parse_strikethrough:
            plugins.append("strikethrough")
        if self.options.parse_tables:
            plugins.append("table")
        if self.options.parse_task_lists:
            plugins.append("task_lists")
        if self.options.autolink_urls:
            plugins.append("url")
        return plugins

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[BlockNode]:
        """Process a list of mistune block tokens into block nodes.

        Parameters
        ----------
        tokens : list of dict
            Mistune token dictionaries

        Returns
        -------
        list of BlockNode
            Block nodes in order

        """
        nodes: list[BlockNode] = []
        for token in tokens:
            node = self._process_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Optional[BlockNode]:
        token_type = token.get("type", "")
        if token_type in _IGNORED_BLOCK_TOKENS:
            return None

        handler = self._block_handlers.get(token_type)
        if handler is None:
            raise UnhandledNodeError(token_type, "block")
        return handler(token)

    def _process_paragraph(self, token: dict[str, Any]) -> Paragraph:
        return Paragraph(content=self._process_inline_tokens(token.get("children", [])))

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        level = token.get("attrs", {}).get("level", 1)
        return Heading(level=level, content=self._process_inline_tokens(token.get("children", [])))

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        """Process a fenced or indented code block.

        Indented blocks are not protected by the fence scan, so their
        content may carry sentinels; ``restore`` puts the source back.
        Non-empty content always ends with a newline, as fenced content
        does.
        """
        from mistune.util import unescape

        info = token.get("attrs", {}).get("info")
        metadata: dict[str, Any] = {"style": token.get("style", "fenced")}
        if token.get("marker"):
            metadata["marker"] = token["marker"]

        content = self.codec.restore(token.get("raw", ""))
        if content and not content.endswith("\n"):
            content += "\n"

        return CodeBlock(
            content=content,
            fence_info=unescape(info) if info else None,
            metadata=metadata,
        )

    def _process_block_quote(self, token: dict[str, Any]) -> BlockQuote:
        return BlockQuote(children=self._process_tokens(token.get("children", [])))

    def _process_list(self, token: dict[str, Any]) -> BulletedList | NumberedList | TaskList:
        """Process a list token.

        A list with at least one checkbox item becomes a TaskList; otherwise
        the ordered flag picks between numbered and bulleted. Tightness is a
        top-level key of the mistune token, not an attribute.
        """
        attrs = token.get("attrs", {})
        tight = bool(token.get("tight", True))
        ordered = bool(attrs.get("ordered", False))
        start = int(attrs.get("start", 1))
        items = [self._process_list_item(child) for child in token.get("children", [])]

        metadata: dict[str, Any] = {}
        if token.get("bullet"):
            metadata["bullet"] = token["bullet"]

        if any(isinstance(item, TaskListItem) for item in items):
            metadata.update({"ordered": ordered, "start": start})
            return TaskList(items=items, tight=tight, metadata=metadata)
        if ordered:
            return NumberedList(items=items, start=start, tight=tight, metadata=metadata)
        return BulletedList(items=items, tight=tight, metadata=metadata)

    def _process_list_item(self, token: dict[str, Any]) -> ListItem | TaskListItem:
        token_type = token.get("type", "")
        children = self._process_tokens(token.get("children", []))
        if token_type == "task_list_item":
            return TaskListItem(children=children, completed=bool(token.get("attrs", {}).get("checked", False)))
        if token_type == "list_item":
            return ListItem(children=children)
        raise UnhandledNodeError(token_type, "block")

    def _process_table(self, token: dict[str, Any]) -> Table:
        """Process a table token into a header row followed by body rows."""
        alignments: list[Optional[str]] = []
        rows: list[TableRow] = []

        for section in token.get("children", []):
            section_type = section.get("type", "")
            if section_type == "table_head":
                head_cells = section.get("children", [])
                alignments = [self._cell_alignment(cell) for cell in head_cells]
                rows.insert(0, TableRow(cells=self._process_table_cells(head_cells), is_header=True))
            elif section_type == "table_body":
                for row in section.get("children", []):
                    if row.get("type") != "table_row":
                        raise UnhandledNodeError(row.get("type", ""), "block")
                    rows.append(TableRow(cells=self._process_table_cells(row.get("children", []))))
            else:
                raise UnhandledNodeError(section_type, "block")

        return Table(alignments=alignments, rows=rows)

    @staticmethod
    def _cell_alignment(cell: dict[str, Any]) -> Optional[str]:
        align = cell.get("attrs", {}).get("align")
        return align if align in _ALIGNMENTS else None

    def _process_table_cells(self, cells: list[dict[str, Any]]) -> list[TableCell]:
        result = []
        for cell in cells:
            if cell.get("type") != "table_cell":
                raise UnhandledNodeError(cell.get("type", ""), "block")
            result.append(TableCell(content=self._process_inline_tokens(cell.get("children", []))))
        return result

    def _process_thematic_break(self, token: dict[str, Any]) -> ThematicBreak:
        return ThematicBreak()

    def _process_html_block(self, token: dict[str, Any]) -> HTMLBlock:
        return HTMLBlock(content=self.codec.restore(token.get("raw", "")).rstrip("\n"))

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[InlineNode]:
        """Process inline tokens.

        Adjacent text tokens (mistune splits text at escapes and entity
        boundaries) are coalesced before being split on styled code
        sentinels, so a sentinel pair is never torn apart by a token edge.

        Parameters
        ----------
        tokens : list of dict
            Inline token dictionaries

        Returns
        -------
        list of InlineNode
            Inline nodes in order

        """
        nodes: list[InlineNode] = []
        pending_text: list[str] = []

        for token in tokens:
            if token.get("type") == "text":
                pending_text.append(self._text_token_content(token))
                continue

            if pending_text:
                nodes.extend(self._split_text("".join(pending_text)))
                pending_text = []
            nodes.append(self._process_inline_token(token))

        if pending_text:
            nodes.extend(self._split_text("".join(pending_text)))

        return nodes

    def _process_inline_token(self, token: dict[str, Any]) -> InlineNode:
        token_type = token.get("type", "")
        handler = self._inline_handlers.get(token_type)
        if handler is None:
            raise UnhandledNodeError(token_type, "inline")
        return handler(token)

    @staticmethod
    def _text_token_content(token: dict[str, Any]) -> str:
        """Resolve entity references in a text token.

        Tokens produced by backslash escapes are already literal and must
        not be unescaped a second time.
        """
        from mistune.util import unescape

        raw = token.get("raw", "")
        if token.get("_emphasis", True):
            return unescape(raw)
        return raw

    def _split_text(self, text: str) -> list[InlineNode]:
        if not text:
            return []
        if not self.options.styled_code or not self.codec.contains_sentinel(text):
            return [Text(content=text)]

        text = self.codec.drop_orphans(text)
        if not self.codec.contains_sentinel(text):
            return [Text(content=text)]

        nodes: list[InlineNode] = []
        for kind, fragment in self.codec.split_text(text):
            if kind == "styled":
                nodes.append(StyledCode(content=fragment))
            else:
                nodes.append(Text(content=fragment))
        return nodes

    def _handle_codespan_token(self, token: dict[str, Any]) -> Code | StyledCode:
        raw = token.get("raw", "")
        if not self.options.styled_code:
            return Code(content=raw)
        kind, content = self.codec.decode(raw)
        if kind == "styled":
            return StyledCode(content=content)
        # Styled syntax written inside a longer code span stays literal
        return Code(content=self.codec.restore(content))

    def _handle_softbreak_token(self, token: dict[str, Any]) -> SoftBreak:
        return SoftBreak()

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak()

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        return Emphasis(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_strong_token(self, token: dict[str, Any]) -> Strong:
        return Strong(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_strikethrough_token(self, token: dict[str, Any]) -> Strikethrough:
        return Strikethrough(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_link_token(self, token: dict[str, Any]) -> Link:
        url, title = self._link_target(token)
        return Link(url=url, content=self._process_inline_tokens(token.get("children", [])), title=title)

    def _handle_image_token(self, token: dict[str, Any]) -> Image:
        url, title = self._link_target(token)
        return Image(url=url, content=self._process_inline_tokens(token.get("children", [])), title=title)

    def _link_target(self, token: dict[str, Any]) -> tuple[str, Optional[str]]:
        """Return the destination and title of a link or image token.

        mistune hands over destinations with entities resolved and unsafe
        characters percent-encoded; sentinels are only visible after
        decoding.
        """
        from mistune.util import unescape

        attrs = token.get("attrs", {})
        url = attrs.get("url", "")
        decoded_url = unquote(url)
        if self.codec.contains_sentinel(decoded_url):
            url = self.codec.restore(decoded_url)

        title = attrs.get("title")
        if title is not None:
            title = self.codec.restore(unescape(title))
        return url, title

    def _handle_inline_html_token(self, token: dict[str, Any]) -> HTMLInline:
        return HTMLInline(content=self.codec.restore(token.get("raw", "")))


def markdown_to_ast(markdown_content: ParserInput, options: MarkdownParserOptions | None = None) -> Document:
    r"""Parse markdown into a Document in one step.

    Parameters
    ----------
    markdown_content : str, bytes, Path or file-like
        Markdown to parse
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Document
        Root of the parsed tree

    Examples
    --------
    >>> doc = markdown_to_ast("# Hello\\n\\nWorld")
    >>> len(doc.children)
    2

    """
    return MarkdownParser(options).parse(markdown_content)
