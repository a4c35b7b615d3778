#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/ast/nodes.py
"""Tree model for parsed markdown notes.

The tree is a small, closed vocabulary of block and inline nodes produced by
:class:`~maestromd.parsers.markdown.MarkdownParser` and consumed by every
renderer through the visitor pattern.

Nodes are frozen dataclasses. Sequence fields are stored as tuples (lists
passed to a constructor are converted), so a parsed tree is immutable and a
renderer can never alter what another renderer will see. The tree is rebuilt
on every parse.

Node Hierarchy
--------------
Block-level nodes:
    - Document (root)
    - BlockQuote, BulletedList, NumberedList, TaskList
    - CodeBlock, HTMLBlock, Paragraph, Heading, Table, ThematicBreak

Item wrappers:
    - ListItem, TaskListItem, TableRow, TableCell

Inline nodes:
    - Text, SoftBreak, LineBreak, Code, StyledCode, HTMLInline
    - Emphasis, Strong, Strikethrough, Link, Image

Every node carries a ``metadata`` dict, excluded from equality and hashing,
in which the parser records source-surface hints (fence markers, bullet
characters) used by the markdown serializer.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union

from maestromd.constants import Alignment


def _metadata_field() -> Any:
    return field(default_factory=dict, compare=False, hash=False, repr=False)


def _freeze(node: Node, *names: str) -> None:
    for name in names:
        value = getattr(node, name)
        if not isinstance(value, tuple):
            object.__setattr__(node, name, tuple(value))


class Node(ABC):
    """Base class for all tree nodes.

    All nodes support the visitor pattern for traversal and rendering.
    """

    metadata: dict[str, Any]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """


# ============================================================================
# Document Root
# ============================================================================


@dataclass(frozen=True)
class Document(Node):
    """Root node holding the ordered sequence of top-level blocks.

    Parameters
    ----------
    children : tuple of BlockNode, default = ()
        Block-level nodes in document order

    """

    children: tuple[BlockNode, ...] = ()
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "children")

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[BlockNode]:
        return iter(self.children)

    def __getitem__(self, index: int) -> BlockNode:
        return self.children[index]

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass(frozen=True)
class BlockQuote(Node):
    """Block quote containing nested blocks.

    Parameters
    ----------
    children : tuple of BlockNode
        Quoted block content

    """

    children: tuple[BlockNode, ...] = ()
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "children")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self)


@dataclass(frozen=True)
class ListItem(Node):
    """Item of a bulleted, numbered or task list.

    Parameters
    ----------
    children : tuple of BlockNode
        Block content of the item (paragraphs, nested lists, code blocks...)

    """

    children: tuple[BlockNode, ...] = ()
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "children")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list item."""
        return visitor.visit_list_item(self)


@dataclass(frozen=True)
class TaskListItem(Node):
    """Task list item with a completion state.

    Parameters
    ----------
    children : tuple of BlockNode
        Block content of the item, without the ``[ ]`` / ``[x]`` marker
    completed : bool, default = False
        Whether the checkbox is ticked

    """

    children: tuple[BlockNode, ...] = ()
    completed: bool = False
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "children")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this task item."""
        return visitor.visit_task_list_item(self)


@dataclass(frozen=True)
class BulletedList(Node):
    """Unordered list.

    Parameters
    ----------
    items : tuple of ListItem
        List items
    tight : bool, default = True
        Tight lists render their items without blank lines in between

    """

    items: tuple[ListItem, ...] = ()
    tight: bool = True
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "items")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_bulleted_list(self)


@dataclass(frozen=True)
class NumberedList(Node):
    """Ordered list.

    Parameters
    ----------
    items : tuple of ListItem
        List items
    start : int, default = 1
        Number of the first item
    tight : bool, default = True
        Tight lists render their items without blank lines in between

    """

    items: tuple[ListItem, ...] = ()
    start: int = 1
    tight: bool = True
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "items")
        if self.start < 0:
            raise ValueError(f"List start must be non-negative, got {self.start}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_numbered_list(self)


@dataclass(frozen=True)
class TaskList(Node):
    """List in which at least one item carries a checkbox.

    Items without a checkbox keep their plain :class:`ListItem` form.

    Parameters
    ----------
    items : tuple of ListItem or TaskListItem
        List items
    tight : bool, default = True
        Tight lists render their items without blank lines in between

    """

    items: tuple[Union[ListItem, TaskListItem], ...] = ()
    tight: bool = True
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "items")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this task list."""
        return visitor.visit_task_list(self)


@dataclass(frozen=True)
class CodeBlock(Node):
    """Fenced or indented code block.

    Parameters
    ----------
    content : str
        Literal code, normally ending with a newline
    fence_info : str or None, default = None
        Info string after the opening fence (usually a language name)

    """

    content: str = ""
    fence_info: Optional[str] = None
    metadata: dict[str, Any] = _metadata_field()

    @property
    def language(self) -> Optional[str]:
        """First word of the info string, if any."""
        if not self.fence_info:
            return None
        return self.fence_info.split()[0]

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self)


@dataclass(frozen=True)
class HTMLBlock(Node):
    """Raw HTML block, kept verbatim.

    Parameters
    ----------
    content : str
        Raw HTML source

    """

    content: str = ""
    metadata: dict[str, Any] = _metadata_field()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this HTML block."""
        return visitor.visit_html_block(self)


@dataclass(frozen=True)
class Paragraph(Node):
    """Paragraph of inline content.

    Parameters
    ----------
    content : tuple of InlineNode
        Inline nodes in order

    """

    content: tuple[InlineNode, ...] = ()
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self)


@dataclass(frozen=True)
class Heading(Node):
    """ATX or setext heading.

    Parameters
    ----------
    level : int
        Heading level (1-6)
    content : tuple of InlineNode
        Inline nodes forming the heading text

    Raises
    ------
    ValueError
        If level is outside 1-6

    """

    level: int = 1
    content: tuple[InlineNode, ...] = ()
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "content")
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this heading."""
        return visitor.visit_heading(self)


@dataclass(frozen=True)
class TableCell(Node):
    """Table cell holding inline content.

    Parameters
    ----------
    content : tuple of InlineNode
        Inline nodes in the cell

    """

    content: tuple[InlineNode, ...] = ()
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this cell."""
        return visitor.visit_table_cell(self)


@dataclass(frozen=True)
class TableRow(Node):
    """Table row.

    Parameters
    ----------
    cells : tuple of TableCell
        Cells in column order
    is_header : bool, default = False
        Whether this is the header row

    """

    cells: tuple[TableCell, ...] = ()
    is_header: bool = False
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "cells")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this row."""
        return visitor.visit_table_row(self)


@dataclass(frozen=True)
class Table(Node):
    """GFM pipe table.

    The first row of a parsed table is the header row and is marked with
    ``is_header=True``.

    Parameters
    ----------
    alignments : tuple of Alignment or None
        Per-column alignment; ``None`` means no alignment was given
    rows : tuple of TableRow
        Header row followed by body rows

    """

    alignments: tuple[Optional[Alignment], ...] = ()
    rows: tuple[TableRow, ...] = ()
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "alignments", "rows")

    @property
    def header(self) -> Optional[TableRow]:
        """The header row, if the first row is marked as one."""
        if self.rows and self.rows[0].is_header:
            return self.rows[0]
        return None

    @property
    def body(self) -> tuple[TableRow, ...]:
        """All rows that are not the header row."""
        return tuple(row for row in self.rows if not row.is_header)

    @property
    def column_count(self) -> int:
        """Number of columns, from the alignment row or the widest row."""
        widest = max((len(row.cells) for row in self.rows), default=0)
        return max(len(self.alignments), widest)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table."""
        return visitor.visit_table(self)


@dataclass(frozen=True)
class ThematicBreak(Node):
    """Horizontal rule between blocks."""

    metadata: dict[str, Any] = _metadata_field()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this thematic break."""
        return visitor.visit_thematic_break(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass(frozen=True)
class Text(Node):
    """Plain text run.

    Parameters
    ----------
    content : str
        Literal text with escapes and entities already resolved

    """

    content: str = ""
    metadata: dict[str, Any] = _metadata_field()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text."""
        return visitor.visit_text(self)


@dataclass(frozen=True)
class SoftBreak(Node):
    """Line ending inside a paragraph that is not a hard break."""

    metadata: dict[str, Any] = _metadata_field()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this soft break."""
        return visitor.visit_soft_break(self)


@dataclass(frozen=True)
class LineBreak(Node):
    """Hard line break (trailing double space or backslash)."""

    metadata: dict[str, Any] = _metadata_field()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this line break."""
        return visitor.visit_line_break(self)


@dataclass(frozen=True)
class Code(Node):
    """Ordinary inline code span (single backtick or longer than two).

    Parameters
    ----------
    content : str
        Literal code

    """

    content: str = ""
    metadata: dict[str, Any] = _metadata_field()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code span."""
        return visitor.visit_code(self)


@dataclass(frozen=True)
class StyledCode(Node):
    """Double-backtick code span, rendered as a highlighted token.

    Parameters
    ----------
    content : str
        Literal code without delimiters or sentinels (may be empty)

    """

    content: str = ""
    metadata: dict[str, Any] = _metadata_field()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this styled code span."""
        return visitor.visit_styled_code(self)


@dataclass(frozen=True)
class HTMLInline(Node):
    """Raw inline HTML tag or fragment, kept verbatim.

    Parameters
    ----------
    content : str
        Raw HTML source

    """

    content: str = ""
    metadata: dict[str, Any] = _metadata_field()

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline HTML."""
        return visitor.visit_html_inline(self)


@dataclass(frozen=True)
class Emphasis(Node):
    """Emphasized (italic) inline content."""

    content: tuple[InlineNode, ...] = ()
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this emphasis."""
        return visitor.visit_emphasis(self)


@dataclass(frozen=True)
class Strong(Node):
    """Strong (bold) inline content."""

    content: tuple[InlineNode, ...] = ()
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strong emphasis."""
        return visitor.visit_strong(self)


@dataclass(frozen=True)
class Strikethrough(Node):
    """Struck-through inline content (GFM ``~~text~~``)."""

    content: tuple[InlineNode, ...] = ()
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strikethrough."""
        return visitor.visit_strikethrough(self)


@dataclass(frozen=True)
class Link(Node):
    """Hyperlink.

    Autolinks (``<https://...>``) and bare URLs are links whose content is a
    single text node holding the URL.

    Parameters
    ----------
    url : str
        Link destination as written in the source
    content : tuple of InlineNode
        Link text
    title : str or None, default = None
        Optional link title

    """

    url: str = ""
    content: tuple[InlineNode, ...] = ()
    title: Optional[str] = None
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self)


@dataclass(frozen=True)
class Image(Node):
    """Inline image reference.

    Parameters
    ----------
    url : str
        Image source as written in the source
    content : tuple of InlineNode
        Alt text as inline nodes
    title : str or None, default = None
        Optional image title

    """

    url: str = ""
    content: tuple[InlineNode, ...] = ()
    title: Optional[str] = None
    metadata: dict[str, Any] = _metadata_field()

    def __post_init__(self) -> None:
        _freeze(self, "content")

    @property
    def alt_text(self) -> str:
        """Alt text flattened to plain text."""
        from maestromd.ast.utils import extract_text

        return extract_text(self.content)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self)


BlockNode = Union[
    BlockQuote,
    BulletedList,
    NumberedList,
    TaskList,
    CodeBlock,
    HTMLBlock,
    Paragraph,
    Heading,
    Table,
    ThematicBreak,
]

InlineNode = Union[
    Text,
    SoftBreak,
    LineBreak,
    Code,
    StyledCode,
    HTMLInline,
    Emphasis,
    Strong,
    Strikethrough,
    Link,
    Image,
]

BLOCK_NODE_TYPES = (
    BlockQuote,
    BulletedList,
    NumberedList,
    TaskList,
    CodeBlock,
    HTMLBlock,
    Paragraph,
    Heading,
    Table,
    ThematicBreak,
)

INLINE_NODE_TYPES = (
    Text,
    SoftBreak,
    LineBreak,
    Code,
    StyledCode,
    HTMLInline,
    Emphasis,
    Strong,
    Strikethrough,
    Link,
    Image,
)

LIST_NODE_TYPES = (BulletedList, NumberedList, TaskList)
