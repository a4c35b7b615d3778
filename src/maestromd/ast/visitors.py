#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/ast/visitors.py
"""Visitor pattern base class for tree traversal.

Every renderer in :mod:`maestromd.renderers` is a :class:`NodeVisitor`. The
set of ``visit_*`` methods is closed over the node vocabulary in
:mod:`maestromd.ast.nodes`, so adding a node kind without teaching every
renderer about it is caught at class-instantiation time.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

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


class NodeVisitor(ABC):
    """Abstract base class for tree visitors.

    Subclasses implement one ``visit_*`` method per node kind. Each node's
    ``accept`` dispatches to the matching method.

    Examples
    --------
    Counting styled code spans:

        >>> class StyledCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_styled_code(self, node):
        ...         self.count += 1
        ...     # ... remaining visit_* methods recurse into children

    """

    # Block nodes

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit the Document root."""

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""

    @abstractmethod
    def visit_bulleted_list(self, node: BulletedList) -> Any:
        """Visit a BulletedList node."""

    @abstractmethod
    def visit_numbered_list(self, node: NumberedList) -> Any:
        """Visit a NumberedList node."""

    @abstractmethod
    def visit_task_list(self, node: TaskList) -> Any:
        """Visit a TaskList node."""

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""

    @abstractmethod
    def visit_task_list_item(self, node: TaskListItem) -> Any:
        """Visit a TaskListItem node."""

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""

    @abstractmethod
    def visit_html_block(self, node: HTMLBlock) -> Any:
        """Visit an HTMLBlock node."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""

    # Inline nodes

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""

    @abstractmethod
    def visit_soft_break(self, node: SoftBreak) -> Any:
        """Visit a SoftBreak node."""

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit a Code node."""

    @abstractmethod
    def visit_styled_code(self, node: StyledCode) -> Any:
        """Visit a StyledCode node."""

    @abstractmethod
    def visit_html_inline(self, node: HTMLInline) -> Any:
        """Visit an HTMLInline node."""

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""

    @abstractmethod
    def visit_strikethrough(self, node: Strikethrough) -> Any:
        """Visit a Strikethrough node."""

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""

    def generic_visit(self, node: Node) -> Any:
        """Fallback for nodes dispatched without a dedicated method.

        Parameters
        ----------
        node : Node
            The node to visit

        Returns
        -------
        Any
            Result of processing (default: None)

        """
        return None
