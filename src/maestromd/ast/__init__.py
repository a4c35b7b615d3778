#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/ast/__init__.py
"""Tree model, visitor base class and traversal helpers."""

from maestromd.ast.nodes import (
    BLOCK_NODE_TYPES,
    INLINE_NODE_TYPES,
    LIST_NODE_TYPES,
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
from maestromd.ast.utils import (
    collect_image_sources,
    contains_styled_code,
    extract_text,
    get_node_children,
    iter_nodes,
)
from maestromd.ast.visitors import NodeVisitor

__all__ = [
    "BLOCK_NODE_TYPES",
    "INLINE_NODE_TYPES",
    "LIST_NODE_TYPES",
    "BlockNode",
    "InlineNode",
    "Node",
    "Document",
    "BlockQuote",
    "BulletedList",
    "NumberedList",
    "TaskList",
    "ListItem",
    "TaskListItem",
    "CodeBlock",
    "HTMLBlock",
    "Paragraph",
    "Heading",
    "Table",
    "TableRow",
    "TableCell",
    "ThematicBreak",
    "Text",
    "SoftBreak",
    "LineBreak",
    "Code",
    "StyledCode",
    "HTMLInline",
    "Emphasis",
    "Strong",
    "Strikethrough",
    "Link",
    "Image",
    "NodeVisitor",
    "collect_image_sources",
    "contains_styled_code",
    "extract_text",
    "get_node_children",
    "iter_nodes",
]
