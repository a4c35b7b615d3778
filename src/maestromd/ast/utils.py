#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/ast/utils.py
"""Utility functions for working with tree nodes.

Functions
---------
get_node_children : Direct children of any node
iter_nodes : Depth-first, pre-order walk
extract_text : Plain text of a node or node sequence
contains_styled_code : Whether an inline sequence holds a styled code span
collect_image_sources : Distinct image sources in first-seen order

Examples
--------
    >>> from maestromd.ast import Heading, Text, Emphasis
    >>> heading = Heading(level=1, content=[Text("Hello "), Emphasis(content=[Text("world")])])
    >>> extract_text(heading)
    'Hello world'

"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence, Union

from maestromd.ast.nodes import (
    BlockQuote,
    BulletedList,
    Code,
    Document,
    Emphasis,
    Heading,
    Image,
    Link,
    ListItem,
    Node,
    NumberedList,
    Paragraph,
    Strikethrough,
    Strong,
    StyledCode,
    Table,
    TableCell,
    TableRow,
    TaskList,
    TaskListItem,
    Text,
)


def get_node_children(node: Node) -> list[Node]:
    """Get the direct child nodes of a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        Child nodes (empty list for leaves)

    """
    if isinstance(node, (Document, BlockQuote, ListItem, TaskListItem)):
        return list(node.children)

    if isinstance(node, (Paragraph, Heading, TableCell, Emphasis, Strong, Strikethrough, Link, Image)):
        return list(node.content)

    if isinstance(node, (BulletedList, NumberedList, TaskList)):
        return list(node.items)

    if isinstance(node, Table):
        return list(node.rows)

    if isinstance(node, TableRow):
        return list(node.cells)

    return []


def iter_nodes(node_or_nodes: Union[Node, Iterable[Node]]) -> Iterator[Node]:
    """Walk a tree depth-first in pre-order.

    Parameters
    ----------
    node_or_nodes : Node or iterable of Node
        Root node, or a sequence of sibling roots

    Yields
    ------
    Node
        Every node, parents before their children

    """
    stack: list[Node]
    if isinstance(node_or_nodes, Node):
        stack = [node_or_nodes]
    else:
        stack = list(node_or_nodes)[::-1]

    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(get_node_children(current)))


def extract_text(node_or_nodes: Union[Node, Iterable[Node]], joiner: str = "") -> str:
    """Extract the literal text of a node or nodes.

    Text, code and styled code literals are concatenated in document order;
    markup, breaks and raw HTML contribute nothing.

    Parameters
    ----------
    node_or_nodes : Node or iterable of Node
        Where to extract text from
    joiner : str, default = ""
        String placed between literal pieces

    Returns
    -------
    str
        Concatenated literal text

    """
    parts = [
        node.content
        for node in iter_nodes(node_or_nodes)
        if isinstance(node, (Text, Code, StyledCode))
    ]
    return joiner.join(parts)


def contains_styled_code(inlines: Sequence[Node]) -> bool:
    """Return True if any direct member of an inline sequence is StyledCode."""
    return any(isinstance(node, StyledCode) for node in inlines)


def collect_image_sources(node_or_nodes: Union[Node, Iterable[Node]]) -> list[tuple[str, str]]:
    """Collect distinct image sources in first-seen order.

    Parameters
    ----------
    node_or_nodes : Node or iterable of Node
        Tree or inline sequence to scan

    Returns
    -------
    list of tuple[str, str]
        ``(source, alt_text)`` pairs, one per distinct source string. The
        alt text is taken from the first image using the source.

    """
    seen: dict[str, str] = {}
    for node in iter_nodes(node_or_nodes):
        if isinstance(node, Image) and node.url not in seen:
            seen[node.url] = node.alt_text
    return list(seen.items())
