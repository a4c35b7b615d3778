#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/renderers/base.py
"""Base classes for tree renderers.

Every renderer is a :class:`~maestromd.ast.NodeVisitor` that is total over
the node vocabulary, pure (it never alters the tree) and deterministic for
a given tree and options. Renderers reset their internal state at the start
of every call, so one instance can be reused.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Iterable, Union

from maestromd.ast import Document
from maestromd.ast.nodes import BlockNode, Node
from maestromd.exceptions import InvalidOptionsError
from maestromd.options.base import BaseRendererOptions

RenderInput = Union[Document, Iterable[BlockNode]]


class BaseRenderer(ABC):
    """Abstract base class for all tree renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    def render(self, doc: RenderInput, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render the tree and write it to a file or stream.

        Parameters
        ----------
        doc : Document or iterable of BlockNode
            Tree to render
        output : str, Path, IO[bytes] or IO[str]
            Output destination; strings are file paths

        """
        self.write_text_output(self.render_to_string(doc), output)

    @abstractmethod
    def render_to_string(self, doc: RenderInput) -> str:
        """Render the tree to a string.

        Parameters
        ----------
        doc : Document or iterable of BlockNode
            Tree to render

        Returns
        -------
        str
            Rendered output

        """

    @staticmethod
    def _coerce_document(doc: RenderInput) -> Document:
        """Accept either a Document or a bare sequence of block nodes."""
        if isinstance(doc, Document):
            return doc
        return Document(children=tuple(doc))

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(text: str, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Write text output to a file path or IO stream.

        Binary streams receive UTF-8 encoded bytes.

        Examples
        --------
            >>> from io import StringIO
            >>> buffer = StringIO()
            >>> BaseRenderer.write_text_output("# Hello", buffer)
            >>> buffer.getvalue()
            '# Hello'

        """
        if isinstance(output, (str, Path)):
            Path(output).write_text(text, encoding="utf-8")
            return

        try:
            output.write(text)  # type: ignore[arg-type]
        except TypeError:
            output.write(text.encode("utf-8"))  # type: ignore[arg-type]


class InlineContentMixin:
    """Mixin capturing the string output of nested inline nodes.

    The implementing class must have a ``_output`` attribute (list[str])
    that its visitor methods append to.
    """

    _output: list[str]

    def _render_inline_content(self, content: Iterable[Node]) -> str:
        """Render a sequence of inline nodes to a string.

        Parameters
        ----------
        content : iterable of Node
            Inline nodes to render

        Returns
        -------
        str
            Rendered inline content

        """
        saved_output = self._output
        self._output = []

        for node in content:
            node.accept(self)

        result = "".join(self._output)
        self._output = saved_output
        return result
