#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/api.py
"""Public entry points: parse, render, serialize and compose.

Examples
--------
    >>> from maestromd import parse, render, serialize
    >>> tree = parse("Use ``SELECT *`` here")
    >>> render(tree, "plaintext")
    'Use SELECT * here'
    >>> serialize(tree)
    'Use ``SELECT *`` here'
    >>> render(tree, "html", standalone=False)
    '<p>Use <code class="styled-code">SELECT *</code> here</p>\\n'

"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from rich.text import Text

from maestromd.ast.nodes import Document, InlineNode
from maestromd.composer import ComposedInline, InlineViewComposer
from maestromd.constants import RenderTarget
from maestromd.exceptions import InvalidOptionsError, ValidationError
from maestromd.images import resolve_images, resolve_images_sync
from maestromd.options.base import BaseRendererOptions
from maestromd.options.html import HtmlRendererOptions
from maestromd.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from maestromd.options.plaintext import PlainTextOptions
from maestromd.options.richtext import RichTextOptions
from maestromd.parsers.base import ParserInput
from maestromd.parsers.markdown import MarkdownParser
from maestromd.renderers.base import RenderInput
from maestromd.renderers.html import HtmlRenderer
from maestromd.renderers.markdown import MarkdownRenderer
from maestromd.renderers.plaintext import PlainTextRenderer
from maestromd.renderers.richtext import RichTextRenderer
from maestromd.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

_RENDERER_OPTIONS: dict[str, type[BaseRendererOptions]] = {
    "richtext": RichTextOptions,
    "plaintext": PlainTextOptions,
    "html": HtmlRendererOptions,
    "markdown": MarkdownRendererOptions,
}


def _merge_options(options: Any, options_class: type, name: str, **kwargs: Any) -> Any:
    """Validate an options object and apply keyword overrides.

    Raises
    ------
    InvalidOptionsError
        If options is not None and not an instance of options_class

    """
    if options is not None and not isinstance(options, options_class):
        raise InvalidOptionsError(converter_name=name, expected_type=options_class, received_type=type(options))
    if kwargs:
        if options is not None:
            return options.create_updated(**kwargs)
        return options_class(**kwargs)
    return options


def parse(markdown: ParserInput, options: Optional[MarkdownParserOptions] = None, **kwargs: Any) -> Document:
    """Parse a markdown note into a tree.

    Parameters
    ----------
    markdown : str, bytes, Path or file-like
        Markdown source; a Path or stream is read first
    options : MarkdownParserOptions or None, default = None
        Parser options
    kwargs : Any
        Parser option overrides, e.g. ``styled_code=False``

    Returns
    -------
    Document
        Immutable tree, rebuilt on every call

    Raises
    ------
    InvalidOptionsError
        If options is not a MarkdownParserOptions

    """
    parser_options = _merge_options(options, MarkdownParserOptions, "markdown", **kwargs)
    return MarkdownParser(parser_options).parse(markdown)


def render(
    tree: RenderInput,
    target: RenderTarget = "richtext",
    config: Optional[BaseRendererOptions] = None,
    *,
    images: Optional[Mapping[str, Any]] = None,
    **kwargs: Any,
) -> Union[Text, str]:
    """Render a tree to one of the supported targets.

    Parameters
    ----------
    tree : Document or iterable of BlockNode
        Tree to render
    target : {"richtext", "plaintext", "html", "markdown"}, default "richtext"
        Output target
    config : BaseRendererOptions or None, default = None
        Options of the target's renderer: RichTextOptions, PlainTextOptions,
        HtmlRendererOptions or MarkdownRendererOptions
    images : Mapping[str, Any] or None, default = None
        Resolved images (rich text only), as returned by
        :func:`~maestromd.images.resolve_images`
    kwargs : Any
        Renderer option overrides, e.g. ``standalone=True``

    Returns
    -------
    Text or str
        A :class:`rich.text.Text` for ``"richtext"``, a string otherwise

    Raises
    ------
    ValidationError
        If the target is unknown
    InvalidOptionsError
        If config is not the options class of the target

    """
    options_class = _RENDERER_OPTIONS.get(target)
    if options_class is None:
        raise ValidationError(
            f"Unknown render target: {target!r}. Expected one of: {', '.join(_RENDERER_OPTIONS)}",
            parameter_name="target",
            parameter_value=target,
        )
    options = _merge_options(config, options_class, target, **kwargs)

    with debug_timer(logger, f"Rendering ({target})"):
        if target == "richtext":
            return RichTextRenderer(options, images).render_to_text(tree)
        if target == "plaintext":
            return PlainTextRenderer(options).render_to_string(tree)
        if target == "html":
            return HtmlRenderer(options).render_to_string(tree)
        return MarkdownRenderer(options).render_to_string(tree)


def serialize(tree: RenderInput, options: Optional[MarkdownRendererOptions] = None, **kwargs: Any) -> str:
    """Serialize a tree back to markdown with styled code spans restored.

    Parameters
    ----------
    tree : Document or iterable of BlockNode
        Tree to serialize
    options : MarkdownRendererOptions or None, default = None
        Serializer options
    kwargs : Any
        Serializer option overrides

    Returns
    -------
    str
        Markdown that parses back to the same tree

    """
    serializer_options = _merge_options(options, MarkdownRendererOptions, "markdown", **kwargs)
    return MarkdownRenderer(serializer_options).render_to_string(tree)


def compose(
    inlines: Iterable[InlineNode],
    config: Optional[RichTextOptions] = None,
    *,
    images: Optional[Mapping[str, Any]] = None,
) -> ComposedInline:
    """Compose inline content into text runs and styled code chips.

    Parameters
    ----------
    inlines : iterable of InlineNode
        Inline content, e.g. ``paragraph.content``
    config : RichTextOptions or None, default = None
        Rich text options (theme, chip padding, soft break mode)
    images : Mapping[str, Any] or None, default = None
        Resolved images

    Returns
    -------
    ComposedInline
        Segments with a ``.text`` view and a ``.wrap(width)`` layout

    """
    options = _merge_options(config, RichTextOptions, "richtext")
    return InlineViewComposer(options, images).compose(inlines)


__all__ = [
    "parse",
    "render",
    "serialize",
    "compose",
    "resolve_images",
    "resolve_images_sync",
]
