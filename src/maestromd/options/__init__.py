#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/options/__init__.py
"""Frozen dataclass options for parsers, renderers and the image resolver."""

from maestromd.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from maestromd.options.html import HtmlRendererOptions
from maestromd.options.images import ImageResolverOptions
from maestromd.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from maestromd.options.plaintext import PlainTextOptions
from maestromd.options.richtext import RichTextOptions, TextStyles

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "HtmlRendererOptions",
    "ImageResolverOptions",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "PlainTextOptions",
    "RichTextOptions",
    "TextStyles",
]
