#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/renderers/__init__.py
"""Renderers turning the tree into rich text, plain text, HTML or markdown.

Available renderers:
- PlainTextRenderer: literal text without styling
- HtmlRenderer: HTML fragment or standalone document
- MarkdownRenderer: CommonMark/GFM with styled code restored
- RichTextInlineRenderer: inline content to a ``rich`` Text
- RichTextRenderer: whole documents to a ``rich`` Text

RichTextRenderer composes inline content through
:class:`maestromd.composer.InlineViewComposer`, which itself builds on
RichTextInlineRenderer, so it is imported from its own module:

    >>> from maestromd.renderers.richtext import RichTextRenderer

"""

from maestromd.renderers.base import BaseRenderer, InlineContentMixin
from maestromd.renderers.html import HtmlRenderer
from maestromd.renderers.markdown import MarkdownRenderer
from maestromd.renderers.plaintext import PlainTextRenderer
from maestromd.renderers.rich_inline import RichTextInlineRenderer

__all__ = [
    "BaseRenderer",
    "InlineContentMixin",
    "HtmlRenderer",
    "MarkdownRenderer",
    "PlainTextRenderer",
    "RichTextInlineRenderer",
]
