"""maestromd - markdown notes with styled code chips.

maestromd parses markdown notes into an immutable tree and renders that
tree as styled terminal text, plain text, HTML, or back to markdown. Notes
distinguish ordinary inline code (```` `code` ````) from *styled* code
written with a double-backtick delimiter (```` ``SELECT *`` ````), which is
shown as a boxed chip that is never split across lines.

Key Features
------------
- CommonMark + GFM (tables, strikethrough, task lists) via mistune
- Styled code spans recovered through a sentinel codec around the grammar
- Rich text output with ``rich``, including chip-aware line wrapping
- HTML output with bleach-based sanitizing of raw HTML
- Markdown serialization that re-parses to the same tree
- Concurrent image resolution with httpx and per-image timeouts

Examples
--------
    >>> from maestromd import parse, render
    >>> tree = parse("Run ``VACUUM`` nightly")
    >>> render(tree, "plaintext")
    'Run VACUUM nightly'

Printing styled text in a terminal:

    >>> from rich.console import Console
    >>> Console().print(render(tree))

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "maestromd requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from maestromd.api import compose, parse, render, resolve_images, resolve_images_sync, serialize
from maestromd.ast import Document
from maestromd.composer import ComposedInline, InlineSegment, InlineViewComposer
from maestromd.exceptions import (
    DependencyError,
    ImageResolutionError,
    InvalidOptionsError,
    MaestroMdError,
    ParsingError,
    RenderingError,
    ValidationError,
)
from maestromd.images import HttpxImageLoader, ResolvedImage
from maestromd.logging_utils import configure_logging
from maestromd.markers import MarkerCodec, decode, encode, restore, split_text
from maestromd.options import (
    HtmlRendererOptions,
    ImageResolverOptions,
    MarkdownParserOptions,
    MarkdownRendererOptions,
    PlainTextOptions,
    RichTextOptions,
    TextStyles,
)

__all__ = [
    "__version__",
    # Main API
    "parse",
    "render",
    "serialize",
    "compose",
    "resolve_images",
    "resolve_images_sync",
    # Tree
    "Document",
    # Composition
    "ComposedInline",
    "InlineSegment",
    "InlineViewComposer",
    # Images
    "HttpxImageLoader",
    "ResolvedImage",
    # Marker codec
    "MarkerCodec",
    "encode",
    "decode",
    "split_text",
    "restore",
    # Options
    "HtmlRendererOptions",
    "ImageResolverOptions",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "PlainTextOptions",
    "RichTextOptions",
    "TextStyles",
    # Exceptions
    "MaestroMdError",
    "DependencyError",
    "ImageResolutionError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
    "ValidationError",
    # Logging
    "configure_logging",
]
