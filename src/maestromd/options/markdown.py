#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/options/markdown.py
"""Configuration options for markdown parsing and serialization."""

from __future__ import annotations

from dataclasses import dataclass, field

from maestromd.constants import (
    DEFAULT_BULLET_SYMBOLS,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_EMPHASIS_SYMBOL,
    CodeFenceChar,
    EmphasisSymbol,
)
from maestromd.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for markdown parsing.

    Parameters
    ----------
    styled_code : bool, default True
        Treat double-backtick spans as styled code. When False every code
        span becomes ordinary code.
    parse_tables : bool, default True
        Recognize GFM pipe tables.
    parse_strikethrough : bool, default True
        Recognize GFM ``~~strikethrough~~``.
    parse_task_lists : bool, default True
        Recognize ``[ ]`` / ``[x]`` task list items.
    autolink_urls : bool, default True
        Turn bare ``http(s)://`` URLs into links.

    """

    styled_code: bool = field(
        default=True,
        metadata={"help": "Treat double-backtick spans as styled code", "importance": "core"},
    )
    parse_tables: bool = field(
        default=True,
        metadata={"help": "Parse GFM pipe tables", "importance": "core"},
    )
    parse_strikethrough: bool = field(
        default=True,
        metadata={"help": "Parse ~~strikethrough~~ spans", "importance": "core"},
    )
    parse_task_lists: bool = field(
        default=True,
        metadata={"help": "Parse [ ] / [x] task list items", "importance": "core"},
    )
    autolink_urls: bool = field(
        default=True,
        metadata={"help": "Turn bare URLs into links", "importance": "advanced"},
    )


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for serializing a tree back to markdown.

    Parameters
    ----------
    bullet_symbols : str, default "-*+"
        Bullet characters. The first is used normally; consecutive sibling
        lists alternate through the rest so they do not merge on re-parse.
    emphasis_symbol : {"*", "_"}, default "*"
        Delimiter used for emphasis and strong emphasis.
    code_fence_char : {"`", "~"}, default "`"
        Fence character for code blocks.
    code_fence_min : int, default 3
        Minimum fence length for code blocks.
    escape_special : bool, default True
        Escape markdown punctuation in text so it re-parses as text.
    collapse_blank_lines : bool, default True
        Collapse runs of blank lines in the output.
    use_recorded_markers : bool, default True
        Reuse the bullet and fence characters recorded by the parser when
        present, keeping the output close to the original source.

    """

    bullet_symbols: str = field(
        default=DEFAULT_BULLET_SYMBOLS,
        metadata={"help": "Bullet characters for unordered lists", "importance": "core"},
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Emphasis delimiter", "choices": ["*", "_"], "importance": "core"},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Code block fence character", "choices": ["`", "~"], "importance": "advanced"},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum code fence length", "type": int, "importance": "advanced"},
    )
    escape_special: bool = field(
        default=True,
        metadata={"help": "Escape markdown punctuation in text", "importance": "advanced"},
    )
    collapse_blank_lines: bool = field(
        default=True,
        metadata={"help": "Collapse runs of blank lines", "importance": "advanced"},
    )
    use_recorded_markers: bool = field(
        default=True,
        metadata={"help": "Reuse bullet and fence characters recorded at parse time", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate markdown renderer options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()
        if not self.bullet_symbols or any(symbol not in "-*+" for symbol in self.bullet_symbols):
            raise ValueError(f"bullet_symbols must be drawn from '-*+', got {self.bullet_symbols!r}")
        if self.emphasis_symbol not in ("*", "_"):
            raise ValueError(f"emphasis_symbol must be '*' or '_', got {self.emphasis_symbol!r}")
        if self.code_fence_char not in ("`", "~"):
            raise ValueError(f"code_fence_char must be '`' or '~', got {self.code_fence_char!r}")
        if self.code_fence_min < 3:
            raise ValueError(f"code_fence_min must be at least 3, got {self.code_fence_min}")
