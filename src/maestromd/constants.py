#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the maestromd library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Styled Code Markers - Sentinels used by the marker codec
3. Rich Text Theme - Default colors and styles
4. Markdown / Plain Text / HTML Output - Renderer defaults
5. Image Resolution - Network and size limits
6. Dependencies - Third-party package requirements
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

Alignment = Literal["left", "center", "right"]
CodeSpanKind = Literal["plain", "styled"]
SoftBreakMode = Literal["space", "line_break"]
EmphasisSymbol = Literal["*", "_"]
CodeFenceChar = Literal["`", "~"]
HtmlPassthroughMode = Literal["pass-through", "escape", "drop", "sanitize"]
RenderTarget = Literal["richtext", "plaintext", "html", "markdown"]
SegmentKind = Literal["text", "token", "soft_break", "line_break"]

# =============================================================================
# Styled Code Markers
# =============================================================================

# Private sentinel pair wrapped around the content of double-backtick spans
# before the grammar runs. The characters are unlikely in prose or SQL.
STYLED_START = "⟪STYLED⟪"
STYLED_END = "⟫STYLED⟫"

STYLED_DELIMITER = "``"

# =============================================================================
# Rich Text Theme
# =============================================================================

LINK_COLOR = "#7DD3C0"
IMAGE_LINK_COLOR = "#EF44C0"
IMAGE_LINK_SUFFIX = ".png"

# rgb(0.95, 0.78, 0.96) and rgb(1.0, 0.92, 0.68)
HIGHLIGHT_ACTIVE_STYLE = "black on #f2c7f5"
HIGHLIGHT_MATCH_STYLE = "black on #ffebad"

# Chip background is white at 0.9
DEFAULT_STYLED_CODE_STYLE = "black on #e6e6e6"
DEFAULT_CODE_STYLE = "bold #d7875f"
DEFAULT_CHIP_PADDING = 1

HIGHLIGHT_ATTRIBUTE = "data-sqlmaestro"
HIGHLIGHT_ACTIVE = "active"
HIGHLIGHT_MATCH = "match"

DEFAULT_BULLET = "•"
DEFAULT_TASK_CHECKED = "☑"
DEFAULT_TASK_UNCHECKED = "☐"
DEFAULT_QUOTE_GUTTER = "▌ "
DEFAULT_RULE_CHAR = "─"
DEFAULT_RULE_WIDTH = 40
DEFAULT_IMAGE_PLACEHOLDER = "[image: {alt}]"

# =============================================================================
# Markdown / Plain Text / HTML Output
# =============================================================================

DEFAULT_BULLET_SYMBOLS = "-*+"
DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_CODE_FENCE_MIN = 3

DEFAULT_PARAGRAPH_SEPARATOR = "\n\n"
DEFAULT_LIST_ITEM_PREFIX = "- "
DEFAULT_TABLE_CELL_SEPARATOR = " | "

DEFAULT_HTML_PASSTHROUGH_MODE: HtmlPassthroughMode = "sanitize"
DEFAULT_STYLED_CODE_CLASS = "styled-code"

# Tags and attributes kept by the HTML "sanitize" passthrough mode
SANITIZE_ALLOWED_TAGS = frozenset(
    {
        "a",
        "abbr",
        "b",
        "blockquote",
        "br",
        "code",
        "del",
        "details",
        "div",
        "em",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "hr",
        "i",
        "kbd",
        "li",
        "mark",
        "ol",
        "p",
        "pre",
        "s",
        "span",
        "strong",
        "sub",
        "summary",
        "sup",
        "table",
        "tbody",
        "td",
        "th",
        "thead",
        "tr",
        "u",
        "ul",
    }
)
SANITIZE_ALLOWED_ATTRIBUTES = {
    "*": ["class", "title"],
    "a": ["href", "title"],
    "mark": [HIGHLIGHT_ATTRIBUTE],
    "td": ["align"],
    "th": ["align"],
}

DANGEROUS_URL_SCHEMES = (
    "javascript:",
    "vbscript:",
    "data:text/html",
    "data:text/javascript",
    "data:application/javascript",
    "data:application/x-javascript",
)

# =============================================================================
# Image Resolution
# =============================================================================

DEFAULT_IMAGE_TIMEOUT = 10.0
DEFAULT_MAX_IMAGE_SIZE_BYTES = 20 * 1024 * 1024
DEFAULT_ALLOWED_IMAGE_SCHEMES = ("http", "https", "data", "file")
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_USER_AGENT = "maestromd/0.1"

ENV_DISABLE_NETWORK = "MAESTROMD_DISABLE_NETWORK"
ENV_USER_AGENT = "MAESTROMD_USER_AGENT"

# =============================================================================
# Dependencies
# =============================================================================

DEPS_MARKDOWN = [("mistune", "mistune", ">=3.0.0")]
DEPS_RICH = [("rich", "rich", ">=13.0.0")]
DEPS_NETWORK = [("httpx", "httpx", ">=0.28.1")]
DEPS_SANITIZE = [("bleach", "bleach", ">=6.0.0")]
