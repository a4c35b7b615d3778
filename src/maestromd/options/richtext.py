#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/options/richtext.py
"""Configuration options for rich text rendering and inline composition.

Styles are given as ``rich`` style definitions (``"bold #7DD3C0"``,
``"black on #e6e6e6"``) and validated with :meth:`rich.style.Style.parse`
when the options are created, so a typo fails at configuration time rather
than in the middle of rendering.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Optional

from rich.errors import StyleSyntaxError
from rich.style import Style

from maestromd.constants import (
    DEFAULT_BULLET,
    DEFAULT_CHIP_PADDING,
    DEFAULT_CODE_STYLE,
    DEFAULT_IMAGE_PLACEHOLDER,
    DEFAULT_QUOTE_GUTTER,
    DEFAULT_RULE_WIDTH,
    DEFAULT_STYLED_CODE_STYLE,
    DEFAULT_TASK_CHECKED,
    DEFAULT_TASK_UNCHECKED,
    HIGHLIGHT_ACTIVE_STYLE,
    HIGHLIGHT_MATCH_STYLE,
    IMAGE_LINK_COLOR,
    LINK_COLOR,
    SoftBreakMode,
)
from maestromd.options.base import BaseRendererOptions, CloneFrozenMixin

_DEFAULT_HEADING_STYLES = (
    "bold underline",
    "bold",
    "bold",
    "bold italic",
    "italic",
    "dim italic",
)


def _validate_style(name: str, definition: str) -> None:
    try:
        Style.parse(definition)
    except StyleSyntaxError as e:
        raise ValueError(f"Invalid style for {name}: {definition!r} ({e})") from e


@dataclass(frozen=True)
class TextStyles(CloneFrozenMixin):
    """Theme of text attributes used by the rich text renderer.

    Parameters
    ----------
    code : str
        Ordinary inline code (combined over the surrounding style).
    styled_code : str
        Styled code chips.
    emphasis, strong, strikethrough : str
        Scoped inline emphasis styles.
    link : str
        Base style for link text.
    link_color : str
        Color of ordinary links.
    image_link_color : str
        Color of links whose destination ends in ``.png``.
    highlight_active, highlight_match : str
        Styles applied inside ``<mark data-sqlmaestro="active|match">``.
    headings : tuple of str
        Styles for heading levels 1-6.
    block_quote, code_block, table_header, rule, image : str
        Block-level styles.

    """

    code: str = field(default=DEFAULT_CODE_STYLE, metadata={"help": "Inline code style"})
    styled_code: str = field(default=DEFAULT_STYLED_CODE_STYLE, metadata={"help": "Styled code chip style"})
    emphasis: str = field(default="italic", metadata={"help": "Emphasis style"})
    strong: str = field(default="bold", metadata={"help": "Strong emphasis style"})
    strikethrough: str = field(default="strike", metadata={"help": "Strikethrough style"})
    link: str = field(default="underline", metadata={"help": "Link text style"})
    link_color: str = field(default=LINK_COLOR, metadata={"help": "Link color"})
    image_link_color: str = field(default=IMAGE_LINK_COLOR, metadata={"help": "Color for links to .png files"})
    highlight_active: str = field(default=HIGHLIGHT_ACTIVE_STYLE, metadata={"help": "Active search highlight"})
    highlight_match: str = field(default=HIGHLIGHT_MATCH_STYLE, metadata={"help": "Search match highlight"})
    headings: tuple[str, ...] = field(default=_DEFAULT_HEADING_STYLES, metadata={"help": "Heading styles 1-6"})
    block_quote: str = field(default="dim", metadata={"help": "Block quote gutter style"})
    code_block: str = field(default="#d7875f", metadata={"help": "Code block style"})
    table_header: str = field(default="bold", metadata={"help": "Table header style"})
    rule: str = field(default="dim", metadata={"help": "Thematic break style"})
    image: str = field(default="italic #EF44C0", metadata={"help": "Image placeholder style"})

    def __post_init__(self) -> None:
        """Validate every style definition.

        Raises
        ------
        ValueError
            If a style cannot be parsed or the heading tuple has the wrong length.

        """
        if len(self.headings) != 6:
            raise ValueError(f"headings must define 6 styles, got {len(self.headings)}")
        for theme_field in fields(self):
            value = getattr(self, theme_field.name)
            if theme_field.name == "headings":
                for level, definition in enumerate(value, start=1):
                    _validate_style(f"headings[{level}]", definition)
            else:
                _validate_style(theme_field.name, value)

    def heading_style(self, level: int) -> str:
        """Return the style for a heading level, clamped to 1-6."""
        return self.headings[min(max(level, 1), 6) - 1]


@dataclass(frozen=True)
class RichTextOptions(BaseRendererOptions):
    """Configuration options for rich text rendering.

    Parameters
    ----------
    theme : TextStyles
        Text attribute theme.
    soft_break_mode : {"space", "line_break"}, default "space"
        Render soft line endings as a space or as a real line break.
    base_url : str or None, default None
        Base URL that relative link destinations are resolved against.
    width : int or None, default None
        Wrap inline content at this many cells. Styled code chips are never
        split across lines.
    chip_padding : int, default 1
        Cells of padding on each side of a styled code chip.
    image_placeholder : str, default "[image: {alt}]"
        Text shown for an image whose source has been resolved. ``{alt}``
        and ``{url}`` are substituted.
    bullet : str, default "•"
        Bullet glyph for bulleted lists.
    task_checked, task_unchecked : str
        Checkbox glyphs for task list items.
    quote_gutter : str, default "▌ "
        Prefix for each block quote line.
    rule_width : int, default 40
        Width of a thematic break rule.

    """

    theme: TextStyles = field(
        default_factory=TextStyles,
        metadata={"help": "Text attribute theme", "importance": "core"},
    )
    soft_break_mode: SoftBreakMode = field(
        default="space",
        metadata={"help": "Soft break rendering", "choices": ["space", "line_break"], "importance": "core"},
    )
    base_url: Optional[str] = field(
        default=None,
        metadata={"help": "Base URL for resolving relative links", "importance": "core"},
    )
    width: Optional[int] = field(
        default=None,
        metadata={"help": "Wrap inline content at this width (None disables)", "importance": "core"},
    )
    chip_padding: int = field(
        default=DEFAULT_CHIP_PADDING,
        metadata={"help": "Padding cells on each side of a styled code chip", "importance": "advanced"},
    )
    image_placeholder: str = field(
        default=DEFAULT_IMAGE_PLACEHOLDER,
        metadata={"help": "Placeholder text for resolved images", "importance": "advanced"},
    )
    bullet: str = field(default=DEFAULT_BULLET, metadata={"help": "Bullet glyph", "importance": "advanced"})
    task_checked: str = field(
        default=DEFAULT_TASK_CHECKED, metadata={"help": "Checked task glyph", "importance": "advanced"}
    )
    task_unchecked: str = field(
        default=DEFAULT_TASK_UNCHECKED, metadata={"help": "Unchecked task glyph", "importance": "advanced"}
    )
    quote_gutter: str = field(
        default=DEFAULT_QUOTE_GUTTER, metadata={"help": "Block quote line prefix", "importance": "advanced"}
    )
    rule_width: int = field(
        default=DEFAULT_RULE_WIDTH, metadata={"help": "Thematic break width", "importance": "advanced"}
    )

    def __post_init__(self) -> None:
        """Validate rich text options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()
        if self.soft_break_mode not in ("space", "line_break"):
            raise ValueError(f"soft_break_mode must be 'space' or 'line_break', got {self.soft_break_mode!r}")
        if self.width is not None and self.width <= 0:
            raise ValueError(f"width must be positive, got {self.width}")
        if self.chip_padding < 0:
            raise ValueError(f"chip_padding must be non-negative, got {self.chip_padding}")
        if self.rule_width <= 0:
            raise ValueError(f"rule_width must be positive, got {self.rule_width}")
