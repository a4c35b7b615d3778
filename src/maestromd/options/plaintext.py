#  Copyright (c) 2025 Tom Villani, Ph.D.
# maestromd/options/plaintext.py
"""Configuration options for plain text rendering."""

from dataclasses import dataclass, field
from typing import Optional

from maestromd.constants import (
    DEFAULT_LIST_ITEM_PREFIX,
    DEFAULT_PARAGRAPH_SEPARATOR,
    DEFAULT_TABLE_CELL_SEPARATOR,
)
from maestromd.options.base import BaseRendererOptions


@dataclass(frozen=True)
class PlainTextOptions(BaseRendererOptions):
    r"""Configuration options for plain text rendering.

    All styling is stripped, leaving only literal text content. The literal
    contents of code and styled code spans are kept.

    Parameters
    ----------
    max_line_width : int or None, default None
        Wrap paragraphs at this width. None disables wrapping.
    table_cell_separator : str, default " | "
        Separator string between table cells.
    include_table_headers : bool, default True
        Whether to include the table header row.
    paragraph_separator : str, default "\n\n"
        Separator between blocks.
    list_item_prefix : str, default "- "
        Prefix for bulleted list items. Numbered items use ``N. `` and task
        items ``[x] `` / ``[ ] ``.
    preserve_code_blocks : bool, default True
        Keep code block line breaks and indentation instead of wrapping.

    """

    max_line_width: Optional[int] = field(
        default=None,
        metadata={"help": "Maximum line width for wrapping (None to disable)", "importance": "core"},
    )
    table_cell_separator: str = field(
        default=DEFAULT_TABLE_CELL_SEPARATOR,
        metadata={"help": "Separator between table cells", "importance": "advanced"},
    )
    include_table_headers: bool = field(
        default=True,
        metadata={"help": "Include table header rows", "importance": "core"},
    )
    paragraph_separator: str = field(
        default=DEFAULT_PARAGRAPH_SEPARATOR,
        metadata={"help": "Separator between blocks", "importance": "advanced"},
    )
    list_item_prefix: str = field(
        default=DEFAULT_LIST_ITEM_PREFIX,
        metadata={"help": "Prefix for bulleted list items", "importance": "advanced"},
    )
    preserve_code_blocks: bool = field(
        default=True,
        metadata={"help": "Preserve code block formatting", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate plain text options.

        Raises
        ------
        ValueError
            If max_line_width is not positive.

        """
        super().__post_init__()
        if self.max_line_width is not None and self.max_line_width <= 0:
            raise ValueError(f"max_line_width must be positive, got {self.max_line_width}")
