#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/options/html.py
"""Configuration options for HTML rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from maestromd.constants import (
    DEFAULT_HTML_PASSTHROUGH_MODE,
    DEFAULT_STYLED_CODE_CLASS,
    HtmlPassthroughMode,
)
from maestromd.options.base import BaseRendererOptions

_PASSTHROUGH_MODES = ("pass-through", "escape", "drop", "sanitize")


@dataclass(frozen=True)
class HtmlRendererOptions(BaseRendererOptions):
    """Configuration options for HTML rendering.

    Parameters
    ----------
    standalone : bool, default False
        Wrap the fragment in a complete ``<html>`` document.
    title : str, default "Note"
        Document title used in standalone mode.
    escape_html : bool, default True
        Escape HTML special characters in text content.
    html_passthrough_mode : {"pass-through", "escape", "drop", "sanitize"}, default "sanitize"
        How to handle HTMLBlock and HTMLInline nodes:
        - "pass-through": Pass through unchanged (use only with trusted content)
        - "escape": HTML-escape the content
        - "drop": Remove HTML content entirely
        - "sanitize": Keep an allow-list of tags and attributes (bleach)
    base_url : str or None, default None
        Base URL that relative link and image URLs are resolved against.
    sanitize_urls : bool, default True
        Replace ``javascript:``-style URLs with ``#``.
    styled_code_class : str, default "styled-code"
        CSS class of the ``<code>`` element emitted for styled code.
    css_class_map : dict or None, default None
        Extra CSS classes per element name, e.g. ``{"table": "notes-table"}``.

    """

    standalone: bool = field(
        default=False,
        metadata={"help": "Generate complete HTML document (vs content fragment)", "importance": "core"},
    )
    title: str = field(
        default="Note",
        metadata={"help": "Document title for standalone output", "importance": "advanced"},
    )
    escape_html: bool = field(
        default=True,
        metadata={"help": "Escape HTML special characters in text", "importance": "security"},
    )
    html_passthrough_mode: HtmlPassthroughMode = field(
        default=DEFAULT_HTML_PASSTHROUGH_MODE,
        metadata={
            "help": "How to handle raw HTML: pass-through, escape, drop, or sanitize",
            "choices": list(_PASSTHROUGH_MODES),
            "importance": "security",
        },
    )
    base_url: Optional[str] = field(
        default=None,
        metadata={"help": "Base URL for resolving relative links and images", "importance": "advanced"},
    )
    sanitize_urls: bool = field(
        default=True,
        metadata={"help": "Neutralize dangerous URL schemes", "importance": "security"},
    )
    styled_code_class: str = field(
        default=DEFAULT_STYLED_CODE_CLASS,
        metadata={"help": "CSS class for styled code spans", "importance": "advanced"},
    )
    css_class_map: Optional[dict[str, str]] = field(
        default=None,
        metadata={"help": "Extra CSS classes per element name", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate HTML renderer options.

        Raises
        ------
        ValueError
            If html_passthrough_mode or styled_code_class is invalid.

        """
        super().__post_init__()
        if self.html_passthrough_mode not in _PASSTHROUGH_MODES:
            raise ValueError(
                f"html_passthrough_mode must be one of {_PASSTHROUGH_MODES}, got {self.html_passthrough_mode!r}"
            )
        if not self.styled_code_class or any(ch.isspace() or ch in "\"'<>" for ch in self.styled_code_class):
            raise ValueError(f"styled_code_class must be a single CSS class name, got {self.styled_code_class!r}")
