#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/parsers/__init__.py
"""Parsers producing the maestromd tree model."""

from maestromd.parsers.base import BaseParser
from maestromd.parsers.markdown import MarkdownParser, markdown_to_ast

__all__ = ["BaseParser", "MarkdownParser", "markdown_to_ast"]
