#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/parsers/base.py
"""Base class for parsers producing the maestromd tree model."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from maestromd.ast import Document
from maestromd.exceptions import InvalidOptionsError
from maestromd.options.base import BaseParserOptions

logger = logging.getLogger(__name__)

ParserInput = Union[str, bytes, Path, IO[bytes], IO[str]]


class BaseParser(ABC):
    """Abstract base class for parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Parsing options. If None, subclasses substitute their defaults.

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Document:
        """Parse the input into a Document tree.

        Parameters
        ----------
        input_data : str, bytes, Path or file-like
            Input to parse. Strings are always treated as content, never as
            file paths.

        Returns
        -------
        Document
            Root of the parsed tree

        """

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Load text from a string, bytes, path or stream.

        Bytes are decoded as UTF-8 (a leading BOM is dropped); undecodable
        sequences are replaced rather than rejected.
        """
        if isinstance(input_data, str):
            return input_data
        if isinstance(input_data, bytes):
            return input_data.decode("utf-8-sig", errors="replace")
        if isinstance(input_data, Path):
            logger.debug("Reading markdown from %s", input_data)
            return input_data.read_bytes().decode("utf-8-sig", errors="replace")

        content = input_data.read()
        if isinstance(content, bytes):
            return content.decode("utf-8-sig", errors="replace")
        return content
