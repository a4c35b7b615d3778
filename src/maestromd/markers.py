#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/markers.py
"""Sentinel codec for styled code spans.

Markdown has a single code-span construct, but notes distinguish two kinds
of inline code: ordinary ``` `code` ``` and *styled* code written with a
double-backtick delimiter (```` ``SELECT *`` ````). The grammar cannot tell
the two apart, so before parsing the content of every double-backtick span
is wrapped in a private sentinel pair. The grammar then carries the
sentinels through as part of the code literal (or, in unusual nesting, as
plain text) and the tree builder uses :func:`decode` and :func:`split_text`
to recover the distinction.

Fenced code blocks are opaque: nothing inside a fence is ever rewritten.

Examples
--------
    >>> encode("Use ``SELECT *`` here")
    'Use ``⟪STYLED⟪SELECT *⟫STYLED⟫`` here'
    >>> decode("⟪STYLED⟪SELECT *⟫STYLED⟫")
    ('styled', 'SELECT *')
    >>> restore(encode("Use ``SELECT *`` here"))
    'Use ``SELECT *`` here'

"""

from __future__ import annotations

import logging
import re

from maestromd.constants import STYLED_DELIMITER, STYLED_END, STYLED_START, CodeSpanKind

logger = logging.getLogger(__name__)

# Opening fence: optional indentation, blockquote or list markers, then three
# or more backticks or tildes. A backtick fence's info string may not contain
# backticks (otherwise the line is an inline code span).
_FENCE_PATTERN = r"""
    ^[ \t]*(?:(?:>|(?:[-+*]|\d{1,9}[.)])(?=[ \t]))[ \t]*)*
    (?P<fence>(?P<char>[`~])(?P=char){2,})
    (?:(?<=`)[^`\n]*|(?<=~)[^\n]*)
    (?:\n|\Z)
    .*?
    (?:^[ \t>]*(?P=fence)(?P=char)*[ \t]*(?:\n|\Z)|\Z)
"""

# A double-backtick span whose delimiters are not part of a longer backtick
# run. Content may hold lone backticks and single newlines. A newline may not
# start a blank line (quoted or not) or a line able to interrupt a paragraph:
# list item, ATX heading or fence. Quote markers are allowed so quoted
# paragraphs can span lines. A span split across blocks anyway leaves
# unpaired sentinels, which restore and drop_orphans remove.
_STYLED_SPAN_PATTERN = r"""
    (?<![`\\])``(?!`)
    (?P<content>(?:
        [^`\n]
        |\n(?!
            [ \t]*\n
            |(?:[ \t]{0,3}>)+[ \t]*(?:\n|\Z)
            |[ \t]{0,3}(?:
                (?:[-+*]|\d{1,9}[.)])(?:[ \t]|\n|\Z)
                |\#{1,6}(?:[ \t]|\n|\Z)
                |`{3}
                |~{3}
            )
        )
        |(?<!`)`(?!`)
    )+)
    (?<!`)``(?!`)
"""


def _trim_code_padding(content: str) -> str:
    """Strip one leading and one trailing space when both are present.

    This mirrors the code span rule of the grammar, which the sentinels
    hide from it: ```` `` `x` `` ```` has content ``"`x`"``.
    """
    if content.strip(" ") and content.startswith(" ") and content.endswith(" "):
        return content[1:-1]
    return content


class MarkerCodec:
    """Encode, decode and restore the styled code sentinel envelope.

    Parameters
    ----------
    start : str, default STYLED_START
        Start sentinel inserted after the opening delimiter
    end : str, default STYLED_END
        End sentinel inserted before the closing delimiter

    Raises
    ------
    ValueError
        If either sentinel is empty or the two are identical

    Notes
    -----
    All regular expressions are compiled once in the constructor, so a
    codec instance can be shared freely and never fails per call.

    """

    def __init__(self, start: str = STYLED_START, end: str = STYLED_END):
        if not start or not end:
            raise ValueError("Styled code sentinels must be non-empty strings")
        if start == end:
            raise ValueError("Styled code start and end sentinels must differ")

        self.start = start
        self.end = end

        self._fence_re = re.compile(_FENCE_PATTERN, re.MULTILINE | re.DOTALL | re.VERBOSE)
        self._styled_span_re = re.compile(_STYLED_SPAN_PATTERN, re.VERBOSE)
        self._encoded_span_re = re.compile(
            re.escape(STYLED_DELIMITER)
            + re.escape(start)
            + r"((?:(?!" + re.escape(start) + r").)*?)"
            + re.escape(end)
            + re.escape(STYLED_DELIMITER),
            re.DOTALL,
        )
        self._orphan_re = re.compile(
            re.escape(STYLED_DELIMITER + start) + "|" + re.escape(end + STYLED_DELIMITER)
        )

    def find_fenced_regions(self, markdown: str) -> list[tuple[int, int]]:
        """Return ``(start, end)`` offsets of every fenced code block.

        An unclosed fence extends to the end of the document.
        """
        return [match.span() for match in self._fence_re.finditer(markdown)]

    def encode(self, markdown: str) -> str:
        """Wrap the content of every double-backtick span outside fences.

        Parameters
        ----------
        markdown : str
            Raw markdown text

        Returns
        -------
        str
            Markdown with sentinels inserted inside styled spans

        """
        if STYLED_DELIMITER not in markdown:
            return markdown

        parts: list[str] = []
        position = 0
        for region_start, region_end in self.find_fenced_regions(markdown):
            parts.append(self._encode_chunk(markdown[position:region_start]))
            parts.append(markdown[region_start:region_end])
            position = region_end
        parts.append(self._encode_chunk(markdown[position:]))
        return "".join(parts)

    def _encode_chunk(self, chunk: str) -> str:
        if not chunk:
            return chunk
        return self._styled_span_re.sub(self._wrap_match, chunk)

    def _wrap_match(self, match: re.Match[str]) -> str:
        return f"{STYLED_DELIMITER}{self.start}{match.group('content')}{self.end}{STYLED_DELIMITER}"

    def wrap(self, content: str) -> str:
        """Return the encoded source form of one styled span."""
        return f"{STYLED_DELIMITER}{self.start}{content}{self.end}{STYLED_DELIMITER}"

    def is_encoded(self, literal: str) -> bool:
        """Return True if a code literal carries the full sentinel envelope."""
        return (
            len(literal) >= len(self.start) + len(self.end)
            and literal.startswith(self.start)
            and literal.endswith(self.end)
        )

    def decode(self, literal: str) -> tuple[CodeSpanKind, str]:
        """Classify a code span literal and strip the sentinels.

        Parameters
        ----------
        literal : str
            The code literal as produced by the grammar

        Returns
        -------
        tuple[CodeSpanKind, str]
            ``("styled", content)`` if the literal is wrapped in the sentinel
            pair, otherwise ``("plain", literal)``

        """
        if self.is_encoded(literal):
            inner = literal[len(self.start) : len(literal) - len(self.end)]
            return "styled", _trim_code_padding(inner)
        return "plain", literal

    def split_text(self, text: str) -> list[tuple[CodeSpanKind | str, str]]:
        """Split a text literal into ``text`` and ``styled`` fragments.

        An unmatched start sentinel turns the remainder of the literal,
        sentinel included, into a single text fragment. Empty text
        fragments are not emitted; empty styled fragments are.

        Returns
        -------
        list[tuple[str, str]]
            Ordered ``(kind, content)`` pairs where kind is ``"text"`` or
            ``"styled"``

        """
        fragments: list[tuple[CodeSpanKind | str, str]] = []
        position = 0
        while position < len(text):
            start_index = text.find(self.start, position)
            if start_index < 0:
                fragments.append(("text", text[position:]))
                break
            if start_index > position:
                fragments.append(("text", text[position:start_index]))

            content_start = start_index + len(self.start)
            end_index = text.find(self.end, content_start)
            if end_index < 0:
                logger.debug("Unmatched styled code sentinel at offset %d", start_index)
                fragments.append(("text", text[start_index:]))
                break

            fragments.append(("styled", _trim_code_padding(text[content_start:end_index])))
            position = end_index + len(self.end)
        return fragments

    def contains_sentinel(self, text: str) -> bool:
        """Return True if the text contains either sentinel."""
        return self.start in text or self.end in text

    def drop_orphans(self, text: str) -> str:
        """Remove sentinels that sit against a delimiter but have no partner.

        A styled span that the grammar splits across two blocks leaves its
        start sentinel after the opening ```` `` ```` in one block and its end
        sentinel before the closing ```` `` ```` in the other. Complete
        envelopes and sentinels elsewhere in the text are left alone.

        Examples
        --------
        >>> codec = MarkerCodec("<<", ">>")
        >>> codec.drop_orphans("para ``<<a")
        'para ``a'
        >>> codec.drop_orphans("b>>`` and ``<<c>>``")
        'b`` and ``<<c>>``'

        """
        if not self.contains_sentinel(text):
            return text

        parts: list[str] = []
        position = 0
        for match in self._encoded_span_re.finditer(text):
            parts.append(self._orphan_re.sub(STYLED_DELIMITER, text[position : match.start()]))
            parts.append(match.group(0))
            position = match.end()
        parts.append(self._orphan_re.sub(STYLED_DELIMITER, text[position:]))
        return "".join(parts)

    def restore(self, markdown: str) -> str:
        """Turn encoded styled spans back into double-backtick syntax.

        Unpaired sentinels next to a delimiter are dropped.
        """
        if not self.contains_sentinel(markdown):
            return markdown
        restored = self._encoded_span_re.sub(lambda m: f"{STYLED_DELIMITER}{m.group(1)}{STYLED_DELIMITER}", markdown)
        return self._orphan_re.sub(STYLED_DELIMITER, restored)


DEFAULT_CODEC = MarkerCodec()


def encode(markdown: str) -> str:
    """Encode styled spans with the default codec."""
    return DEFAULT_CODEC.encode(markdown)


def decode(literal: str) -> tuple[CodeSpanKind, str]:
    """Decode a code literal with the default codec."""
    return DEFAULT_CODEC.decode(literal)


def split_text(text: str) -> list[tuple[CodeSpanKind | str, str]]:
    """Split a text literal with the default codec."""
    return DEFAULT_CODEC.split_text(text)


def restore(markdown: str) -> str:
    """Restore encoded styled spans with the default codec."""
    return DEFAULT_CODEC.restore(markdown)


__all__ = [
    "MarkerCodec",
    "DEFAULT_CODEC",
    "encode",
    "decode",
    "split_text",
    "restore",
]
