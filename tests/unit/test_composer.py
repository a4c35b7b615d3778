#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_composer.py
"""Unit tests for the inline view composer.

Tests cover:
- Partitioning inline content into text, token and break segments
- Chip padding and style
- Break segments and the extra-line flag
- Wrapping with chips kept whole
- Rendering a composed inline through a rich Console

"""

from io import StringIO

import pytest
from rich.console import Console

from maestromd.ast import Emphasis, LineBreak, SoftBreak, StyledCode, Text
from maestromd.composer import ComposedInline, InlineViewComposer
from maestromd.exceptions import InvalidOptionsError
from maestromd.options import PlainTextOptions, RichTextOptions
from maestromd.parsers.markdown import MarkdownParser


def inlines(markdown: str):
    return MarkdownParser().parse(markdown)[0].content


def kinds(composed: ComposedInline) -> list[tuple[str, str]]:
    return [(segment.kind, segment.content) for segment in composed.segments]


@pytest.mark.unit
class TestSegments:
    """Tests for segment partitioning."""

    def test_three_segments(self, styled_sentence: str) -> None:
        """Test the canonical text, token, text partition."""
        composed = InlineViewComposer().compose(inlines(styled_sentence))
        assert kinds(composed) == [("text", "Use "), ("token", "SELECT *"), ("text", " here")]
        assert composed.has_styled_code is True

    def test_chip_text_padded(self, styled_sentence: str) -> None:
        """Test that a chip is padded on both sides."""
        token = InlineViewComposer().compose(inlines(styled_sentence)).segments[1]
        assert token.text.plain == " SELECT * "
        assert token.text.style == "black on #e6e6e6"

    def test_chip_padding_option(self) -> None:
        """Test a chip without padding."""
        composer = InlineViewComposer(RichTextOptions(chip_padding=0))
        token = composer.compose([StyledCode("x")]).segments[0]
        assert token.text.plain == "x"

    def test_no_styled_code_single_segment(self) -> None:
        """Test that content without styled code is one text segment."""
        composed = InlineViewComposer().compose(inlines("plain `code` and *em*"))
        assert kinds(composed) == [("text", "plain code and em")]
        assert composed.has_styled_code is False

    def test_adjacent_tokens(self) -> None:
        """Test two chips with only a space between them."""
        composed = InlineViewComposer().compose(inlines("``a`` ``b``"))
        assert kinds(composed) == [("token", "a"), ("text", " "), ("token", "b")]

    def test_styled_code_inside_emphasis_stays_in_text(self) -> None:
        """Test that only direct styled code children become chips."""
        composed = InlineViewComposer().compose([Emphasis(content=[StyledCode("x")]), StyledCode("y")])
        assert kinds(composed) == [("text", "x"), ("token", "y")]

    def test_line_breaks_and_extra_line(self) -> None:
        """Test that a break directly after a break asks for an extra line."""
        composed = InlineViewComposer().compose([StyledCode("a"), LineBreak(), LineBreak(), Text("b")])
        segments = composed.segments
        assert [segment.kind for segment in segments] == ["token", "line_break", "line_break", "text"]
        assert segments[1].needs_extra_line is False
        assert segments[2].needs_extra_line is True
        assert segments[3].content == "b"

    def test_soft_break_in_space_mode(self) -> None:
        """Test that soft breaks stay inside text runs by default."""
        composed = InlineViewComposer().compose([StyledCode("a"), SoftBreak(), Text("b")])
        assert kinds(composed) == [("token", "a"), ("text", " b")]

    def test_soft_break_in_line_break_mode(self) -> None:
        """Test soft break segments and whitespace suppression after them."""
        composer = InlineViewComposer(RichTextOptions(soft_break_mode="line_break"))
        composed = composer.compose([StyledCode("a"), SoftBreak(), Text("  b")])
        assert kinds(composed) == [("token", "a"), ("soft_break", "\n"), ("text", "b")]

    def test_text_property(self, styled_sentence: str) -> None:
        """Test that the joined text embeds the chip in place."""
        composed = InlineViewComposer().compose(inlines(styled_sentence))
        assert composed.plain == "Use  SELECT *  here"

    def test_wrong_options_type(self) -> None:
        """Test that non rich text options are rejected."""
        with pytest.raises(InvalidOptionsError):
            InlineViewComposer(PlainTextOptions())  # type: ignore[arg-type]


@pytest.mark.unit
class TestWrap:
    """Tests for line breaking with chips."""

    def test_chip_on_its_own_line(self) -> None:
        """Test that a chip that does not fit moves to the next line whole."""
        composed = InlineViewComposer().compose(inlines("alpha beta ``SELECT *`` gamma"))
        assert [line.plain for line in composed.wrap(12)] == ["alpha beta", " SELECT * ", "gamma"]

    def test_wide_enough_single_line(self) -> None:
        """Test that everything fits on one line when the width allows."""
        composed = InlineViewComposer().compose(inlines("alpha ``x`` beta"))
        assert [line.plain for line in composed.wrap(80)] == ["alpha  x  beta"]

    def test_word_attached_to_chip_moves_with_it(self) -> None:
        """Test that text written against a chip is kept on the chip's line."""
        composed = InlineViewComposer().compose([Text("aaaa b"), StyledCode("c"), Text("d")])
        assert [line.plain for line in composed.wrap(7)] == ["aaaa", "b c d"]

    def test_forced_break(self) -> None:
        """Test that line breaks always start a new line."""
        composed = InlineViewComposer().compose([StyledCode("a"), LineBreak(), Text("b")])
        assert [line.plain for line in composed.wrap(80)] == [" a ", "b"]

    def test_overlong_word_folded(self) -> None:
        """Test that a word wider than the line is folded."""
        composed = InlineViewComposer().compose([Text("abcdefgh "), StyledCode("x")])
        assert [line.plain for line in composed.wrap(4)] == ["abcd", "efgh", " x "]

    def test_chip_styles_survive_wrapping(self) -> None:
        """Test that a wrapped chip keeps its style."""
        composed = InlineViewComposer().compose(inlines("alpha beta ``SELECT *`` gamma"))
        chip_line = composed.wrap(12)[1]
        assert any(span.style == "black on #e6e6e6" for span in chip_line.spans)

    def test_invalid_width(self) -> None:
        """Test that a width below one is rejected."""
        composed = InlineViewComposer().compose([StyledCode("x")])
        with pytest.raises(ValueError):
            composed.wrap(0)


@pytest.mark.unit
class TestConsoleRendering:
    """Tests for printing a composed inline with rich."""

    def test_console_wraps_to_width(self) -> None:
        """Test that the console width drives the wrapping."""
        composed = InlineViewComposer().compose(inlines("alpha beta ``SELECT *`` gamma"))
        buffer = StringIO()
        Console(file=buffer, width=12, color_system=None).print(composed)
        lines = [line.rstrip() for line in buffer.getvalue().splitlines()]
        assert lines == ["alpha beta", " SELECT *", "gamma"]
