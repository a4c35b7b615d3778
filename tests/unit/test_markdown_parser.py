#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_markdown_parser.py
"""Unit tests for MarkdownParser.

Tests cover:
- Styled code vs ordinary code spans
- Fenced code opacity
- Block structure: headings, lists, task lists, quotes, tables, rules
- Inline structure: emphasis, links, images, breaks, escapes, raw HTML
- Parser options and input types

"""

from io import BytesIO, StringIO

import pytest
from hypothesis import given
from hypothesis import strategies as st

from maestromd.ast import (
    BlockQuote,
    BulletedList,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    ListItem,
    NumberedList,
    Paragraph,
    SoftBreak,
    Strikethrough,
    Strong,
    StyledCode,
    Table,
    TaskList,
    TaskListItem,
    Text,
    ThematicBreak,
)
from maestromd import render, serialize
from maestromd.ast.utils import extract_text
from maestromd.constants import STYLED_END, STYLED_START
from maestromd.exceptions import InvalidOptionsError
from maestromd.options import MarkdownParserOptions, PlainTextOptions
from maestromd.parsers.markdown import MarkdownParser, markdown_to_ast


def parse(markdown: str, **kwargs) -> Document:
    options = MarkdownParserOptions(**kwargs) if kwargs else None
    return MarkdownParser(options).parse(markdown)


@pytest.mark.unit
class TestStyledCode:
    """Tests for styled code recognition."""

    def test_three_part_sentence(self) -> None:
        """Test the canonical styled code sentence."""
        doc = parse("Use ``SELECT *`` here")
        assert doc.children == (
            Paragraph(content=[Text("Use "), StyledCode("SELECT *"), Text(" here")]),
        )

    def test_plain_code_not_affected(self) -> None:
        """Test that single-backtick code stays ordinary code."""
        doc = parse("`a` and ``b``")
        assert doc[0].content == (Code("a"), Text(" and "), StyledCode("b"))

    def test_triple_backtick_span_is_plain_code(self) -> None:
        """Test that a triple-backtick inline span is ordinary code."""
        doc = parse("x ```y``` z")
        assert doc[0].content == (Text("x "), Code("y"), Text(" z"))

    def test_styled_code_with_inner_backtick(self) -> None:
        """Test that padded styled content may contain backticks."""
        doc = parse("`` `x` ``")
        assert doc[0].content == (StyledCode("`x`"),)

    def test_styled_code_in_emphasis(self) -> None:
        """Test styled code nested in strong emphasis."""
        doc = parse("**run ``VACUUM``**")
        assert doc[0].content == (Strong(content=[Text("run "), StyledCode("VACUUM")]),)

    def test_styled_code_in_heading_and_table(self) -> None:
        """Test styled code inside headings and table cells."""
        doc = parse("# Fix ``x``\n\n| q |\n|---|\n| ``y`` |")
        assert doc[0] == Heading(level=1, content=[Text("Fix "), StyledCode("x")])
        table = doc[1]
        assert isinstance(table, Table)
        assert table.rows[1].cells[0].content == (StyledCode("y"),)

    def test_styled_code_disabled(self) -> None:
        """Test that styled_code=False makes every span ordinary code."""
        doc = parse("Use ``SELECT *`` here", styled_code=False)
        assert doc[0].content == (Text("Use "), Code("SELECT *"), Text(" here"))

    def test_no_sentinel_leaks(self, sample_note: str) -> None:
        """Test that no sentinel survives anywhere in a parsed tree."""
        doc = parse(sample_note)
        assert STYLED_START not in repr(doc)
        assert STYLED_END not in repr(doc)

    def test_unmatched_sentinel_kept_as_text(self) -> None:
        """Test that a stray start sentinel and its trailing text survive."""
        doc = parse(f"a {STYLED_START} b")
        paragraph = doc[0]
        assert all(isinstance(node, Text) for node in paragraph.content)
        assert extract_text(paragraph) == f"a {STYLED_START} b"

    def test_styled_syntax_inside_longer_code_span(self) -> None:
        """Test that double backticks written inside a triple-backtick span stay literal."""
        doc = parse("run ``` ``y`` ``` now")
        assert doc[0].content == (Text("run "), Code("``y``"), Text(" now"))
        assert render(doc, "plaintext") == "run ``y`` now"

    def test_quoted_styled_span_across_lines(self) -> None:
        """Test that a styled span may continue on the next quoted line."""
        quote = parse("> ``a\n> b``")[0]
        assert isinstance(quote, BlockQuote)
        assert quote.children[0].content == (StyledCode("a b"),)

    @pytest.mark.parametrize(
        "source",
        [
            "para ``a\n- b``",
            "``\n-   *``",
            "a ``b\n# c``",
            "a ``b\n```\nc``",
            "a ``b\n\nc``",
            "> a ``b\n>\n> c``",
            "a ``b\n===\nc``",
        ],
    )
    def test_span_across_blocks_leaves_no_sentinel(self, source: str) -> None:
        """Test that double backticks split between two blocks stay sentinel free."""
        doc = parse(source)
        markdown = serialize(doc)
        for sentinel in (STYLED_START, STYLED_END):
            assert sentinel not in repr(doc)
            assert sentinel not in markdown

    def test_setext_split_span_keeps_backticks(self) -> None:
        """Test that a span torn apart by a setext underline keeps its delimiters as text."""
        doc = parse("a ``b\n===\nc``")
        assert doc[0] == Heading(level=1, content=[Text("a ``b")])
        assert doc[1] == Paragraph(content=[Text("c ``")])


@pytest.mark.unit
class TestCodeBlocks:
    """Tests for fenced and indented code blocks."""

    def test_fenced_block_opaque(self) -> None:
        """Test that double backticks in a fence stay literal code."""
        doc = parse("```\n``x``\n```")
        assert len(doc) == 1
        block = doc[0]
        assert isinstance(block, CodeBlock)
        assert block.content == "``x``\n"
        assert block.fence_info is None

    def test_fence_info_and_language(self) -> None:
        """Test info string and language extraction."""
        block = parse("```sql title\nSELECT 1;\n```")[0]
        assert block.fence_info == "sql title"
        assert block.language == "sql"
        assert block.metadata["marker"] == "```"
        assert block.metadata["style"] == "fenced"

    def test_indented_block_restores_styled_syntax(self) -> None:
        """Test that indented code keeps its double-backtick source."""
        block = parse("    run ``x``\n")[0]
        assert isinstance(block, CodeBlock)
        assert block.content == "run ``x``\n"
        assert block.metadata["style"] == "indent"

    def test_indented_block_ends_with_newline(self) -> None:
        """Test that indented content ends with a newline like fenced content."""
        block = parse("    xx")[0]
        assert block.content == "xx\n"

    def test_indented_block_serialize_reparses(self) -> None:
        """Test that an indented block survives a serialize round trip."""
        doc = parse("    xx")
        assert parse(serialize(doc)) == doc


@pytest.mark.unit
class TestBlocks:
    """Tests for block-level structure."""

    def test_heading_levels(self) -> None:
        """Test ATX and setext headings."""
        doc = parse("## Two\n\nOne\n===")
        assert doc[0] == Heading(level=2, content=[Text("Two")])
        assert doc[1] == Heading(level=1, content=[Text("One")])

    def test_bulleted_list(self) -> None:
        """Test a tight bulleted list."""
        lst = parse("- a\n- b")[0]
        assert isinstance(lst, BulletedList)
        assert lst.tight is True
        assert lst.items == (
            ListItem(children=[Paragraph(content=[Text("a")])]),
            ListItem(children=[Paragraph(content=[Text("b")])]),
        )
        assert lst.metadata["bullet"] == "-"

    def test_loose_list(self) -> None:
        """Test that blank lines between items make a loose list."""
        lst = parse("* a\n\n* b")[0]
        assert isinstance(lst, BulletedList)
        assert lst.tight is False

    def test_numbered_list_start(self) -> None:
        """Test that the start number of an ordered list is kept."""
        lst = parse("3. x\n4. y")[0]
        assert isinstance(lst, NumberedList)
        assert lst.start == 3
        assert len(lst.items) == 2

    def test_nested_list(self) -> None:
        """Test a list nested inside a list item."""
        lst = parse("- a\n  - b\n- c")[0]
        first = lst.items[0]
        assert isinstance(first.children[1], BulletedList)
        assert extract_text(first.children[1]) == "b"

    def test_task_list_detection(self) -> None:
        """Test that one checkbox item makes the whole list a task list."""
        lst = parse("- [x] done\n- plain\n- [ ] todo")[0]
        assert isinstance(lst, TaskList)
        first, second, third = lst.items
        assert isinstance(first, TaskListItem) and first.completed is True
        assert isinstance(second, ListItem)
        assert isinstance(third, TaskListItem) and third.completed is False
        assert extract_text(first) == "done"

    def test_ordered_task_list_keeps_numbering(self) -> None:
        """Test that an ordered task list records its numbering."""
        lst = parse("2. [ ] a\n3. [x] b")[0]
        assert isinstance(lst, TaskList)
        assert lst.metadata["ordered"] is True
        assert lst.metadata["start"] == 2

    def test_task_lists_disabled(self) -> None:
        """Test that checkbox parsing can be disabled."""
        lst = parse("- [x] done", parse_task_lists=False)[0]
        assert isinstance(lst, BulletedList)
        assert extract_text(lst) == "[x] done"

    def test_block_quote(self) -> None:
        """Test a block quote with two paragraphs."""
        quote = parse("> a\n>\n> b")[0]
        assert quote == BlockQuote(children=[Paragraph(content=[Text("a")]), Paragraph(content=[Text("b")])])

    def test_thematic_break(self) -> None:
        """Test a thematic break between paragraphs."""
        doc = parse("a\n\n***\n\nb")
        assert isinstance(doc[1], ThematicBreak)

    def test_html_block(self) -> None:
        """Test a raw HTML block."""
        block = parse("<div>\nhi\n</div>")[0]
        assert block == HTMLBlock(content="<div>\nhi\n</div>")

    def test_table_alignments(self) -> None:
        """Test that column alignments keep their declared order."""
        table = parse("| a | b | c | d |\n|:--|:-:|--:|---|\n| 1 | 2 | 3 | 4 |")[0]
        assert isinstance(table, Table)
        assert table.alignments == ("left", "center", "right", None)
        assert table.header is not None
        assert [extract_text(cell) for cell in table.header.cells] == ["a", "b", "c", "d"]
        assert len(table.body) == 1
        assert [extract_text(cell) for cell in table.body[0].cells] == ["1", "2", "3", "4"]

    def test_tables_disabled(self) -> None:
        """Test that pipe tables become paragraphs when disabled."""
        doc = parse("| a |\n|---|\n| 1 |", parse_tables=False)
        assert isinstance(doc[0], Paragraph)


@pytest.mark.unit
class TestInlines:
    """Tests for inline structure."""

    def test_emphasis_kinds(self) -> None:
        """Test emphasis, strong emphasis and strikethrough."""
        content = parse("*a* **b** ~~c~~")[0].content
        assert content == (
            Emphasis(content=[Text("a")]),
            Text(" "),
            Strong(content=[Text("b")]),
            Text(" "),
            Strikethrough(content=[Text("c")]),
        )

    def test_soft_and_hard_breaks(self) -> None:
        """Test soft and hard line breaks."""
        assert parse("a\nb")[0].content == (Text("a"), SoftBreak(), Text("b"))
        assert parse("a  \nb")[0].content == (Text("a"), LineBreak(), Text("b"))

    def test_link_with_title(self) -> None:
        """Test an inline link with a title."""
        link = parse('[docs](https://example.com/docs "Docs")')[0].content[0]
        assert link == Link(url="https://example.com/docs", content=[Text("docs")], title="Docs")

    def test_image(self) -> None:
        """Test an inline image and its alt text."""
        image = parse("![the *plan*](plan.png)")[0].content[0]
        assert isinstance(image, Image)
        assert image.url == "plan.png"
        assert image.alt_text == "the plan"

    def test_bare_url_autolinked(self) -> None:
        """Test that bare URLs become links."""
        content = parse("see https://example.com now")[0].content
        links = [node for node in content if isinstance(node, Link)]
        assert len(links) == 1
        assert links[0].url == "https://example.com"

    def test_bare_url_not_linked_when_disabled(self) -> None:
        """Test that bare URL linking can be disabled."""
        content = parse("see https://example.com now", autolink_urls=False)[0].content
        assert content == (Text("see https://example.com now"),)

    def test_escapes_and_entities(self) -> None:
        """Test backslash escapes and entity references."""
        assert parse("\\*not em\\* &amp; more")[0].content == (Text("*not em* & more"),)

    def test_escaped_entity_stays_literal(self) -> None:
        """Test that an escaped ampersand is not unescaped twice."""
        assert parse("\\&amp;")[0].content == (Text("&amp;"),)

    def test_inline_html(self) -> None:
        """Test inline HTML tags become HTMLInline nodes."""
        content = parse('a <mark data-sqlmaestro="match">b</mark> c')[0].content
        assert content == (
            Text("a "),
            HTMLInline('<mark data-sqlmaestro="match">'),
            Text("b"),
            HTMLInline("</mark>"),
            Text(" c"),
        )

    def test_strikethrough_disabled(self) -> None:
        """Test that strikethrough parsing can be disabled."""
        assert parse("~~x~~", parse_strikethrough=False)[0].content == (Text("~~x~~"),)


@pytest.mark.unit
class TestParserInput:
    """Tests for input types and options validation."""

    def test_empty_input(self) -> None:
        """Test that empty input parses to an empty document."""
        assert parse("") == Document()

    def test_crlf_normalized(self) -> None:
        """Test that Windows line endings behave like Unix ones."""
        assert parse("a\r\nb") == parse("a\nb")

    def test_bytes_and_streams(self) -> None:
        """Test bytes, binary and text streams as input."""
        expected = parse("Use ``x``")
        parser = MarkdownParser()
        assert parser.parse("Use ``x``".encode("utf-8")) == expected
        assert parser.parse(BytesIO(b"Use ``x``")) == expected
        assert parser.parse(StringIO("Use ``x``")) == expected

    def test_path_input(self, tmp_path) -> None:
        """Test reading a note from a path."""
        note = tmp_path / "note.md"
        note.write_text("# Hi\n", encoding="utf-8")
        assert MarkdownParser().parse(note) == Document(children=[Heading(level=1, content=[Text("Hi")])])

    def test_string_is_never_a_path(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a string argument is parsed as content."""
        (tmp_path / "note.md").write_text("# Hi\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        doc = MarkdownParser().parse("note.md")
        assert doc == Document(children=[Paragraph(content=[Text("note.md")])])

    def test_wrong_options_type(self) -> None:
        """Test that renderer options are rejected by the parser."""
        with pytest.raises(InvalidOptionsError):
            MarkdownParser(PlainTextOptions())  # type: ignore[arg-type]

    def test_markdown_to_ast(self) -> None:
        """Test the one-call helper."""
        assert len(markdown_to_ast("# Hello\n\nWorld")) == 2

    def test_parse_is_deterministic(self, sample_note: str) -> None:
        """Test that two parses of the same note produce equal trees."""
        assert parse(sample_note) == parse(sample_note)


@pytest.mark.unit
@pytest.mark.fuzzing
class TestParserTotality:
    """Property-based tests: any input parses to a document."""

    @given(st.text(alphabet="ab `*_-#>\n[]()!~|:\\", max_size=80))
    def test_any_markup_parses(self, markdown: str) -> None:
        """Test that arbitrary markup characters never raise."""
        doc = MarkdownParser().parse(markdown)
        assert isinstance(doc, Document)
        assert STYLED_START not in repr(doc)
        assert STYLED_END not in repr(doc)
