#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/maestromd/composer.py
"""Inline view composition with styled code chips.

Styled code spans are shown as boxed chips inside running text. A chip is
a unit: it is never split across lines, and the text on both sides of it
stays in place. The composer partitions an inline sequence into segments
(text runs, chips and explicit breaks) and :class:`ComposedInline` lays
them out, either as one :class:`rich.text.Text` for unconstrained output or
as wrapped lines for a given width.

Examples
--------
    >>> from maestromd import parse
    >>> paragraph = parse("Use ``SELECT *`` here")[0]
    >>> composed = InlineViewComposer().compose(paragraph.content)
    >>> [(segment.kind, segment.content) for segment in composed.segments]
    [('text', 'Use '), ('token', 'SELECT *'), ('text', ' here')]

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional

from rich.cells import cell_len
from rich.console import Console, ConsoleOptions, RenderResult
from rich.measure import Measurement
from rich.text import Text

from maestromd.ast.nodes import InlineNode, LineBreak, SoftBreak, StyledCode
from maestromd.constants import SegmentKind
from maestromd.options.richtext import RichTextOptions
from maestromd.renderers.rich_inline import RichTextInlineRenderer

logger = logging.getLogger(__name__)

_ATOM_RE = re.compile(r"\n|[^\S\n]+|\S+")


@dataclass(frozen=True)
class InlineSegment:
    """One piece of a composed inline sequence.

    Parameters
    ----------
    kind : {"text", "token", "soft_break", "line_break"}
        Segment kind
    text : Text
        Rendered text; for a token this is the padded chip
    content : str
        Plain content; for a token this is the code without padding
    needs_extra_line : bool, default False
        Set on a break that directly follows another break

    """

    kind: SegmentKind
    text: Text
    content: str = ""
    needs_extra_line: bool = False

    @property
    def is_break(self) -> bool:
        return self.kind in ("soft_break", "line_break")


@dataclass(frozen=True)
class ComposedInline:
    """Laid-out inline content made of text runs, chips and breaks.

    Parameters
    ----------
    segments : tuple of InlineSegment
        Segments in text order

    """

    segments: tuple[InlineSegment, ...] = ()
    has_styled_code: bool = field(default=False)

    @property
    def text(self) -> Text:
        """All segments joined into one Text, chips embedded in place."""
        result = Text()
        for segment in self.segments:
            if segment.is_break:
                result.append("\n")
            else:
                result.append_text(segment.text)
        return result

    @property
    def plain(self) -> str:
        """Plain string of :attr:`text`."""
        return self.text.plain

    def wrap(self, width: int) -> list[Text]:
        """Greedy line breaking with chips kept whole.

        Text runs break at whitespace and at forced newlines. A chip and
        any words written directly against it form one unit. A unit wider
        than the line is broken between its parts, and a single part wider
        than the line is folded at the width.

        Parameters
        ----------
        width : int
            Available width in terminal cells

        Returns
        -------
        list[Text]
            One Text per output line

        Raises
        ------
        ValueError
            If width is less than 1

        """
        if width < 1:
            raise ValueError(f"width must be at least 1, got {width}")

        builder = _LineBuilder(width)
        unit: list[Text] = []
        for kind, atom in self._atoms():
            if kind == "part":
                unit.append(atom)
                continue
            if unit:
                builder.place_unit(unit)
                unit = []
            if kind == "newline":
                builder.newline()
            else:
                builder.space(atom)
        if unit:
            builder.place_unit(unit)
        return builder.finish()

    def _atoms(self) -> Iterator[tuple[str, Text]]:
        """Yield ``("part" | "space" | "newline", text)`` atoms in order."""
        for segment in self.segments:
            if segment.is_break:
                yield "newline", Text("\n")
            elif segment.kind == "token":
                yield "part", segment.text
            else:
                for match in _ATOM_RE.finditer(segment.text.plain):
                    piece = segment.text[match.start() : match.end()]
                    if match.group() == "\n":
                        yield "newline", piece
                    elif match.group().isspace():
                        yield "space", piece
                    else:
                        yield "part", piece

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        lines = self.wrap(max(options.max_width, 1))
        rendered = Text("\n").join(lines)
        rendered.no_wrap = True
        yield rendered

    def __rich_measure__(self, console: Console, options: ConsoleOptions) -> Measurement:
        widest_part = max((atom.cell_len for kind, atom in self._atoms() if kind == "part"), default=0)
        widest_line = max((cell_len(line) for line in self.plain.split("\n")), default=0)
        return Measurement(min(widest_part, widest_line), widest_line)


class _LineBuilder:
    """Accumulates atoms into lines of at most ``width`` cells."""

    def __init__(self, width: int):
        self.width = width
        self.lines: list[Text] = []
        self.line = Text()
        self.used = 0
        self.pending_space: Optional[Text] = None

    def break_line(self) -> None:
        self.lines.append(self.line)
        self.line = Text()
        self.used = 0
        self.pending_space = None

    def newline(self) -> None:
        self.break_line()

    def space(self, atom: Text) -> None:
        # Whitespace at the start of a wrapped line is dropped
        if self.used == 0:
            return
        if self.pending_space is None:
            self.pending_space = atom
        else:
            self.pending_space = Text.assemble(self.pending_space, atom)

    def _space_width(self) -> int:
        return self.pending_space.cell_len if self.pending_space is not None and self.used else 0

    def _append(self, part: Text) -> None:
        if self.pending_space is not None and self.used:
            self.line.append_text(self.pending_space)
            self.used += self.pending_space.cell_len
        self.pending_space = None
        self.line.append_text(part)
        self.used += part.cell_len

    def place_unit(self, parts: list[Text]) -> None:
        total = sum(part.cell_len for part in parts)
        if self.used + self._space_width() + total <= self.width:
            for part in parts:
                self._append(part)
        elif total <= self.width:
            self.break_line()
            for part in parts:
                self._append(part)
        else:
            for part in parts:
                self._place_part(part)

    def _place_part(self, part: Text) -> None:
        width = part.cell_len
        if self.used + self._space_width() + width <= self.width:
            self._append(part)
            return
        if self.used:
            self.break_line()
        if width <= self.width:
            self._append(part)
            return
        chunks = _fold(part, self.width)
        for chunk in chunks[:-1]:
            self._append(chunk)
            self.break_line()
        self._append(chunks[-1])

    def finish(self) -> list[Text]:
        if self.line.plain or not self.lines:
            self.lines.append(self.line)
        return self.lines


def _fold(part: Text, width: int) -> list[Text]:
    """Cut a Text into pieces of at most ``width`` cells."""
    offsets = []
    used = 0
    for index, char in enumerate(part.plain):
        char_width = cell_len(char)
        if used and used + char_width > width:
            offsets.append(index)
            used = 0
        used += char_width
    return list(part.divide(offsets)) if offsets else [part]


class InlineViewComposer:
    """Partition inline content into text runs, chips and breaks.

    Parameters
    ----------
    options : RichTextOptions or None, default = None
        Rich text options; the theme's ``styled_code`` style and
        ``chip_padding`` define the chip look
    images : Mapping[str, Any] or None, default = None
        Resolved images passed through to the inline renderer

    """

    def __init__(self, options: RichTextOptions | None = None, images: Optional[Mapping[str, Any]] = None):
        self.inline_renderer = RichTextInlineRenderer(options, images)
        self.options: RichTextOptions = self.inline_renderer.options

    def compose(self, inlines: Iterable[InlineNode]) -> ComposedInline:
        """Compose an inline sequence.

        Parameters
        ----------
        inlines : iterable of InlineNode
            Inline content of a paragraph, heading or table cell

        Returns
        -------
        ComposedInline
            A single text segment when no styled code is present, otherwise
            the partitioned segments

        """
        nodes = tuple(inlines)
        if not any(isinstance(node, StyledCode) for node in nodes):
            text = self.inline_renderer.render_inlines(nodes)
            return ComposedInline(segments=(InlineSegment("text", text, text.plain),), has_styled_code=False)

        segments: list[InlineSegment] = []
        run: list[InlineNode] = []

        def flush_run() -> None:
            if not run:
                return
            after_break = bool(segments) and segments[-1].is_break
            text = self.inline_renderer.render_inlines(run, skip_leading_whitespace=after_break)
            run.clear()
            if text.plain:
                segments.append(InlineSegment("text", text, text.plain))

        for node in nodes:
            if isinstance(node, StyledCode):
                flush_run()
                segments.append(InlineSegment("token", self._chip(node.content), node.content))
            elif isinstance(node, LineBreak) or (
                isinstance(node, SoftBreak) and self.options.soft_break_mode == "line_break"
            ):
                flush_run()
                kind: SegmentKind = "line_break" if isinstance(node, LineBreak) else "soft_break"
                follows_break = bool(segments) and segments[-1].is_break
                segments.append(InlineSegment(kind, Text("\n"), "\n", needs_extra_line=follows_break))
            else:
                run.append(node)
        flush_run()

        logger.debug("Composed %d inline nodes into %d segments", len(nodes), len(segments))
        return ComposedInline(segments=tuple(segments), has_styled_code=True)

    def _chip(self, content: str) -> Text:
        padding = " " * self.options.chip_padding
        return Text(f"{padding}{content}{padding}", style=self.options.theme.styled_code)
