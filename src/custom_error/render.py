"""Text rendering of contexts.

A context is drawn as a block: a leading decorator, one row per logical line
(more when a line is wider than the column budget), a highlight strip under
every row that carries highlights, and a trailing decorator::

      ╭─[path/file.txt:3:2]
    3 │ …ello world
      ╎  ╶╴   ╶───╴ Rest
      ╵

Several contexts of one diagnostic are rendered as a single merged block that
shares the margin; only the first keeps its leading and only the last keeps
its trailing decorator.
"""
import textwrap
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, Sequence

from custom_error.config import DEFAULT_OPTIONS, RenderOptions
from custom_error.context import Context
from custom_error.highlight import Highlight
from custom_error.symbols import Symbols, display_text

__all__ = ['MergeRole', 'Merge', 'line_rows', 'context_lines', 'render_context', 'write_context',
           'render_contexts', 'contexts_lines']

WINDOW_PADDING = 5
MIN_BUDGET = 10


class MergeRole(Enum):
    SOLO = 1
    FIRST = 2
    MIDDLE = 3
    LAST = 4


@dataclass(frozen=True)
class Merge:
    """Position of a context within a merged group, with the margin shared by the group."""
    role: MergeRole = MergeRole.SOLO
    margin: int | None = None

    @staticmethod
    def solo() -> 'Merge':
        return Merge()

    @staticmethod
    def first(margin: int) -> 'Merge':
        return Merge(MergeRole.FIRST, margin)

    @staticmethod
    def middle(margin: int) -> 'Merge':
        return Merge(MergeRole.MIDDLE, margin)

    @staticmethod
    def last(margin: int) -> 'Merge':
        return Merge(MergeRole.LAST, margin)

    @staticmethod
    def for_position(index: int, count: int, margin: int) -> 'Merge':
        if count <= 1:
            return Merge(MergeRole.SOLO, margin)
        if index == 0:
            return Merge.first(margin)
        if index == count - 1:
            return Merge.last(margin)
        return Merge.middle(margin)

    @property
    def leading_decoration(self) -> bool:
        return self.role in (MergeRole.SOLO, MergeRole.FIRST)

    @property
    def trailing_decoration(self) -> bool:
        return self.role in (MergeRole.SOLO, MergeRole.LAST)


def line_rows(length: int, span: tuple[int, int] | None, budget: int) -> list[tuple[int, int]]:
    """Split a line of `length` characters into rows of at most `budget` characters.

    A line that fits is a single row. Otherwise rows start a few characters
    before the highlighted span (or at the start of the line without one) and
    continue until the rest of the line fits.
    """
    if length <= budget:
        return [(0, length)]
    start = 0 if span is None else min(max(0, span[0] - WINDOW_PADDING), length - 1)
    rows = []
    while start + budget < length:
        rows.append((start, start + budget))
        start += budget
    rows.append((start, length))
    return rows


def highlight_span(highlights: Sequence[Highlight], length: int) -> tuple[int, int] | None:
    """Union of the highlights clipped to the line, or `None` without highlights."""
    if not highlights:
        return None
    start = min(min(h.offset, length) for h in highlights)
    end = max(min(h.end, length) for h in highlights)
    return start, end


@dataclass
class _Mark:
    column: int
    glyph: str
    comment: list[str]
    below: int | None = None  # comment column when the comment starts on the next row

    @property
    def comment_column(self) -> int:
        if self.below is not None:
            return self.below
        return self.column + len(self.glyph) + 1

    @property
    def start_column(self) -> int:
        return min(self.column, self.comment_column)

    @property
    def end_column(self) -> int:
        end = self.column + len(self.glyph)
        if not self.comment:
            return end
        return max(end, self.comment_column + max(len(line) for line in self.comment) + 1)

    def cells(self) -> list[tuple[int, int, str]]:
        """`(row, column, text)` pieces of this mark, row 0 being the glyph row."""
        if self.below is not None:
            return [(0, self.column, self.glyph)] + [(row + 1, self.below, line)
                                                     for row, line in enumerate(self.comment)]
        if not self.comment:
            return [(0, self.column, self.glyph)]
        return [(0, self.column, f"{self.glyph} {self.comment[0]}")] + \
            [(row, self.comment_column, line) for row, line in enumerate(self.comment) if row > 0]


@dataclass
class _Strip:
    cursor: int = 0
    marks: list[_Mark] = field(default_factory=list)

    def fits(self, mark: _Mark) -> bool:
        return not self.marks or self.cursor <= mark.start_column

    def add(self, mark: _Mark) -> None:
        self.marks.append(mark)
        self.cursor = mark.end_column

    def lines(self) -> list[str]:
        cells = [cell for mark in self.marks for cell in mark.cells()]
        result = [''] * (max(row for row, _, _ in cells) + 1)
        for row, column, text in cells:
            result[row] += ' ' * (column - len(result[row])) + text
        return result


class _ContextRenderer:
    def __init__(self, context: Context, margin: int, options: RenderOptions) -> None:
        self.context = context
        self.margin = margin
        self.symbols: Symbols = options.symbols
        self.width = options.max_columns - margin - 3
        self.budget = max(MIN_BUDGET, self.width - 2 * len(self.symbols.ellipsis))

    def header(self) -> str:
        if self.context.source is not None:
            return f"{' ' * self.margin} {self.symbols.top_source}{self.context.locator()}]"
        return f"{' ' * self.margin} {self.symbols.top}"

    def footer(self, note: str | None) -> str:
        if note is not None:
            return f"{' ' * self.margin} {self.symbols.bottom_note}{note}]"
        return f"{' ' * self.margin} {self.symbols.bottom}"

    def body(self) -> list[str]:
        result = []
        by_line: dict[int, list[Highlight]] = {}
        for highlight in self.context.highlights:
            by_line.setdefault(highlight.line, []).append(highlight)

        for index, line in enumerate(self.context.logical_lines()):
            highlights = sorted(by_line.get(index, []), key=lambda h: h.offset)
            if self.context.line_number is None:
                number = ' ' * self.margin
            else:
                number = str(self.context.line_number + index).ljust(self.margin)
            rows = line_rows(len(line), highlight_span(highlights, len(line)), self.budget)
            for start, end in rows:
                trimmed = start > 0 or (index == 0 and self.context.first_line_offset > 0)
                lead = len(self.symbols.ellipsis) if trimmed else 0
                text = display_text(line[start:end], self.symbols)
                result.append(f"{number} {self.symbols.row} "
                              f"{self.symbols.ellipsis if trimmed else ''}{text}"
                              f"{self.symbols.ellipsis if end < len(line) else ''}")
                result.extend(self.strips(highlights, len(line), start, end, lead))
        return result

    def strips(self, highlights: Sequence[Highlight], length: int, start: int, end: int,
               lead: int) -> list[str]:
        marks = []
        for highlight in highlights:
            mark = self.mark(highlight, length, start, end, lead)
            if mark is not None:
                marks.append(mark)
        marks.sort(key=lambda m: m.column)

        strips: list[_Strip] = []
        for mark in marks:
            for strip in strips:
                if strip.fits(mark):
                    strip.add(mark)
                    break
            else:
                strip = _Strip()
                strip.add(mark)
                strips.append(strip)

        prefix = f"{' ' * self.margin} {self.symbols.strip} "
        return [prefix + line for strip in strips for line in strip.lines()]

    def mark(self, highlight: Highlight, length: int, start: int, end: int, lead: int) -> _Mark | None:
        """Glyph run of a highlight within the row `start..end`, if it shows on that row."""
        sym = self.symbols
        first = min(highlight.offset, length)
        last = min(highlight.end, length)
        if first == last:
            if start <= first < end or first == end == length:
                return self.with_comment(lead + first - start, sym.point, highlight.comment)
            return None
        if first >= end or last <= start:
            return None

        before = first < start
        after = last > end
        size = min(last, end) - max(first, start)
        if before and after:
            glyph = sym.fill * lead + sym.fill * size
        elif before:
            glyph = sym.fill * lead + sym.fill * (size - 1) + sym.close
        elif after:
            glyph = sym.open + sym.fill * (size - 1)
        elif size == 1:
            glyph = sym.short
        else:
            glyph = sym.open + sym.fill * (size - 2) + sym.close
        column = 0 if before else lead + first - start
        return self.with_comment(column, glyph, None if after else highlight.comment)

    def with_comment(self, column: int, glyph: str, comment: str | None) -> _Mark:
        """Mark drawing `glyph` at `column`, with the comment wrapped to stay within the column budget.

        The comment follows the glyph when enough columns are left, otherwise it
        starts on the next strip row further left. Blank comments are not drawn.
        """
        if comment is None or not comment.strip():
            return _Mark(column, glyph, [])
        text = display_text(comment, self.symbols)
        inline = column + len(glyph) + 1
        if self.width - inline >= MIN_BUDGET:
            return _Mark(column, glyph, textwrap.wrap(text, width=self.width - inline))
        below = max(0, min(column, self.width - MIN_BUDGET))
        return _Mark(column, glyph, textwrap.wrap(text, width=max(1, self.width - below)), below)

    def locator_line(self) -> str:
        return f"[{self.context.locator()}]"


def context_lines(context: Context, note: str | None = None, merge: Merge | None = None,
                  options: RenderOptions | None = None) -> list[str]:
    """Render a context into its output lines (without line feeds)."""
    if context.is_empty():
        return []
    merge = merge or Merge.solo()
    options = options or DEFAULT_OPTIONS
    margin = context.margin() if merge.margin is None else merge.margin
    renderer = _ContextRenderer(context, margin, options)
    if not context.lines:
        return [renderer.locator_line()]

    lines = []
    if merge.leading_decoration:
        lines.append(renderer.header())
    lines.extend(renderer.body())
    if merge.trailing_decoration:
        lines.append(renderer.footer(note))
    return lines


def render_context(context: Context, note: str | None = None, merge: Merge | None = None,
                   options: RenderOptions | None = None) -> str:
    return '\n'.join(context_lines(context, note, merge, options))


def write_context(sink: IO[str], context: Context, note: str | None = None, merge: Merge | None = None,
                  options: RenderOptions | None = None) -> None:
    """Write a rendered context to `sink`; errors raised by the sink propagate."""
    sink.write(render_context(context, note, merge, options))


def contexts_lines(contexts: Sequence[Context], note: str | None = None,
                   options: RenderOptions | None = None) -> list[str]:
    """Render the non-empty contexts as one merged block sharing a margin.

    Only contexts with text take part in the frame; locator-only contexts are
    drawn in place as their locator line and never open or close the block.
    """
    shown = [c for c in contexts if not c.is_empty()]
    framed = [c for c in shown if c.lines]
    margin = max((c.margin() for c in framed), default=0)
    lines = []
    position = 0
    for context in shown:
        if not context.lines:
            lines.extend(context_lines(context, merge=Merge.middle(margin), options=options))
            continue
        merge = Merge.for_position(position, len(framed), margin)
        position += 1
        lines.extend(context_lines(context, note if merge.trailing_decoration else None, merge, options))
    return lines


def render_contexts(contexts: Sequence[Context], note: str | None = None,
                    options: RenderOptions | None = None) -> str:
    return '\n'.join(contexts_lines(contexts, note, options))
