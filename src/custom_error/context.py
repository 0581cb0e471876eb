from dataclasses import dataclass, field, replace
from typing import IO, TYPE_CHECKING, Iterable

from parsy import line_info_at

from custom_error.highlight import Bounds, Highlight, HighlightLike, normalize_bounds
from custom_error.text import Borrowed, Owned, Text, as_text

if TYPE_CHECKING:
    from custom_error.config import RenderOptions
    from custom_error.render import Merge

__all__ = ['FilePosition', 'Context', 'split_lines']


def split_lines(text: str) -> list[str]:
    """Split text on line feeds; a line feed ending the text does not start a new line."""
    if not text:
        return []
    lines = text.split('\n')
    if text.endswith('\n'):
        lines.pop()
    return lines


def _order(highlight: Highlight) -> tuple[int, int]:
    return highlight.line, highlight.offset


@dataclass(frozen=True)
class FilePosition:
    """Scan position in a buffer: a character offset plus its *zero*-based line and column."""
    buffer: str
    offset: int = 0
    line_index: int = 0
    column: int = 0

    @property
    def remaining(self) -> str:
        """The text from this position forward."""
        return self.buffer[self.offset:]

    @staticmethod
    def at(buffer: str, offset: int) -> 'FilePosition':
        """Position at a character offset, with line and column derived from the buffer."""
        line_index, column = line_info_at(buffer, offset)
        return FilePosition(buffer, offset, line_index, column)


@dataclass(frozen=True)
class Context:
    """A located slice of text with highlights, rendered as an annotated code block."""
    source: str | None = None
    line_number: int | None = None  # one-based, of the first line
    first_line_offset: int = 0  # characters trimmed before the first line starts
    lines: Text = field(default_factory=Owned)
    highlights: tuple[Highlight, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'lines', as_text(self.lines))
        object.__setattr__(self, 'highlights', tuple(self.highlights))

    # Constructors

    @staticmethod
    def none() -> 'Context':
        """Context used when there is nothing to point at."""
        return Context()

    @staticmethod
    def show(line: str | Text) -> 'Context':
        """Context showing a line (for example a file name) without position."""
        return Context(lines=as_text(line))

    @staticmethod
    def full_line(line_index: int, line: str | Text) -> 'Context':
        """Context for a line that is wrong as a whole."""
        return Context(line_number=line_index + 1, lines=as_text(line))

    @staticmethod
    def line(line_index: int | None, line: str | Text, offset: int, length: int,
             comment: str | None = None) -> 'Context':
        """Context highlighting `length` characters from `offset` on a single line."""
        return Context(line_number=None if line_index is None else line_index + 1,
                       lines=as_text(line),
                       highlights=(Highlight(0, offset, length, comment),))

    @staticmethod
    def line_range(line_index: int | None, line: str | Text, start: int | None, stop: int | None,
                   comment: str | None = None, *, inclusive: bool = False) -> 'Context':
        """Context highlighting a range on a single line; `None` bounds extend to the line ends."""
        if start is None and stop is None:
            if line_index is None:
                return Context.show(line)
            return Context.full_line(line_index, line)
        offset, length = normalize_bounds(start, stop, inclusive=inclusive,
                                          line_length=len(str(line)))
        return Context.line(line_index, line, offset, length, comment)

    @staticmethod
    def multiple_highlights(line_index: int | None, lines: str | Text,
                            highlights: Iterable[tuple[int, Bounds | None, str | None]]) -> 'Context':
        """Context with several highlights, each given as `(line, bounds, comment)`.

        A bounds of `None` (or a slice without start and stop) covers the whole line.
        """
        text = as_text(lines)
        lengths = [len(line) for line in split_lines(str(text))]
        result = []
        for line, bounds, comment in highlights:
            if not 0 <= line < len(lengths):
                raise IndexError(f"highlight on line {line}, but the context has {len(lengths)} line(s)")
            if bounds is None:
                result.append(Highlight(line, 0, lengths[line], comment))
            else:
                offset, length = normalize_bounds(bounds.start, bounds.stop, line_length=lengths[line])
                result.append(Highlight(line, offset, length, comment))
        return Context(line_number=None if line_index is None else line_index + 1,
                       lines=text,
                       highlights=tuple(sorted(result, key=_order)))

    @staticmethod
    def position(pos: FilePosition) -> 'Context':
        """Context pointing at a single scan position with a three character marker."""
        line_end = pos.buffer.find('\n', pos.offset)
        if line_end == -1:
            line_end = len(pos.buffer)
        return Context(line_number=pos.line_index + 1,
                       first_line_offset=pos.column,
                       lines=Borrowed(pos.buffer, pos.offset, line_end),
                       highlights=(Highlight(0, 0, 3),))

    @staticmethod
    def range(start: FilePosition, end: FilePosition) -> 'Context':
        """Context spanning from `start` up to (excluding) `end` within one buffer."""
        buffer = start.buffer
        if start.line_index == end.line_index:
            lines = Borrowed(buffer, start.offset, start.offset + max(0, end.column - start.column))
            return Context(line_number=start.line_index + 1,
                           first_line_offset=start.column,
                           lines=lines,
                           highlights=(Highlight(0, 0, len(lines)),))

        stop = start.offset
        for _ in range(end.line_index - start.line_index):
            newline = buffer.find('\n', stop)
            if newline == -1:
                stop = len(buffer)
                break
            stop = newline + 1
        else:
            line_end = buffer.find('\n', stop)
            stop = min(stop + end.column, len(buffer) if line_end == -1 else line_end)
        return Context(line_number=start.line_index + 1,
                       first_line_offset=start.column,
                       lines=Borrowed(buffer, start.offset, stop))

    # Builders

    def with_source(self, source: str) -> 'Context':
        return replace(self, source=source)

    def with_line_index(self, line_index: int) -> 'Context':
        """Set the *zero*-based index of the first line."""
        return replace(self, line_number=line_index + 1)

    def with_lines(self, first_line_offset: int, lines: str | Text) -> 'Context':
        """Set the text together with the number of characters trimmed before it."""
        return replace(self, first_line_offset=first_line_offset, lines=as_text(lines))

    def add_highlight(self, highlight: HighlightLike) -> 'Context':
        highlights = sorted(self.highlights + (Highlight.of(highlight),), key=_order)
        return replace(self, highlights=tuple(highlights))

    def to_owned(self) -> 'Context':
        """Copy the text so the context no longer refers to the source buffer."""
        return replace(self, lines=self.lines.to_owned())

    # Queries

    @property
    def line_index(self) -> int | None:
        return None if self.line_number is None else self.line_number - 1

    def is_empty(self) -> bool:
        return not self.lines and self.source is None and self.line_number is None

    def logical_lines(self) -> list[str]:
        return split_lines(str(self.lines))

    def margin(self) -> int:
        """Width needed for the largest line number shown."""
        if self.line_number is None:
            return 0
        count = max(1, len(self.logical_lines()))
        return len(str(self.line_number + count - 1))

    def locator(self) -> str:
        """`source:line:column`, each part present only if known."""
        parts = self.source or ''
        if self.line_number is not None:
            parts += f":{self.line_number}"
            if len(self.highlights) == 1 and self.highlights[0].line == 0:
                parts += f":{self.first_line_offset + self.highlights[0].offset + 1}"
        return parts

    # Display

    def write(self, sink: IO[str], note: str | None = None, merge: 'Merge | None' = None,
              options: 'RenderOptions | None' = None) -> None:
        from custom_error.render import write_context
        write_context(sink, self, note, merge, options)

    def render(self, note: str | None = None, merge: 'Merge | None' = None,
               options: 'RenderOptions | None' = None) -> str:
        from custom_error.render import render_context
        return render_context(self, note, merge, options)

    def to_html(self, options: 'RenderOptions | None' = None) -> str:
        from custom_error.html import context_to_html
        return context_to_html(self, options)

    def __str__(self) -> str:
        return self.render()
