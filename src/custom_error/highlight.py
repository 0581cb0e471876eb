import sys
from dataclasses import dataclass
from typing import TypeAlias

__all__ = ['UNBOUNDED', 'Highlight', 'HighlightLike', 'Bounds', 'normalize_bounds']

UNBOUNDED = sys.maxsize
"""Length of a highlight whose range has no upper bound; clipped to the line when rendering."""

Bounds: TypeAlias = slice | range
HighlightLike: TypeAlias = ('Highlight'
                            ' | tuple[int, int, int]'
                            ' | tuple[int, int, int, str | None]'
                            ' | tuple[int, Bounds]'
                            ' | tuple[int, Bounds, str | None]')


def normalize_bounds(start: int | None, stop: int | None, *, inclusive: bool = False,
                     line_length: int | None = None) -> tuple[int, int]:
    """Turn range bounds into an `(offset, length)` pair.

    A missing start means 0, a missing stop means the end of the line (or
    `UNBOUNDED` if the line length is unknown). Lengths saturate: a stop before
    the start gives 0 and an unbounded inclusive stop stays `UNBOUNDED`.
    """
    offset = 0 if start is None else max(0, start)
    if stop is None:
        if line_length is None:
            return offset, UNBOUNDED
        return offset, max(0, line_length - offset)
    end = stop + 1 if inclusive else stop
    return offset, min(UNBOUNDED, max(0, end - offset))


@dataclass(frozen=True)
class Highlight:
    """A highlight on a single logical line of a context."""
    line: int  # index into the context's lines, zero-based
    offset: int  # in characters
    length: int  # zero for a point marker
    comment: str | None = None

    @property
    def end(self) -> int:
        return self.offset + self.length

    @staticmethod
    def from_range(line: int, start: int | None, stop: int | None, comment: str | None = None,
                   *, inclusive: bool = False) -> 'Highlight':
        """Create a highlight covering `start..stop` (or `start..=stop` if inclusive)."""
        offset, length = normalize_bounds(start, stop, inclusive=inclusive)
        return Highlight(line, offset, length, comment)

    @staticmethod
    def from_bounds(line: int, bounds: Bounds, comment: str | None = None) -> 'Highlight':
        """Create a highlight from a `slice` or `range`; the stop is exclusive."""
        if isinstance(bounds, range) and bounds.step != 1:
            raise ValueError(f"highlight range must be contiguous: {bounds!r}")
        return Highlight.from_range(line, bounds.start, bounds.stop, comment)

    @staticmethod
    def of(value: HighlightLike) -> 'Highlight':
        """Coerce one of the accepted shorthand forms into a highlight."""
        match value:
            case Highlight():
                return value
            case (int(line), slice() | range() as bounds):
                return Highlight.from_bounds(line, bounds)
            case (int(line), slice() | range() as bounds, comment):
                return Highlight.from_bounds(line, bounds, comment)
            case (int(line), int(offset), int(length)):
                return Highlight(line, offset, length)
            case (int(line), int(offset), int(length), comment):
                return Highlight(line, offset, length, comment)
            case _:
                raise TypeError(f"cannot make a highlight from {value!r}")
