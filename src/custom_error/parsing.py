"""Bridge between parsy parsers and diagnostics.

`located` records where a parser matched so the match can be shown as a
context later on, and `syntax_error` turns a failed parse into a diagnostic
pointing at the failure position.
"""
import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from parsy import ParseError, Parser, Result

from custom_error.context import Context, FilePosition
from custom_error.diagnostics import Diagnostic, DiagnosticError
from custom_error.kinds import BasicKind, Kind
from custom_error.text import Borrowed

__all__ = ['position_at', 'Located', 'located', 'expected_message', 'syntax_error', 'parse']

logger = logging.getLogger(__name__)

T = TypeVar('T')


def position_at(source: str, index: int) -> FilePosition:
    """Scan position of the character at `index` in `source`."""
    return FilePosition.at(source, index)


@dataclass(frozen=True)
class Located(Generic[T]):
    """Parse result together with the positions where it starts and ends (exclusive)."""
    value: T
    start: FilePosition
    end: FilePosition

    def context(self, source_name: str | None = None) -> Context:
        context = Context.range(self.start, self.end)
        return context if source_name is None else context.with_source(source_name)


def located(parser: Parser) -> Parser:
    """Wrap `parser` so its result becomes a `Located` value."""

    @Parser
    def located_parser(source: str, offset: int) -> Result:
        result = parser(source, offset)
        if result.status:
            value = Located(result.value, position_at(source, offset), position_at(source, result.index))
            return Result.success(result.index, value).aggregate(result)
        return result

    return located_parser


def expected_message(error: ParseError) -> str:
    expected = sorted(error.expected)
    if len(expected) == 1:
        return f"expected {expected[0]}"
    return f"expected one of {', '.join(expected)}"


def syntax_error(error: ParseError, *, source_name: str | None = None,
                 kind: Kind = BasicKind.ERROR) -> Diagnostic:
    """Diagnostic for a failed parse, highlighting the character where parsing stopped."""
    source = error.stream
    pos = position_at(source, error.index)
    line_start = error.index - pos.column
    line_end = source.find('\n', line_start)
    if line_end == -1:
        line_end = len(source)
    length = 1 if error.index < line_end else 0
    message = expected_message(error)
    context = Context.line(pos.line_index, Borrowed(source, line_start, line_end), pos.column, length, message)
    if source_name is not None:
        context = context.with_source(source_name)
    return Diagnostic.new(kind, "Invalid syntax", message, context)


def parse(parser: Parser, source: str, *, source_name: str | None = None) -> object:
    """Run `parser` on the whole of `source`, raising a `DiagnosticError` on failure."""
    try:
        return parser.parse(source)
    except ParseError as err:
        logger.debug("parse of %s failed at index %d", source_name or '<string>', err.index)
        raise DiagnosticError(syntax_error(err, source_name=source_name)) from err
