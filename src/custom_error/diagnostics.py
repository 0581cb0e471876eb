from dataclasses import dataclass, replace
from typing import IO, Any, Iterable

from custom_error.colour import Role, decorate
from custom_error.config import DEFAULT_OPTIONS, RenderOptions
from custom_error.context import Context
from custom_error.kinds import BasicKind, DescribedKind, Kind
from custom_error.render import contexts_lines

__all__ = ['Diagnostic', 'DiagnosticError']


@dataclass(frozen=True)
class Diagnostic:
    """Diagnostic record: a kind, descriptions, suggestions, the contexts it occurred in and its causes."""
    kind: Kind = BasicKind.ERROR
    short_description: str = ''
    long_description: str = ''
    suggestions: tuple[str, ...] = ()
    version: str = ''
    contexts: tuple[Context, ...] = ()
    underlying: tuple['Diagnostic', ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'suggestions', tuple(self.suggestions))
        object.__setattr__(self, 'contexts', tuple(self.contexts))
        object.__setattr__(self, 'underlying', tuple(self.underlying))

    @staticmethod
    def new(kind: Kind, short_description: str, long_description: str, context: Context) -> 'Diagnostic':
        """Create a diagnostic.

        `short_description` is the title line, `long_description` is shown below
        the context to give more information, and `context` leads the user to
        the right place in the code or file.
        """
        return Diagnostic(kind, short_description, long_description, contexts=(context,))

    @staticmethod
    def small(kind: Kind, short_description: str, long_description: str) -> 'Diagnostic':
        """Create a diagnostic without any context."""
        return Diagnostic(kind, short_description, long_description)

    @staticmethod
    def from_kind(kind: DescribedKind, context: Context | None = None) -> 'Diagnostic':
        """Create a diagnostic whose descriptions, suggestions and version come from `kind`."""
        if context is None:
            diagnostic = Diagnostic.small(kind, kind.short_description(), kind.long_description())
        else:
            diagnostic = Diagnostic.new(kind, kind.short_description(), kind.long_description(), context)
        return diagnostic.add_suggestions(kind.suggestions()).with_version(kind.version())

    @staticmethod
    def error(short_description: str, long_description: str, context: Context) -> 'Diagnostic':
        return Diagnostic.new(BasicKind.ERROR, short_description, long_description, context)

    @staticmethod
    def warning(short_description: str, long_description: str, context: Context) -> 'Diagnostic':
        return Diagnostic.new(BasicKind.WARNING, short_description, long_description, context)

    # Builders

    def with_long_description(self, long_description: str) -> 'Diagnostic':
        return replace(self, long_description=long_description)

    def add_suggestions(self, suggestions: Iterable[str]) -> 'Diagnostic':
        """Extend the suggestions; previously added suggestions are kept."""
        return replace(self, suggestions=self.suggestions + tuple(suggestions))

    def with_version(self, version: str) -> 'Diagnostic':
        """Set the version of the format or tool the diagnostic refers to."""
        return replace(self, version=version)

    def replace_context(self, context: Context) -> 'Diagnostic':
        return replace(self, contexts=(context,))

    def add_context(self, context: Context) -> 'Diagnostic':
        return replace(self, contexts=self.contexts + (context,))

    def add_contexts(self, contexts: Iterable[Context]) -> 'Diagnostic':
        return replace(self, contexts=self.contexts + tuple(contexts))

    def add_underlying_error(self, error: 'Diagnostic') -> 'Diagnostic':
        return replace(self, underlying=self.underlying + (error,))

    def add_underlying_errors(self, errors: Iterable['Diagnostic']) -> 'Diagnostic':
        return replace(self, underlying=self.underlying + tuple(errors))

    def overwrite_line_index(self, line_index: int) -> 'Diagnostic':
        """Set the *zero*-based line index of every context."""
        return replace(self, contexts=tuple(c.with_line_index(line_index) for c in self.contexts))

    def to_owned(self) -> 'Diagnostic':
        """Copy all text so the diagnostic no longer refers to any source buffer."""
        return replace(self,
                       contexts=tuple(c.to_owned() for c in self.contexts),
                       underlying=tuple(e.to_owned() for e in self.underlying))

    # Queries

    def could_merge(self, other: 'Diagnostic') -> bool:
        """Test if the two diagnostics are equal in everything but their contexts."""
        return (self.kind == other.kind
                and self.short_description == other.short_description
                and self.long_description == other.long_description
                and self.suggestions == other.suggestions
                and self.version == other.version
                and self.underlying == other.underlying)

    def is_blocking(self, settings: Any = None) -> bool:
        return self.kind.is_blocking(settings)

    # Display

    def render(self, settings: Any = None, options: RenderOptions | None = None) -> str:
        """Render the diagnostic as text; every line ends with a line feed.

        Without settings the title is decorated as a blocking diagnostic.
        """
        options = options or DEFAULT_OPTIONS
        colour = options.colour
        blocking = settings is None or self.kind.is_blocking(settings)
        label = decorate(self.kind.label(), Role.EMPHASIS_1 if blocking else Role.EMPHASIS_2, colour)

        lines = [f"{label}: {self.short_description}"]
        lines.extend(contexts_lines(self.contexts, options=options))
        lines.append(self.long_description)
        match self.suggestions:
            case ():
                pass
            case (suggestion,):
                lines.append(f"{decorate('Did you mean', Role.EMPHASIS_2, colour)}: {suggestion}?")
            case _:
                lines.append(f"{decorate('Did you mean any of', Role.EMPHASIS_2, colour)}: "
                             f"{', '.join(self.suggestions)}?")
        if self.version:
            lines.append(f"{decorate('Version', Role.EMPHASIS_3, colour)}: {self.version}")
        text = '\n'.join(lines) + '\n'

        match self.underlying:
            case ():
                return text
            case (error,):
                return text + f"{decorate('Underlying error', Role.EMPHASIS_4, colour)}:\n" \
                    + error.render(settings, options)
            case _:
                return text + f"{decorate('Underlying errors', Role.EMPHASIS_4, colour)}:\n" \
                    + '\n'.join(e.render(settings, options) for e in self.underlying)

    def write(self, sink: IO[str], settings: Any = None, options: RenderOptions | None = None) -> None:
        """Write the rendering to `sink`; errors raised by the sink propagate."""
        sink.write(self.render(settings, options))

    def to_html(self, settings: Any = None, options: RenderOptions | None = None) -> str:
        from custom_error.html import diagnostic_to_html
        return diagnostic_to_html(self, settings, options)

    def __str__(self) -> str:
        return self.render()


class DiagnosticError(Exception):
    """Exception carrying a diagnostic, for code paths that report failures by raising."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.short_description)
        self.diagnostic = diagnostic

    def __str__(self) -> str:
        return self.diagnostic.render()
