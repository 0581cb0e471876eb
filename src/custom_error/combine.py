import logging
from typing import Any, Generic, Iterable, Iterator, Sequence, TypeVar

from custom_error.config import RenderOptions
from custom_error.diagnostics import Diagnostic, DiagnosticError

__all__ = ['combine_error', 'CombineErrors', 'combine_errors', 'Issuer']

logger = logging.getLogger(__name__)

T = TypeVar('T')


def combine_error(errors: list[Diagnostic], error: Diagnostic, settings: Any = None) -> None:
    """Fold `error` into the first diagnostic of `errors` that it can be merged with, or append it.

    This turns the same error on many lines of a file into one diagnostic
    carrying all of the contexts. Diagnostics whose kind is ignored for merging
    never receive other contexts.
    """
    for index, existing in enumerate(errors):
        if existing.kind.ignored_for_merge(settings):
            continue
        if existing.could_merge(error):
            errors[index] = existing.add_contexts(error.contexts)
            logger.debug("merged %r into diagnostic #%d (%d contexts)",
                         error.short_description, index, len(errors[index].contexts))
            return
    errors.append(error)


class CombineErrors(Generic[T]):
    """Iterator adapter that yields the values of a stream and merges its diagnostics on the side.

    Items that are a `Diagnostic` (or a `DiagnosticError`) are combined into
    `errors`; every other item is passed through lazily.
    """

    def __init__(self, items: Iterable[T | Diagnostic | DiagnosticError], settings: Any = None) -> None:
        self._items = iter(items)
        self._settings = settings
        self._errors: list[Diagnostic] = []

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        for item in self._items:
            match item:
                case Diagnostic():
                    combine_error(self._errors, item, self._settings)
                case DiagnosticError(diagnostic=diagnostic):
                    combine_error(self._errors, diagnostic, self._settings)
                case _:
                    return item
        raise StopIteration

    @property
    def errors(self) -> Sequence[Diagnostic]:
        """The combined diagnostics seen so far; complete once the stream is exhausted."""
        return self._errors


def combine_errors(items: Iterable[T | Diagnostic | DiagnosticError], settings: Any = None) -> CombineErrors[T]:
    return CombineErrors(items, settings)


class Issuer:
    """Diagnostic collector that merges repeated diagnostics."""

    def __init__(self, settings: Any = None) -> None:
        self.settings = settings
        self._diagnostics: list[Diagnostic] = []

    def issue(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        combine_error(self._diagnostics, diagnostic, self.settings)

    @property
    def has_diagnostics(self) -> bool:
        """Test if there are any diagnostics."""
        return len(self._diagnostics) > 0

    @property
    def has_errors(self) -> bool:
        """Test if there are any blocking diagnostics."""
        return any(d.kind.is_blocking(self.settings) for d in self._diagnostics)

    def get_diagnostics(self) -> Sequence[Diagnostic]:
        """Get all diagnostics."""
        return self._diagnostics

    def pretty(self, options: RenderOptions | None = None) -> str:
        """Pretty-print all diagnostics, separated by blank lines."""
        return '\n'.join(d.render(self.settings, options) for d in self._diagnostics)
