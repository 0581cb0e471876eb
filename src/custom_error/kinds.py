from enum import Enum
from typing import Any, Protocol, runtime_checkable

__all__ = ['Kind', 'DescribedKind', 'BasicKind']


@runtime_checkable
class Kind(Protocol):
    """Severity/category of a diagnostic.

    `settings` is an opaque value defined by the kind type (``None`` if the
    kind does not use any) and is passed through unchanged by the renderer
    and the merger.
    """

    def label(self) -> str:
        """Term describing the kind, for example 'error' or 'warning'."""
        ...

    def is_blocking(self, settings: Any) -> bool:
        """Test if the diagnostic should block the operation from succeeding."""
        ...

    def ignored_for_merge(self, settings: Any) -> bool:
        """Test if other diagnostics must not be folded into this one."""
        ...


@runtime_checkable
class DescribedKind(Kind, Protocol):
    """Kind that carries its own descriptions, for use with `Diagnostic.from_kind`."""

    def short_description(self) -> str:
        ...

    def long_description(self) -> str:
        ...

    def suggestions(self) -> list[str]:
        """Suggestions shown with every diagnostic of this kind, possibly none."""
        ...

    def version(self) -> str:
        """Version of the format or tool the kind refers to, or '' if unknown."""
        ...


class BasicKind(Enum):
    """Diagnostic kind without settings."""
    ERROR = 1
    WARNING = 2

    def label(self) -> str:
        return self.name.lower()

    def is_blocking(self, settings: None = None) -> bool:
        return self is BasicKind.ERROR

    def ignored_for_merge(self, settings: None = None) -> bool:
        return False

    def __str__(self) -> str:
        return self.label()
