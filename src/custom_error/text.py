from abc import ABC, abstractmethod

__all__ = ['Text', 'Borrowed', 'Owned', 'as_text']


class Text(ABC):
    """Text handle: either a view into a caller-owned buffer or an owned copy.

    Both variants compare and hash by their content, so a borrowed view and an
    owned copy of the same characters are interchangeable.
    """

    __slots__ = ()

    @abstractmethod
    def __str__(self) -> str:
        raise NotImplementedError()

    @abstractmethod
    def to_owned(self) -> 'Owned':
        """Copy the text so it no longer depends on any buffer."""
        raise NotImplementedError()

    def __len__(self) -> int:
        return len(str(self))

    def __bool__(self) -> bool:
        return len(self) > 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Text):
            return str(self) == str(other)
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class Borrowed(Text):
    """View into `buffer[start:end]`, sliced only when the text is needed."""

    __slots__ = ('buffer', 'start', 'end')

    def __init__(self, buffer: str, start: int = 0, end: int | None = None) -> None:
        self.buffer = buffer
        self.start = max(0, min(start, len(buffer)))
        self.end = len(buffer) if end is None else max(self.start, min(end, len(buffer)))

    def __str__(self) -> str:
        return self.buffer[self.start:self.end]

    def __len__(self) -> int:
        return self.end - self.start

    def to_owned(self) -> 'Owned':
        return Owned(str(self))


class Owned(Text):
    __slots__ = ('value',)

    def __init__(self, value: str = '') -> None:
        self.value = value

    def __str__(self) -> str:
        return self.value

    def to_owned(self) -> 'Owned':
        return self


def as_text(value: 'str | Text') -> Text:
    """Wrap a plain string as owned text; text handles pass through unchanged."""
    if isinstance(value, Text):
        return value
    return Owned(value)
