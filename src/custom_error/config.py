import os
from dataclasses import dataclass, replace
from typing import Mapping

from custom_error.symbols import ASCII, UNICODE, Symbols

__all__ = ['RenderOptions', 'DEFAULT_OPTIONS']

_TRUE_VALUES = frozenset(['1', 'true', 'yes', 'on'])


@dataclass(frozen=True)
class RenderOptions:
    """Rendering configuration shared by the text and HTML renderers."""
    max_columns: int = 100
    ascii: bool = False
    colour: bool = False
    html_columns: int = 195

    def __post_init__(self) -> None:
        if self.max_columns < 20:
            raise ValueError(f"max_columns must be at least 20, got {self.max_columns}")
        if self.html_columns < 20:
            raise ValueError(f"html_columns must be at least 20, got {self.html_columns}")

    @property
    def symbols(self) -> Symbols:
        return ASCII if self.ascii else UNICODE

    def with_ascii(self, ascii: bool = True) -> 'RenderOptions':
        return replace(self, ascii=ascii)

    def with_colour(self, colour: bool = True) -> 'RenderOptions':
        return replace(self, colour=colour)

    def with_max_columns(self, max_columns: int) -> 'RenderOptions':
        return replace(self, max_columns=max_columns)

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> 'RenderOptions':
        """Read options from the environment.

        `NO_COLOR` (any value) disables colour, `FORCE_COLOR` enables it,
        `CUSTOM_ERROR_ASCII` selects the ASCII glyphs and
        `CUSTOM_ERROR_COLUMNS` sets the column budget.
        """
        env = os.environ if environ is None else environ
        colour = 'FORCE_COLOR' in env and 'NO_COLOR' not in env
        ascii = env.get('CUSTOM_ERROR_ASCII', '').strip().lower() in _TRUE_VALUES
        columns = env.get('CUSTOM_ERROR_COLUMNS', '').strip()
        if columns:
            try:
                max_columns = int(columns)
            except ValueError:
                raise ValueError(f"CUSTOM_ERROR_COLUMNS is not a number: {columns!r}") from None
        else:
            max_columns = RenderOptions.max_columns
        return RenderOptions(max_columns=max_columns, ascii=ascii, colour=colour)


DEFAULT_OPTIONS = RenderOptions()
