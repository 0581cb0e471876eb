from dataclasses import dataclass

__all__ = ['Symbols', 'UNICODE', 'ASCII', 'display_char', 'display_text']


@dataclass(frozen=True)
class Symbols:
    """Glyphs used to draw a context."""
    top_source: str  # followed by the locator and ']'
    top: str
    row: str
    strip: str
    bottom_note: str  # followed by the note and ']'
    bottom: str
    ellipsis: str
    point: str
    short: str
    open: str
    fill: str
    close: str
    placeholder: str | None  # replaces every non-ASCII character when set


UNICODE = Symbols(top_source='╭─[', top='╷', row='│', strip='╎', bottom_note='╰─[', bottom='╵',
                  ellipsis='…', point='⏵', short='⁃', open='╶', fill='─', close='╴',
                  placeholder=None)

ASCII = Symbols(top_source='+-[', top=',', row='|', strip=':', bottom_note='+-[', bottom="'",
                ellipsis='...', point='^', short='^', open='^', fill='~', close='~',
                placeholder='?')


def display_char(c: str, symbols: Symbols = UNICODE) -> str:
    """Map a character to exactly one printable character."""
    code = ord(c)
    if symbols.placeholder is not None:
        if c == '\t':
            return ' '
        if code < 0x20 or code >= 0x7F:
            return symbols.placeholder
        return c
    if code < 0x20:
        return chr(code + 0x2400)  # control pictures block
    if code == 0x7F:
        return '␡'
    return c


def display_text(text: str, symbols: Symbols = UNICODE) -> str:
    return ''.join(display_char(c, symbols) for c in text)
