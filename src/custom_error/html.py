from html import escape
from typing import Any

from custom_error.config import DEFAULT_OPTIONS, RenderOptions
from custom_error.context import Context
from custom_error.diagnostics import Diagnostic
from custom_error.highlight import Highlight
from custom_error.render import highlight_span, line_rows

__all__ = ['context_to_html', 'diagnostic_to_html']


def _highlighted_row(line: str, start: int, end: int, highlights: list[Highlight]) -> str:
    """Markup for `line[start:end]` with one span per run of identically highlighted characters."""
    clipped = [(min(h.offset, len(line)), min(h.end, len(line)), h) for h in highlights]
    parts = []
    active: list[Highlight] = []
    for index in range(start, end + 1):
        for first, last, h in clipped:
            if first == last == index and (index < end or end == len(line)):
                parts.append(f"<span class='highlight point' title='{escape(h.comment or '')}'></span>")
        now = [h for first, last, h in clipped if first <= index < last]
        if now != active:
            if active:
                parts.append('</span>')
            if now:
                title = '; '.join(h.comment for h in now if h.comment)
                parts.append(f"<span class='highlight' title='{escape(title)}'>")
            active = now
        if index < end:
            parts.append(escape(line[index]))
    if active:
        parts.append('</span>')
    return ''.join(parts)


def context_to_html(context: Context, options: RenderOptions | None = None) -> str:
    """Render a context as a `<div class='context'>` block; empty contexts render nothing."""
    if context.is_empty():
        return ''
    options = options or DEFAULT_OPTIONS
    parts = ["<div class='context'>"]
    if context.source is not None or not context.lines:
        parts.append(f"<span class='source'>{escape(context.locator())}</span>")

    by_line: dict[int, list[Highlight]] = {}
    for highlight in context.highlights:
        by_line.setdefault(highlight.line, []).append(highlight)
    for index, line in enumerate(context.logical_lines()):
        highlights = by_line.get(index, [])
        number = '' if context.line_number is None else str(context.line_number + index)
        for start, end in line_rows(len(line), highlight_span(highlights, len(line)), options.html_columns):
            trimmed = start > 0 or (index == 0 and context.first_line_offset > 0)
            parts.append(f"<span class='line-number'>{number}</span><span class='line'>")
            if trimmed:
                parts.append('…')
            parts.append(_highlighted_row(line, start, end, highlights))
            if end < len(line):
                parts.append('…')
            parts.append('</span>')
    parts.append('</div>')
    return ''.join(parts)


def diagnostic_to_html(diagnostic: Diagnostic, settings: Any = None, options: RenderOptions | None = None) -> str:
    """Render a diagnostic as nested HTML; underlying errors go into a collapsible list."""
    blocking = settings is None or diagnostic.kind.is_blocking(settings)
    kind_class = escape(diagnostic.kind.label())
    parts = [f"<div class='{kind_class}{'' if blocking else ' non-blocking'}'>",
             f"<p class='title'>{escape(diagnostic.short_description)}</p>",
             "<div class='contexts'>"]
    parts.extend(context_to_html(c, options) for c in diagnostic.contexts)
    parts.append('</div>')
    parts.append(f"<p class='description'>{escape(diagnostic.long_description)}</p>")
    if diagnostic.suggestions:
        parts.append(f"<p>Did you mean{'' if len(diagnostic.suggestions) == 1 else ' any of'}?</p><ul>")
        parts.extend(f"<li class='suggestion'>{escape(s)}</li>" for s in diagnostic.suggestions)
        parts.append('</ul>')
    if diagnostic.version:
        parts.append(f"<p class='version'>Version: <span class='version-text'>{escape(diagnostic.version)}</span></p>")
    if diagnostic.underlying:
        plural = '' if len(diagnostic.underlying) == 1 else 's'
        parts.append(f"<label><input type='checkbox'></input> Underlying error{plural}</label><ul>")
        for error in diagnostic.underlying:
            parts.append(f"<li class='underlying_error'>{diagnostic_to_html(error, settings, options)}</li>")
        parts.append('</ul>')
    parts.append('</div>')
    return ''.join(parts)
