import json
from enum import Enum
from typing import Any, Mapping

from custom_error.context import Context
from custom_error.diagnostics import Diagnostic
from custom_error.highlight import Highlight
from custom_error.kinds import BasicKind
from custom_error.text import Owned

__all__ = ['context_to_dict', 'context_from_dict', 'diagnostic_to_dict', 'diagnostic_from_dict',
           'dumps', 'loads']


def _highlight_to_dict(highlight: Highlight) -> dict[str, Any]:
    return {'line': highlight.line, 'offset': highlight.offset, 'length': highlight.length,
            'comment': highlight.comment}


def context_to_dict(context: Context) -> dict[str, Any]:
    return {
        'source': context.source,
        'line_number': context.line_number,
        'first_line_offset': context.first_line_offset,
        'lines': str(context.lines),
        'highlights': [_highlight_to_dict(h) for h in context.highlights],
    }


def context_from_dict(data: Mapping[str, Any]) -> Context:
    """Load a context; the text is always owned afterwards."""
    return Context(source=data.get('source'),
                   line_number=data.get('line_number'),
                   first_line_offset=data.get('first_line_offset', 0),
                   lines=Owned(data.get('lines', '')),
                   highlights=tuple(Highlight(h['line'], h['offset'], h['length'], h.get('comment'))
                                    for h in data.get('highlights', [])))


def diagnostic_to_dict(diagnostic: Diagnostic) -> dict[str, Any]:
    if not isinstance(diagnostic.kind, Enum):
        raise TypeError(f"only enum kinds can be serialised, got {type(diagnostic.kind).__name__}")
    return {
        'kind': diagnostic.kind.name,
        'short_description': diagnostic.short_description,
        'long_description': diagnostic.long_description,
        'suggestions': list(diagnostic.suggestions),
        'version': diagnostic.version,
        'contexts': [context_to_dict(c) for c in diagnostic.contexts],
        'underlying': [diagnostic_to_dict(e) for e in diagnostic.underlying],
    }


def diagnostic_from_dict(data: Mapping[str, Any], kind_type: type[Enum] = BasicKind) -> Diagnostic:
    """Load a diagnostic whose kind is a member of `kind_type`."""
    try:
        kind = kind_type[data['kind']]
    except KeyError:
        raise ValueError(f"unknown {kind_type.__name__} member: {data.get('kind')!r}") from None
    return Diagnostic(kind=kind,
                      short_description=data.get('short_description', ''),
                      long_description=data.get('long_description', ''),
                      suggestions=tuple(data.get('suggestions', ())),
                      version=data.get('version', ''),
                      contexts=tuple(context_from_dict(c) for c in data.get('contexts', [])),
                      underlying=tuple(diagnostic_from_dict(e, kind_type) for e in data.get('underlying', [])))


def dumps(diagnostic: Diagnostic, **kwargs: Any) -> str:
    return json.dumps(diagnostic_to_dict(diagnostic), ensure_ascii=False, **kwargs)


def loads(text: str, kind_type: type[Enum] = BasicKind) -> Diagnostic:
    return diagnostic_from_dict(json.loads(text), kind_type)
