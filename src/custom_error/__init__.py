from custom_error.colour import Role, decorate
from custom_error.combine import CombineErrors, Issuer, combine_error, combine_errors
from custom_error.config import RenderOptions
from custom_error.context import Context, FilePosition
from custom_error.diagnostics import Diagnostic, DiagnosticError
from custom_error.highlight import UNBOUNDED, Highlight
from custom_error.kinds import BasicKind, DescribedKind, Kind
from custom_error.render import Merge, MergeRole, render_context, render_contexts
from custom_error.text import Borrowed, Owned, Text

__all__ = ['Role', 'decorate', 'CombineErrors', 'Issuer', 'combine_error', 'combine_errors',
           'RenderOptions', 'Context', 'FilePosition', 'Diagnostic', 'DiagnosticError',
           'UNBOUNDED', 'Highlight', 'BasicKind', 'DescribedKind', 'Kind', 'Merge', 'MergeRole',
           'render_context', 'render_contexts', 'Borrowed', 'Owned', 'Text']
