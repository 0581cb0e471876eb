import logging
import os
import re
import sys
from argparse import ArgumentParser
from typing import Sequence

from custom_error.combine import Issuer
from custom_error.config import RenderOptions
from custom_error.context import Context, FilePosition
from custom_error.diagnostics import Diagnostic
from custom_error.kinds import BasicKind
from custom_error.text import Borrowed

logger = logging.getLogger('custom_error')


def match_context(source: str, start: int, end: int, file_path: str, comment: str | None) -> Context:
    """Context for the match `source[start:end]`, showing the whole line for single-line matches."""
    first = FilePosition.at(source, start)
    last = FilePosition.at(source, end)
    if first.line_index != last.line_index:
        return Context.range(first, last).with_source(file_path)
    line_start = start - first.column
    line_end = source.find('\n', line_start)
    if line_end == -1:
        line_end = len(source)
    line = Borrowed(source, line_start, line_end)
    return Context.line(first.line_index, line, first.column, end - start, comment).with_source(file_path)


def process_file(file_path: str, pattern: re.Pattern[str], issuer: Issuer, template: Diagnostic,
                 comment: str | None) -> int:
    """Report every match of `pattern` in the file; returns the number of matches."""
    try:
        with open(file_path, encoding='utf-8') as f:
            source = f.read()
    except UnicodeDecodeError:
        logger.warning("skipping %s: not valid UTF-8", file_path)
        return 0
    except OSError as err:
        logger.warning("skipping %s: %s", file_path, err.strerror or err)
        return 0
    count = 0
    for match in pattern.finditer(source):
        context = match_context(source, match.start(), match.end(), file_path, comment)
        issuer.issue(template.replace_context(context.to_owned()))
        count += 1
    logger.info("%s: %d match(es)", file_path, count)
    return count


def check_path(path: str, pattern: re.Pattern[str], issuer: Issuer, template: Diagnostic,
               comment: str | None) -> None:
    if os.path.isfile(path):
        process_file(path, pattern, issuer, template, comment)
    else:
        for entry in sorted(os.listdir(path)):
            entry_path = os.path.join(path, entry)
            if os.path.isfile(entry_path):
                process_file(entry_path, pattern, issuer, template, comment)


def main(argv: Sequence[str] | None = None) -> int:
    parser = ArgumentParser(prog='custom-error',
                            description='Report every match of a pattern as a diagnostic.')
    parser.add_argument('INPUT', help='input file or folder')
    parser.add_argument('-e', '--pattern', required=True, help='regular expression to report')
    parser.add_argument('-m', '--message', default='Pattern matched', help='title of the diagnostic')
    parser.add_argument('-d', '--description', default='', help='long description of the diagnostic')
    parser.add_argument('-c', '--comment', help='comment next to every highlight')
    parser.add_argument('-s', '--suggest', action='append', default=[], help='suggestion (repeatable)')
    parser.add_argument('-w', '--warning', action='store_true', help='report warnings instead of errors')
    parser.add_argument('--ascii', action='store_true', help='only use ASCII characters')
    parser.add_argument('--colour', '--color', action='store_true', help='colour the output')
    parser.add_argument('--width', type=int, help='maximum number of columns')
    parser.add_argument('--html', action='store_true', help='print HTML instead of text')
    parser.add_argument('-v', '--verbose', action='store_true', help='log progress to stderr')

    args = parser.parse_args(argv)
    if args.width is not None and args.width < 20:
        parser.error(f"--width must be at least 20, got {args.width}")
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if not os.path.exists(args.INPUT):
        print(f"Error: file not found: {args.INPUT}", file=sys.stderr)
        return 2
    try:
        pattern = re.compile(args.pattern, re.MULTILINE)
    except re.error as err:
        print(f"Error: invalid pattern: {err}", file=sys.stderr)
        return 2

    options = RenderOptions.from_env()
    if args.ascii:
        options = options.with_ascii()
    if args.colour:
        options = options.with_colour()
    if args.width is not None:
        options = options.with_max_columns(args.width)

    kind = BasicKind.WARNING if args.warning else BasicKind.ERROR
    template = Diagnostic.small(kind, args.message, args.description).add_suggestions(args.suggest)
    issuer = Issuer()
    check_path(args.INPUT, pattern, issuer, template, args.comment)

    if args.html:
        print(''.join(d.to_html(options=options) for d in issuer.get_diagnostics()))
    elif issuer.has_diagnostics:
        print(issuer.pretty(options), file=sys.stderr, end='')
    return 1 if issuer.has_errors else 0


if __name__ == '__main__':
    sys.exit(main())
