import unittest

from parsy import ParseError, regex, seq, string

from custom_error.diagnostics import DiagnosticError
from custom_error.parsing import Located, located, parse, syntax_error

let_binding = string('let') >> regex(r'\s+') >> regex('[a-z]+')


class TestSyntaxError(unittest.TestCase):
    def test_points_at_failure(self) -> None:
        with self.assertRaises(ParseError) as caught:
            let_binding.parse("let 1")
        diagnostic = syntax_error(caught.exception, source_name="input.txt")
        self.assertEqual(diagnostic.short_description, "Invalid syntax")
        self.assertEqual(diagnostic.long_description, "expected [a-z]+")
        self.assertEqual(diagnostic.contexts[0].render(),
                         "  ╭─[input.txt:1:5]\n"
                         "1 │ let 1\n"
                         "  ╎     ⁃ expected [a-z]+\n"
                         "  ╵")

    def test_point_at_end_of_input(self) -> None:
        with self.assertRaises(DiagnosticError) as caught:
            parse(seq(string('a'), string('b')), "a")
        context = caught.exception.diagnostic.contexts[0]
        self.assertEqual(context.render(), "  ╷\n1 │ a\n  ╎  ⏵ expected b\n  ╵")

    def test_later_line(self) -> None:
        lines = string('x\n').many() >> string('y')
        with self.assertRaises(DiagnosticError) as caught:
            parse(lines, "x\nx\nz\n")
        context = caught.exception.diagnostic.contexts[0]
        self.assertEqual(context.line_number, 3)
        self.assertEqual(str(context.lines), "z")


class TestLocated(unittest.TestCase):
    def test_value_and_positions(self) -> None:
        result = parse(string('ab') >> located(string('cd')), "abcd")
        self.assertIsInstance(result, Located)
        self.assertEqual(result.value, 'cd')
        self.assertEqual((result.start.offset, result.end.offset), (2, 4))

    def test_context(self) -> None:
        result = parse(located(string('abc')), "abc")
        self.assertEqual(result.context().render(), "  ╷\n1 │ abc\n  ╎ ╶─╴\n  ╵")
        self.assertEqual(result.context("f.txt").source, "f.txt")

    def test_failure_passes_through(self) -> None:
        with self.assertRaises(DiagnosticError):
            parse(located(string('abc')), "abd")


if __name__ == '__main__':
    unittest.main()
