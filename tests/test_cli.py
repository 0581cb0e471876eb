import io
import os
import re
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from custom_error.__main__ import main, process_file
from custom_error.combine import Issuer
from custom_error.diagnostics import Diagnostic
from custom_error.kinds import BasicKind


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.environ = mock.patch.dict(os.environ)
        self.environ.start()
        for key in ("NO_COLOR", "FORCE_COLOR", "CUSTOM_ERROR_ASCII", "CUSTOM_ERROR_COLUMNS"):
            os.environ.pop(key, None)
        self.folder = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.folder.name, 'input.py')
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write("x = 1\ny = 1\n")

    def tearDown(self) -> None:
        self.folder.cleanup()
        self.environ.stop()

    def run_main(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_matches_are_merged(self) -> None:
        code, _, err = self.run_main(self.path, '-e', '1', '-m', 'Magic number', '--width', '80')
        self.assertEqual(code, 1)
        self.assertEqual(err.count("error: Magic number"), 1)
        self.assertIn(f"╭─[{self.path}:1:5]", err)
        self.assertIn("1 │ x = 1\n", err)
        self.assertIn("2 │ y = 1\n", err)

    def test_warning_does_not_fail(self) -> None:
        code, _, err = self.run_main(self.path, '-e', 'y', '-w', '-c', 'rename', '-s', 'z')
        self.assertEqual(code, 0)
        self.assertIn("warning: Pattern matched", err)
        self.assertIn("⁃ rename", err)
        self.assertIn("Did you mean: z?", err)

    def test_no_match(self) -> None:
        code, _, err = self.run_main(self.path, '-e', 'nothing')
        self.assertEqual(code, 0)
        self.assertEqual(err, '')

    def test_folder(self) -> None:
        with open(os.path.join(self.folder.name, 'other.py'), 'w', encoding='utf-8') as f:
            f.write("z = 1\n")
        code, _, err = self.run_main(self.folder.name, '-e', '1')
        self.assertEqual(code, 1)
        self.assertIn("z = 1", err)
        self.assertIn("x = 1", err)

    def test_ascii(self) -> None:
        _, _, err = self.run_main(self.path, '-e', 'x', '--ascii')
        self.assertIn("1 | x = 1\n", err)
        self.assertNotIn("│", err)

    def test_html(self) -> None:
        code, out, err = self.run_main(self.path, '-e', '1', '--html')
        self.assertEqual(code, 1)
        self.assertTrue(out.startswith("<div class='error'>"))
        self.assertEqual(err, '')

    def test_missing_input(self) -> None:
        code, _, err = self.run_main(os.path.join(self.folder.name, 'absent.py'), '-e', 'x')
        self.assertEqual(code, 2)
        self.assertIn("file not found", err)

    def test_invalid_pattern(self) -> None:
        code, _, err = self.run_main(self.path, '-e', '(')
        self.assertEqual(code, 2)
        self.assertIn("invalid pattern", err)

    def test_width_too_small(self) -> None:
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            main([self.path, '-e', 'x', '--width', '5'])

    def test_unreadable_file_is_skipped(self) -> None:
        issuer = Issuer()
        template = Diagnostic.small(BasicKind.ERROR, "Pattern matched", "")
        with mock.patch("custom_error.__main__.open", side_effect=PermissionError(13, "Permission denied"),
                        create=True), self.assertLogs("custom_error", "WARNING") as logs:
            count = process_file(self.path, re.compile("x"), issuer, template, None)
        self.assertEqual(count, 0)
        self.assertEqual(issuer.get_diagnostics(), [])
        self.assertIn("Permission denied", logs.output[0])


if __name__ == '__main__':
    unittest.main()
