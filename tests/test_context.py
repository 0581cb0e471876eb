import unittest

from custom_error.context import Context, FilePosition, split_lines
from custom_error.highlight import UNBOUNDED, Highlight
from custom_error.text import Borrowed, Owned

MULTILINE = "hello world\nthis is a multiline\npiece of teXt"


class TestHighlight(unittest.TestCase):
    def test_from_range(self) -> None:
        for a, b in [(0, 0), (3, 7), (10, 11), (0, 95)]:
            h = Highlight.from_range(0, a, b)
            self.assertEqual(h.offset, a)
            self.assertEqual(h.length, b - a)

    def test_from_range_inclusive(self) -> None:
        h = Highlight.from_range(2, 3, 7, inclusive=True)
        self.assertEqual(h, Highlight(2, 3, 5))

    def test_from_range_unbounded(self) -> None:
        self.assertEqual(Highlight.from_range(0, 4, None).length, UNBOUNDED)
        self.assertEqual(Highlight.from_range(0, None, 4), Highlight(0, 0, 4))

    def test_from_range_saturates(self) -> None:
        self.assertEqual(Highlight.from_range(0, 7, 3).length, 0)

    def test_of(self) -> None:
        self.assertEqual(Highlight.of((1, 2, 3)), Highlight(1, 2, 3))
        self.assertEqual(Highlight.of((1, 2, 3, 'note')), Highlight(1, 2, 3, 'note'))
        self.assertEqual(Highlight.of((0, slice(1, 4))), Highlight(0, 1, 3))
        self.assertEqual(Highlight.of((0, range(1, 4), 'note')), Highlight(0, 1, 3, 'note'))
        self.assertEqual(Highlight.of((0, slice(6, None), 'Rest')), Highlight(0, 6, UNBOUNDED, 'Rest'))
        h = Highlight(0, 0, 0)
        self.assertIs(Highlight.of(h), h)

    def test_of_invalid(self) -> None:
        with self.assertRaises(TypeError):
            Highlight.of(('line', 1))
        with self.assertRaises(ValueError):
            Highlight.of((0, range(0, 10, 2)))


class TestText(unittest.TestCase):
    def test_borrowed_equals_owned(self) -> None:
        borrowed = Borrowed("hello world", 6)
        self.assertEqual(str(borrowed), "world")
        self.assertEqual(len(borrowed), 5)
        self.assertEqual(borrowed, Owned("world"))
        self.assertEqual(hash(borrowed), hash(Owned("world")))
        self.assertIsInstance(borrowed.to_owned(), Owned)

    def test_borrowed_clamps(self) -> None:
        self.assertEqual(str(Borrowed("abc", 2, 10)), "c")
        self.assertFalse(Borrowed("abc", 5))

    def test_split_lines(self) -> None:
        self.assertEqual(split_lines(""), [])
        self.assertEqual(split_lines("a\n"), ["a"])
        self.assertEqual(split_lines("a\n\nb"), ["a", "", "b"])
        self.assertEqual(split_lines("\n"), [""])


class TestContext(unittest.TestCase):
    def test_none_is_empty(self) -> None:
        self.assertTrue(Context.none().is_empty())
        self.assertTrue(Context.show("").is_empty())
        self.assertFalse(Context.none().with_source("file.txt").is_empty())
        self.assertFalse(Context.full_line(0, "").is_empty())

    def test_line_index_is_stored_one_based(self) -> None:
        context = Context.full_line(4, "text")
        self.assertEqual(context.line_number, 5)
        self.assertEqual(context.line_index, 4)
        self.assertIsNone(Context.show("text").line_index)

    def test_line_range(self) -> None:
        context = Context.line_range(0, "hello", 2, None)
        self.assertEqual(context.highlights, (Highlight(0, 2, 3),))
        context = Context.line_range(None, "hello", 1, 3, inclusive=True)
        self.assertEqual(context.highlights, (Highlight(0, 1, 3),))

    def test_line_range_unbounded(self) -> None:
        self.assertEqual(Context.line_range(3, "hello", None, None), Context.full_line(3, "hello"))
        self.assertEqual(Context.line_range(None, "hello", None, None), Context.show("hello"))

    def test_multiple_highlights_sorted(self) -> None:
        context = Context.multiple_highlights(0, "ab\ncd", [(1, slice(0, 1), None), (0, None, 'all')])
        self.assertEqual(context.highlights, (Highlight(0, 0, 2, 'all'), Highlight(1, 0, 1)))

    def test_multiple_highlights_line_out_of_range(self) -> None:
        with self.assertRaises(IndexError):
            Context.multiple_highlights(0, "ab", [(1, None, None)])

    def test_add_highlight_keeps_order(self) -> None:
        context = Context.show("Hello world").add_highlight((0, 6, 5)).add_highlight((0, 1, 2))
        self.assertEqual([h.offset for h in context.highlights], [1, 6])

    def test_builders_return_new_values(self) -> None:
        base = Context.show("text")
        derived = base.with_source("file.txt").with_line_index(2)
        self.assertIsNone(base.source)
        self.assertEqual(derived.source, "file.txt")
        self.assertEqual(derived.line_number, 3)

    def test_margin(self) -> None:
        self.assertEqual(Context.show("a").margin(), 0)
        self.assertEqual(Context.full_line(8, "a").margin(), 1)
        self.assertEqual(Context.full_line(9, "a").margin(), 2)
        self.assertEqual(Context.full_line(8, "a\nb").margin(), 2)

    def test_locator(self) -> None:
        context = Context.line(2, "text", 1, 2).with_source("file.txt")
        self.assertEqual(context.locator(), "file.txt:3:2")
        self.assertEqual(context.add_highlight((0, 3, 1)).locator(), "file.txt:3")
        self.assertEqual(Context.line(None, "text", 1, 2).with_source("f").locator(), "f")

    def test_borrowed_and_owned_contexts_are_equal(self) -> None:
        buffer = "first\nsecond"
        borrowed = Context.full_line(1, Borrowed(buffer, 6))
        owned = Context.full_line(1, "second")
        self.assertEqual(borrowed, owned)
        self.assertEqual(borrowed.render(), owned.render())
        self.assertIsInstance(borrowed.to_owned().lines, Owned)


class TestFilePosition(unittest.TestCase):
    def test_at(self) -> None:
        pos = FilePosition.at("ab\ncdef", 4)
        self.assertEqual((pos.line_index, pos.column), (1, 1))
        self.assertEqual(pos.remaining, "def")

    def test_position(self) -> None:
        context = Context.position(FilePosition.at("ab\ncdef\ng", 4))
        self.assertEqual(str(context.lines), "def")
        self.assertIsInstance(context.lines, Borrowed)
        self.assertEqual(context.line_number, 2)
        self.assertEqual(context.first_line_offset, 1)
        self.assertEqual(context.highlights, (Highlight(0, 0, 3),))

    def test_range_same_line(self) -> None:
        buffer = "hello world"
        context = Context.range(FilePosition.at(buffer, 6), FilePosition.at(buffer, 11))
        self.assertEqual(str(context.lines), "world")
        self.assertEqual(context.first_line_offset, 6)
        self.assertEqual(context.highlights, (Highlight(0, 0, 5),))

    def test_range_multiple_lines(self) -> None:
        start = FilePosition(MULTILINE)
        context = Context.range(start, FilePosition.at(MULTILINE, len(MULTILINE)))
        self.assertEqual(str(context.lines), MULTILINE)
        self.assertEqual(context.highlights, ())

    def test_range_cuts_end_line(self) -> None:
        end = FilePosition.at(MULTILINE, MULTILINE.index("piece") + 5)
        context = Context.range(FilePosition.at(MULTILINE, 6), end)
        self.assertEqual(context.logical_lines(), ["world", "this is a multiline", "piece"])
        self.assertEqual(context.first_line_offset, 6)


if __name__ == '__main__':
    unittest.main()
