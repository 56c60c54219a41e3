"""
Test cases for incremental string decoding in the tokenizer.
"""

import unittest

from jsonshape.core.tokenizer import StringCapture


class TestStringCapture(unittest.TestCase):
    """Test StringCapture escape handling and limits."""

    def test_plain_text(self):
        capture = StringCapture(limit=100)
        capture.append_text("hello ")
        capture.append_text("world")
        self.assertEqual(capture.text(), "hello world")
        self.assertFalse(capture.truncated)

    def test_simple_escapes(self):
        """Test the single character JSON escapes."""
        capture = StringCapture(limit=100)
        for char in 'ntr"\\/':
            capture.append_escape(char)
        self.assertEqual(capture.text(), '\n\t\r"\\/')

    def test_unicode_escape_split_across_calls(self):
        """Test \\u digits delivered one call at a time."""
        capture = StringCapture(limit=100)
        capture.append_text("x")
        capture.append_escape("u")
        for digit in "00e9":
            capture.append_text(digit)
        capture.append_text("y")
        self.assertEqual(capture.text(), "xéy")

    def test_surrogate_pair(self):
        """Test that a surrogate pair becomes one code point."""
        capture = StringCapture(limit=100)
        capture.append_escape("u")
        capture.append_text("d83d")
        capture.append_escape("u")
        capture.append_text("de00")
        self.assertEqual(capture.text(), "😀")

    def test_unpaired_surrogates(self):
        """Test that lone surrogates become replacement characters."""
        capture = StringCapture(limit=100)
        capture.append_escape("u")
        capture.append_text("d83dA")
        capture.append_escape("u")
        capture.append_text("de00")
        self.assertEqual(capture.text(), "\ufffdA\ufffd")

    def test_interrupted_unicode_escape(self):
        """Test that a \\u escape with too few digits is kept literally."""
        capture = StringCapture(limit=100)
        capture.append_escape("u")
        capture.append_text("12zz")
        self.assertEqual(capture.text(), "u12zz")

    def test_limit(self):
        """Test that captured text is bounded."""
        capture = StringCapture(limit=5)
        capture.append_text("abc")
        capture.append_text("defgh")
        capture.append_escape("n")
        self.assertEqual(capture.text(), "abcde")
        self.assertTrue(capture.truncated)


if __name__ == '__main__':
    unittest.main()
