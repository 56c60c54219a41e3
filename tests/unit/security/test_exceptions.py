"""
Test cases for the jsonshape exception hierarchy.
"""

import unittest

from jsonshape.security.exceptions import AnalysisError, SourceReadError, TokenizerStateError


class TestExceptions(unittest.TestCase):
    """Test exception classes."""

    def test_hierarchy(self):
        self.assertTrue(issubclass(SourceReadError, AnalysisError))
        self.assertTrue(issubclass(TokenizerStateError, AnalysisError))
        self.assertTrue(issubclass(AnalysisError, Exception))

    def test_source_read_error_message(self):
        error = SourceReadError("Cannot read source", "data.json")
        self.assertEqual(str(error), "Cannot read source (data.json)")
        self.assertEqual(error.source, "data.json")

    def test_source_read_error_without_source(self):
        error = SourceReadError("Unsupported source type: int")
        self.assertEqual(str(error), "Unsupported source type: int")
        self.assertIsNone(error.source)


if __name__ == '__main__':
    unittest.main()
