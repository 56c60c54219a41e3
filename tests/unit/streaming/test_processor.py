"""
Test cases for chunked document reading.
"""

import io
import os
import tempfile
import unittest
from pathlib import Path

from jsonshape.core.report import Tier
from jsonshape.security.exceptions import SourceReadError
from jsonshape.streaming.processor import DocumentSource, StreamingProcessor, stream_report
from jsonshape.utils.config import AnalysisConfig


class TestDocumentSource(unittest.TestCase):
    """Test DocumentSource over the supported source kinds."""

    def setUp(self):
        handle, self.path = tempfile.mkstemp(suffix=".json")
        with os.fdopen(handle, "w", encoding="utf-8") as f:
            f.write('{"name": "café", "values": [1, 2, 3]}')

    def tearDown(self):
        os.unlink(self.path)

    def test_text_chunks(self):
        source = DocumentSource("abcdefg")
        self.assertEqual(list(source.iter_chunks(3)), ["abc", "def", "g"])
        self.assertEqual(source.size_hint(), 7)
        self.assertEqual(source.name, "<text>")

    def test_path_source(self):
        source = DocumentSource(Path(self.path))
        self.assertEqual(source.kind, "path")
        self.assertEqual(source.size_hint(), os.path.getsize(self.path))
        self.assertEqual("".join(source.iter_chunks(5)), source.read_all())
        self.assertIn("café", source.read_all())

    def test_stream_source(self):
        source = DocumentSource(io.StringIO("[1, 2]"))
        self.assertEqual(source.size_hint(), 6)
        # buffered text is reused after the size probe
        self.assertEqual("".join(source.iter_chunks(4)), "[1, 2]")
        self.assertEqual(source.read_all(), "[1, 2]")

    def test_missing_file(self):
        source = DocumentSource(Path(self.path + ".missing"))
        with self.assertRaises(SourceReadError):
            source.size_hint()
        with self.assertRaises(SourceReadError):
            list(source.iter_chunks(10))
        with self.assertRaises(SourceReadError):
            source.read_all()

    def test_unsupported_source(self):
        with self.assertRaises(SourceReadError):
            DocumentSource(42)

    def test_binary_stream(self):
        source = DocumentSource(io.BytesIO(b"[1]"))
        with self.assertRaises(SourceReadError):
            list(source.iter_chunks(10))


class TestStreamingProcessor(unittest.TestCase):
    """Test the chunked feed loop."""

    def test_small_chunks(self):
        config = AnalysisConfig(chunk_size=3)
        report, tokenizer = StreamingProcessor(config).process(
            DocumentSource('{"a": [1, {"b": null}], "c": "xyz"}')
        )

        self.assertEqual(report.tier, Tier.STREAMING)
        self.assertEqual(report.paths, ["", "a", "a[0]", "a[1]", "a[1].b", "c"])
        self.assertTrue(tokenizer.finalized)

    def test_stops_after_collapse(self):
        """Test that feeding stops once the tokenizer has collapsed."""
        config = AnalysisConfig(chunk_size=4)
        text = "}}}}" + "[1]" * 100
        report, tokenizer = StreamingProcessor(config).process(DocumentSource(text))

        self.assertTrue(tokenizer.collapsed)
        self.assertEqual(tokenizer.position, 4)
        self.assertEqual(report.structure, {})

    def test_stream_report(self):
        report = stream_report(io.StringIO("[true, false]"), AnalysisConfig(chunk_size=2))
        self.assertEqual(report.get("").length, 2)


if __name__ == '__main__':
    unittest.main()
