"""
Test cases for the structural walk of parsed values.
"""

import json
import unittest

from jsonshape.core.assembler import StructureAssembler
from jsonshape.core.report import NodeType, Tier
from jsonshape.core.tokenizer import StreamingTokenizer
from jsonshape.core.walker import value_type, walk_value
from jsonshape.utils.config import AnalysisConfig


def walk(value, config=None):
    assembler = StructureAssembler(config or AnalysisConfig())
    walk_value(value, assembler)
    return assembler.build(Tier.STANDARD, partial=False)


class TestValueType(unittest.TestCase):
    """Test mapping of decoded values to node types."""

    def test_json_values(self):
        cases = [
            (None, NodeType.NULL),
            (True, NodeType.BOOLEAN),
            (0, NodeType.NUMBER),
            (1.5, NodeType.NUMBER),
            ("s", NodeType.STRING),
            ({}, NodeType.OBJECT),
            ([], NodeType.ARRAY),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(value_type(value), expected)

    def test_non_json_value(self):
        with self.assertRaises(TypeError):
            value_type({1, 2})


class TestWalkValue(unittest.TestCase):
    """Test walk_value against the streaming tokenizer."""

    def test_end_to_end_document(self):
        report = walk(json.loads('{"a":{"b":1},"c":[1,2,3]}'))

        self.assertEqual(report.paths, ["", "a", "a.b", "c", "c[0]", "c[1]", "c[2]"])
        self.assertEqual(report.stats.object_count, 2)
        self.assertEqual(report.stats.array_count, 1)
        self.assertEqual(report.stats.max_depth, 2)
        self.assertEqual(report.stats.total_tokens, 19)

    def test_matches_tokenizer(self):
        """Test that both tiers describe a document identically."""
        text = json.dumps(
            {
                "rows": [{"id": i, "tags": ["x"] * i, "score": i / 2} for i in range(6)],
                "meta": {"deep": {"deeper": [[1, 2, 3, 4], {}]}, "flag": False, "none": None},
            }
        )
        walked = walk(json.loads(text))
        tokenizer = StreamingTokenizer()
        tokenizer.feed(text)
        streamed = tokenizer.finalize()

        self.assertEqual(walked.paths, streamed.paths)
        self.assertEqual(
            {path: node.to_dict() for path, node in walked.structure.items()},
            {path: node.to_dict() for path, node in streamed.structure.items()},
        )
        self.assertEqual(walked.stats.to_dict(), streamed.stats.to_dict())

    def test_sampling(self):
        report = walk(list(range(10000)))

        self.assertEqual(report.paths, ["", "[0]", "[1]", "[2]", "[...]"])
        self.assertEqual(report.get("[...]").total_length, 10000)
        self.assertEqual(report.get("").length, 10000)

    def test_deep_nesting_without_recursion(self):
        """Test a value nested far beyond the interpreter recursion limit."""
        value = 1
        for _ in range(5000):
            value = [value]
        report = walk(value)

        self.assertEqual(report.stats.array_count, 5000)
        self.assertEqual(report.stats.max_depth, 5000)
        self.assertEqual(report.get("[0]" * 11).reason, "max_depth_exceeded")
        self.assertEqual(len(report.structure), 12)


if __name__ == '__main__':
    unittest.main()
