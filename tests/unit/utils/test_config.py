"""
Test cases for analysis configuration.
"""

import unittest

from jsonshape.utils.config import (
    AnalysisBehavior,
    AnalysisConfig,
    RecoverySettings,
    ShapeLimits,
    StreamingConfig,
)


class TestAnalysisConfig(unittest.TestCase):
    """Test AnalysisConfig defaults and overrides."""

    def test_defaults(self):
        config = AnalysisConfig()
        self.assertEqual(config.chunk_size, 10 * 1024 * 1024)
        self.assertEqual(config.standard_parse_threshold, 50 * 1024 * 1024)
        self.assertEqual(config.encoding, "utf-8")
        self.assertEqual(config.max_depth, 10)
        self.assertEqual(config.array_sample_size, 3)
        self.assertEqual(config.max_capture_length, 1024)
        self.assertEqual(config.error_density_threshold, 0.2)
        self.assertEqual(config.error_window, 100)
        self.assertEqual(config.max_errors, 1000)
        self.assertEqual(config.max_root_inconsistencies, 1)
        self.assertEqual(config.fragment_timeout, 5.0)
        self.assertFalse(config.structure_only)
        self.assertTrue(config.attempt_standard)

    def test_flat_keyword_options(self):
        config = AnalysisConfig(chunk_size=64, max_depth=4, structure_only=True, max_errors=7)
        self.assertEqual(config.streaming.chunk_size, 64)
        self.assertEqual(config.limits.max_depth, 4)
        self.assertTrue(config.behavior.structure_only)
        self.assertEqual(config.recovery.max_errors, 7)

    def test_nested_groups(self):
        config = AnalysisConfig(
            limits=ShapeLimits(array_sample_size=5),
            recovery=RecoverySettings(error_window=20),
            streaming=StreamingConfig(encoding="latin-1"),
            behavior=AnalysisBehavior(attempt_standard=False),
        )
        self.assertEqual(config.array_sample_size, 5)
        self.assertEqual(config.error_window, 20)
        self.assertEqual(config.encoding, "latin-1")
        self.assertFalse(config.attempt_standard)

    def test_behavior_setters(self):
        config = AnalysisConfig()
        config.structure_only = True
        config.attempt_standard = False
        self.assertTrue(config.behavior.structure_only)
        self.assertFalse(config.behavior.attempt_standard)

    def test_unknown_option(self):
        with self.assertRaises(TypeError):
            AnalysisConfig(chunksize=10)

    def test_invalid_values(self):
        invalid = [
            {"chunk_size": 0},
            {"max_depth": 0},
            {"array_sample_size": -1},
            {"error_density_threshold": 0.0},
            {"error_density_threshold": 1.5},
            {"error_window": 0},
            {"max_errors": 0},
            {"max_root_inconsistencies": -1},
        ]
        for options in invalid:
            with self.subTest(options=options):
                with self.assertRaises(ValueError):
                    AnalysisConfig(**options)


if __name__ == '__main__':
    unittest.main()
