"""
Test cases for error density tracking and structural collapse.
"""

import unittest

from jsonshape.core.report import ParseError
from jsonshape.recovery.core.tracker import ErrorTracker
from jsonshape.utils.config import RecoverySettings


def error(message="Unexpected ','"):
    return ParseError(0, ",", message)


class TestErrorTracker(unittest.TestCase):
    """Test ErrorTracker thresholds."""

    def test_root_inconsistencies(self):
        tracker = ErrorTracker(RecoverySettings(max_root_inconsistencies=1))
        tracker.record(error(), token_index=5, at_root=True)
        self.assertFalse(tracker.collapsed)

        tracker.record(error(), token_index=6, at_root=True)
        self.assertTrue(tracker.collapsed)
        self.assertIn("outside the root", tracker.collapse_reason)

    def test_density_uses_trailing_window(self):
        tracker = ErrorTracker(RecoverySettings(error_window=10, error_density_threshold=0.2))
        tracker.record(error(), token_index=1, at_root=False)
        tracker.record(error(), token_index=2, at_root=False)
        self.assertAlmostEqual(tracker.density(), 0.2)
        self.assertFalse(tracker.collapsed)

        # earlier errors fall out of the window
        tracker.record(error(), token_index=50, at_root=False)
        self.assertAlmostEqual(tracker.density(), 0.1)

        tracker.record(error(), token_index=51, at_root=False)
        tracker.record(error(), token_index=52, at_root=False)
        self.assertTrue(tracker.collapsed)
        self.assertIn("density", tracker.collapse_reason)

    def test_collapse_is_sticky(self):
        tracker = ErrorTracker(RecoverySettings(max_root_inconsistencies=0))
        tracker.record(error(), token_index=0, at_root=True)
        reason = tracker.collapse_reason
        tracker.record(error(), token_index=1000, at_root=False)

        self.assertTrue(tracker.collapsed)
        self.assertEqual(tracker.collapse_reason, reason)

    def test_error_budget(self):
        tracker = ErrorTracker(RecoverySettings(max_errors=2, error_density_threshold=1.0))
        for index in range(3):
            self.assertEqual(tracker.can_record(), index < 2)
            tracker.record(error(), token_index=index * 100, at_root=False)

        self.assertTrue(tracker.over_budget)

    def test_error_summary(self):
        tracker = ErrorTracker(RecoverySettings())
        tracker.record(error("Unexpected ','"), 1, at_root=False)
        tracker.record(error("Unexpected ','"), 2, at_root=False)
        tracker.record(error("Unterminated string at end of input"), 3, at_root=False)
        summary = tracker.get_error_summary()

        self.assertEqual(summary["total_errors"], 3)
        self.assertEqual(summary["error_types"], {"comma_issues": 2, "string_issues": 1})
        self.assertEqual(summary["most_common_errors"][0], "Unexpected ','")


if __name__ == '__main__':
    unittest.main()
