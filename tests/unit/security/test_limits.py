"""
Test cases for shape limits.

Tests focus on the bounds that keep the structure map proportional to the
distinct shape of a document.
"""

import unittest

from jsonshape.security.exceptions import TokenizerStateError
from jsonshape.security.limits import LimitValidator
from jsonshape.utils.config import ShapeLimits


class TestLimitValidator(unittest.TestCase):
    """Test LimitValidator functionality."""

    def setUp(self):
        """Set up test validator with custom limits."""
        self.limits = ShapeLimits(
            max_depth=3,
            array_sample_size=2,
            max_capture_length=8,
            max_sample_length=4,
        )
        self.validator = LimitValidator(self.limits)

    def test_depth_tracking(self):
        self.assertTrue(self.validator.is_depth_tracked(0))
        self.assertTrue(self.validator.is_depth_tracked(3))
        self.assertFalse(self.validator.is_depth_tracked(4))

    def test_element_sampling(self):
        self.assertTrue(self.validator.is_element_sampled(1))
        self.assertFalse(self.validator.is_element_sampled(2))
        self.assertTrue(self.validator.is_sampling_boundary(2))
        self.assertFalse(self.validator.is_sampling_boundary(3))

    def test_capture_length(self):
        self.assertTrue(self.validator.can_capture(7))
        self.assertFalse(self.validator.can_capture(8))

    def test_clip_sample(self):
        """Test that only strings are clipped."""
        self.assertEqual(self.validator.clip_sample("abcdefgh"), "abcd")
        self.assertEqual(self.validator.clip_sample("ab"), "ab")
        self.assertEqual(self.validator.clip_sample(123456789), 123456789)

    def test_validate_chunk(self):
        self.validator.validate_chunk("text")  # Should not raise
        with self.assertRaises(TokenizerStateError) as cm:
            self.validator.validate_chunk(b"bytes")
        self.assertIn("bytes", str(cm.exception))


if __name__ == '__main__':
    unittest.main()
