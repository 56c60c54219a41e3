"""
Shape limits for jsonshape.
This module keeps the structure map bounded by the distinct shape of a
document rather than its raw size.
"""

from typing import Any

from ..utils.config import ShapeLimits
from .exceptions import TokenizerStateError


class LimitValidator:
    """Applies depth, sampling and capture limits during analysis."""

    def __init__(self, limits: ShapeLimits):
        self.limits = limits

    def validate_chunk(self, chunk: Any) -> None:
        """Validate that a chunk handed to the tokenizer is decoded text."""
        if not isinstance(chunk, str):
            raise TokenizerStateError(
                f"Chunks must be str, got {type(chunk).__name__}; decode bytes before feeding"
            )

    def is_depth_tracked(self, depth: int) -> bool:
        """Whether a node at this depth gets its own path."""
        return depth <= self.limits.max_depth

    def is_element_sampled(self, index: int) -> bool:
        """Whether the array element at this index gets its own path."""
        return index < self.limits.array_sample_size

    def is_sampling_boundary(self, index: int) -> bool:
        """Whether this element is the first one beyond the sampling cap."""
        return index == self.limits.array_sample_size

    def can_capture(self, captured_length: int) -> bool:
        """Whether more characters may be captured from a string."""
        return captured_length < self.limits.max_capture_length

    def clip_sample(self, value: Any) -> Any:
        """Clip string samples to the configured length."""
        if isinstance(value, str) and len(value) > self.limits.max_sample_length:
            return value[: self.limits.max_sample_length]
        return value
