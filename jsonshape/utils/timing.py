"""
Caller-owned timing handle.

Durations are recorded on an explicit Timings instance that the caller
passes into analyze() and gets back on the report. There is no process-wide
timer registry.
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

logger = logging.getLogger(__name__)


class Timings:
    """Collects elapsed wall-clock durations by label."""

    def __init__(self) -> None:
        self.durations: dict[str, float] = {}
        self._started: dict[str, float] = {}

    def start(self, label: str) -> None:
        """Start timing a label."""
        self._started[label] = time.perf_counter()

    def stop(self, label: str) -> Optional[float]:
        """Stop timing a label and return its duration in seconds."""
        started = self._started.pop(label, None)
        if started is None:
            logger.warning("Timer not started: %s", label)
            return None
        elapsed = time.perf_counter() - started
        self.durations[label] = self.durations.get(label, 0.0) + elapsed
        logger.debug("%s: %.3fs", label, elapsed)
        return elapsed

    @contextmanager
    def measure(self, label: str) -> Iterator[None]:
        """Time the enclosed block under a label."""
        self.start(label)
        try:
            yield
        finally:
            self.stop(label)

    @property
    def total(self) -> float:
        """Sum of all recorded durations."""
        return sum(self.durations.values())

    def to_dict(self) -> dict[str, float]:
        """Recorded durations keyed by label."""
        return dict(self.durations)
