"""
Error tracking and structural collapse detection.

This module counts recoverable errors for the streaming tokenizer and
decides when its context stack can no longer be trusted.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any

from ...core.report import ParseError
from ...utils.config import RecoverySettings


@dataclass
class RecoveryState:
    """Consolidated error counters for one tokenizer."""

    total_errors: int = 0
    root_inconsistencies: int = 0
    recent_errors: deque = field(default_factory=deque)
    collapsed: bool = False
    collapse_reason: str = ""


class ErrorTracker:
    """
    Tracks error density over a trailing token window.

    Structural collapse is sticky: once the stack has been declared
    unreliable, later well-formed input does not restore confidence.
    """

    def __init__(self, settings: RecoverySettings):
        self.settings = settings
        self.state = RecoveryState()
        self._messages: dict[str, int] = {}

    def record(self, error: ParseError, token_index: int, at_root: bool) -> None:
        """Record an error seen after `token_index` tokens."""
        self.state.total_errors += 1
        self._messages[error.message] = self._messages.get(error.message, 0) + 1

        window = self.state.recent_errors
        window.append(token_index)
        while window and window[0] <= token_index - self.settings.error_window:
            window.popleft()

        if at_root:
            self.state.root_inconsistencies += 1
            if self.state.root_inconsistencies > self.settings.max_root_inconsistencies:
                self._collapse(
                    f"{self.state.root_inconsistencies} stack inconsistencies outside the root value"
                )

        if self.density() > self.settings.error_density_threshold:
            self._collapse(f"error density {self.density():.2f} over the last {self.settings.error_window} tokens")

    def density(self) -> float:
        """Fraction of the trailing window taken up by errors."""
        return len(self.state.recent_errors) / self.settings.error_window

    def can_record(self) -> bool:
        """Whether another error still fits in the report's error list."""
        return self.state.total_errors < self.settings.max_errors

    @property
    def collapsed(self) -> bool:
        return self.state.collapsed

    @property
    def collapse_reason(self) -> str:
        return self.state.collapse_reason

    @property
    def over_budget(self) -> bool:
        """Whether more errors were seen than the configured maximum."""
        return self.state.total_errors > self.settings.max_errors

    def _collapse(self, reason: str) -> None:
        if not self.state.collapsed:
            self.state.collapsed = True
            self.state.collapse_reason = reason

    def get_error_summary(self) -> dict[str, Any]:
        """Get a summary of errors and collapse state."""
        return {
            "total_errors": self.state.total_errors,
            "root_inconsistencies": self.state.root_inconsistencies,
            "collapsed": self.state.collapsed,
            "collapse_reason": self.state.collapse_reason,
            "error_types": self._categorize_errors(),
            "most_common_errors": self._get_common_errors(),
        }

    def _categorize_errors(self) -> dict[str, int]:
        categories: dict[str, int] = {}
        for message, count in self._messages.items():
            category = self._determine_error_category(message)
            categories[category] = categories.get(category, 0) + count
        return categories

    def _determine_error_category(self, message: str) -> str:
        lowered = message.lower()
        if "string" in lowered:
            return "string_issues"
        elif "','" in lowered:
            return "comma_issues"
        elif "':'" in lowered or "key" in lowered:
            return "key_issues"
        elif any(closer in lowered for closer in ("'}'", "']'", "closer", "unclosed")):
            return "structure_issues"
        else:
            return "other"

    def _get_common_errors(self, limit: int = 5) -> list[str]:
        sorted_errors = sorted(self._messages.items(), key=lambda x: x[1], reverse=True)
        return [msg for msg, count in sorted_errors[:limit]]
