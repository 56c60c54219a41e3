"""
Configuration and limits for jsonshape analysis.

This module defines the shape limits, recovery thresholds and streaming
options that control how a document is analyzed.
"""

from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_CHUNK_SIZE = 10 * 1024 * 1024
DEFAULT_STANDARD_PARSE_THRESHOLD = 50 * 1024 * 1024


@dataclass
class ShapeLimits:
    """Bounds on how much of the document shape is tracked individually."""
    max_depth: int = 10
    array_sample_size: int = 3
    max_capture_length: int = 1024
    max_sample_length: int = 100


@dataclass
class RecoverySettings:
    """Thresholds that decide when a tier's output can no longer be trusted."""
    error_density_threshold: float = 0.2
    error_window: int = 100
    max_errors: int = 1000
    max_root_inconsistencies: int = 1
    fragment_timeout: float = 5.0


@dataclass
class StreamingConfig:
    """Streaming and I/O settings."""
    chunk_size: int = DEFAULT_CHUNK_SIZE
    standard_parse_threshold: int = DEFAULT_STANDARD_PARSE_THRESHOLD
    encoding: str = "utf-8"


@dataclass
class AnalysisBehavior:
    """Core analysis behavior settings."""
    structure_only: bool = False
    attempt_standard: bool = True


_LIMIT_FIELDS = ("max_depth", "array_sample_size", "max_capture_length", "max_sample_length")
_RECOVERY_FIELDS = (
    "error_density_threshold",
    "error_window",
    "max_errors",
    "max_root_inconsistencies",
    "fragment_timeout",
)
_STREAMING_FIELDS = ("chunk_size", "standard_parse_threshold", "encoding")
_BEHAVIOR_FIELDS = ("structure_only", "attempt_standard")


def _build_group(cls: type, fields: tuple, options: dict[str, Any]) -> Any:
    return cls(**{name: options[name] for name in fields if name in options})


@dataclass
class AnalysisConfig:
    """Configuration options for jsonshape analysis.

    Settings are grouped into nested dataclasses, but every option can also be
    passed as a flat keyword argument::

        AnalysisConfig(chunk_size=1024, max_depth=4, structure_only=True)
    """

    limits: Optional[ShapeLimits] = None
    recovery: Optional[RecoverySettings] = None
    streaming: Optional[StreamingConfig] = None
    behavior: Optional[AnalysisBehavior] = None

    def __init__(
        self,
        *,
        limits: Optional[ShapeLimits] = None,
        recovery: Optional[RecoverySettings] = None,
        streaming: Optional[StreamingConfig] = None,
        behavior: Optional[AnalysisBehavior] = None,
        **options: Any,
    ):
        known = set(_LIMIT_FIELDS + _RECOVERY_FIELDS + _STREAMING_FIELDS + _BEHAVIOR_FIELDS)
        unknown = set(options) - known
        if unknown:
            raise TypeError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")

        self.limits = limits or _build_group(ShapeLimits, _LIMIT_FIELDS, options)
        self.recovery = recovery or _build_group(RecoverySettings, _RECOVERY_FIELDS, options)
        self.streaming = streaming or _build_group(StreamingConfig, _STREAMING_FIELDS, options)
        self.behavior = behavior or _build_group(AnalysisBehavior, _BEHAVIOR_FIELDS, options)

        self.validate()

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range."""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.standard_parse_threshold < 0:
            raise ValueError("standard_parse_threshold must not be negative")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be positive")
        if self.array_sample_size < 0:
            raise ValueError("array_sample_size must not be negative")
        if self.max_capture_length <= 0:
            raise ValueError("max_capture_length must be positive")
        if not 0.0 < self.error_density_threshold <= 1.0:
            raise ValueError("error_density_threshold must be in (0, 1]")
        if self.error_window <= 0:
            raise ValueError("error_window must be positive")
        if self.max_errors <= 0:
            raise ValueError("max_errors must be positive")
        if self.max_root_inconsistencies < 0:
            raise ValueError("max_root_inconsistencies must not be negative")

    # Flat access properties
    @property
    def max_depth(self) -> int:
        """Nesting depth tracked individually before nodes become truncated."""
        assert self.limits is not None
        return self.limits.max_depth

    @property
    def array_sample_size(self) -> int:
        """Number of leading elements of each array that get their own path."""
        assert self.limits is not None
        return self.limits.array_sample_size

    @property
    def max_capture_length(self) -> int:
        """Maximum characters captured from a key or string value."""
        assert self.limits is not None
        return self.limits.max_capture_length

    @property
    def max_sample_length(self) -> int:
        """Maximum characters kept in a string sample."""
        assert self.limits is not None
        return self.limits.max_sample_length

    @property
    def error_density_threshold(self) -> float:
        """Fraction of the trailing token window that may be errors."""
        assert self.recovery is not None
        return self.recovery.error_density_threshold

    @property
    def error_window(self) -> int:
        """Size of the trailing token window used for error density."""
        assert self.recovery is not None
        return self.recovery.error_window

    @property
    def max_errors(self) -> int:
        """Total error count above which the streaming tier is abandoned."""
        assert self.recovery is not None
        return self.recovery.max_errors

    @property
    def max_root_inconsistencies(self) -> int:
        """Stack inconsistency events tolerated before structural collapse."""
        assert self.recovery is not None
        return self.recovery.max_root_inconsistencies

    @property
    def fragment_timeout(self) -> float:
        """Timeout in seconds for each fragment scan."""
        assert self.recovery is not None
        return self.recovery.fragment_timeout

    @property
    def chunk_size(self) -> int:
        """Characters read per chunk when streaming."""
        assert self.streaming is not None
        return self.streaming.chunk_size

    @property
    def standard_parse_threshold(self) -> int:
        """Largest document (in characters or bytes) tried with a whole-document parse."""
        assert self.streaming is not None
        return self.streaming.standard_parse_threshold

    @property
    def encoding(self) -> str:
        """Text encoding used when opening file sources."""
        assert self.streaming is not None
        return self.streaming.encoding

    @property
    def structure_only(self) -> bool:
        """Whether scalar samples are dropped from the report."""
        assert self.behavior is not None
        return self.behavior.structure_only

    @structure_only.setter
    def structure_only(self, value: bool) -> None:
        """Set structure-only reporting."""
        assert self.behavior is not None
        self.behavior.structure_only = value

    @property
    def attempt_standard(self) -> bool:
        """Whether small documents try a whole-document parse first."""
        assert self.behavior is not None
        return self.behavior.attempt_standard

    @attempt_standard.setter
    def attempt_standard(self, value: bool) -> None:
        """Set whole-document parse attempts."""
        assert self.behavior is not None
        self.behavior.attempt_standard = value
