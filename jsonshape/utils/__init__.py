"""jsonshape configuration and timing utilities."""

from .config import (
    AnalysisBehavior,
    AnalysisConfig,
    RecoverySettings,
    ShapeLimits,
    StreamingConfig,
)
from .timing import Timings

__all__ = [
    "AnalysisConfig",
    "AnalysisBehavior",
    "RecoverySettings",
    "ShapeLimits",
    "StreamingConfig",
    "Timings",
]
