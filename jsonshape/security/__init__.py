"""
jsonshape resource limits and exceptions.

This module provides the bounds that keep the structure map small and the
exceptions raised at the analysis boundary.
"""

from .exceptions import AnalysisError, SourceReadError, TokenizerStateError
from .limits import LimitValidator

__all__ = ["AnalysisError", "SourceReadError", "TokenizerStateError", "LimitValidator"]
