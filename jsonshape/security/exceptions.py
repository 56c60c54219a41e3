"""
Exceptions raised by jsonshape.

Malformed JSON is never an exception here: syntax problems are recorded as
ParseError entries on the report. Exceptions are reserved for sources that
cannot be read and for misuse of the resumable tokenizer API.
"""

from typing import Optional


class AnalysisError(Exception):
    """Base class for all jsonshape exceptions."""


class SourceReadError(AnalysisError):
    """Raised when a document source cannot be read at all."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{message} ({source})"
        super().__init__(message)


class TokenizerStateError(AnalysisError):
    """Raised when the streaming tokenizer is driven incorrectly."""
