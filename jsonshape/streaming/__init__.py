"""
jsonshape Streaming Support.

Chunked reading of large documents for the streaming tokenizer.
"""

from .processor import DocumentSource, StreamingProcessor, stream_report

__all__ = ["DocumentSource", "StreamingProcessor", "stream_report"]
