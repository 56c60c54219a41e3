"""
Chunked document reading for the streaming tier.

This module turns the sources accepted by analyze() into text chunks and
drives the streaming tokenizer over them without loading the whole
document into memory.
"""

import io
import logging
import os
from collections.abc import Iterator
from typing import Optional, TextIO, Union

from ..core.report import StructureReport
from ..core.tokenizer import StreamingTokenizer
from ..security.exceptions import SourceReadError
from ..utils.config import AnalysisConfig

logger = logging.getLogger(__name__)

Source = Union[str, "os.PathLike[str]", TextIO]


class DocumentSource:
    """A document given as text, a file path or an open text stream."""

    def __init__(self, source: Source, encoding: str = "utf-8"):
        if isinstance(source, str):
            self.kind = "text"
        elif isinstance(source, os.PathLike):
            self.kind = "path"
        elif hasattr(source, "read"):
            self.kind = "stream"
        else:
            raise SourceReadError(f"Unsupported source type: {type(source).__name__}")
        self.source = source
        self.encoding = encoding
        self._buffered: Optional[str] = None

    @property
    def name(self) -> str:
        """Human readable name used in log messages and errors."""
        if self.kind == "path":
            return os.fspath(self.source)  # type: ignore[arg-type]
        if self.kind == "stream":
            return str(getattr(self.source, "name", "<stream>"))
        return "<text>"

    def size_hint(self) -> int:
        """Size of the remaining document, in characters for text and bytes for files."""
        if self.kind == "text":
            return len(self.source)  # type: ignore[arg-type]
        if self.kind == "path":
            try:
                return os.path.getsize(self.source)  # type: ignore[arg-type]
            except OSError as e:
                raise SourceReadError(f"Cannot stat source: {e}", self.name) from e
        return len(self._buffer_stream())

    def read_all(self) -> str:
        """Read the whole document."""
        if self.kind == "text":
            return self.source  # type: ignore[return-value]
        if self.kind == "stream":
            return self._buffer_stream()
        try:
            with open(self.source, encoding=self.encoding, errors="replace") as handle:  # type: ignore[arg-type]
                return handle.read()
        except OSError as e:
            raise SourceReadError(f"Cannot read source: {e}", self.name) from e

    def iter_chunks(self, chunk_size: int) -> Iterator[str]:
        """Yield the document in chunks of at most chunk_size characters."""
        if self.kind == "text" or self._buffered is not None:
            text = self.read_all()
            for start in range(0, len(text), chunk_size):
                yield text[start : start + chunk_size]
            return

        if self.kind == "stream":
            yield from self._read_chunks(self.source, chunk_size)  # type: ignore[arg-type]
            return

        try:
            handle = open(self.source, encoding=self.encoding, errors="replace")  # type: ignore[arg-type]
        except OSError as e:
            raise SourceReadError(f"Cannot open source: {e}", self.name) from e
        with handle:
            yield from self._read_chunks(handle, chunk_size)

    def _read_chunks(self, stream: TextIO, chunk_size: int) -> Iterator[str]:
        while True:
            try:
                chunk = stream.read(chunk_size)
            except (OSError, ValueError) as e:
                raise SourceReadError(f"Cannot read source: {e}", self.name) from e
            if not chunk:
                break
            if isinstance(chunk, bytes):
                raise SourceReadError("Stream must be opened in text mode", self.name)
            yield chunk

    def _buffer_stream(self) -> str:
        # Streams are read once; later passes reuse the buffered text
        if self._buffered is None:
            self._buffered = "".join(self._read_chunks(self.source, io.DEFAULT_BUFFER_SIZE * 64))  # type: ignore[arg-type]
        return self._buffered


class StreamingProcessor:
    """Feeds a document source through a StreamingTokenizer chunk by chunk."""

    def __init__(self, config: AnalysisConfig):
        self.config = config

    def process(self, source: DocumentSource) -> tuple[StructureReport, StreamingTokenizer]:
        """Tokenize a source and return the finalized report with its tokenizer."""
        tokenizer = StreamingTokenizer(self.config)
        chunks = 0
        for chunk in source.iter_chunks(self.config.chunk_size):
            tokenizer.feed(chunk)
            chunks += 1
            logger.debug(
                "Fed chunk %d of %s (%d chars, depth %d, %d errors)",
                chunks,
                source.name,
                len(chunk),
                tokenizer.depth,
                tokenizer.error_count,
            )
            if tokenizer.collapsed:
                logger.debug(
                    "Stopping after chunk %d: %s", chunks, tokenizer.tracker.collapse_reason
                )
                break
        return tokenizer.finalize(), tokenizer


def stream_report(source: Source, config: Optional[AnalysisConfig] = None) -> StructureReport:
    """Run only the streaming tier over a source."""
    config = config or AnalysisConfig()
    report, _ = StreamingProcessor(config).process(DocumentSource(source, config.encoding))
    return report
