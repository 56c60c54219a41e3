"""
Streaming structural tokenizer for jsonshape.

StreamingTokenizer is a resumable, character-level state machine. Text is
pushed in with feed() in chunks of any size and the structure report is
built incrementally; finalize() closes the stream and returns the report.
All parser state lives on the instance, so the result does not depend on
how the text was chunked.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..recovery.core.tracker import ErrorTracker
from ..security.exceptions import TokenizerStateError
from ..utils.config import AnalysisConfig, RecoverySettings
from .assembler import StructureAssembler
from .constants import (
    BYTE_ORDER_MARK,
    HEX_DIGITS,
    JSON_ESCAPE_MAP,
    LITERAL_BODY_CHARS,
    LITERAL_START_CHARS,
    NUMBER_START_CHARS,
    REPLACEMENT_CHAR,
    ROOT_PATH,
    WHITESPACE_CHARS,
    key_path,
)
from .report import NodeType, ParseError, StructureReport, Tier

_STRING_STOP = re.compile(r'["\\]')
_STRUCTURAL = re.compile(r"[{}\[\]:,]")
_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_LITERALS = {"true": (NodeType.BOOLEAN, True), "false": (NodeType.BOOLEAN, False), "null": (NodeType.NULL, None)}



class TokenizerState(Enum):
    """Character-level lexical states."""

    DEFAULT = "default"
    IN_STRING = "in_string"
    ESCAPED = "escaped"


class Expect(Enum):
    """What the grammar allows next."""

    VALUE = "value"
    FIRST_ELEMENT = "first_element"
    KEY = "key"
    NEXT_KEY = "next_key"
    COLON = "colon"
    AFTER_VALUE = "after_value"


@dataclass
class Frame:
    """One open container on the context stack."""

    kind: NodeType
    path: Optional[str]
    depth: int
    index: int = 0
    length: int = 0


class StringCapture:
    """Incrementally decodes the content of a JSON string, up to a limit.

    Escapes, including \\uXXXX sequences and surrogate pairs, may be split
    across any number of chunks.
    """

    def __init__(self, limit: int):
        self.limit = limit
        self.truncated = False
        self._parts: list[str] = []
        self._length = 0
        self._unicode: Optional[str] = None
        self._high_surrogate: Optional[int] = None

    def append_text(self, text: str) -> None:
        """Append literal string content."""
        if self._unicode is not None:
            text = self._consume_hex(text)
        if text:
            self._emit(text)

    def append_escape(self, char: str) -> None:
        """Append the character that followed a backslash."""
        self._flush_unicode()
        if char == "u":
            self._unicode = ""
            return
        self._emit(JSON_ESCAPE_MAP.get(char, char))

    def text(self) -> str:
        """Decoded content captured so far."""
        self._flush_unicode()
        self._flush_surrogate()
        return "".join(self._parts)

    def _consume_hex(self, text: str) -> str:
        assert self._unicode is not None
        consumed = 0
        while consumed < len(text) and len(self._unicode) < 4 and text[consumed] in HEX_DIGITS:
            self._unicode += text[consumed]
            consumed += 1
        if len(self._unicode) == 4:
            code_point = int(self._unicode, 16)
            self._unicode = None
            self._emit_code_point(code_point)
        elif consumed < len(text):
            self._flush_unicode()
        return text[consumed:]

    def _flush_unicode(self) -> None:
        # An interrupted \u escape is kept literally
        if self._unicode is not None:
            pending = "u" + self._unicode
            self._unicode = None
            self._emit(pending)

    def _emit_code_point(self, code_point: int) -> None:
        if 0xD800 <= code_point <= 0xDBFF:
            self._flush_surrogate()
            self._high_surrogate = code_point
        elif 0xDC00 <= code_point <= 0xDFFF:
            if self._high_surrogate is None:
                self._append(REPLACEMENT_CHAR)
                return
            high = self._high_surrogate - 0xD800
            low = code_point - 0xDC00
            self._high_surrogate = None
            self._append(chr(0x10000 + (high << 10) + low))
        else:
            self._emit(chr(code_point))

    def _flush_surrogate(self) -> None:
        if self._high_surrogate is not None:
            self._high_surrogate = None
            self._append(REPLACEMENT_CHAR)

    def _emit(self, text: str) -> None:
        self._flush_surrogate()
        self._append(text)

    def _append(self, text: str) -> None:
        remaining = self.limit - self._length
        if remaining <= 0:
            self.truncated = True
            return
        if len(text) > remaining:
            text = text[:remaining]
            self.truncated = True
        self._parts.append(text)
        self._length += len(text)


class StreamingTokenizer:
    """Resumable structural tokenizer.

    Recoverable syntax errors are recorded on the report and the tokenizer
    resynchronizes on the next structural character. When the context stack
    can no longer be trusted, `collapsed` becomes True; the caller decides
    whether to fall back to another strategy.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self.assembler = StructureAssembler(self.config)
        self.validator = self.assembler.validator
        self.tracker = ErrorTracker(self.config.recovery or RecoverySettings())

        self._state = TokenizerState.DEFAULT
        self._expect = Expect.VALUE
        self._stack: list[Frame] = []
        self._path: Optional[str] = ROOT_PATH
        self._root_seen = False
        self._resyncing = False
        self._finalized = False
        self._report: Optional[StructureReport] = None

        self._capture: Optional[StringCapture] = None
        self._string_is_key = False
        self._pending_key = ""
        self._value_path: Optional[str] = None
        self._value_depth = 0

        self._literal: Optional[str] = None
        self._literal_truncated = False
        self._literal_start = (0, 1, 1)

        self._position = 0
        self._line = 1
        self._column = 1

    @property
    def depth(self) -> int:
        """Number of currently open containers."""
        return len(self._stack)

    @property
    def state(self) -> TokenizerState:
        return self._state

    @property
    def position(self) -> int:
        """Offset of the next character to be fed."""
        return self._position

    @property
    def error_count(self) -> int:
        return self.tracker.state.total_errors

    @property
    def collapsed(self) -> bool:
        """Whether the context stack is no longer reliable."""
        return self.tracker.collapsed

    @property
    def over_error_budget(self) -> bool:
        return self.tracker.over_budget

    @property
    def has_root(self) -> bool:
        """Whether a root value was recorded."""
        return self._root_seen

    @property
    def finalized(self) -> bool:
        return self._finalized

    def feed(self, chunk: str) -> None:
        """Consume a chunk of decoded text."""
        if self._finalized:
            raise TokenizerStateError("Cannot feed a finalized tokenizer")
        self.validator.validate_chunk(chunk)

        i = 0
        end = len(chunk)
        if self._position == 0 and chunk.startswith(BYTE_ORDER_MARK):
            self._advance_text(chunk, 0, 1)
            i = 1

        while i < end:
            if self._resyncing:
                match = _STRUCTURAL.search(chunk, i)
                stop = match.start() if match else end
                self._advance_text(chunk, i, stop)
                i = stop
                if i >= end:
                    break
                self._resyncing = False

            state = self._state
            if state is TokenizerState.IN_STRING:
                match = _STRING_STOP.search(chunk, i)
                stop = match.start() if match else end
                if stop > i:
                    if self._capture is not None:
                        self._capture.append_text(chunk[i:stop])
                    self._advance_text(chunk, i, stop)
                    i = stop
                    continue
                char = chunk[i]
                if char == '"':
                    self._end_string()
                else:
                    self._state = TokenizerState.ESCAPED
            elif state is TokenizerState.ESCAPED:
                char = chunk[i]
                if self._capture is not None:
                    self._capture.append_escape(char)
                self._state = TokenizerState.IN_STRING
            else:
                char = chunk[i]
                self._process_default(char)

            self._advance_char(char)
            i += 1

    def finalize(self) -> StructureReport:
        """Close the stream and return the finished report."""
        if self._report is not None:
            return self._report

        if self._state is not TokenizerState.DEFAULT:
            self._record_error("", "Unterminated string at end of input")
            if not self._string_is_key:
                self._record_string_value()
            self._capture = None
            self._state = TokenizerState.DEFAULT
        if self._literal is not None:
            self._end_literal()

        unclosed = len(self._stack)
        if unclosed:
            self._record_error("", f"Unexpected end of input with {unclosed} unclosed container(s)")
            for frame in reversed(self._stack):
                self._finish_frame(frame)
        elif not self._root_seen:
            self._record_error("", "No JSON value found")

        self._finalized = True
        self._report = self.assembler.build(
            Tier.STREAMING,
            partial=self.error_count > 0,
            complete=unclosed == 0,
        )
        return self._report

    def snapshot(self) -> StructureReport:
        """Report on what has been seen so far without closing the stream."""
        if self._report is not None:
            return self._report
        report = self.assembler.build(
            Tier.STREAMING,
            partial=self.error_count > 0 or bool(self._stack),
            complete=False,
        )
        for frame in self._stack:
            if frame.kind == NodeType.ARRAY and frame.path is not None:
                node = report.structure.get(frame.path)
                if node is not None and node.type == NodeType.ARRAY:
                    node.length = max(node.length or 0, frame.length)
        return report

    # Character dispatch

    def _process_default(self, char: str) -> None:
        if self._literal is not None:
            if char in LITERAL_BODY_CHARS:
                if self.validator.can_capture(len(self._literal)):
                    self._literal += char
                else:
                    self._literal_truncated = True
                return
            self._end_literal()

        if char in WHITESPACE_CHARS:
            return
        if char == '"':
            self._on_quote()
        elif char == "{":
            self._on_open(NodeType.OBJECT, char)
        elif char == "[":
            self._on_open(NodeType.ARRAY, char)
        elif char == "}":
            self._on_close(NodeType.OBJECT, char)
        elif char == "]":
            self._on_close(NodeType.ARRAY, char)
        elif char == ":":
            self._on_colon(char)
        elif char == ",":
            self._on_comma(char)
        elif char in NUMBER_START_CHARS or char in LITERAL_START_CHARS:
            self._on_literal_start(char)
        else:
            self._on_unexpected(char)

    def _on_quote(self) -> None:
        expect = self._expect
        top = self._stack[-1] if self._stack else None
        if expect is Expect.AFTER_VALUE and top is not None and top.kind == NodeType.OBJECT:
            self._record_error('"', "Missing ',' between object members")
            self._path = top.path
            expect = self._expect = Expect.NEXT_KEY

        if expect in (Expect.KEY, Expect.NEXT_KEY):
            self._string_is_key = True
            self._capture = StringCapture(self.config.max_capture_length)
        elif self._start_value('"'):
            self._string_is_key = False
            self._capture = (
                None
                if self.config.structure_only
                else StringCapture(self.config.max_capture_length)
            )
        else:
            self._resyncing = True
            return

        self.assembler.count_token()
        self._state = TokenizerState.IN_STRING

    def _end_string(self) -> None:
        self._state = TokenizerState.DEFAULT
        if self._string_is_key:
            self._pending_key = self._capture.text() if self._capture is not None else ""
            self._expect = Expect.COLON
        else:
            self._record_string_value()
            self._expect = Expect.AFTER_VALUE
        self._capture = None

    def _record_string_value(self) -> None:
        if self._value_path is None:
            return
        if self._capture is not None:
            self.assembler.record_value(
                self._value_path, NodeType.STRING, self._value_depth, self._capture.text()
            )
        else:
            self.assembler.record_value(self._value_path, NodeType.STRING, self._value_depth)

    def _on_open(self, kind: NodeType, char: str) -> None:
        if not self._start_value(char):
            return
        path = self._value_path
        depth = self._value_depth
        if path is not None and not self.assembler.record_value(path, kind, depth):
            path = None

        self.assembler.count_token()
        self.assembler.count_container(kind)
        self._stack.append(Frame(kind=kind, path=path, depth=depth))
        self.assembler.observe_depth(len(self._stack))
        self._path = path
        self._expect = Expect.KEY if kind == NodeType.OBJECT else Expect.FIRST_ELEMENT

    def _on_close(self, kind: NodeType, char: str) -> None:
        stack = self._stack
        match = None
        for index in range(len(stack) - 1, -1, -1):
            if stack[index].kind == kind:
                match = index
                break

        if match is None:
            self._record_error(char, f"Unmatched {char!r}")
            return

        if match != len(stack) - 1:
            self._record_error(
                char, f"Missing closer for {len(stack) - 1 - match} container(s) before {char!r}"
            )
            while len(stack) - 1 > match:
                self._finish_frame(stack.pop())
        else:
            self._check_close_expectation(stack[-1], char)

        frame = stack.pop()
        self._finish_frame(frame)
        self.assembler.count_token()
        self._path = frame.path
        self._expect = Expect.AFTER_VALUE

    def _check_close_expectation(self, frame: Frame, char: str) -> None:
        expect = self._expect
        if expect is Expect.NEXT_KEY or (expect is Expect.VALUE and frame.kind == NodeType.ARRAY):
            self._record_error(char, f"Trailing ',' before {char!r}")
        elif expect is Expect.COLON:
            self._record_error(char, f"Expected ':' after object key, found {char!r}")
        elif expect is Expect.VALUE:
            self._record_error(char, f"Missing value before {char!r}")

    def _finish_frame(self, frame: Frame) -> None:
        if frame.kind == NodeType.ARRAY and frame.path is not None:
            self.assembler.close_array(frame.path, frame.length, frame.depth)

    def _on_colon(self, char: str) -> None:
        if self._expect is not Expect.COLON:
            self._record_error(char, "Unexpected ':'")
            return
        frame = self._stack[-1]
        key = self._pending_key
        if frame.path is not None:
            self.assembler.record_key(frame.path, key)
            self._path = key_path(frame.path, key)
        else:
            self._path = None
        self.assembler.count_token()
        self._expect = Expect.VALUE

    def _on_comma(self, char: str) -> None:
        if self._expect is not Expect.AFTER_VALUE or not self._stack:
            self._record_error(char, "Unexpected ','")
            return
        frame = self._stack[-1]
        if frame.kind == NodeType.OBJECT:
            self._path = frame.path
            self._expect = Expect.NEXT_KEY
        else:
            frame.index += 1
            self._expect = Expect.VALUE
        self.assembler.count_token()

    def _on_literal_start(self, char: str) -> None:
        if not self._start_value(char):
            self._resyncing = True
            return
        self.assembler.count_token()
        self._literal = char
        self._literal_truncated = False
        self._literal_start = (self._position, self._line, self._column)
        self._expect = Expect.AFTER_VALUE

    def _end_literal(self) -> None:
        text = self._literal or ""
        self._literal = None
        path = self._value_path

        if text in _LITERALS:
            node_type, value = _LITERALS[text]
        elif self._literal_truncated and text[0] in NUMBER_START_CHARS:
            self._record_unsampled_number(path)
            return
        elif _NUMBER.fullmatch(text):
            try:
                node_type, value = NodeType.NUMBER, json.loads(text)
            except ValueError:
                # past the interpreter's integer digit limit
                self._record_unsampled_number(path)
                return
        else:
            position, line, column = self._literal_start
            self._add_error(
                ParseError(position, text[0], f"Invalid literal {text[:20]!r}", line, column)
            )
            return

        if path is not None:
            self.assembler.record_value(path, node_type, self._value_depth, value)

    def _record_unsampled_number(self, path: Optional[str]) -> None:
        if path is not None:
            self.assembler.record_value(path, NodeType.NUMBER, self._value_depth)

    def _on_unexpected(self, char: str) -> None:
        self._record_error(char, f"Unexpected character {char!r}")
        if self._stack and self._expect in (Expect.VALUE, Expect.FIRST_ELEMENT):
            # the garbage stands in for the missing value
            self._expect = Expect.AFTER_VALUE
        self._resyncing = True

    def _start_value(self, char: str) -> bool:
        """Check that a value may start here and resolve its path."""
        stack = self._stack
        top = stack[-1] if stack else None
        expect = self._expect

        if expect is Expect.AFTER_VALUE and top is not None and top.kind == NodeType.ARRAY:
            self._record_error(char, "Missing ',' between array elements")
            top.index += 1
            expect = Expect.VALUE

        if expect not in (Expect.VALUE, Expect.FIRST_ELEMENT):
            if top is None:
                message = "Unexpected content after the root value"
            elif expect in (Expect.KEY, Expect.NEXT_KEY):
                message = f"Expected object key, found {char!r}"
            elif expect is Expect.COLON:
                message = f"Expected ':' after object key, found {char!r}"
            else:
                message = "Missing ',' between object members"
            self._record_error(char, message)
            return False

        if top is None:
            self._root_seen = True
            self._value_path = ROOT_PATH
        elif top.kind == NodeType.ARRAY:
            top.length += 1
            self._value_path = (
                self.assembler.element_path(top.path, top.index, len(stack))
                if top.path is not None
                else None
            )
        else:
            self._value_path = self._path
        self._value_depth = len(stack)
        return True

    # Errors and position bookkeeping

    def _record_error(self, char: str, message: str) -> None:
        self._add_error(ParseError(self._position, char, message, self._line, self._column))

    def _add_error(self, error: ParseError) -> None:
        if self.tracker.can_record():
            self.assembler.add_error(error)
        self.tracker.record(error, self.assembler.stats.total_tokens, at_root=not self._stack)

    def _advance_char(self, char: str) -> None:
        self._position += 1
        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

    def _advance_text(self, chunk: str, start: int, stop: int) -> None:
        self._position += stop - start
        newlines = chunk.count("\n", start, stop)
        if newlines:
            self._line += newlines
            self._column = stop - chunk.rfind("\n", start, stop)
        else:
            self._column += stop - start


def feed(tokenizer: StreamingTokenizer, chunk: str) -> None:
    """Push a chunk of text into a tokenizer."""
    tokenizer.feed(chunk)


def finalize(tokenizer: StreamingTokenizer) -> StructureReport:
    """Close a tokenizer and return its report."""
    return tokenizer.finalize()
