"""
Common constants and path helpers used across the jsonshape library.
"""

ROOT_PATH = ""
SAMPLING_SUFFIX = "[...]"

BYTE_ORDER_MARK = "\ufeff"
REPLACEMENT_CHAR = "\ufffd"

STRUCTURAL_CHARS = frozenset("{}[]:,")
WHITESPACE_CHARS = frozenset(" \t\r\n")
NUMBER_START_CHARS = frozenset("-0123456789")
LITERAL_START_CHARS = frozenset("tfn")
LITERAL_BODY_CHARS = frozenset(
    "0123456789+-.eE" "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"
)
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

TRUNCATION_ARRAY_SAMPLING = "array_sampling"
TRUNCATION_MAX_DEPTH = "max_depth_exceeded"

# Standard JSON escape sequences mapping
JSON_ESCAPE_MAP = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    '"': '"',
    "\\": "\\",
    "/": "/",
}


def key_path(prefix: str, key: str) -> str:
    """Path of an object member."""
    return f"{prefix}.{key}" if prefix else key


def index_path(prefix: str, index: int) -> str:
    """Path of an array element."""
    return f"{prefix}[{index}]"


def sampling_path(prefix: str) -> str:
    """Path of the synthetic node summarizing unsampled array elements."""
    return f"{prefix}{SAMPLING_SUFFIX}"
