"""
Structural walk of an already parsed value.

Used by the standard tier and by the fixed-content path of the recovery tier.
The walk uses an explicit work list instead of recursion, so deeply nested
documents cannot exhaust the call stack, and visits every node so that the
statistics match what the streaming tokenizer counts.
"""

from typing import Any, NamedTuple, Optional

from .assembler import StructureAssembler
from .constants import ROOT_PATH, key_path
from .report import NodeType


class _Pending(NamedTuple):
    """A value waiting to be visited."""

    value: Any
    path: Optional[str]
    depth: int


class _Element(NamedTuple):
    """An array element whose path is resolved when it is visited."""

    value: Any
    array_path: str
    index: int
    depth: int


class _CloseArray(NamedTuple):
    """Marker that finalizes an array after its elements were visited."""

    path: Optional[str]
    length: int
    depth: int


def value_type(value: Any) -> NodeType:
    """Map a decoded JSON value to its node type."""
    if value is None:
        return NodeType.NULL
    if isinstance(value, bool):
        return NodeType.BOOLEAN
    if isinstance(value, (int, float)):
        return NodeType.NUMBER
    if isinstance(value, str):
        return NodeType.STRING
    if isinstance(value, dict):
        return NodeType.OBJECT
    if isinstance(value, (list, tuple)):
        return NodeType.ARRAY
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def walk_value(value: Any, assembler: StructureAssembler) -> None:
    """Feed the structure of a decoded JSON value into an assembler.

    Nodes are recorded in document order. A path of None marks a subtree that
    is outside the array sample or below the depth cap: it is still counted but
    not recorded.
    """
    work: list[Any] = [_Pending(value, ROOT_PATH, 0)]

    while work:
        item = work.pop()

        if isinstance(item, _CloseArray):
            if item.path is not None:
                assembler.close_array(item.path, item.length, item.depth)
            continue
        if isinstance(item, _Element):
            path = assembler.element_path(item.array_path, item.index, item.depth)
            item = _Pending(item.value, path, item.depth)

        node_type = value_type(item.value)
        tracked = item.path is not None
        if tracked:
            tracked = assembler.record_value(item.path, node_type, item.depth, item.value)

        child_depth = item.depth + 1
        if node_type == NodeType.OBJECT:
            assembler.count_container(node_type)
            assembler.observe_depth(child_depth)
            members = list(item.value.items())
            # braces, keys, colons and separating commas
            assembler.count_token(2 + 2 * len(members) + max(len(members) - 1, 0))
            children = []
            for key, child in members:
                child_path = None
                if tracked:
                    assembler.record_key(item.path, key)
                    child_path = key_path(item.path, key)
                children.append(_Pending(child, child_path, child_depth))
            work.extend(reversed(children))

        elif node_type == NodeType.ARRAY:
            assembler.count_container(node_type)
            assembler.observe_depth(child_depth)
            length = len(item.value)
            assembler.count_token(2 + max(length - 1, 0))
            work.append(_CloseArray(item.path if tracked else None, length, item.depth))
            children = [
                _Element(child, item.path, index, child_depth)
                if tracked
                else _Pending(child, None, child_depth)
                for index, child in enumerate(item.value)
            ]
            work.extend(reversed(children))

        else:
            assembler.count_token()
