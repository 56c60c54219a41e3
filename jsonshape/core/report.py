"""
Structure report data model.

Every tier produces a StructureReport: a mapping from path to StructureNode
plus aggregate statistics, annotated with the tier that produced it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..utils.timing import Timings


class NodeType(Enum):
    """Types of nodes in the structure map."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    TRUNCATED = "truncated"

    @property
    def is_container(self) -> bool:
        return self in (NodeType.OBJECT, NodeType.ARRAY)

    @property
    def is_scalar(self) -> bool:
        return self in (NodeType.STRING, NodeType.NUMBER, NodeType.BOOLEAN, NodeType.NULL)


class Tier(Enum):
    """Strategy that produced a report."""

    STANDARD = "standard"
    STREAMING = "streaming"
    PARTIAL = "partial"


@dataclass
class StructureNode:
    """One entry per distinct path."""

    type: NodeType
    depth: int
    keys: Optional[list[str]] = None
    length: Optional[int] = None
    sample: Any = None
    has_sample: bool = False
    reason: Optional[str] = None
    total_length: Optional[int] = None
    sampled_length: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict, omitting unset fields."""
        result: dict[str, Any] = {"type": self.type.value, "depth": self.depth}
        if self.type == NodeType.OBJECT:
            result["keys"] = list(self.keys or [])
        elif self.type == NodeType.ARRAY:
            result["length"] = self.length or 0
        elif self.type == NodeType.TRUNCATED:
            result["reason"] = self.reason
            if self.total_length is not None:
                result["totalLength"] = self.total_length
                result["sampledLength"] = self.sampled_length
        elif self.has_sample:
            result["sample"] = self.sample
        return result


@dataclass
class ParseError:
    """A recoverable syntax problem found while analyzing a document."""

    position: int
    character: str
    message: str
    line: int = 1
    column: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "character": self.character,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }


@dataclass
class Fragment:
    """An independently parseable container recovered from damaged content."""

    type: NodeType
    position: int
    content: str
    parsed_value: Any

    @property
    def end(self) -> int:
        """Offset just past the fragment in the original content."""
        return self.position + len(self.content)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "position": self.position,
            "content": self.content,
            "parsedValue": self.parsed_value,
        }


@dataclass
class ReportStats:
    """Aggregate shape statistics."""

    total_tokens: int = 0
    object_count: int = 0
    array_count: int = 0
    max_depth: int = 0
    errors: list[ParseError] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalTokens": self.total_tokens,
            "objectCount": self.object_count,
            "arrayCount": self.array_count,
            "maxDepth": self.max_depth,
            "errors": [error.to_dict() for error in self.errors],
        }


@dataclass
class StructureReport:
    """Structure map, statistics and provenance of one analysis."""

    structure: dict[str, StructureNode] = field(default_factory=dict)
    stats: ReportStats = field(default_factory=ReportStats)
    tier: Tier = Tier.STANDARD
    partial: bool = False
    complete: bool = True
    fragments: list[Fragment] = field(default_factory=list)
    corrupted: bool = False
    fixed: bool = False
    timings: Optional[Timings] = None

    @property
    def paths(self) -> list[str]:
        """Recorded paths in discovery order."""
        return list(self.structure)

    @property
    def errors(self) -> list[ParseError]:
        return self.stats.errors

    def get(self, path: str) -> Optional[StructureNode]:
        """Node recorded at a path, if any."""
        return self.structure.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self.structure

    def to_dict(self) -> dict[str, Any]:
        """Serialize the report for downstream analyzers."""
        result: dict[str, Any] = {
            "tier": self.tier.value,
            "partial": self.partial,
            "complete": self.complete,
            "structure": {path: node.to_dict() for path, node in self.structure.items()},
            "stats": self.stats.to_dict(),
        }
        if self.corrupted:
            result["corrupted"] = True
            result["fragments"] = [fragment.to_dict() for fragment in self.fragments]
        if self.fixed:
            result["fixed"] = True
        if self.timings is not None:
            result["timings"] = self.timings.to_dict()
        return result
