"""
Structure report assembler shared by every tier.

The assembler merges per-path node records, applies the depth and array
sampling limits uniformly, keeps aggregate statistics and finally builds an
immutable-by-convention StructureReport.
"""

from dataclasses import replace
from typing import Any, Optional

from ..security.limits import LimitValidator
from ..utils.config import AnalysisConfig, ShapeLimits
from .constants import (
    TRUNCATION_ARRAY_SAMPLING,
    TRUNCATION_MAX_DEPTH,
    index_path,
    sampling_path,
)
from .report import NodeType, ParseError, ReportStats, StructureNode, StructureReport, Tier

_NO_SAMPLE = object()


class StructureAssembler:
    """Accumulates nodes and statistics for one analysis."""

    def __init__(self, config: AnalysisConfig):
        self.config = config
        self.validator = LimitValidator(config.limits or ShapeLimits())
        self.stats = ReportStats()
        self._nodes: dict[str, StructureNode] = {}
        self._key_sets: dict[str, dict[str, None]] = {}

    def record_value(
        self, path: str, node_type: NodeType, depth: int, value: Any = _NO_SAMPLE
    ) -> bool:
        """Record a node at a path.

        Returns True when the node's children should be path-tracked, False
        when the depth cap turned the node into a truncation marker.
        """
        if not self.validator.is_depth_tracked(depth):
            self._merge(
                path,
                StructureNode(type=NodeType.TRUNCATED, depth=depth, reason=TRUNCATION_MAX_DEPTH),
            )
            return False

        node = StructureNode(type=node_type, depth=depth)
        if node_type == NodeType.OBJECT:
            self._key_sets.setdefault(path, {})
        elif node_type == NodeType.ARRAY:
            node.length = 0
        elif value is not _NO_SAMPLE and not self.config.structure_only:
            node.sample = self.validator.clip_sample(value)
            node.has_sample = True
        self._merge(path, node)
        return True

    def record_key(self, path: str, key: str) -> None:
        """Add a key to the object recorded at a path."""
        key_set = self._key_sets.get(path)
        if key_set is not None:
            key_set[key] = None

    def element_path(self, array_path: str, index: int, depth: int) -> Optional[str]:
        """Path for an array element, or None when it falls outside the sample."""
        if self.validator.is_element_sampled(index):
            return index_path(array_path, index)
        if self.validator.is_sampling_boundary(index):
            self.record_sampling(array_path, depth, index + 1)
        return None

    def record_sampling(self, array_path: str, depth: int, total_length: int) -> None:
        """Record or update the synthetic node standing in for unsampled elements."""
        path = sampling_path(array_path)
        node = self._nodes.get(path)
        if node is None:
            self._nodes[path] = StructureNode(
                type=NodeType.TRUNCATED,
                depth=depth,
                reason=TRUNCATION_ARRAY_SAMPLING,
                total_length=total_length,
                sampled_length=self.config.array_sample_size,
            )
        elif node.total_length is None or total_length > node.total_length:
            node.total_length = total_length

    def close_array(self, array_path: str, length: int, depth: int) -> None:
        """Finalize the observed length of an array and its sampling node."""
        node = self._nodes.get(array_path)
        if node is None or node.type != NodeType.ARRAY:
            return
        node.length = max(node.length or 0, length)
        if length > self.config.array_sample_size:
            self.record_sampling(array_path, depth + 1, length)

    def count_token(self, count: int = 1) -> None:
        self.stats.total_tokens += count

    def count_container(self, node_type: NodeType) -> None:
        if node_type == NodeType.OBJECT:
            self.stats.object_count += 1
        else:
            self.stats.array_count += 1

    def observe_depth(self, depth: int) -> None:
        if depth > self.stats.max_depth:
            self.stats.max_depth = depth

    def add_error(self, error: ParseError) -> None:
        self.stats.errors.append(error)

    def build(self, tier: Tier, partial: bool, complete: bool = True, **extra: Any) -> StructureReport:
        """Build a report from copies of the accumulated state."""
        structure: dict[str, StructureNode] = {}
        for path, node in self._nodes.items():
            if node.type == NodeType.OBJECT:
                structure[path] = replace(node, keys=list(self._key_sets.get(path, {})))
            else:
                structure[path] = replace(node)
        stats = replace(self.stats, errors=list(self.stats.errors))
        return StructureReport(
            structure=structure,
            stats=stats,
            tier=tier,
            partial=partial,
            complete=complete,
            **extra,
        )

    def _merge(self, path: str, node: StructureNode) -> None:
        existing = self._nodes.get(path)
        if existing is None:
            self._nodes[path] = node
        elif existing.type == NodeType.ARRAY and node.type == NodeType.ARRAY:
            existing.length = max(existing.length or 0, node.length or 0)
