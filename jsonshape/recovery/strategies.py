"""
Fragment recovery for jsonshape - salvage what is parseable from damaged JSON.

This is the terminal fallback tier. It first applies a small set of fixes
for common corruption and retries a whole-document parse. If that still
fails, it scans for leaf-level containers that parse on their own and
reports them as fragments.
"""

import json
import logging
from typing import Any, Optional

import regex

from ..core.assembler import StructureAssembler
from ..core.constants import BYTE_ORDER_MARK
from ..core.report import Fragment, NodeType, ParseError, StructureReport, Tier
from ..core.walker import walk_value
from ..utils.config import AnalysisConfig

logger = logging.getLogger(__name__)

# Leaf-level containers: no inner brackets of the same kind
_FRAGMENT_PATTERNS = {
    NodeType.OBJECT: regex.compile(r"\{[^{}]*\}"),
    NodeType.ARRAY: regex.compile(r"\[[^\[\]]*\]"),
}
# String literals are matched whole so commas inside them are left alone
_TRAILING_COMMA = regex.compile(r'("(?:[^"\\]|\\.)*")|,(\s*[}\]])')
_UNPARSABLE = object()


def fix_common_issues(text: str, timeout: float = 5.0) -> str:
    """
    Apply fixes for common corruption.

    Strips a leading byte order mark and removes trailing commas directly
    before a closing bracket, outside string literals. On a regex timeout
    the text is returned with only the byte order mark removed.
    """
    if text.startswith(BYTE_ORDER_MARK):
        text = text[1:]
    try:
        return _TRAILING_COMMA.sub(_drop_trailing_comma, text, timeout=timeout)
    except TimeoutError:
        logger.warning("Trailing comma fix timed out after %.1fs", timeout)
        return text


def _drop_trailing_comma(match: Any) -> str:
    if match.group(1) is not None:
        return match.group(1)
    return match.group(2)


class FragmentRecoveryParser:
    """Extracts independently parseable containers from damaged content."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def recover(self, text: str) -> list[Fragment]:
        """
        Find leaf-level objects and arrays that parse on their own.

        Args:
            text: Raw document content

        Returns:
            Fragments sorted by position. Candidates that fail to parse or
            lie inside an accepted fragment are dropped. Never raises.
        """
        candidates = []
        for node_type, pattern in _FRAGMENT_PATTERNS.items():
            candidates.extend(self._scan(text, node_type, pattern))

        # Outer candidates first so nested ones can be skipped
        candidates.sort(key=lambda c: (c[1], -len(c[2])))

        fragments: list[Fragment] = []
        covered_until = -1
        for node_type, position, content in candidates:
            if position < covered_until:
                continue
            parsed = self._parse_candidate(content)
            if parsed is _UNPARSABLE:
                continue
            fragments.append(Fragment(node_type, position, content, parsed))
            covered_until = position + len(content)

        logger.debug("Recovered %d fragment(s) from %d candidate(s)", len(fragments), len(candidates))
        return fragments

    def parse_partial(self, text: str) -> StructureReport:
        """
        Analyze damaged content.

        If the fixed text parses as a whole, its structure is walked and the
        report is marked fixed. Otherwise the report carries fragments and is
        marked corrupted.
        """
        fixed_text = fix_common_issues(text, self.config.fragment_timeout)
        assembler = StructureAssembler(self.config)

        try:
            value = json.loads(fixed_text)
        except json.JSONDecodeError as e:
            error = ParseError(
                e.pos, fixed_text[e.pos : e.pos + 1], f"Document is not valid JSON: {e.msg}", e.lineno, e.colno
            )
        except RecursionError:
            error = ParseError(0, "", "Document is nested too deeply to parse")
        except ValueError as e:
            error = ParseError(0, "", f"Document could not be converted: {e}")
        else:
            walk_value(value, assembler)
            logger.info("Common corruption fixes made the document parseable")
            return assembler.build(Tier.PARTIAL, partial=True, fixed=True)

        assembler.add_error(error)
        fragments = self.recover(text)
        return assembler.build(Tier.PARTIAL, partial=True, fragments=fragments, corrupted=True)

    def _scan(self, text: str, node_type: NodeType, pattern: Any) -> list[tuple[NodeType, int, str]]:
        found = []
        try:
            for match in pattern.finditer(text, timeout=self.config.fragment_timeout):
                found.append((node_type, match.start(), match.group()))
        except TimeoutError:
            logger.warning(
                "Fragment scan for %s candidates timed out after %.1fs; keeping %d found so far",
                node_type.value,
                self.config.fragment_timeout,
                len(found),
            )
        return found

    @staticmethod
    def _parse_candidate(content: str) -> Any:
        try:
            return json.loads(content)
        except (ValueError, RecursionError):
            return _UNPARSABLE


def recover(text: str, config: Optional[AnalysisConfig] = None) -> list[Fragment]:
    """Extract independently parseable fragments from damaged content."""
    return FragmentRecoveryParser(config).recover(text)


def parse_partial(text: str, config: Optional[AnalysisConfig] = None) -> StructureReport:
    """Run the partial tier over damaged content and return its report."""
    return FragmentRecoveryParser(config).parse_partial(text)
