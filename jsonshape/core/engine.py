"""
Tier controller for jsonshape - picks the strategy that can describe a document.

analyze() tries a whole-document parse first, falls back to the streaming
tokenizer, and finally to fragment recovery. Every path returns a
StructureReport annotated with the tier that produced it; only a source
that cannot be read raises.
"""

import json
import logging
from contextlib import nullcontext
from pathlib import Path
from typing import Any, ContextManager, Optional, Union

from ..recovery.strategies import FragmentRecoveryParser
from ..streaming.processor import DocumentSource, Source, StreamingProcessor
from ..utils.config import AnalysisConfig
from ..utils.timing import Timings
from .assembler import StructureAssembler
from .constants import BYTE_ORDER_MARK
from .report import StructureReport, Tier
from .walker import walk_value

logger = logging.getLogger(__name__)


def analyze(
    source: Source,
    config: Optional[AnalysisConfig] = None,
    timings: Optional[Timings] = None,
) -> StructureReport:
    """
    Describe the structure of a JSON document.

    Args:
        source: Document text, a path-like object, or an open text stream
        config: Optional AnalysisConfig with limits and thresholds
        timings: Optional caller-owned Timings handle; each tier that runs
            is timed into it and it is attached to the returned report

    Returns:
        StructureReport whose `tier` says which strategy produced it

    Raises:
        SourceReadError: If the source cannot be read
    """
    if config is None:
        config = AnalysisConfig()

    document = DocumentSource(source, config.encoding)
    text: Optional[str] = None

    if config.attempt_standard and document.size_hint() <= config.standard_parse_threshold:
        text = document.read_all()
        with _measure(timings, Tier.STANDARD.value):
            report = _attempt_standard(text, config)
        if report is not None:
            return _finish(report, timings)
        # Small enough to keep: later tiers reuse the text instead of re-reading
        document = DocumentSource(text)
    else:
        logger.info("Skipping whole-document parse for %s", document.name)

    with _measure(timings, Tier.STREAMING.value):
        report = _attempt_streaming(document, config)
    if report is not None:
        return _finish(report, timings)

    if text is None:
        text = document.read_all()
    with _measure(timings, Tier.PARTIAL.value):
        report = FragmentRecoveryParser(config).parse_partial(text)
    logger.info(
        "Fragment recovery finished for %s: fixed=%s, %d fragment(s)",
        document.name,
        report.fixed,
        len(report.fragments),
    )
    return _finish(report, timings)


def analyze_file(
    path: Union[str, Path],
    config: Optional[AnalysisConfig] = None,
    timings: Optional[Timings] = None,
) -> StructureReport:
    """Describe the structure of the JSON document stored at a path."""
    return analyze(Path(path), config, timings)


def _attempt_standard(text: str, config: AnalysisConfig) -> Optional[StructureReport]:
    """Whole-document parse followed by a structural walk, or None on failure."""
    if text.startswith(BYTE_ORDER_MARK):
        text = text[1:]
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.info("Whole-document parse failed, falling back to streaming: %s", e)
        return None

    assembler = StructureAssembler(config)
    walk_value(value, assembler)
    return assembler.build(Tier.STANDARD, partial=False)


def _attempt_streaming(
    document: DocumentSource, config: AnalysisConfig
) -> Optional[StructureReport]:
    """Run the streaming tokenizer, or return None when its result is unusable."""
    report, tokenizer = StreamingProcessor(config).process(document)

    if tokenizer.collapsed:
        reason = f"structural collapse ({tokenizer.tracker.collapse_reason})"
    elif tokenizer.over_error_budget:
        reason = f"{tokenizer.error_count} errors exceed the limit of {config.max_errors}"
    elif not tokenizer.has_root:
        reason = "no root value found"
    else:
        if report.partial:
            logger.info(
                "Streaming analysis of %s recovered from %d error(s)",
                document.name,
                tokenizer.error_count,
            )
        return report

    summary = tokenizer.tracker.get_error_summary()
    logger.warning(
        "Streaming analysis of %s abandoned: %s; error types %s, most common %s",
        document.name,
        reason,
        summary["error_types"],
        summary["most_common_errors"],
    )
    return None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _measure(timings: Optional[Timings], label: str) -> ContextManager[None]:
    if timings is None:
        return nullcontext()
    return timings.measure(label)


def _finish(report: StructureReport, timings: Optional[Timings]) -> StructureReport:
    report.timings = timings
    logger.debug(
        "Analysis finished by the %s tier: %d path(s), %d error(s)",
        report.tier.value,
        len(report.structure),
        report.stats.error_count,
    )
    return report
