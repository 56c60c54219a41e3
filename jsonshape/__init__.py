"""
jsonshape - Structural description of JSON documents, even broken or huge ones.

jsonshape reports the shape of a JSON document: which paths exist, the
nesting of objects and arrays, the keys observed and basic statistics. It
does not need the whole document to parse, and it does not need the whole
document in memory.

Key Features:
- Tiered analysis: whole-document parse, streaming tokenizer, fragment recovery
- Resumable tokenizer that accepts chunks of any size
- Forward-progress error recovery with structural collapse detection
- Array sampling and depth caps that keep reports bounded by shape, not size
- Reports annotated with the tier that produced them

Quick Start:
    import jsonshape
    report = jsonshape.analyze('{"a": {"b": 1}, "c": [1, 2, 3]}')
    report.paths  # ['', 'a', 'a.b', 'c', 'c[0]', 'c[1]', 'c[2]']

    # Large files are streamed in chunks
    report = jsonshape.analyze_file("timeline.json")

    # Drive the tokenizer yourself
    from jsonshape import StreamingTokenizer
    tokenizer = StreamingTokenizer()
    for chunk in chunks:
        tokenizer.feed(chunk)
    report = tokenizer.finalize()
"""

from .core.engine import analyze, analyze_file
from .core.report import Fragment, NodeType, ParseError, ReportStats, StructureNode, StructureReport, Tier
from .core.tokenizer import StreamingTokenizer, feed, finalize
from .core.walker import walk_value
from .recovery.strategies import FragmentRecoveryParser, parse_partial, recover
from .security.exceptions import AnalysisError, SourceReadError, TokenizerStateError
from .utils.config import AnalysisBehavior, AnalysisConfig, RecoverySettings, ShapeLimits, StreamingConfig
from .utils.timing import Timings

__version__ = "0.1.0"
__author__ = "jsonshape contributors"

__all__ = [
    # Analysis entry points
    "analyze", "analyze_file",
    # Streaming tokenizer
    "StreamingTokenizer", "feed", "finalize", "walk_value",
    # Fragment recovery
    "recover", "parse_partial", "FragmentRecoveryParser",
    # Configuration classes
    "AnalysisConfig", "AnalysisBehavior", "RecoverySettings", "ShapeLimits", "StreamingConfig",
    # Report model
    "StructureReport", "StructureNode", "ReportStats", "ParseError", "Fragment", "NodeType", "Tier",
    "Timings",
    # Exception classes
    "AnalysisError", "SourceReadError", "TokenizerStateError",
]
