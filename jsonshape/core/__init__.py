"""
jsonshape Core Analysis Engine.

This module provides the tier controller, the streaming tokenizer and the
structure report model shared by every tier.
"""

from .engine import analyze, analyze_file
from .report import Fragment, NodeType, ParseError, ReportStats, StructureNode, StructureReport, Tier
from .tokenizer import StreamingTokenizer, TokenizerState, feed, finalize
from .walker import walk_value

__all__ = [
    'analyze', 'analyze_file',
    'StreamingTokenizer', 'TokenizerState', 'feed', 'finalize',
    'walk_value',
    'Fragment', 'NodeType', 'ParseError', 'ReportStats', 'StructureNode', 'StructureReport', 'Tier'
]
