"""
jsonshape Fragment Recovery System.

This module salvages structure and fragments from documents too damaged for
the streaming tokenizer.
"""

from . import _exports
from .strategies import FragmentRecoveryParser, fix_common_issues, parse_partial, recover

__all__ = [
    "recover",
    "parse_partial",
    *_exports.RECOVERY_EXPORTS,
]
