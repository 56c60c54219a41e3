"""
Recovery core module.

This module contains the error accounting used by the streaming tokenizer to
decide when its context stack can no longer be trusted.
"""

from .tracker import ErrorTracker, RecoveryState

__all__ = ["ErrorTracker", "RecoveryState"]
