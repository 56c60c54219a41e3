"""Shared recovery module exports."""

RECOVERY_EXPORTS = [
    "FragmentRecoveryParser",
    "fix_common_issues",
]
