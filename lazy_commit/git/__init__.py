"""Git Operations Package"""

from lazy_commit.git.analyzer import GitAnalyzer, FileChange
from lazy_commit.git.guard import (
    DiffGuard,
    SensitiveMatch,
    SensitivePattern,
    SENSITIVE_PATTERNS,
    scan_diff,
    validate_staged_changes,
)

__all__ = [
    "GitAnalyzer",
    "FileChange",
    "DiffGuard",
    "SensitiveMatch",
    "SensitivePattern",
    "SENSITIVE_PATTERNS",
    "scan_diff",
    "validate_staged_changes",
]
