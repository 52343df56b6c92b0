"""
Build log classification for the unitybuildrunner package.

This module matches build log text against known failure signatures.
"""

from .classifier import (
    COMPILER_ERROR_PATTERNS,
    DEFAULT_PATTERNS,
    EDITOR_ERROR_PATTERNS,
    PATTERN_SETS,
    SHADER_ERROR_PATTERNS,
    STRICT_PATTERNS,
    ErrorClassifier,
    create_classifier,
)

__all__ = [
    "COMPILER_ERROR_PATTERNS",
    "DEFAULT_PATTERNS",
    "EDITOR_ERROR_PATTERNS",
    "PATTERN_SETS",
    "SHADER_ERROR_PATTERNS",
    "STRICT_PATTERNS",
    "ErrorClassifier",
    "create_classifier",
]
