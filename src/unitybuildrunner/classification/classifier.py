"""
Build log error classification.

The editor's exit code is not trustworthy, so failures are detected by
matching known signatures in the free-text build log. Patterns are compiled
once per classifier and evaluated against every drained chunk of log text.
"""

import logging
import re
from typing import Iterable, List, Sequence, Tuple

from ..models.build import ClassificationResult
from ..validation import validate_enum_choice, validate_regex_pattern

logger = logging.getLogger(__name__)

# Script compilation and player build failures.
COMPILER_ERROR_PATTERNS: Tuple[str, ...] = (
    "compilationhadfailure: True",
    "DisplayProgressNotification: Build Failed",
    r"error CS\d+",
    "Error building Player because scripts had compiler errors",
)

# Shader compilation failures, flagged only by the strict set.
SHADER_ERROR_PATTERNS: Tuple[str, ...] = (
    "Compilation failed",
)

# Editor-level failures that prevent any build from starting.
EDITOR_ERROR_PATTERNS: Tuple[str, ...] = (
    # Only one editor process may open a given project path.
    "Multiple Unity instances cannot open the same project.",
    # The license must be activated before a batch build.
    "Unity has not been activated",
)

DEFAULT_PATTERNS: Tuple[str, ...] = COMPILER_ERROR_PATTERNS + EDITOR_ERROR_PATTERNS
STRICT_PATTERNS: Tuple[str, ...] = COMPILER_ERROR_PATTERNS + SHADER_ERROR_PATTERNS + EDITOR_ERROR_PATTERNS

PATTERN_SETS = {
    "default": DEFAULT_PATTERNS,
    "strict": STRICT_PATTERNS,
}

_REGEX_FLAGS = re.IGNORECASE | re.MULTILINE


class ErrorClassifier:
    """
    Stateless matcher of failure signatures in build log text.

    Patterns keep their given order, and each pattern yields at most one
    result per call to `classify`.
    """

    def __init__(self, patterns: Iterable[str]):
        self._patterns: Tuple[str, ...] = tuple(patterns)
        self._regexes: List[re.Pattern] = [re.compile(p, _REGEX_FLAGS) for p in self._patterns]

    @property
    def patterns(self) -> Tuple[str, ...]:
        return self._patterns

    def classify(self, text: str) -> List[ClassificationResult]:
        """Match every configured signature against a chunk of log text.

        Args:
            text: Newly drained log text.

        Returns:
            One ClassificationResult per pattern found anywhere in `text`,
            in pattern order. Empty when the text is clean.
        """
        results = []
        if not text:
            return results

        for regex in self._regexes:
            match = regex.search(text)
            if match is None:
                continue
            results.append(ClassificationResult(
                pattern=regex.pattern,
                text=text,
                match=match.group(0),
                line=_line_at(text, match.start()),
            ))
        return results


def _line_at(text: str, position: int) -> str:
    """Return the full line of `text` containing `position`."""
    start = text.rfind("\n", 0, position) + 1
    end = text.find("\n", position)
    if end == -1:
        end = len(text)
    return text[start:end].rstrip("\r")


def create_classifier(pattern_set: str = "default", extra_patterns: Sequence[str] = ()) -> ErrorClassifier:
    """Build a classifier for a named pattern set.

    Args:
        pattern_set: "default", or "strict" to also flag shader compilation
            failures.
        extra_patterns: Additional regex signatures appended after the
            built-in set.

    Returns:
        A ready ErrorClassifier.

    Raises:
        ValidationError: If the set name or an extra pattern is invalid.
    """
    name = validate_enum_choice(
        pattern_set,
        choices=list(PATTERN_SETS),
        field_name="classifier.pattern_set",
        case_sensitive=False,
    )
    extras = []
    for index, pattern in enumerate(extra_patterns):
        extras.append(validate_regex_pattern(pattern, field_name=f"classifier.extra_patterns[{index}]"))

    patterns = PATTERN_SETS[name] + tuple(extras)
    logger.debug(f"Created '{name}' error classifier with {len(patterns)} patterns")
    return ErrorClassifier(patterns)
