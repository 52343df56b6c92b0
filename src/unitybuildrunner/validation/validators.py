"""
Validation functions for configuration values, command-line options and
build requests.

Every validator returns the normalized value or raises ValidationError naming
the offending field.
"""

import math
import os
import re
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar, Union

from .exceptions import ValidationError

N = TypeVar('N', int, float)

# "[d.]hh:mm:ss[.fff]", e.g. "02:00:00" or "1.00:30:00"
_TIMESPAN_PATTERN = re.compile(
    r'^(?:(?P<days>\d+)\.)?(?P<hours>\d+):(?P<minutes>[0-5]?\d):(?P<seconds>[0-5]?\d(?:\.\d+)?)$'
)


def _validate_number(
    value: Any,
    cast: Callable[[Any], N],
    kind: str,
    min_value: N,
    max_value: Optional[N],
    field_name: str,
) -> N:
    # bool is an int subclass, but `true` in a TOML file is never a count
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a valid {kind}, got {value}", field_name, value)
    try:
        number = cast(value)
    except (ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a valid {kind}, got {value}", field_name, value)

    if number < min_value:
        raise ValidationError(f"{field_name} must be >= {min_value}, got {number}", field_name, value)
    if max_value is not None and number > max_value:
        raise ValidationError(f"{field_name} must be <= {max_value}, got {number}", field_name, value)
    return number


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate an integer within inclusive bounds.

    Raises:
        ValidationError: If the value is not an integer or out of bounds
    """
    return _validate_number(value, int, "integer", min_value, max_value, field_name)


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate a number within inclusive bounds, returned as float.

    Raises:
        ValidationError: If the value is not a number or out of bounds
    """
    return _validate_number(value, float, "number", min_value, max_value, field_name)


def validate_path_exists(path: Union[str, Path], field_name: str = "path") -> str:
    """Validate that a path exists and return it as a string."""
    path_str = str(path)
    if not os.path.exists(path_str):
        raise ValidationError(f"{field_name} does not exist: {path_str}", field_name, path_str)
    return path_str


def validate_file_exists(path: Union[str, Path], field_name: str = "file") -> str:
    """Validate that a path exists and is a regular file."""
    path_str = validate_path_exists(path, field_name=field_name)
    if not os.path.isfile(path_str):
        raise ValidationError(f"{field_name} is not a file: {path_str}", field_name, path_str)
    return path_str


def validate_regex_pattern(pattern: str, field_name: str = "regex_pattern") -> str:
    """
    Validate that `pattern` is a non-empty, compilable regular expression.

    Raises:
        ValidationError: If the pattern is empty or does not compile
    """
    if not isinstance(pattern, str) or not pattern:
        raise ValidationError(f"{field_name} must be a non-empty string", field_name, pattern)

    try:
        re.compile(pattern)
    except re.error as e:
        raise ValidationError(f"{field_name} is not a valid regex pattern: {e}", field_name, pattern)
    return pattern


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Returns:
        The matching choice, spelled as in ``choices``

    Raises:
        ValidationError: If value is not in choices
    """
    text = str(value)
    if case_sensitive:
        matches = [choice for choice in choices if choice == text]
    else:
        matches = [choice for choice in choices if choice.lower() == text.lower()]

    if not matches:
        raise ValidationError(f"{field_name} must be one of {choices}, got {value}", field_name, value)
    return matches[0]


def validate_timeout(value: Any, field_name: str = "timeout") -> float:
    """
    Validate a timeout and convert it to seconds.

    Accepts a number of seconds (int, float or numeric string) or a
    timespan string in ``[d.]hh:mm:ss[.fff]`` form such as ``"02:00:00"``.

    Args:
        value: Timeout value to validate
        field_name: Name of the field being validated

    Returns:
        Timeout in seconds, always > 0

    Raises:
        ValidationError: If the value cannot be parsed or is not positive
    """
    if isinstance(value, str):
        text = value.strip()
        match = _TIMESPAN_PATTERN.match(text)
        if match:
            seconds = (
                int(match.group("days") or 0) * 86400
                + int(match.group("hours")) * 3600
                + int(match.group("minutes")) * 60
                + float(match.group("seconds"))
            )
        else:
            try:
                seconds = float(text)
            except ValueError:
                raise ValidationError(
                    f"{field_name} must be seconds or a 'hh:mm:ss' timespan, got {value!r}",
                    field_name=field_name,
                    value=value
                )
    else:
        seconds = validate_positive_float(value, field_name=field_name)

    if not math.isfinite(seconds) or seconds <= 0:
        raise ValidationError(
            f"{field_name} must be a finite number of seconds greater than zero, got {value!r}",
            field_name=field_name,
            value=value
        )
    return seconds
