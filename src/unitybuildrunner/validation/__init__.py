"""
Validation and error handling for the unitybuildrunner package.

This module provides input validation and error handling with consistent
error reporting across the application.
"""

# Core exception classes and error handling
from .exceptions import (
    BuildRunnerError,
    ErrorSeverity,
    LogFileOpenError,
    ProcessLaunchError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)

# Retry strategy
from .strategies import simple_retry

# Validation functions
from .validators import (
    validate_enum_choice,
    validate_file_exists,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
    validate_regex_pattern,
    validate_timeout,
)

__all__ = [
    # Core functionality
    "BuildRunnerError",
    "ErrorSeverity",
    "LogFileOpenError",
    "ProcessLaunchError",
    "ValidationError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    # Strategies
    "simple_retry",
    # Validators
    "validate_enum_choice",
    "validate_file_exists",
    "validate_path_exists",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_regex_pattern",
    "validate_timeout",
]
