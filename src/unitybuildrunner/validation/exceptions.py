"""
Exception types and error handling helpers.

This module provides the error types raised across the runner and a small
helper for consistent logging of errors before they are re-raised or mapped
to an exit code.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

_module_logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the main exception type used for configuration, argument and
    build request validation.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class BuildRunnerError(Exception):
    """Base class for infrastructure errors raised while supervising a build."""


class ProcessLaunchError(BuildRunnerError):
    """The operating system refused to create the build tool process."""

    def __init__(self, message: str, command: str):
        super().__init__(message)
        self.command = command


class LogFileOpenError(BuildRunnerError):
    """The build log exists but could not be opened for shared reading."""

    def __init__(self, message: str, log_file_path: str):
        super().__init__(message)
        self.log_file_path = log_file_path


_LOG_LEVELS = {
    ErrorSeverity.DEBUG: logging.DEBUG,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log an error under a context label, then optionally re-raise it.

    Tracebacks are attached at DEBUG and CRITICAL severity only.

    Args:
        error: The exception to report
        context: Where the error occurred, e.g. "log file preparation"
        severity: An ErrorSeverity or its string value
        reraise: Re-raise ``error`` after logging
        logger: Logger to write to instead of this module's logger
    """
    if isinstance(severity, str):
        severity = ErrorSeverity(severity.lower())
    level = _LOG_LEVELS[severity]

    (logger or _module_logger).log(
        level,
        f"Error in {context}: {error}",
        exc_info=severity in (ErrorSeverity.DEBUG, ErrorSeverity.CRITICAL),
    )

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Report an error raised while loading or validating configuration."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(
    error: Exception,
    context: str,
    exit_code: int = 1,
    include_traceback: bool = False,
    **kwargs
) -> None:
    """Log a CLI error and exit the interpreter with ``exit_code``."""
    kwargs.setdefault('severity', ErrorSeverity.CRITICAL if include_traceback else ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", reraise=False, **kwargs)
    sys.exit(exit_code)
