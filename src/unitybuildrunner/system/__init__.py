"""
System interaction utilities for the unitybuildrunner package.

This module covers the build tool's command line and the environment
lookups used to locate the build tool.
"""

from .arguments import (
    DEFAULT_LOG_FILE_NAME,
    LOG_FILE_FLAG,
    ensure_log_file_argument,
    format_argument_string,
    is_valid_log_file_name,
    normalize_arguments,
    parse_log_file,
    quote_argument,
    strip_quotes,
)
from .environment import BUILD_TOOL_ENV_KEY, resolve_build_tool_path

__all__ = [
    # Arguments
    "DEFAULT_LOG_FILE_NAME",
    "LOG_FILE_FLAG",
    "ensure_log_file_argument",
    "format_argument_string",
    "is_valid_log_file_name",
    "normalize_arguments",
    "parse_log_file",
    "quote_argument",
    "strip_quotes",
    # Environment
    "BUILD_TOOL_ENV_KEY",
    "resolve_build_tool_path",
]
