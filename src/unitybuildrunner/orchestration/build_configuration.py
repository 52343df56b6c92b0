"""
Build request preparation for the orchestration module.

This module validates the caller's inputs and turns them into an immutable
BuildRequest with a guaranteed, tailable `-logFile` argument.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Sequence

from ..models.build import BuildRequest
from ..system.arguments import (
    DEFAULT_LOG_FILE_NAME,
    ensure_log_file_argument,
    format_argument_string,
    normalize_arguments,
    strip_quotes,
)
from ..validation import (
    ValidationError,
    validate_file_exists,
    validate_path_exists,
    validate_timeout,
)

logger = logging.getLogger(__name__)


def create_build_request(
    executable: str,
    args: Sequence[str],
    timeout: Any,
    working_dir: Optional[str] = None,
    default_log_file: str = DEFAULT_LOG_FILE_NAME,
) -> BuildRequest:
    """
    Validate inputs and create a BuildRequest.

    Args:
        executable: Path to the build tool executable
        args: Build tool arguments
        timeout: Overall timeout, as seconds or a `[d.]hh:mm:ss` string
        working_dir: Directory to start the build tool in, defaults to the
            current directory
        default_log_file: Log file injected when `-logFile` is missing or
            cannot be tailed

    Returns:
        The validated BuildRequest

    Raises:
        ValidationError: If any input is invalid
    """
    executable = validate_file_exists(executable, field_name="unity_path")
    timeout_seconds = validate_timeout(timeout, field_name="timeout")

    arguments = normalize_arguments([strip_quotes(arg) for arg in args])
    if not arguments:
        raise ValidationError(
            "Build tool arguments are missing. Pass at least one argument for the build tool.",
            field_name="args",
            value=list(args),
        )

    arguments, log_file = ensure_log_file_argument(arguments, default_log_file)

    try:
        format_argument_string(arguments)
    except ValueError as e:
        raise ValidationError(str(e), field_name="args", value=arguments) from e

    working_dir = validate_path_exists(
        Path(working_dir or os.getcwd()).resolve(), field_name="working_dir"
    )

    request = BuildRequest(
        executable=executable,
        args=tuple(arguments),
        working_dir=working_dir,
        log_file=log_file,
        timeout=timeout_seconds,
    )
    logger.debug(f"Created build request for {executable} logging to {request.log_file_path}")
    return request
