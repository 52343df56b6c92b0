"""
Build data models.

This module contains the structures that flow through a supervised build:
the immutable request, classifier matches, the outcome variants with their
stable exit codes, and the final result handed back to the caller.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from ..system.arguments import format_argument_string


class BuildOutcome(Enum):
    """
    Terminal classification of a supervised build.

    Each member carries the process exit code reported to callers and CI.
    """

    SUCCESS = ("Success", 0)
    # Fallback only. The wrapped process's own non-zero code passes through.
    UNDERLYING_PROCESS_NON_ZERO_EXIT = ("UnderlyingProcessNonZeroExit", 1)
    CLASSIFIED_FAILURE_DETECTED = ("ClassifiedFailureDetected", 9900)
    PROCESS_LAUNCH_FAILED = ("ProcessLaunchFailed", 9901)
    PROCESS_EXITED_IMMEDIATELY = ("ProcessExitedImmediately", 9902)
    TIMED_OUT = ("TimedOut", 9903)
    CANCELLED = ("Cancelled", 9904)
    LOG_FILE_NEVER_APPEARED = ("LogFileNeverAppeared", 9905)
    UNKNOWN_ERROR = ("UnknownError", 9999)

    def __init__(self, label: str, exit_code: int):
        self.label = label
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.label


def resolve_exit_code(outcome: BuildOutcome, native_exit_code: Optional[int]) -> int:
    """Resolve the process exit code for a finished build.

    A classified failure always reports its own code. Otherwise a non-zero
    native exit code from the wrapped process is surfaced. A process killed
    by signal N reports 128 + N, as a shell would. In every remaining case the
    outcome's code is used.

    Args:
        outcome: The latched build outcome.
        native_exit_code: Exit code of the wrapped process if it exited on its
            own, None if it never ran or was killed by the supervisor.

    Returns:
        The numeric exit code.
    """
    if outcome is BuildOutcome.CLASSIFIED_FAILURE_DETECTED:
        return outcome.exit_code
    if native_exit_code:
        # Popen reports death by signal N as -N
        return native_exit_code if native_exit_code > 0 else 128 - native_exit_code
    return outcome.exit_code


@dataclass(frozen=True)
class BuildRequest:
    """
    Everything needed to launch and supervise one batch build.

    Created once per invocation by `create_build_request`, which enforces
    that the executable exists and the log file is a real path.
    """

    # Path to the build tool executable.
    executable: str
    # Arguments passed to the build tool, including `-logFile <log_file>`.
    args: Tuple[str, ...]
    # Directory the build tool is started in.
    working_dir: str
    # Log file path as given on the command line.
    log_file: str
    # Overall timeout in seconds.
    timeout: float

    @property
    def log_file_path(self) -> Path:
        """Log file path resolved against the working directory."""
        return Path(self.working_dir, os.path.expanduser(self.log_file))

    @property
    def argument_string(self) -> str:
        """Arguments joined for display, with values quoted."""
        return format_argument_string(self.args)


@dataclass(frozen=True)
class ClassificationResult:
    """A failure signature found in build log text."""

    # The regex pattern that matched.
    pattern: str
    # The chunk of log text the pattern was matched against.
    text: str
    # The exact substring that matched.
    match: str
    # The complete log line containing the match.
    line: str


@dataclass(frozen=True)
class BuildResult:
    """
    The final report of a supervised build.
    """

    outcome: BuildOutcome
    exit_code: int
    # Exit code of the wrapped process when it exited on its own.
    native_exit_code: Optional[int]
    elapsed_seconds: float
    message: str = ""
    classification: Optional[ClassificationResult] = None
    pid: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is BuildOutcome.SUCCESS and self.exit_code == 0
