"""
Shared data structures for the orchestration module.

This module defines the supervisor's state enumeration, the outcome latch and
the per-run runtime state.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..models.build import BuildOutcome, BuildRequest, ClassificationResult
from .cancellation import CancellationToken
from .process_manager import ProcessHandle

logger = logging.getLogger(__name__)


class SupervisorState(Enum):
    """Phases of a supervised build, in order."""
    STARTING = "starting"
    AWAITING_LOG_FILE = "awaiting_log_file"
    TAILING = "tailing"
    FINALIZING = "finalizing"
    DONE = "done"


class OutcomeLatch:
    """
    Holds the first terminating condition observed during a run.

    Later conditions are ignored, so a classified failure is never
    overwritten by a timeout that fires while the process is being killed.
    """

    def __init__(self):
        self.outcome: Optional[BuildOutcome] = None
        self.message: str = ""
        self.classification: Optional[ClassificationResult] = None

    @property
    def is_set(self) -> bool:
        return self.outcome is not None

    def latch(
        self,
        outcome: BuildOutcome,
        message: str = "",
        classification: Optional[ClassificationResult] = None,
    ) -> bool:
        """Record `outcome` unless one is already latched.

        Returns:
            True if this call set the outcome.
        """
        if self.outcome is not None:
            logger.debug(f"Ignoring {outcome}, outcome already latched as {self.outcome}")
            return False
        self.outcome = outcome
        self.message = message
        self.classification = classification
        return True


@dataclass
class RuntimeState:
    """
    Runtime state of a single supervised build.

    Created at the start of `BuildSupervisor.run` and discarded when it
    returns; nothing is shared across runs.
    """
    request: BuildRequest
    token: CancellationToken
    started_at: float = field(default_factory=time.monotonic)
    latch: OutcomeLatch = field(default_factory=OutcomeLatch)
    process: Optional[ProcessHandle] = None
    # Exit code of the build tool, recorded only when it exited on its own.
    native_exit_code: Optional[int] = None

    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def remaining(self) -> float:
        """Seconds left before the build timeout, never negative."""
        return max(0.0, self.request.timeout - self.elapsed())
