"""
Cooperative cancellation for a supervised build.
"""

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    A one-shot cancellation flag that sleeping code can wait on.

    `cancel` may be called from any thread or from a signal handler. Every
    sleep in the supervisor goes through `wait`, so a cancellation wakes the
    supervisor immediately instead of after the current poll interval.
    """

    def __init__(self):
        self._event = threading.Event()
        self._reason: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: str = "Operation cancelled.") -> bool:
        """Request cancellation. Repeated calls keep the first reason.

        Returns:
            True if this call cancelled the token, False if it was already
            cancelled.
        """
        if self._event.is_set():
            return False
        self._reason = reason
        self._event.set()
        logger.debug(f"Cancellation requested: {reason}")
        return True

    def wait(self, seconds: float) -> bool:
        """Sleep up to `seconds`, returning early on cancellation.

        Returns:
            True if the token is cancelled.
        """
        return self._event.wait(max(0.0, seconds))
