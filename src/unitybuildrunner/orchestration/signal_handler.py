"""
Signal handling for the orchestration module.

This module translates SIGINT and SIGTERM into cancellation of the running
build, so the supervisor still kills the build tool and reports Cancelled.
"""

import logging
import signal
from typing import Any, Dict

from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

CANCEL_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SignalHandler:
    """
    Installs cancellation handlers for the duration of a supervised build.

    Python only delivers signals to the main thread. Installing from another
    thread logs a warning and leaves the existing handlers in place.
    """

    def __init__(self, token: CancellationToken):
        self.token = token
        self._previous: Dict[signal.Signals, Any] = {}

    @property
    def installed(self) -> bool:
        return bool(self._previous)

    def setup_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to the cancellation token."""
        for signum in CANCEL_SIGNALS:
            try:
                self._previous[signum] = signal.signal(signum, self._handle_signal)
            except (ValueError, OSError) as e:
                logger.warning(f"Could not install handler for {signum.name}: {e}")
        if self._previous:
            logger.debug(f"Cancellation handlers installed for {', '.join(s.name for s in self._previous)}")

    def cleanup_signal_handlers(self) -> None:
        """Put back whatever handlers were active before setup."""
        while self._previous:
            signum, handler = self._previous.popitem()
            if handler is None:
                # installed outside Python; nothing to restore
                continue
            try:
                signal.signal(signum, handler)
            except (ValueError, OSError) as e:
                logger.warning(f"Could not restore handler for {signum.name}: {e}")

    def __enter__(self) -> "SignalHandler":
        self.setup_signal_handlers()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup_signal_handlers()

    def _handle_signal(self, signum: int, frame: Any) -> None:
        name = signal.Signals(signum).name
        if self.token.cancel(f"Signal {name} received, operation cancelled."):
            logger.warning(f"Signal {name} received. Cancelling build.")
        else:
            logger.warning(f"Signal {name} received, cancellation already in progress.")
