"""
Incremental reading of the build tool's log file.

The build tool is the only writer of its log and only ever appends; the
tailer is the only reader and only ever reads forward from its own cursor.
"""

import codecs
import logging
import time
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

from ..validation import LogFileOpenError, simple_retry

logger = logging.getLogger(__name__)


class LogTailer:
    """
    Returns the text appended to a log file since the previous read.

    The file is opened read-only, which on every supported platform allows
    the writer to keep the file open and continue appending.
    """

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self._file: Optional[BinaryIO] = None
        # Holds back an incomplete multi-byte sequence until the next drain.
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._position = 0

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._position

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def open(self) -> "LogTailer":
        """
        Open the log file for shared reading.

        Raises:
            LogFileOpenError: If the file cannot be opened
        """
        if self._file is not None:
            return self
        try:
            self._file = open(self.path, "rb")
        except OSError as e:
            raise LogFileOpenError(
                f"Could not open log file for shared reading: {e}", str(self.path)
            ) from e
        logger.debug(f"Opened log file for tailing: {self.path}")
        return self

    def drain(self) -> str:
        """
        Read everything appended since the previous call.

        Returns:
            The new text, or an empty string if nothing was appended.

        Raises:
            RuntimeError: If the tailer has not been opened
        """
        if self._file is None:
            raise RuntimeError(f"Log tailer for {self.path} is not open")

        data = self._file.read()
        if not data:
            return ""
        self._position += len(data)
        return self._decoder.decode(data)

    def close(self) -> None:
        if self._file is None:
            return
        try:
            self._file.close()
        finally:
            self._file = None

    def __enter__(self) -> "LogTailer":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def prepare_log_file(
    path: Union[str, Path],
    attempts: int = 10,
    delay: float = 1.0,
    sleep: Callable[[float], object] = time.sleep,
) -> bool:
    """
    Delete the log file left behind by a previous run.

    The previous editor process may still be releasing the file, so deletion
    is retried. Failure is not fatal: the build proceeds with the stale file.

    Args:
        path: Log file path
        attempts: Maximum number of deletion attempts
        delay: Seconds between attempts
        sleep: Delay function; returning True stops retrying early

    Returns:
        True if no file remains at `path`, False if deletion never succeeded
    """
    log_path = Path(path)
    if not log_path.exists():
        return True

    try:
        simple_retry(
            lambda: log_path.unlink(missing_ok=True),
            max_attempts=attempts,
            delay=delay,
            context=f"deleting log file {log_path}",
            retry_on=(OSError,),
            sleep=sleep,
        )
    except OSError as e:
        logger.warning(f"Couldn't delete log file {log_path}, continuing with the stale file: {e}")
        return False

    logger.debug(f"Deleted previous log file: {log_path}")
    return True
