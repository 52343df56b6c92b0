"""
Retry helpers.

The runner has a single transient-failure case worth retrying: deleting the
previous run's log file while the previous editor process may still hold it.
"""

import logging
import time
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


def simple_retry(
    func: Callable[[], T],
    max_attempts: int = 3,
    delay: float = 1.0,
    context: str = "operation",
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], object] = time.sleep,
) -> T:
    """
    Call ``func`` until it returns, at most ``max_attempts`` times.

    Only exceptions listed in ``retry_on`` lead to another attempt; anything
    else propagates immediately. Between attempts ``sleep(delay)`` is called.
    A sleep that returns True stops retrying, so a cancellable wait can be
    passed in.

    Returns:
        Whatever ``func`` returned

    Raises:
        ValueError: If ``max_attempts`` is less than 1
        Exception: The exception from the final attempt made
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    attempt = 1
    while True:
        try:
            result = func()
        except retry_on as e:
            if attempt == max_attempts:
                logger.error(f"{context} failed after {max_attempts} attempts: {e}")
                raise
            logger.warning(f"{context} failed (attempt {attempt}/{max_attempts}): {e}")
            if sleep(delay) is True:
                logger.info(f"Gave up retrying {context} after attempt {attempt}")
                raise
            attempt += 1
        else:
            if attempt > 1:
                logger.info(f"{context} succeeded on attempt {attempt}")
            return result
