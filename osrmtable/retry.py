"""
Purpose: Fixed-delay, bounded retry.

No exponential backoff and no jitter: every failure costs one attempt and the
same delay, whatever its type. The caller decides what to do once the budget
is spent by looking at the RetryOutcome.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_DELAY_S = 1.0


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    """Either the value of the successful attempt, or the last error once exhausted."""
    value: Optional[T]
    attempts: int
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def exhausted(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay_s: float = DEFAULT_DELAY_S
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    sleep: Callable[[float], None] = time.sleep

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        if self.delay_s < 0:
            raise ValueError("delay_s must not be negative.")

    def run(self, fn: Callable[[], T]) -> RetryOutcome[T]:
        """
        Call fn until it returns or max_attempts calls have failed.
        Exceptions outside retry_on propagate immediately.
        Sleeps delay_s between attempts, not after the last one.
        """
        last_error: Optional[BaseException] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return RetryOutcome(value=fn(), attempts=attempt)
            except self.retry_on as e:
                last_error = e
                logger.warning(f"Attempt {attempt}/{self.max_attempts} failed: {e}")
                if attempt < self.max_attempts:
                    self.sleep(self.delay_s)
        return RetryOutcome(value=None, attempts=self.max_attempts, error=last_error)
