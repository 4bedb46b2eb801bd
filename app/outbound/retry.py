"""
Messenger Sentiment Responder
Outbound retry policy

Delivery is attempted inline by the orchestrator; a RetryPolicy only says
whether (and after how long) to try again. There is no retry queue.
"""

from __future__ import annotations

from typing import Optional, Protocol

from app.errors import DeliveryError

MAX_ATTEMPTS = 3
BASE_DELAY_SECONDS = 0.5
BACKOFF_CAP_SECONDS = 30.0


class RetryPolicy(Protocol):
    def next_delay(self, attempt: int, error: DeliveryError) -> Optional[float]:
        """
        attempt is the 1-based number of the attempt that just failed.
        Return seconds to wait before the next attempt, or None to give up.
        """
        ...


class NoRetry:
    def next_delay(self, attempt: int, error: DeliveryError) -> Optional[float]:
        return None


class CappedBackoffRetry:
    """Exponential backoff for retryable errors only, capped per wait."""

    def __init__(
        self,
        max_attempts: int = MAX_ATTEMPTS,
        base_delay: float = BASE_DELAY_SECONDS,
        cap: float = BACKOFF_CAP_SECONDS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self._base_delay = base_delay
        self._cap = cap

    def next_delay(self, attempt: int, error: DeliveryError) -> Optional[float]:
        if not error.retryable or attempt >= self.max_attempts:
            return None
        return min(self._base_delay * 2 ** (attempt - 1), self._cap)


def build_retry_policy(max_attempts: int) -> RetryPolicy:
    if max_attempts <= 1:
        return NoRetry()
    return CappedBackoffRetry(max_attempts=max_attempts)
