"""
Bounded retry loop for send attempts.

Each attempt gets a fresh deadline. Only errors the classifier marks as
retry-eligible start another attempt; everything else, including
cancellation, ends the call immediately.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from ..domain.errors import FCMError
from .error_classifier import classify_deadline, is_retry_eligible

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_MIN_BACKOFF = 0.1  # seconds
DEFAULT_MAX_BACKOFF = 60.0  # seconds


async def run_with_deadline(operation: Callable[[], Awaitable[T]], timeout: float) -> T:
    """
    Run one attempt under its own time budget.

    Raises:
        FCMConnectionError: If the budget runs out before the attempt ends
    """
    try:
        async with asyncio.timeout(timeout):
            return await operation()
    except TimeoutError as e:
        raise classify_deadline(timeout) from e


class RetryPolicy:
    """
    Retries an operation on transient failures.

    A policy holds the state of one logical send (attempt count and last
    error) and is discarded once the send finishes.
    """

    def __init__(
        self,
        max_attempts: int,
        attempt_timeout: float,
        min_backoff: float = DEFAULT_MIN_BACKOFF,
        max_backoff: float = DEFAULT_MAX_BACKOFF,
    ) -> None:
        """
        Args:
            max_attempts: Upper bound on attempts; values below 1 mean one attempt
            attempt_timeout: Time budget of each attempt, in seconds
            min_backoff: Base delay; attempt n waits min_backoff * n**2
            max_backoff: Cap on the delay between attempts
        """
        self.max_attempts = max(1, max_attempts)
        self.attempt_timeout = attempt_timeout
        self.min_backoff = min_backoff
        self.max_backoff = max_backoff
        self.attempts = 0
        self.last_error: FCMError | None = None

    def backoff(self, attempt: int) -> float:
        """Delay after the given failed attempt."""
        return min(self.min_backoff * attempt * attempt, self.max_backoff)

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run operation until it succeeds or attempts are exhausted.

        Returns:
            The first successful result

        Raises:
            FCMError: The first non-retryable error, or the last error once
                attempts are exhausted
            asyncio.CancelledError: If the caller cancels; no further
                attempt starts
        """
        while True:
            self.attempts += 1
            try:
                return await run_with_deadline(operation, self.attempt_timeout)
            except FCMError as e:
                self.last_error = e

            if not is_retry_eligible(self.last_error):
                raise self.last_error
            if self.attempts >= self.max_attempts:
                logger.warning(
                    "Send attempts exhausted",
                    attempts=self.attempts,
                    error=str(self.last_error),
                )
                raise self.last_error

            delay = self.backoff(self.attempts)
            logger.info(
                "Retrying send",
                attempt=self.attempts,
                max_attempts=self.max_attempts,
                delay_s=delay,
                error=str(self.last_error),
            )
            if delay > 0:
                await asyncio.sleep(delay)
