"""
Retry policy for GitHub API fetches.

Failures are classified as retryable (:class:`TransientFetchError`) or
terminal (authentication and decode errors). Retryable failures are retried
a bounded number of times with a fixed delay between attempts.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from ..exceptions import FetchExhaustedError, TransientFetchError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """Bounded retry with a fixed delay and no jitter."""

    def __init__(self, max_retries: int = 3, retry_delay: float = 5.0):
        """
        Initialize the retry policy.

        Args:
            max_retries: Retries allowed after the initial attempt
            retry_delay: Seconds to sleep between attempts
        """
        if max_retries < 0:
            raise ValueError(f"max_retries must not be negative, got {max_retries}")
        if retry_delay < 0:
            raise ValueError(f"retry_delay must not be negative, got {retry_delay}")

        self.max_retries = max_retries
        self.retry_delay = retry_delay

    @property
    def max_attempts(self) -> int:
        """Total attempts, including the initial one."""
        return self.max_retries + 1

    async def run(
        self, operation: Callable[[], Awaitable[T]], description: str = "operation"
    ) -> T:
        """
        Run an operation under this policy.

        Args:
            operation: Async callable performing a single attempt
            description: Human readable name used in logs and errors

        Returns:
            The operation's result

        Raises:
            FetchExhaustedError: If every attempt failed with a retryable error
        """
        last_error: TransientFetchError | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await operation()
            except TransientFetchError as e:
                last_error = e
                if attempt == self.max_attempts:
                    break
                logger.warning(
                    "Retryable failure, retrying",
                    operation=description,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    retry_delay=self.retry_delay,
                    status_code=e.status_code,
                    error=str(e),
                )
                await asyncio.sleep(self.retry_delay)

        logger.error(
            "Retries exhausted",
            operation=description,
            attempts=self.max_attempts,
            error=str(last_error),
        )
        raise FetchExhaustedError(
            f"{description} failed after {self.max_attempts} attempts: {last_error}",
            attempts=self.max_attempts,
            last_error=last_error,
        ) from last_error
