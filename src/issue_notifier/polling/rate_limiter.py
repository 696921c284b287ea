"""
Rate limiter for the GitHub issue notifier polling system.

This module provides a token bucket that bounds outbound GitHub API calls
to a fixed rate.
"""

import asyncio
import time

import structlog

from ..exceptions import RateLimitCancelled

logger = structlog.get_logger(__name__)


class RateLimiter:
    """
    Token bucket gate for outbound API calls.

    Tokens refill continuously at ``capacity / window_seconds`` per second
    and never accumulate beyond ``capacity``. Each call to :meth:`acquire`
    takes one token, waiting for a refill when the bucket is empty.
    """

    def __init__(self, capacity: int = 30, window_seconds: float = 60.0):
        """
        Initialize the rate limiter.

        Args:
            capacity: Maximum number of tokens (and burst size)
            window_seconds: Time needed to refill an empty bucket
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")

        self.capacity = capacity
        self.window_seconds = window_seconds
        self.refill_rate = capacity / window_seconds
        self._tokens = float(capacity)
        self._last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    @property
    def available_tokens(self) -> float:
        """Get the number of tokens currently in the bucket."""
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(
                float(self.capacity), self._tokens + elapsed * self.refill_rate
            )
        self._last_refill = now

    async def acquire(self, cancel_event: asyncio.Event | None = None) -> None:
        """
        Take one token, waiting until one is available.

        Args:
            cancel_event: Event that abandons the wait when set

        Raises:
            RateLimitCancelled: If cancel_event is set before a token is taken
        """
        async with self._lock:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    raise RateLimitCancelled("Rate limit wait cancelled")

                self._refill()
                if self._tokens >= 1.0:
                    self._tokens -= 1.0
                    return

                wait_seconds = (1.0 - self._tokens) / self.refill_rate
                logger.debug(
                    "Rate limit reached, waiting for token",
                    wait_seconds=round(wait_seconds, 3),
                    capacity=self.capacity,
                )

                if cancel_event is None:
                    await asyncio.sleep(wait_seconds)
                    continue

                try:
                    await asyncio.wait_for(cancel_event.wait(), timeout=wait_seconds)
                except asyncio.TimeoutError:
                    continue
