"""Polling policy for endpoints that compute their result on demand."""

from __future__ import annotations

from dataclasses import dataclass

from pytoon.const import (
    DEFAULT_POLL_BACKOFF_FACTOR,
    DEFAULT_POLL_DELAY,
    DEFAULT_POLL_MAX_ATTEMPTS,
    DEFAULT_POLL_MAX_DELAY,
)


@dataclass(frozen=True)
class PollingPolicy:
    """Bounds for re-requesting a resource that answered 202 Accepted.

    The delay before retry ``n`` (0-indexed) is
    ``delay * backoff_factor ** n``, capped at ``max_delay``.

    Example:
        policy = PollingPolicy(max_attempts=5, delay=0.5, backoff_factor=2.0)

        for attempt in range(policy.max_attempts):
            response = await fetch()
            if response.status != 202:
                break
            await asyncio.sleep(policy.delay_for(attempt))

    Attributes:
        max_attempts: Maximum number of requests, including the first one.
        delay: Initial delay in seconds between requests.
        backoff_factor: Multiplier applied to the delay after each attempt.
        max_delay: Upper bound for a single delay in seconds.
    """

    max_attempts: int = DEFAULT_POLL_MAX_ATTEMPTS
    delay: float = DEFAULT_POLL_DELAY
    backoff_factor: float = DEFAULT_POLL_BACKOFF_FACTOR
    max_delay: float = DEFAULT_POLL_MAX_DELAY

    def __post_init__(self) -> None:
        """Validate the policy.

        Raises:
            ValueError: If a bound is out of range.
        """
        if self.max_attempts < 1:
            msg = "max_attempts must be at least 1"
            raise ValueError(msg)
        if self.delay < 0 or self.max_delay < 0:
            msg = "delays cannot be negative"
            raise ValueError(msg)
        if self.backoff_factor < 1:
            msg = "backoff_factor must be at least 1"
            raise ValueError(msg)

    def delay_for(self, attempt: int) -> float:
        """Calculate the delay after a given attempt.

        Args:
            attempt: Attempt number (0-indexed).

        Returns:
            Delay in seconds before the next attempt.
        """
        return min(self.delay * (self.backoff_factor**attempt), self.max_delay)
