"""Bounded retry with exponential backoff and jitter.

Every outbound call made by the feed and provider clients goes through a
:class:`RetryExecutor`.  Transport failures (network errors, non-2xx
statuses, undecodable or malformed bodies) are retried; anything else is
raised immediately.  Cancellation is never retried.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import random
from collections.abc import Awaitable, Callable
from typing import ClassVar, TypeVar

from tsw6weather.exceptions import Tsw6ConfigError, Tsw6TransportError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration.

    Parameters
    ----------
    max_attempts : int
        Total number of attempts, including the first one.  ``0`` and ``1``
        both mean a single attempt without retries.
    initial_delay : float
        Seconds to wait before the first retry.  Each following retry waits
        :attr:`BACKOFF_FACTOR` times longer.
    jitter : bool
        Add a random extra of up to one full delay to every wait.
    """

    BACKOFF_FACTOR: ClassVar[float] = 2.0

    max_attempts: int = 5
    initial_delay: float = 0.1
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise Tsw6ConfigError(f"max_attempts must be >= 0, got {self.max_attempts}")
        if self.initial_delay < 0:
            raise Tsw6ConfigError(f"initial_delay must be >= 0, got {self.initial_delay}")

    @property
    def attempts(self) -> int:
        """Number of attempts actually made (at least one)."""
        return max(1, self.max_attempts)

    def base_delay(self, attempt_index: int) -> float:
        """Delay before retry number ``attempt_index + 1``, without jitter."""
        return self.initial_delay * self.BACKOFF_FACTOR**attempt_index


def is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, Tsw6TransportError)


class RetryExecutor:
    """Run awaitable operations under a :class:`RetryPolicy`."""

    def __init__(
        self,
        policy: RetryPolicy,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._policy = policy
        self._sleep = sleep
        self._rng = rng or random.Random()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def _delay(self, attempt_index: int) -> float:
        delay = self._policy.base_delay(attempt_index)
        if self._policy.jitter:
            delay += delay * self._rng.random()
        return delay

    async def execute(self, op: Callable[[], Awaitable[T]], *, description: str = "request") -> T:
        """Await ``op()`` until it succeeds or the policy is exhausted.

        Raises
        ------
        Tsw6TransportError
            The last failure once every attempt failed.
        asyncio.CancelledError
            Propagated immediately, without further attempts.
        """
        attempts = self._policy.attempts
        for attempt_index in range(attempts):
            try:
                return await op()
            except Exception as exc:
                if not is_retryable(exc) or attempt_index + 1 >= attempts:
                    raise
                delay = self._delay(attempt_index)
                _logger.warning(
                    "%s failed (attempt %d/%d): %s; retrying in %.2fs",
                    description,
                    attempt_index + 1,
                    attempts,
                    exc,
                    delay,
                )
                await self._sleep(delay)
        raise AssertionError("unreachable")  # pragma: no cover
