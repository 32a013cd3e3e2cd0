"""Custom exception hierarchy for tsw6weather."""

from __future__ import annotations


class Tsw6WeatherError(Exception):
    """Base exception for all tsw6weather errors."""


class Tsw6ConfigError(Tsw6WeatherError):
    """Invalid or missing configuration."""


class Tsw6TransportError(Tsw6WeatherError):
    """HTTP-level failure (network, non-2xx, invalid JSON).

    Always considered transient: the retry executor retries it until the
    policy is exhausted.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class Tsw6ResponseError(Tsw6TransportError):
    """Response decoded as JSON but did not have the expected shape."""


class Tsw6ServiceUnavailableError(Tsw6WeatherError):
    """The simulation API is unreachable or does not identify as expected.

    Raised by the startup probe, and by the tick loop once the simulation
    has stayed unreachable for too many consecutive updates.
    """


class Tsw6SubscriptionError(Tsw6WeatherError):
    """The player-info subscription could not be registered."""
