"""Distance-gated weather synchronization."""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Callable
from enum import StrEnum
from typing import Protocol

from tsw6weather._constants import MIN_MOVEMENT_M
from tsw6weather.converter import DEFAULT_CONVERSION, ConversionConstants, convert
from tsw6weather.exceptions import Tsw6SubscriptionError, Tsw6TransportError
from tsw6weather.geo import GeoPoint, haversine_m
from tsw6weather.models.openweather import ProviderObservation
from tsw6weather.models.weather import WeatherVector

_logger = logging.getLogger(__name__)


class PositionFeed(Protocol):
    async def register_subscription(self) -> bool:
        ...

    async def read_position(self) -> GeoPoint | None:
        ...


class ObservationSource(Protocol):
    async def fetch_current(self, point: GeoPoint) -> ProviderObservation:
        ...


class WeatherTarget(Protocol):
    async def retarget(self, target: WeatherVector) -> None:
        ...


class ControllerState(StrEnum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"


@dataclasses.dataclass(frozen=True)
class SyncStatus:
    """Point-in-time view of the controller, for display or diagnostics."""

    state: ControllerState
    position: GeoPoint | None
    accumulated_km: float
    threshold_km: float
    observation: ProviderObservation | None
    target: WeatherVector | None
    fetch_count: int


class WeatherSyncController:
    """Decide when to fetch weather and hand it to the transition engine.

    Distance travelled between position reads accumulates until it reaches
    ``update_threshold_km``; that read triggers one fetch and resets the
    accumulator.  Movement under 10 cm is ignored as jitter.
    """

    def __init__(
        self,
        feed: PositionFeed,
        provider: ObservationSource,
        engine: WeatherTarget,
        *,
        update_threshold_km: float = 5.0,
        conversion: ConversionConstants = DEFAULT_CONVERSION,
        distance: Callable[[GeoPoint, GeoPoint], float] = haversine_m,
        on_weather: Callable[[ProviderObservation, WeatherVector], None] | None = None,
    ) -> None:
        self._feed = feed
        self._provider = provider
        self._engine = engine
        self._threshold_km = update_threshold_km
        self._conversion = conversion
        self._distance = distance
        self._on_weather = on_weather
        self._state = ControllerState.UNINITIALIZED
        self._position: GeoPoint | None = None
        self._accumulated_m = 0.0
        self._observation: ProviderObservation | None = None
        self._target: WeatherVector | None = None
        self._fetch_count = 0
        _logger.info("Weather controller initialized with %s km update threshold", update_threshold_km)

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def accumulated_km(self) -> float:
        return self._accumulated_m / 1000.0

    @property
    def position(self) -> GeoPoint | None:
        return self._position

    @property
    def status(self) -> SyncStatus:
        return SyncStatus(
            state=self._state,
            position=self._position,
            accumulated_km=self.accumulated_km,
            threshold_km=self._threshold_km,
            observation=self._observation,
            target=self._target,
            fetch_count=self._fetch_count,
        )

    async def initialise(self) -> None:
        """Register the feed and bootstrap weather for the starting position.

        Raises
        ------
        Tsw6SubscriptionError
            The subscription could not be registered.
        """
        if not await self._feed.register_subscription():
            raise Tsw6SubscriptionError("Could not register the player-info subscription")

        try:
            position = await self._feed.read_position()
        except Tsw6TransportError as exc:
            _logger.warning("Could not read initial position: %s", exc)
            position = None

        self._state = ControllerState.RUNNING
        if position is None:
            _logger.info("No initial position yet; weather will be fetched on the first reading")
            return
        self._position = position
        await self._update_weather(position)

    async def tick(self) -> bool:
        """Run one position check.

        Never raises (cancellation aside): a failing collaborator costs one
        tick, not the loop.  Returns ``False`` when the simulation could not
        be reached, so the caller can count consecutive failures.
        """
        try:
            await self._tick()
        except Tsw6TransportError as exc:
            _logger.error("Could not read player location: %s", exc)
            return False
        except Exception:
            _logger.exception("Error during weather update tick")
        return True

    async def force_update(self) -> None:
        """Fetch weather for the last known position regardless of distance."""
        _logger.info("Forcing weather update")
        position = self._position
        if position is None:
            _logger.warning("No known position; cannot force a weather update")
            return
        self._accumulated_m = 0.0
        await self._update_weather(position)

    async def _tick(self) -> None:
        new_position = await self._feed.read_position()
        if new_position is None:
            _logger.warning("Could not retrieve player location - skipping update")
            return

        previous = self._position
        self._position = new_position

        if previous is None:
            # First reading after a start without position: same as the bootstrap fetch.
            self._accumulated_m = 0.0
            await self._update_weather(new_position)
            return

        distance_m = self._distance(previous, new_position)
        if distance_m <= MIN_MOVEMENT_M:
            return

        self._accumulated_m += distance_m
        _logger.debug(
            "Distance travelled: %.2f km (Total: %.2f km)",
            distance_m / 1000.0,
            self.accumulated_km,
        )
        if self._threshold_reached():
            _logger.info(
                "Accumulated distance (%.2f km) exceeded threshold (%s km) - updating weather",
                self.accumulated_km,
                self._threshold_km,
            )
            self._accumulated_m = 0.0
            await self._update_weather(new_position)

    def _threshold_reached(self) -> bool:
        # Summed in metres; isclose absorbs rounding when the deltas add up to exactly the threshold.
        threshold_m = self._threshold_km * 1000.0
        return self._accumulated_m >= threshold_m or math.isclose(self._accumulated_m, threshold_m)

    async def _update_weather(self, position: GeoPoint) -> None:
        _logger.info("Fetching weather data for location: %s", position)
        self._fetch_count += 1
        try:
            observation = await self._provider.fetch_current(position)
        except Tsw6TransportError as exc:
            _logger.error("Failed to fetch weather data after retries: %s", exc)
            return

        vector = convert(observation, self._conversion)
        self._observation = observation
        self._target = vector
        await self._engine.retarget(vector)
        _logger.info(
            "Weather updated successfully: %s - %.2fK",
            observation.condition,
            observation.temperature_k,
        )

        if self._on_weather is not None:
            try:
                self._on_weather(observation, vector)
            except Exception:
                _logger.debug("on_weather callback failed", exc_info=True)
