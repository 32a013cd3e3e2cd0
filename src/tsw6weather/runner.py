"""Wire the clients together and drive the sync loop."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

import aiohttp

from tsw6weather.config import SyncConfig
from tsw6weather.controller import WeatherSyncController
from tsw6weather.exceptions import Tsw6ServiceUnavailableError
from tsw6weather.feed import SimulationFeedClient
from tsw6weather.models.openweather import ProviderObservation
from tsw6weather.models.weather import WeatherVector
from tsw6weather.provider import WeatherProviderClient
from tsw6weather.transition import WeatherTransitionEngine

_logger = logging.getLogger(__name__)


async def tick_loop(
    controller: WeatherSyncController,
    *,
    interval: float,
    stop_event: asyncio.Event,
    max_failed_ticks: int = 0,
) -> None:
    """Tick every *interval* seconds until *stop_event* is set.

    Ticks never overlap: the next wait starts after the previous tick ends.

    Raises
    ------
    Tsw6ServiceUnavailableError
        ``max_failed_ticks`` consecutive ticks could not reach the simulation.
    """
    failures = 0
    while not stop_event.is_set():
        if await controller.tick():
            failures = 0
        else:
            failures += 1
            if max_failed_ticks and failures >= max_failed_ticks:
                raise Tsw6ServiceUnavailableError(
                    f"Simulation unreachable for {failures} consecutive updates"
                )
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=interval)


async def sync_weather(
    config: SyncConfig,
    feed: SimulationFeedClient,
    provider: WeatherProviderClient,
    *,
    stop_event: asyncio.Event,
    on_weather: Callable[[ProviderObservation, WeatherVector], None] | None = None,
) -> None:
    """Probe, initialise, loop, and always clean up the subscription."""
    if not await feed.is_available():
        raise Tsw6ServiceUnavailableError(
            "Simulation HTTP API isn't accessible; check the game runs with the -HTTPAPI flag"
        )

    engine = WeatherTransitionEngine(
        feed,
        duration=config.transition_duration,
        interval=config.transition_push_interval,
    )
    controller = WeatherSyncController(
        feed,
        provider,
        engine,
        update_threshold_km=config.update_threshold_km,
        conversion=config.conversion,
        on_weather=on_weather,
    )
    try:
        await controller.initialise()
        _logger.info("Starting weather update loop (every %s seconds)", config.tick_interval)
        await tick_loop(
            controller,
            interval=config.tick_interval,
            stop_event=stop_event,
            max_failed_ticks=config.max_failed_ticks,
        )
    finally:
        _logger.info("Performing cleanup...")
        await engine.stop()
        if feed.handle is not None:
            _logger.info("Deregistering subscription...")
            await feed.deregister_subscription()


async def run(
    config: SyncConfig,
    *,
    stop_event: asyncio.Event | None = None,
    on_weather: Callable[[ProviderObservation, WeatherVector], None] | None = None,
) -> None:
    """Run the weather sync until *stop_event* is set or the task is cancelled."""
    config.require_keys()
    stop_event = stop_event or asyncio.Event()
    async with aiohttp.ClientSession() as http_session:
        async with (
            SimulationFeedClient(config, session=http_session) as feed,
            WeatherProviderClient(config, session=http_session) as provider,
        ):
            await sync_weather(config, feed, provider, stop_event=stop_event, on_weather=on_weather)
