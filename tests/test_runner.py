from __future__ import annotations

import asyncio
import dataclasses

import pytest

from conftest import FakeOpenWeather, FakeSimulation
from tsw6weather._retry import RetryExecutor
from tsw6weather.config import SyncConfig
from tsw6weather.exceptions import (
    Tsw6ConfigError,
    Tsw6ServiceUnavailableError,
    Tsw6SubscriptionError,
)
from tsw6weather.feed import SimulationFeedClient
from tsw6weather.models import ProviderObservation, WeatherVector
from tsw6weather.provider import WeatherProviderClient
from tsw6weather.runner import run, sync_weather, tick_loop


def _clients(
    config: SyncConfig, simulation: FakeSimulation, openweather: FakeOpenWeather, retry: RetryExecutor
) -> tuple[SimulationFeedClient, WeatherProviderClient]:
    return (
        SimulationFeedClient(config, transport=simulation, retry=retry),
        WeatherProviderClient(config, transport=openweather, retry=retry),
    )


@pytest.fixture
def fast_config(config: SyncConfig) -> SyncConfig:
    return dataclasses.replace(config, tick_interval=0.01, transition_duration=0.0, transition_push_interval=0.01)


@pytest.mark.asyncio
async def test_sync_weather_deregisters_when_stopped(
    fast_config: SyncConfig, simulation: FakeSimulation, openweather: FakeOpenWeather, fast_retry: RetryExecutor
) -> None:
    feed, provider = _clients(fast_config, simulation, openweather, fast_retry)
    stop_event = asyncio.Event()
    updates: list[WeatherVector] = []

    def _on_weather(_observation: ProviderObservation, vector: WeatherVector) -> None:
        updates.append(vector)
        stop_event.set()

    await asyncio.wait_for(
        sync_weather(fast_config, feed, provider, stop_event=stop_event, on_weather=_on_weather),
        timeout=5,
    )

    assert len(updates) == 1
    assert len(openweather.calls) == 1
    assert simulation.subscriptions == set()
    assert simulation.count("DELETE") == 1


@pytest.mark.asyncio
async def test_sync_weather_refuses_unexpected_service(
    fast_config: SyncConfig, openweather: FakeOpenWeather, fast_retry: RetryExecutor
) -> None:
    simulation = FakeSimulation(info={"Meta": {"Worker": "Other"}})
    feed, provider = _clients(fast_config, simulation, openweather, fast_retry)

    with pytest.raises(Tsw6ServiceUnavailableError):
        await sync_weather(fast_config, feed, provider, stop_event=asyncio.Event())

    assert simulation.count("POST") == 0


@pytest.mark.asyncio
async def test_sync_weather_stops_after_consecutive_failures(
    fast_config: SyncConfig, simulation: FakeSimulation, openweather: FakeOpenWeather, fast_retry: RetryExecutor
) -> None:
    config = dataclasses.replace(fast_config, max_failed_ticks=2)
    feed, provider = _clients(config, simulation, openweather, fast_retry)

    def _on_weather(_observation: ProviderObservation, _vector: WeatherVector) -> None:
        simulation.fail_next = 1000

    with pytest.raises(Tsw6ServiceUnavailableError, match="2 consecutive"):
        await asyncio.wait_for(
            sync_weather(config, feed, provider, stop_event=asyncio.Event(), on_weather=_on_weather),
            timeout=5,
        )

    assert simulation.count("GET", "/subscription") == 1 + 2 * 3


@pytest.mark.asyncio
async def test_cancellation_still_cleans_up(
    fast_config: SyncConfig, simulation: FakeSimulation, openweather: FakeOpenWeather, fast_retry: RetryExecutor
) -> None:
    feed, provider = _clients(fast_config, simulation, openweather, fast_retry)
    task = asyncio.create_task(sync_weather(fast_config, feed, provider, stop_event=asyncio.Event()))

    while simulation.count("GET", "/subscription") < 3:
        await asyncio.sleep(0.005)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert simulation.subscriptions == set()


@pytest.mark.asyncio
async def test_tick_loop_resets_failure_count_on_success() -> None:
    results = iter([False, True, False, True, False])
    stop_event = asyncio.Event()
    ticks = 0

    class _Controller:
        async def tick(self) -> bool:
            nonlocal ticks
            ticks += 1
            result = next(results, None)
            if result is None:
                stop_event.set()
                return True
            return result

    await tick_loop(_Controller(), interval=0.0, stop_event=stop_event, max_failed_ticks=2)  # type: ignore[arg-type]

    assert ticks == 6


@pytest.mark.asyncio
async def test_run_requires_api_keys() -> None:
    with pytest.raises(Tsw6ConfigError):
        await run(SyncConfig(simulation_api_key="", openweather_api_key="key"))


@pytest.mark.asyncio
async def test_unconfirmed_registration_is_cleaned_up(
    fast_config: SyncConfig, simulation: FakeSimulation, openweather: FakeOpenWeather, fast_retry: RetryExecutor
) -> None:
    feed, provider = _clients(fast_config, simulation, openweather, fast_retry)
    simulation.reject_registration = True

    with pytest.raises(Tsw6SubscriptionError):
        await sync_weather(fast_config, feed, provider, stop_event=asyncio.Event())

    assert simulation.count("DELETE") == 1
    assert feed.handle is None
