from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from tsw6weather._retry import RetryExecutor, RetryPolicy
from tsw6weather.config import SyncConfig
from tsw6weather.exceptions import Tsw6TransportError

LONDON = (51.5074, -0.1278)


def api_info_payload(**meta_overrides: Any) -> dict[str, Any]:
    meta: dict[str, Any] = {
        "Worker": "DTGCommWorkerRC",
        "GameName": "Train Sim World 6®",
        "GameBuildNumber": 1234,
        "APIVersion": 1,
        "GameInstanceID": "A1B2C3",
    }
    meta.update(meta_overrides)
    return {"Meta": meta, "HttpRoutes": [{"Verb": "GET", "Path": "/info", "Description": "Info"}]}


def observation_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "coord": {"lon": -0.1278, "lat": 51.5074},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "base": "stations",
        "main": {"temp": 288.15, "feels_like": 287.0, "pressure": 1012, "humidity": 80},
        "visibility": 10000,
        "wind": {"speed": 4.1, "deg": 240},
        "rain": {"1h": 2.5},
        "clouds": {"all": 75},
        "dt": 1771000000,
        "sys": {"type": 2, "id": 2075535, "country": "GB", "sunrise": 1770970000, "sunset": 1771005000},
        "timezone": 0,
        "id": 2643743,
        "name": "London",
        "cod": 200,
    }
    payload.update(overrides)
    return payload


@dataclass
class FakeSimulation:
    """In-memory stand-in for the simulation comm API (implements ``Transport``)."""

    position: tuple[float, float] | None = LONDON
    node_valid: bool = True
    info: Any = field(default_factory=api_info_payload)
    fail_next: int = 0
    calls: list[tuple[str, str, dict[str, str], Any]] = field(default_factory=list)
    subscriptions: set[int] = field(default_factory=set)
    weather: dict[str, float] = field(default_factory=dict)
    # Served, one per read, before the real subscription payload.
    queued_reads: list[Any] = field(default_factory=list)
    reject_registration: bool = False

    def count(self, method: str, prefix: str = "") -> int:
        return sum(1 for m, path, _, _ in self.calls if m == method and path.startswith(prefix))

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        params = dict(params or {})
        self.calls.append((method, path, params, json_body))

        if self.fail_next > 0:
            self.fail_next -= 1
            raise Tsw6TransportError(f"HTTP 503 from {path}", status_code=503, endpoint=path)

        if method == "GET" and path == "/info":
            return self.info

        if method == "POST" and path == "/subscription/DriverAid.PlayerInfo":
            if self.reject_registration:
                raise Tsw6TransportError(f"HTTP 500 from {path}", status_code=500, endpoint=path)
            self.subscriptions.add(int(params["Subscription"]))
            return None

        if method == "GET" and path == "/subscription":
            subscription_id = int(params["Subscription"])
            if subscription_id not in self.subscriptions:
                raise Tsw6TransportError(f"HTTP 404 from {path}", status_code=404, endpoint=path)
            if self.queued_reads:
                return self.queued_reads.pop(0)
            entries: list[dict[str, Any]] = []
            if self.position is not None:
                latitude, longitude = self.position
                entries.append(
                    {
                        "Path": "DriverAid.PlayerInfo",
                        "NodeValid": self.node_valid,
                        "Values": {
                            "geoLocation": {"latitude": latitude, "longitude": longitude},
                            "currentTile": {"x": 10, "y": -3},
                            "playerProfileName": "Driver",
                            "cameraMode": "Cab",
                            "currentServiceName": "1A23",
                        },
                    }
                )
            return {"RequestedSubscriptionID": subscription_id, "Entries": entries}

        if method == "DELETE" and path == "/subscription/":
            self.subscriptions.discard(int(params["Subscription"]))
            return None

        if method == "PATCH" and path.startswith("/set/WeatherManager."):
            self.weather[path.removeprefix("/set/WeatherManager.")] = json_body["Value"]
            return None

        raise Tsw6TransportError(f"HTTP 404 from {path}", status_code=404, endpoint=path)


@dataclass
class FakeOpenWeather:
    """Stand-in for the OpenWeather API (implements ``Transport``)."""

    payload: Any = field(default_factory=observation_payload)
    fail_next: int = 0
    calls: list[dict[str, str]] = field(default_factory=list)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> Any:
        assert method == "GET"
        assert path == "/data/2.5/weather"
        self.calls.append(dict(params or {}))
        if self.fail_next > 0:
            self.fail_next -= 1
            raise Tsw6TransportError(f"HTTP 502 from {path}", status_code=502, endpoint=path)
        return self.payload


@pytest.fixture
def config() -> SyncConfig:
    return SyncConfig(
        simulation_api_key="sim-key",
        openweather_api_key="ow-key",
        retry=RetryPolicy(max_attempts=3, initial_delay=0.0, jitter=False),
    )


@pytest.fixture
def fast_retry() -> RetryExecutor:
    async def _no_sleep(_delay: float) -> None:
        return None

    return RetryExecutor(RetryPolicy(max_attempts=3, initial_delay=0.01, jitter=False), sleep=_no_sleep)


@pytest.fixture
def simulation() -> FakeSimulation:
    return FakeSimulation()


@pytest.fixture
def openweather() -> FakeOpenWeather:
    return FakeOpenWeather()
