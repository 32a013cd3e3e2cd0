from __future__ import annotations

import pytest

from conftest import api_info_payload, observation_payload
from tsw6weather.geo import GeoPoint
from tsw6weather.models import ApiInfo, ProviderObservation, SubscriptionData, WeatherVector
from tsw6weather.subscription import SubscriptionHandle, SubscriptionState

# ---------------------------------------------------------------------------
# Simulation payloads
# ---------------------------------------------------------------------------


def test_api_info_parses_meta_aliases() -> None:
    info = ApiInfo.model_validate(api_info_payload())
    assert info.meta is not None
    assert info.meta.worker == "DTGCommWorkerRC"
    assert info.meta.game_build_number == 1234
    assert info.http_routes[0].path == "/info"


def test_api_info_without_meta() -> None:
    assert ApiInfo.model_validate({}).meta is None


def test_player_position_from_first_entry() -> None:
    data = SubscriptionData.model_validate(
        {
            "RequestedSubscriptionID": 7,
            "Entries": [
                {"Path": "DriverAid.PlayerInfo", "Values": {"geoLocation": {"latitude": 1.5, "longitude": 2.5}}}
            ],
        }
    )
    assert data.player_position() == GeoPoint(1.5, 2.5)


@pytest.mark.parametrize(
    "payload",
    [
        {"RequestedSubscriptionID": 7},
        {"Entries": []},
        {"Entries": [{"Path": "DriverAid.PlayerInfo"}]},
        {"Entries": [{"Values": {"playerProfileName": "Driver"}}]},
        {"Entries": [{"NodeValid": False, "Values": {"geoLocation": {"latitude": 1.0, "longitude": 2.0}}}]},
    ],
)
def test_player_position_missing(payload: dict[str, object]) -> None:
    assert SubscriptionData.model_validate(payload).player_position() is None


# ---------------------------------------------------------------------------
# OpenWeather payloads
# ---------------------------------------------------------------------------


def test_observation_accessors() -> None:
    observation = ProviderObservation.model_validate(observation_payload())
    assert observation.temperature_k == pytest.approx(288.15)
    assert observation.humidity == 80
    assert observation.cloud_percentage == 75
    assert observation.rain_1h == 2.5
    assert observation.snow_1h == 0.0
    assert observation.condition == "Rain"
    assert observation.condition_code == 500
    assert observation.is_snowing is False


def test_observation_snow_condition() -> None:
    observation = ProviderObservation.model_validate(
        observation_payload(weather=[{"id": 600, "main": "Snow"}], snow={"1h": 1.0})
    )
    assert observation.is_snowing is True
    assert observation.snow_1h == 1.0


def test_observation_ignores_unknown_fields() -> None:
    observation = ProviderObservation.model_validate(observation_payload(extra_field={"x": 1}))
    assert observation.name == "London"


# ---------------------------------------------------------------------------
# Weather vector
# ---------------------------------------------------------------------------


def test_interpolate_endpoints() -> None:
    start = WeatherVector(temperature=10.0, cloudiness=0.2)
    target = WeatherVector(temperature=20.0, cloudiness=0.6)
    assert start.interpolate(target, 0.0) is start
    assert start.interpolate(target, 1.0) is target
    assert start.interpolate(target, 1.5) is target

    middle = start.interpolate(target, 0.5)
    assert middle.temperature == pytest.approx(15.0)
    assert middle.cloudiness == pytest.approx(0.4)


def test_channel_values_use_simulation_names() -> None:
    values = WeatherVector(temperature=3.0, fog_density=0.05).channel_values()
    assert list(values) == ["Temperature", "Cloudiness", "Precipitation", "Wetness", "GroundSnow", "FogDensity"]
    assert values["Temperature"] == 3.0
    assert values["FogDensity"] == 0.05


# ---------------------------------------------------------------------------
# Subscription handle
# ---------------------------------------------------------------------------


def test_subscription_handle_id_in_range() -> None:
    for _ in range(50):
        handle = SubscriptionHandle()
        assert 1 <= handle.id <= 65535
        assert handle.state is SubscriptionState.UNREGISTERED


def test_subscription_handle_activation_keeps_id() -> None:
    handle = SubscriptionHandle(id=42)
    active = handle.activated()
    assert active.id == 42
    assert active.state is SubscriptionState.ACTIVE
    assert handle.active is False
