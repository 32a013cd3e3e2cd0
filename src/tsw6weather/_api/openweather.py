"""OpenWeather current-weather endpoint."""

from __future__ import annotations

from tsw6weather._api._common import parse_model
from tsw6weather._transport import Transport
from tsw6weather.geo import GeoPoint
from tsw6weather.models.openweather import ProviderObservation

CURRENT_WEATHER_ENDPOINT = "/data/2.5/weather"


async def fetch_current_weather(transport: Transport, point: GeoPoint, api_key: str) -> ProviderObservation:
    payload = await transport.request(
        "GET",
        CURRENT_WEATHER_ENDPOINT,
        params={
            "lat": repr(point.latitude),
            "lon": repr(point.longitude),
            "appid": api_key,
        },
    )
    return parse_model(ProviderObservation, payload, endpoint=CURRENT_WEATHER_ENDPOINT)
