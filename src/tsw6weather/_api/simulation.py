"""Simulation comm API endpoints.

Endpoints:
  - POST   /subscription/DriverAid.PlayerInfo?Subscription=<id> (register)
  - GET    /subscription?Subscription=<id> (read)
  - DELETE /subscription/?Subscription=<id> (deregister)
  - PATCH  /set/WeatherManager.<Channel> (weather channel write)
  - GET    /info (identity metadata)
"""

from __future__ import annotations

from tsw6weather._api._common import parse_model
from tsw6weather._constants import PLAYER_INFO_PATH, WEATHER_MANAGER_PREFIX
from tsw6weather._transport import Transport
from tsw6weather.models.simulation import ApiInfo, SubscriptionData

INFO_ENDPOINT = "/info"
SUBSCRIPTION_ENDPOINT = "/subscription"


def weather_channel_endpoint(channel: str) -> str:
    return f"/set/{WEATHER_MANAGER_PREFIX}.{channel}"


async def register_subscription(transport: Transport, subscription_id: int) -> None:
    await transport.request(
        "POST",
        f"{SUBSCRIPTION_ENDPOINT}/{PLAYER_INFO_PATH}",
        params={"Subscription": str(subscription_id)},
    )


async def read_subscription(transport: Transport, subscription_id: int) -> SubscriptionData:
    payload = await transport.request(
        "GET",
        SUBSCRIPTION_ENDPOINT,
        params={"Subscription": str(subscription_id)},
    )
    return parse_model(SubscriptionData, payload, endpoint=SUBSCRIPTION_ENDPOINT)


async def deregister_subscription(transport: Transport, subscription_id: int) -> None:
    await transport.request(
        "DELETE",
        f"{SUBSCRIPTION_ENDPOINT}/",
        params={"Subscription": str(subscription_id)},
    )


async def set_weather_channel(transport: Transport, channel: str, value: float) -> None:
    await transport.request("PATCH", weather_channel_endpoint(channel), json_body={"Value": value})


async def fetch_api_info(transport: Transport) -> ApiInfo:
    payload = await transport.request("GET", INFO_ENDPOINT)
    return parse_model(ApiInfo, payload, endpoint=INFO_ENDPOINT)
