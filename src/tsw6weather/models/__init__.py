"""Data models for simulation and weather provider payloads."""

from tsw6weather.models._base import Tsw6BaseModel
from tsw6weather.models.openweather import (
    CloudData,
    Coordinates,
    MainWeatherData,
    PrecipitationData,
    ProviderObservation,
    SystemData,
    WeatherCondition,
    WindData,
)
from tsw6weather.models.simulation import (
    ApiInfo,
    ApiMeta,
    CurrentTile,
    GeoLocation,
    HttpRoute,
    PlayerInfoValues,
    SubscriptionData,
    SubscriptionEntry,
)
from tsw6weather.models.weather import CHANNELS, WeatherVector

__all__ = [
    "CHANNELS",
    "ApiInfo",
    "ApiMeta",
    "CloudData",
    "Coordinates",
    "CurrentTile",
    "GeoLocation",
    "HttpRoute",
    "MainWeatherData",
    "PlayerInfoValues",
    "PrecipitationData",
    "ProviderObservation",
    "SubscriptionData",
    "SubscriptionEntry",
    "SystemData",
    "Tsw6BaseModel",
    "WeatherCondition",
    "WeatherVector",
    "WindData",
]
