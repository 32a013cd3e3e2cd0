"""tsw6weather - Real-world weather sync for Train Sim World 6."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tsw6weather")
except PackageNotFoundError:
    __version__ = "0+local"
from tsw6weather._retry import RetryExecutor, RetryPolicy
from tsw6weather.config import SyncConfig
from tsw6weather.controller import ControllerState, SyncStatus, WeatherSyncController
from tsw6weather.converter import ConversionConstants, convert
from tsw6weather.exceptions import (
    Tsw6ConfigError,
    Tsw6ResponseError,
    Tsw6ServiceUnavailableError,
    Tsw6SubscriptionError,
    Tsw6TransportError,
    Tsw6WeatherError,
)
from tsw6weather.feed import SimulationFeedClient
from tsw6weather.geo import GeoPoint, haversine_km, haversine_m
from tsw6weather.models import ProviderObservation, WeatherVector
from tsw6weather.provider import WeatherProviderClient
from tsw6weather.runner import run
from tsw6weather.subscription import SubscriptionHandle, SubscriptionState
from tsw6weather.transition import TransitionState, WeatherTransitionEngine

__all__ = [
    "__version__",
    "ControllerState",
    "ConversionConstants",
    "GeoPoint",
    "ProviderObservation",
    "RetryExecutor",
    "RetryPolicy",
    "SimulationFeedClient",
    "SubscriptionHandle",
    "SubscriptionState",
    "SyncConfig",
    "SyncStatus",
    "TransitionState",
    "Tsw6ConfigError",
    "Tsw6ResponseError",
    "Tsw6ServiceUnavailableError",
    "Tsw6SubscriptionError",
    "Tsw6TransportError",
    "Tsw6WeatherError",
    "WeatherProviderClient",
    "WeatherSyncController",
    "WeatherTransitionEngine",
    "WeatherVector",
    "convert",
    "haversine_km",
    "haversine_m",
    "run",
]
