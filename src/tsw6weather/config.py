"""Configuration for tsw6weather."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from tsw6weather._constants import (
    EXPECTED_GAME_NAME,
    EXPECTED_WORKER,
    OPENWEATHER_BASE_URL,
    SIMULATION_BASE_URL,
)
from tsw6weather._retry import RetryPolicy
from tsw6weather.converter import ConversionConstants
from tsw6weather.exceptions import Tsw6ConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env: Any, key: str, cast: type[int] | type[float]) -> int | float | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise Tsw6ConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Runtime configuration.

    The core never reads files or environment variables itself; build this
    object once (directly or with :meth:`from_env`) and pass it in.

    Parameters
    ----------
    simulation_api_key : str
        Key for the simulation comm API, sent as the ``DTGCommKey`` header.
    openweather_api_key : str
        OpenWeather API key.
    simulation_base_url : str
        Base URL of the simulation comm API.
    openweather_base_url : str
        Base URL of the OpenWeather API.
    update_threshold_km : float
        Distance travelled before fresh weather is fetched.
    tick_interval : float
        Seconds between position checks.
    transition_duration : float
        Seconds over which a new weather target is blended in.
    transition_push_interval : float
        Seconds between weather pushes during a transition.
    retry : RetryPolicy
        Retry policy shared by both clients.
    simulation_timeout : float
        Total per-request timeout for simulation calls, in seconds.
    openweather_timeout : float
        Total per-request timeout for OpenWeather calls, in seconds.
    connect_timeout : float
        Connection timeout for both services, in seconds.
    max_failed_ticks : int
        Stop the runner after this many consecutive ticks that could not
        reach the simulation.  ``0`` disables the limit.
    expected_worker : str
        ``Meta.Worker`` value the availability probe requires.
    expected_game_name : str
        ``Meta.GameName`` value the availability probe requires.
    conversion : ConversionConstants
        Observation-to-simulation mapping constants.
    """

    simulation_api_key: str
    openweather_api_key: str
    simulation_base_url: str = SIMULATION_BASE_URL
    openweather_base_url: str = OPENWEATHER_BASE_URL
    update_threshold_km: float = 5.0
    tick_interval: float = 5.0
    transition_duration: float = 30.0
    transition_push_interval: float = 1.0
    retry: RetryPolicy = dataclasses.field(default_factory=RetryPolicy)
    simulation_timeout: float = 30.0
    openweather_timeout: float = 15.0
    connect_timeout: float = 5.0
    max_failed_ticks: int = 4
    expected_worker: str = EXPECTED_WORKER
    expected_game_name: str = EXPECTED_GAME_NAME
    conversion: ConversionConstants = dataclasses.field(default_factory=ConversionConstants)

    def __post_init__(self) -> None:
        if self.update_threshold_km <= 0:
            raise Tsw6ConfigError(f"update_threshold_km must be positive, got {self.update_threshold_km}")
        if self.tick_interval <= 0:
            raise Tsw6ConfigError(f"tick_interval must be positive, got {self.tick_interval}")
        if self.transition_duration < 0:
            raise Tsw6ConfigError(f"transition_duration must be >= 0, got {self.transition_duration}")
        if self.transition_push_interval <= 0:
            raise Tsw6ConfigError(f"transition_push_interval must be positive, got {self.transition_push_interval}")
        if self.max_failed_ticks < 0:
            raise Tsw6ConfigError(f"max_failed_ticks must be >= 0, got {self.max_failed_ticks}")

    def require_keys(self) -> None:
        """Raise :class:`Tsw6ConfigError` unless both API keys are set."""
        missing = [
            name
            for name, value in (
                ("simulation_api_key", self.simulation_api_key),
                ("openweather_api_key", self.openweather_api_key),
            )
            if not value.strip()
        ]
        if missing:
            raise Tsw6ConfigError(f"Missing API key(s): {', '.join(missing)}")

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from environment variables.

        Reads ``TSW6_API_KEY``, ``OPENWEATHER_API_KEY`` and the optional
        ``TSW6_*`` / ``TSW6_WEATHER_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SyncConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "TSW6_API_KEY": "simulation_api_key",
            "OPENWEATHER_API_KEY": "openweather_api_key",
            "TSW6_BASE_URL": "simulation_base_url",
            "OPENWEATHER_BASE_URL": "openweather_base_url",
        }
        config_kwargs: dict[str, Any] = {
            "simulation_api_key": "",
            "openweather_api_key": "",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val.strip()

        _ENV_FLOAT_MAP = {
            "TSW6_WEATHER_UPDATE_THRESHOLD_KM": "update_threshold_km",
            "TSW6_WEATHER_TICK_INTERVAL": "tick_interval",
            "TSW6_WEATHER_TRANSITION_DURATION": "transition_duration",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            number = _env_number(env, env_key, float)
            if number is not None:
                config_kwargs[field_name] = number

        failed_ticks = _env_number(env, "TSW6_WEATHER_MAX_FAILED_TICKS", int)
        if failed_ticks is not None:
            config_kwargs["max_failed_ticks"] = failed_ticks

        # retry is nested, handle separately
        if "retry" not in overrides:
            retry_kwargs: dict[str, Any] = {}
            attempts = _env_number(env, "TSW6_WEATHER_RETRY_MAX_ATTEMPTS", int)
            if attempts is not None:
                retry_kwargs["max_attempts"] = attempts
            delay = _env_number(env, "TSW6_WEATHER_RETRY_INITIAL_DELAY", float)
            if delay is not None:
                retry_kwargs["initial_delay"] = delay
            retry_kwargs["jitter"] = _env_bool(env.get("TSW6_WEATHER_RETRY_JITTER"), True)
            config_kwargs["retry"] = RetryPolicy(**retry_kwargs)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
