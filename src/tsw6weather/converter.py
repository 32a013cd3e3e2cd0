"""Map OpenWeather observations onto the simulation's weather channels.

The saturation points and weights below are tuning heuristics, not physical
constants, which is why they live in :class:`ConversionConstants` instead of
being hard-coded.
"""

from __future__ import annotations

import dataclasses
import logging

from tsw6weather._constants import KELVIN_OFFSET
from tsw6weather.exceptions import Tsw6ConfigError
from tsw6weather.models.openweather import ProviderObservation
from tsw6weather.models.weather import WeatherVector

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ConversionConstants:
    """Tuning knobs for :func:`convert`.

    Parameters
    ----------
    precipitation_saturation_mm_h : float
        Combined rain + snow intensity (mm/h) that maps to precipitation 1.
    wetness_precipitation_weight : float
        Share of precipitation in the wetness blend.
    wetness_humidity_weight : float
        Share of relative humidity in the wetness blend.
    ground_snow_saturation_mm_h : float
        Snow intensity (mm/h) that maps to full ground cover.
    fog_max_density : float
        Fog density used at or below :attr:`fog_dense_visibility_km`.
    fog_dense_visibility_km : float
        Visibility at which fog is densest.
    fog_clear_visibility_km : float
        Visibility at which fog disappears.
    """

    precipitation_saturation_mm_h: float = 10.0
    wetness_precipitation_weight: float = 0.7
    wetness_humidity_weight: float = 0.3
    ground_snow_saturation_mm_h: float = 5.0
    fog_max_density: float = 0.1
    fog_dense_visibility_km: float = 1.0
    fog_clear_visibility_km: float = 10.0

    def __post_init__(self) -> None:
        if self.precipitation_saturation_mm_h <= 0 or self.ground_snow_saturation_mm_h <= 0:
            raise Tsw6ConfigError("saturation intensities must be positive")
        if self.fog_clear_visibility_km <= self.fog_dense_visibility_km:
            raise Tsw6ConfigError("fog_clear_visibility_km must exceed fog_dense_visibility_km")


DEFAULT_CONVERSION = ConversionConstants()


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def fog_density_for_visibility(visibility_m: float | None, constants: ConversionConstants = DEFAULT_CONVERSION) -> float:
    """Linear ramp from ``fog_max_density`` (dense) to 0 (clear); unknown visibility is clear."""
    if visibility_m is None:
        return 0.0
    visibility_km = visibility_m / 1000.0
    if visibility_km >= constants.fog_clear_visibility_km:
        return 0.0
    if visibility_km <= constants.fog_dense_visibility_km:
        return constants.fog_max_density
    span = constants.fog_clear_visibility_km - constants.fog_dense_visibility_km
    return constants.fog_max_density * (1 - (visibility_km - constants.fog_dense_visibility_km) / span)


def convert(observation: ProviderObservation, constants: ConversionConstants = DEFAULT_CONVERSION) -> WeatherVector:
    """Convert a provider observation into a :class:`WeatherVector`.

    Deterministic and side-effect free apart from a DEBUG log line.
    """
    precipitation = clamp(
        (observation.rain_1h + observation.snow_1h) / constants.precipitation_saturation_mm_h
    )
    wetness = clamp(
        precipitation * constants.wetness_precipitation_weight
        + (observation.humidity / 100.0) * constants.wetness_humidity_weight
    )
    # Reported snow volume lags behind the condition code; only trust it while it is snowing.
    ground_snow = (
        clamp(observation.snow_1h / constants.ground_snow_saturation_mm_h) if observation.is_snowing else 0.0
    )

    vector = WeatherVector(
        temperature=observation.temperature_k - KELVIN_OFFSET,
        cloudiness=clamp(observation.cloud_percentage / 100.0),
        precipitation=precipitation,
        wetness=wetness,
        ground_snow=ground_snow,
        fog_density=fog_density_for_visibility(observation.visibility, constants),
    )
    _logger.debug("Weather conversion: %s", vector.describe())
    return vector
