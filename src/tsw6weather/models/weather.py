"""Simulation-facing weather state."""

from __future__ import annotations

import dataclasses

# Simulation channel name for each vector field, in push order.
CHANNELS: dict[str, str] = {
    "temperature": "Temperature",
    "cloudiness": "Cloudiness",
    "precipitation": "Precipitation",
    "wetness": "Wetness",
    "ground_snow": "GroundSnow",
    "fog_density": "FogDensity",
}


def lerp(start: float, end: float, progress: float) -> float:
    return start + (end - start) * progress


@dataclasses.dataclass(frozen=True)
class WeatherVector:
    """One instant of simulation weather.

    Parameters
    ----------
    temperature : float
        Air temperature in °C.
    cloudiness : float
        0 (clear) to 1 (overcast).
    precipitation : float
        0 (none) to 1 (heavy).
    wetness : float
        Ground wetness, 0 (dry) to 1 (soaked).
    ground_snow : float
        Snow cover, 0 (none) to 1 (heavy).
    fog_density : float
        0 (clear) to 0.1, the densest fog the simulation renders.
    """

    temperature: float = 0.0
    cloudiness: float = 0.0
    precipitation: float = 0.0
    wetness: float = 0.0
    ground_snow: float = 0.0
    fog_density: float = 0.0

    def interpolate(self, target: WeatherVector, progress: float) -> WeatherVector:
        """Per-channel linear interpolation toward *target*.

        ``progress`` is clamped to [0, 1]; at 1 the target itself is returned
        so no floating-point residue is left behind.
        """
        if progress >= 1.0:
            return target
        if progress <= 0.0:
            return self
        return WeatherVector(
            **{name: lerp(getattr(self, name), getattr(target, name), progress) for name in CHANNELS}
        )

    def channel_values(self) -> dict[str, float]:
        """Simulation channel name → value."""
        return {channel: getattr(self, name) for name, channel in CHANNELS.items()}

    def describe(self) -> str:
        return (
            f"Temp={self.temperature:.1f}°C, Cloud={self.cloudiness:.2f}, "
            f"Precip={self.precipitation:.2f}, Wet={self.wetness:.2f}, "
            f"Snow={self.ground_snow:.2f}, Fog={self.fog_density:.3f}"
        )
