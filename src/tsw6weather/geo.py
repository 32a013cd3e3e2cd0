"""Geographic position value type and great-circle distance."""

from __future__ import annotations

import dataclasses
import math

from tsw6weather._constants import EARTH_RADIUS_M

# ~0.1 m at the equator.
_EQUALITY_TOLERANCE_DEG = 0.000001


@dataclasses.dataclass(frozen=True, eq=False)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees.

    Equality is tolerance based (roughly 0.1 m), so points are not hashable.
    """

    latitude: float
    longitude: float

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"coordinates must be finite, got ({self.latitude}, {self.longitude})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeoPoint):
            return NotImplemented
        return (
            abs(self.latitude - other.latitude) < _EQUALITY_TOLERANCE_DEG
            and abs(self.longitude - other.longitude) < _EQUALITY_TOLERANCE_DEG
        )

    def __str__(self) -> str:
        return f"Lat={self.latitude:.6f}, Lon={self.longitude:.6f}"

    def distance_m(self, other: GeoPoint) -> float:
        return haversine_m(self, other)

    def distance_km(self, other: GeoPoint) -> float:
        return haversine_km(self, other)


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in metres on a spherical Earth.

    Longitude wraparound needs no special casing: the half-angle sine of the
    longitude delta is the same for -358° and +2°.
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # Rounding can push h marginally outside [0, 1] for antipodal points.
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    return haversine_m(a, b) / 1000.0
