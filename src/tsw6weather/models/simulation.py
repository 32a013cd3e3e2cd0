"""Models for the simulation comm API (``/info`` and subscription reads)."""

from __future__ import annotations

from pydantic import Field

from tsw6weather.geo import GeoPoint
from tsw6weather.models._base import Tsw6BaseModel


class ApiMeta(Tsw6BaseModel):
    """Identity metadata returned by ``GET /info``."""

    worker: str = Field(default="", alias="Worker")
    game_name: str = Field(default="", alias="GameName")
    game_build_number: int = Field(default=0, alias="GameBuildNumber")
    api_version: int = Field(default=0, alias="APIVersion")
    game_instance_id: str = Field(default="", alias="GameInstanceID")


class HttpRoute(Tsw6BaseModel):
    verb: str = Field(default="", alias="Verb")
    path: str = Field(default="", alias="Path")
    description: str = Field(default="", alias="Description")


class ApiInfo(Tsw6BaseModel):
    """Full ``GET /info`` payload.

    ``meta`` is ``None`` when the server answered without a ``Meta`` object,
    which the availability probe treats as "not the simulation".
    """

    meta: ApiMeta | None = Field(default=None, alias="Meta")
    http_routes: list[HttpRoute] = Field(default_factory=list, alias="HttpRoutes")


class GeoLocation(Tsw6BaseModel):
    latitude: float
    longitude: float


class CurrentTile(Tsw6BaseModel):
    x: int = 0
    y: int = 0


class PlayerInfoValues(Tsw6BaseModel):
    """Values of the ``DriverAid.PlayerInfo`` node.

    ``geo_location`` is ``None`` until the player is placed in the world.
    """

    geo_location: GeoLocation | None = Field(default=None, alias="geoLocation")
    current_tile: CurrentTile | None = Field(default=None, alias="currentTile")
    player_profile_name: str = Field(default="", alias="playerProfileName")
    camera_mode: str = Field(default="", alias="cameraMode")
    current_service_name: str = Field(default="", alias="currentServiceName")


class SubscriptionEntry(Tsw6BaseModel):
    path: str = Field(default="", alias="Path")
    node_valid: bool = Field(default=True, alias="NodeValid")
    values: PlayerInfoValues | None = Field(default=None, alias="Values")


class SubscriptionData(Tsw6BaseModel):
    """Payload of ``GET /subscription?Subscription=<id>``."""

    requested_subscription_id: int = Field(default=0, alias="RequestedSubscriptionID")
    entries: list[SubscriptionEntry] = Field(default_factory=list, alias="Entries")

    def player_position(self) -> GeoPoint | None:
        """Position from the first entry, or ``None`` when the feed has no usable data yet."""
        if not self.entries:
            return None
        entry = self.entries[0]
        if not entry.node_valid or entry.values is None or entry.values.geo_location is None:
            return None
        location = entry.values.geo_location
        return GeoPoint(latitude=location.latitude, longitude=location.longitude)
