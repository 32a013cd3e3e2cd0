"""Model of the OpenWeather current-weather payload.

Optional sections are modelled explicitly.  What absence means:

* ``rain`` / ``snow`` absent: no precipitation of that kind (0 mm/h).
* ``clouds`` absent: clear sky (0 %).
* ``visibility`` absent: clear air (no fog).
* ``weather`` empty: no condition code; nothing is treated as snow.
* ``main`` is required; a payload without it fails validation.
"""

from __future__ import annotations

from pydantic import Field

from tsw6weather.models._base import Tsw6BaseModel

SNOW_CONDITION_CODES = range(600, 700)


class Coordinates(Tsw6BaseModel):
    lon: float
    lat: float


class WeatherCondition(Tsw6BaseModel):
    """Condition group, e.g. ``id=601, main="Snow"``."""

    id: int
    main: str | None = None
    description: str | None = None
    icon: str | None = None


class MainWeatherData(Tsw6BaseModel):
    temp: float
    feels_like: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    pressure: float | None = None
    humidity: float = 0.0


class WindData(Tsw6BaseModel):
    speed: float = 0.0
    deg: int = 0
    gust: float | None = None


class PrecipitationData(Tsw6BaseModel):
    """Rain or snow volume in mm over the last 1 / 3 hours."""

    one_hour: float | None = Field(default=None, alias="1h")
    three_hours: float | None = Field(default=None, alias="3h")


class CloudData(Tsw6BaseModel):
    all: float = 0.0


class SystemData(Tsw6BaseModel):
    type: int | None = None
    id: int | None = None
    country: str | None = None
    sunrise: int | None = None
    sunset: int | None = None


class ProviderObservation(Tsw6BaseModel):
    """Current weather at one coordinate."""

    coord: Coordinates | None = None
    weather: list[WeatherCondition] = Field(default_factory=list)
    base: str | None = None
    main: MainWeatherData
    visibility: int | None = None
    wind: WindData | None = None
    rain: PrecipitationData | None = None
    snow: PrecipitationData | None = None
    clouds: CloudData | None = None
    dt: int = 0
    sys: SystemData | None = None
    timezone: int = 0
    id: int = 0
    name: str | None = None
    cod: int = 0

    @property
    def temperature_k(self) -> float:
        return self.main.temp

    @property
    def humidity(self) -> float:
        return self.main.humidity

    @property
    def cloud_percentage(self) -> float:
        return self.clouds.all if self.clouds is not None else 0.0

    @property
    def rain_1h(self) -> float:
        if self.rain is None or self.rain.one_hour is None:
            return 0.0
        return self.rain.one_hour

    @property
    def snow_1h(self) -> float:
        if self.snow is None or self.snow.one_hour is None:
            return 0.0
        return self.snow.one_hour

    @property
    def condition_code(self) -> int | None:
        return self.weather[0].id if self.weather else None

    @property
    def condition(self) -> str | None:
        return self.weather[0].main if self.weather else None

    @property
    def is_snowing(self) -> bool:
        code = self.condition_code
        return code is not None and code in SNOW_CONDITION_CODES
