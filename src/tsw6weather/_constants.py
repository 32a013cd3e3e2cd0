"""Internal constants shared across the library."""

SIMULATION_BASE_URL = "http://127.0.0.1:31270"
OPENWEATHER_BASE_URL = "https://api.openweathermap.org"

# Header carrying the simulation comm API key.
SIMULATION_KEY_HEADER = "DTGCommKey"

EXPECTED_WORKER = "DTGCommWorkerRC"
EXPECTED_GAME_NAME = "Train Sim World 6®"

PLAYER_INFO_PATH = "DriverAid.PlayerInfo"
WEATHER_MANAGER_PREFIX = "WeatherManager"

# Subscription ids are 16-bit unsigned; 0 is not used by the simulation.
SUBSCRIPTION_ID_MIN = 1
SUBSCRIPTION_ID_MAX = 0xFFFF

EARTH_RADIUS_M = 6_371_000.0

# Positions closer than this are GPS/float jitter, not movement.
MIN_MOVEMENT_M = 0.1

KELVIN_OFFSET = 273.15
