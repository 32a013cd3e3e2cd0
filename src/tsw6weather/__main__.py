"""Command-line entry point: ``python -m tsw6weather``.

API keys come from ``TSW6_API_KEY`` / ``OPENWEATHER_API_KEY`` (or the
matching flags); every other setting has a default, see
:class:`tsw6weather.config.SyncConfig`.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from typing import Any

from tsw6weather.config import SyncConfig
from tsw6weather.exceptions import Tsw6WeatherError
from tsw6weather.runner import run

_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

_logger = logging.getLogger("tsw6weather")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tsw6weather",
        description="Sync real-world weather into Train Sim World 6.",
    )
    parser.add_argument("--tsw6-key", help="Simulation comm API key (default: $TSW6_API_KEY)")
    parser.add_argument("--openweather-key", help="OpenWeather API key (default: $OPENWEATHER_API_KEY)")
    parser.add_argument("--threshold-km", type=float, help="Distance travelled before fetching new weather")
    parser.add_argument("--interval", type=float, help="Seconds between position checks")
    parser.add_argument("--transition", type=float, help="Seconds to blend into new weather")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Minimum log level (default: INFO)",
    )
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> SyncConfig:
    overrides: dict[str, Any] = {}
    if args.tsw6_key:
        overrides["simulation_api_key"] = args.tsw6_key
    if args.openweather_key:
        overrides["openweather_api_key"] = args.openweather_key
    if args.threshold_km is not None:
        overrides["update_threshold_km"] = args.threshold_km
    if args.interval is not None:
        overrides["tick_interval"] = args.interval
    if args.transition is not None:
        overrides["transition_duration"] = args.transition
    return SyncConfig.from_env(**overrides)


async def _main(config: SyncConfig) -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Windows event loops lack signal handlers; Ctrl+C cancels the run task instead.
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, stop_event.set)
    await run(config, stop_event=stop_event)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format=_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    try:
        config = _build_config(args)
        asyncio.run(_main(config))
    except KeyboardInterrupt:
        _logger.info("Shutdown requested")
    except Tsw6WeatherError as exc:
        _logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
