"""Async client for the OpenWeather current-weather API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from tsw6weather._api import openweather as _openweather_api
from tsw6weather._retry import RetryExecutor
from tsw6weather._transport import JsonTransport, Transport
from tsw6weather.config import SyncConfig
from tsw6weather.exceptions import Tsw6WeatherError
from tsw6weather.geo import GeoPoint
from tsw6weather.models.openweather import ProviderObservation

_logger = logging.getLogger(__name__)


class WeatherProviderClient:
    """Fetch current weather for a coordinate.

    Every call is a fresh request; deciding *when* to fetch is the sync
    controller's job.

    Usage::

        async with WeatherProviderClient(config) as provider:
            observation = await provider.fetch_current(GeoPoint(51.5, -0.12))
    """

    def __init__(
        self,
        config: SyncConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        retry: RetryExecutor | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._external_transport = transport is not None
        self._retry = retry or RetryExecutor(config.retry)
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> WeatherProviderClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = JsonTransport(
            self._config.openweather_base_url,
            self._http_session,
            timeout=aiohttp.ClientTimeout(
                total=self._config.openweather_timeout,
                connect=self._config.connect_timeout,
            ),
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._external_transport:
            return
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise Tsw6WeatherError("Client not initialized. Use 'async with WeatherProviderClient(...) as provider:'")
        return self._transport

    async def fetch_current(self, point: GeoPoint) -> ProviderObservation:
        """Current observation at *point*.

        Raises
        ------
        Tsw6TransportError
            The provider could not be reached, or kept answering with an
            unusable payload, until the retry policy was exhausted.
        """
        transport = self._require_transport()
        async with self._lock:
            observation = await self._retry.execute(
                lambda: _openweather_api.fetch_current_weather(transport, point, self._config.openweather_api_key),
                description="Weather fetch",
            )
        _logger.debug(
            "Observation for %s: condition=%s temp=%.2fK",
            point,
            observation.condition,
            observation.temperature_k,
        )
        return observation
