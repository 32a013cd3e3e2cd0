"""Async client for the simulation's local comm API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from tsw6weather._api import simulation as _simulation_api
from tsw6weather._constants import SIMULATION_KEY_HEADER
from tsw6weather._retry import RetryExecutor
from tsw6weather._transport import JsonTransport, Transport
from tsw6weather.config import SyncConfig
from tsw6weather.exceptions import Tsw6TransportError, Tsw6WeatherError
from tsw6weather.geo import GeoPoint
from tsw6weather.models.simulation import ApiInfo
from tsw6weather.models.weather import WeatherVector
from tsw6weather.subscription import SubscriptionHandle, SubscriptionState

_logger = logging.getLogger(__name__)


class SimulationFeedClient:
    """Subscription lifecycle, position reads and weather writes.

    Usage::

        async with SimulationFeedClient(config) as feed:
            if await feed.is_available() and await feed.register_subscription():
                position = await feed.read_position()

    Reads, pushes and lifecycle calls are each serialized, so the tick loop
    and the transition loop can share one client without an operation ever
    overlapping with itself.
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
        self._handle: SubscriptionHandle | None = None
        self._lifecycle_lock = asyncio.Lock()
        self._read_lock = asyncio.Lock()
        self._push_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SimulationFeedClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = JsonTransport(
            self._config.simulation_base_url,
            self._http_session,
            headers={SIMULATION_KEY_HEADER: self._config.simulation_api_key},
            timeout=aiohttp.ClientTimeout(
                total=self._config.simulation_timeout,
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
            raise Tsw6WeatherError("Client not initialized. Use 'async with SimulationFeedClient(...) as feed:'")
        return self._transport

    # ------------------------------------------------------------------
    # Subscription lifecycle
    # ------------------------------------------------------------------

    @property
    def handle(self) -> SubscriptionHandle | None:
        return self._handle

    @property
    def state(self) -> SubscriptionState:
        if self._handle is None:
            return SubscriptionState.UNREGISTERED
        return self._handle.state

    async def register_subscription(self) -> bool:
        """Subscribe to the player-info node.

        Returns ``True`` once the subscription is active, ``False`` if the
        simulation could not be reached after retries.
        """
        transport = self._require_transport()
        async with self._lifecycle_lock:
            if self._handle is None:
                self._handle = SubscriptionHandle()
            handle = self._handle
            try:
                await self._retry.execute(
                    lambda: _simulation_api.register_subscription(transport, handle.id),
                    description="Subscription registration",
                )
            except Tsw6TransportError as exc:
                _logger.error("Failed to register subscription %d: %s", handle.id, exc)
                return False
            self._handle = handle.activated()
            _logger.info("Subscription registered with ID: %d", handle.id)
            return True

    async def deregister_subscription(self) -> bool:
        """Remove the subscription.

        Also sent when registration was attempted but never confirmed, since
        the simulation may have accepted it anyway.  A no-op returning
        ``False`` (with a warning) when no id was ever allocated.
        """
        transport = self._require_transport()
        async with self._lifecycle_lock:
            handle = self._handle
            if handle is None:
                _logger.warning("No subscription to deregister")
                return False
            try:
                await self._retry.execute(
                    lambda: _simulation_api.deregister_subscription(transport, handle.id),
                    description="Subscription deregistration",
                )
            except Tsw6TransportError as exc:
                _logger.error("Failed to deregister subscription %d: %s", handle.id, exc)
                return False
            self._handle = None
            _logger.info("Subscription %d deregistered successfully", handle.id)
            return True

    # ------------------------------------------------------------------
    # Feed I/O
    # ------------------------------------------------------------------

    async def read_position(self) -> GeoPoint | None:
        """Current player position.

        Returns ``None`` while the simulation has nothing to report (no
        active subscription, player not yet in a drivable state).

        Raises
        ------
        Tsw6TransportError
            The simulation could not be read after retries.
        """
        transport = self._require_transport()
        handle = self._handle
        if handle is None or not handle.active:
            _logger.warning("No active subscription to read from")
            return None

        async with self._read_lock:
            data = await self._retry.execute(
                lambda: _simulation_api.read_subscription(transport, handle.id),
                description="Subscription read",
            )

        position = data.player_position()
        if position is None:
            _logger.debug("Subscription %d has no geo-location yet", handle.id)
            return None
        _logger.debug("Player location: %s", position)
        return position

    async def push_weather(self, vector: WeatherVector) -> bool:
        """Write every weather channel.

        Returns ``True`` when all channels were applied.  Failures are logged
        and reported through the return value only; the next push carries a
        fresher vector anyway.
        """
        transport = self._require_transport()
        applied = True
        async with self._push_lock:
            for channel, value in vector.channel_values().items():
                try:
                    await self._retry.execute(
                        lambda channel=channel, value=value: _simulation_api.set_weather_channel(
                            transport, channel, value
                        ),
                        description=f"Weather update ({channel})",
                    )
                except Tsw6TransportError as exc:
                    _logger.error("Failed to set weather channel %s: %s", channel, exc)
                    applied = False
        return applied

    # ------------------------------------------------------------------
    # Availability probe
    # ------------------------------------------------------------------

    async def get_api_info(self) -> ApiInfo:
        """Fetch ``/info`` once, without retries."""
        return await _simulation_api.fetch_api_info(self._require_transport())

    async def is_available(self) -> bool:
        """Check the simulation answers and identifies as the expected service.

        A single attempt: failing here means "not available yet", which the
        caller decides how to handle.
        """
        try:
            info = await self.get_api_info()
        except Tsw6TransportError as exc:
            _logger.error("Failed to retrieve API info: %s", exc)
            return False

        meta = info.meta
        if meta is None:
            _logger.error("API response missing 'Meta' property")
            return False
        if meta.worker != self._config.expected_worker:
            _logger.error("Invalid Worker value: %s", meta.worker)
            return False
        if meta.game_name != self._config.expected_game_name:
            _logger.error("Invalid GameName value: %s", meta.game_name)
            return False
        if meta.game_build_number <= 0:
            _logger.error("Invalid or missing GameBuildNumber")
            return False
        if meta.api_version <= 0:
            _logger.error("Invalid or missing APIVersion")
            return False
        if not meta.game_instance_id:
            _logger.error("Missing GameInstanceID")
            return False

        _logger.info(
            "Connected to API with GameInstanceID %s on version %d",
            meta.game_instance_id,
            meta.game_build_number,
        )
        return True
