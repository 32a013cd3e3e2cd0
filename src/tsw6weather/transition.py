"""Smooth weather transitions.

The engine owns the authoritative "current" weather vector.  Each new target
starts a background task that blends from the current vector to the target
over a fixed wall-clock duration, pushing one intermediate vector per
interval.  A newer target cancels the running task, and waits for it to
finish, before the next one starts: at most one task ever pushes.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Protocol

from tsw6weather.models.weather import WeatherVector

_logger = logging.getLogger(__name__)


class WeatherSink(Protocol):
    async def push_weather(self, vector: WeatherVector) -> bool:
        ...


@dataclasses.dataclass
class TransitionState:
    """One in-flight blend from ``start`` to ``target``."""

    start: WeatherVector
    target: WeatherVector
    started_at: float
    duration: float
    task: asyncio.Task[None] | None = dataclasses.field(default=None, repr=False)

    def progress(self, now: float) -> float:
        """Fraction of the transition elapsed at *now*, in ``[0, 1]``.

        Recomputed from the clock on every tick so rounding never accumulates.
        """
        if self.duration <= 0:
            return 1.0
        return min(max(now - self.started_at, 0.0) / self.duration, 1.0)


class WeatherTransitionEngine:
    """Blend weather toward the latest target and push it to the simulation."""

    def __init__(
        self,
        sink: WeatherSink,
        *,
        duration: float = 30.0,
        interval: float = 1.0,
        initial: WeatherVector | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._sink = sink
        self._duration = duration
        self._interval = interval
        self._current = initial or WeatherVector()
        self._clock = clock
        self._sleep = sleep
        self._state: TransitionState | None = None
        self._lock = asyncio.Lock()

    @property
    def current(self) -> WeatherVector:
        return self._current

    @property
    def target(self) -> WeatherVector | None:
        return self._state.target if self._state is not None else None

    @property
    def is_transitioning(self) -> bool:
        state = self._state
        return state is not None and state.task is not None and not state.task.done()

    async def retarget(self, target: WeatherVector) -> None:
        """Start blending toward *target*, superseding any running transition."""
        async with self._lock:
            await self._cancel_running()
            state = TransitionState(
                start=self._current,
                target=target,
                started_at=self._clock(),
                duration=self._duration,
            )
            _logger.info("Starting weather transition over %s seconds", self._duration)
            _logger.debug("From: %s", state.start.describe())
            _logger.debug("To: %s", target.describe())
            state.task = asyncio.create_task(self._run(state), name="weather-transition")
            self._state = state

    async def stop(self) -> None:
        """Cancel the running transition, if any, and wait for it to exit."""
        async with self._lock:
            await self._cancel_running()

    async def wait(self) -> None:
        """Wait for the current transition to finish on its own.

        Re-raises the error that ended the transition, if any.
        """
        state = self._state
        if state is not None and state.task is not None:
            await asyncio.wait({state.task})
            if not state.task.cancelled() and (exc := state.task.exception()) is not None:
                raise exc

    async def _cancel_running(self) -> None:
        state = self._state
        if state is None or state.task is None:
            return
        task = state.task
        if not task.done():
            task.cancel()
            # asyncio.wait does not re-raise the task's CancelledError; only a
            # cancellation aimed at the caller propagates from here.
            await asyncio.wait({task})
        if task.cancelled():
            _logger.debug("Weather transition cancelled")
            return
        # Retrieve the outcome so a crashed transition is reported here, not by the event loop.
        if (exc := task.exception()) is not None:
            _logger.error("Weather transition failed: %s", exc, exc_info=exc)

    async def _run(self, state: TransitionState) -> None:
        while True:
            progress = state.progress(self._clock())
            self._current = state.start.interpolate(state.target, progress)

            try:
                await self._sink.push_weather(self._current)
            except Exception:
                _logger.exception("Error during weather transition push")

            if progress >= 1.0:
                _logger.info("Weather transition complete")
                _logger.debug("Final state: %s", self._current.describe())
                return

            await self._sleep(self._interval)
