"""Periodic poll-and-publish loop for linked channels."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from pytwinkly.models import REFRESH, Channel


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from pytwinkly.dispatcher import CommandDispatcher

_LOGGER = logging.getLogger(__name__)


class StateReconciler:
    """Keep the published channel values in line with the device.

    Once per tick, every linked channel is refreshed through the dispatcher,
    which publishes the value or reports the device offline. The first tick
    runs as soon as the loop starts; later ticks follow at a fixed delay.
    A failing channel never stops the loop.
    """

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        linked_channels: Callable[[], Iterable[Channel]],
        interval: float,
    ) -> None:
        """Initialize the reconciler.

        Args:
            dispatcher: Dispatcher used to refresh each channel.
            linked_channels: Callable returning the channels to poll on each tick.
            interval: Seconds between ticks. Zero or negative disables the loop.
        """
        self._dispatcher = dispatcher
        self._linked_channels = linked_channels
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        """Get the polling interval in seconds."""
        return self._interval

    @property
    def enabled(self) -> bool:
        """Check if polling is enabled by the configured interval."""
        return self._interval > 0

    @property
    def is_running(self) -> bool:
        """Check if the background task is active."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background loop (no-op when disabled or already running)."""
        if not self.enabled:
            _LOGGER.debug("Polling disabled (interval %s)", self._interval)
            return

        if self.is_running:
            return

        self._task = asyncio.create_task(self._run())
        _LOGGER.info("Started state polling (interval: %ss)", self._interval)

    async def stop(self) -> None:
        """Cancel the background loop, abandoning any in-flight request."""
        if self._task is None:
            return

        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        _LOGGER.info("Stopped state polling")

    async def tick(self) -> None:
        """Refresh every linked channel once."""
        for channel in list(self._linked_channels()):
            try:
                await self._dispatcher.handle_command(channel, REFRESH)
            except Exception:
                _LOGGER.exception("Unexpected error refreshing channel %s", channel)

    async def _run(self) -> None:
        try:
            while True:
                await self.tick()
                await asyncio.sleep(self._interval)
        except asyncio.CancelledError:
            _LOGGER.debug("State polling loop cancelled")
            raise
