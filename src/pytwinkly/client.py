"""Client for a single Twinkly device.

This module wires the session manager, command executor, device facade,
command dispatcher and polling loop together, and acts as the state sink
that external listeners subscribe to.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from pytwinkly.api import TwinklyAPI
from pytwinkly.auth import SessionManager
from pytwinkly.config import TwinklyConfig
from pytwinkly.devices import TwinklyDevice
from pytwinkly.dispatcher import CommandDispatcher
from pytwinkly.models import REFRESH, Channel, ConnectionStatus, ThingStatus
from pytwinkly.reconciler import StateReconciler


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from types import TracebackType

    from aiohttp import ClientSession

_LOGGER = logging.getLogger(__name__)


class TwinklyClient:
    """Stateful client for one Twinkly device.

    Example:
        Basic usage with automatic session management:

        ```python
        from pytwinkly import Channel, TwinklyClient


        def on_state(channel, value):
            print(f"{channel} -> {value}")


        async with TwinklyClient(host="192.168.1.40", refresh_interval=30) as client:
            client.add_listener(on_state)

            await client.handle_command(Channel.SWITCH, True)
            await client.handle_command(Channel.DIMMER, 42)
            await client.refresh(Channel.MODE)
        ```

        Session injection and direct device access:

        ```python
        async with ClientSession() as session:
            client = TwinklyClient(host="192.168.1.40", session=session, refresh_interval=0)
            async with client:
                print(await client.device.get_brightness())
        ```

    Attributes:
        config: Device configuration.
    """

    def __init__(
        self,
        host: str | None = None,
        *,
        config: TwinklyConfig | None = None,
        refresh_interval: float | None = None,
        session: ClientSession | None = None,
        linked_channels: Iterable[Channel | str] | None = None,
    ) -> None:
        """Initialize the Twinkly client.

        Args:
            host: Host name or IP address of the device. Ignored if config is given.
            config: Optional full configuration.
            refresh_interval: Optional polling interval overriding the config.
                Zero or negative disables polling.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            linked_channels: Channels polled by the reconciliation loop.
                Defaults to every channel.

        Raises:
            ValueError: If neither host nor config is provided.
        """
        if config is None:
            if host is None:
                msg = "Either host or config must be provided"
                raise ValueError(msg)
            config = TwinklyConfig(host=host)

        if refresh_interval is not None:
            config = replace(config, refresh_interval=refresh_interval)

        self.config = config
        self._session_manager = SessionManager(
            config,
            session=session,
            on_session_updated=self._handle_session_established,
        )
        self._api = TwinklyAPI(session_manager=self._session_manager, session=session)
        self._device = TwinklyDevice(self._api)
        self._dispatcher = CommandDispatcher(self._device, self._session_manager, self)
        self._reconciler = StateReconciler(self._dispatcher, self.linked_channels, config.refresh_interval)

        channels = Channel if linked_channels is None else linked_channels
        self._linked: set[Channel] = {Channel(channel) for channel in channels}

        self._listeners: list[Callable[[Channel, Any], None]] = []
        self._status_listeners: list[Callable[[ConnectionStatus], None]] = []
        self._status = ConnectionStatus(ThingStatus.UNKNOWN)

    @property
    def api(self) -> TwinklyAPI:
        """Get the underlying command executor."""
        return self._api

    @property
    def device(self) -> TwinklyDevice:
        """Get the device facade."""
        return self._device

    @property
    def session_manager(self) -> SessionManager:
        """Get the session manager."""
        return self._session_manager

    @property
    def reconciler(self) -> StateReconciler:
        """Get the polling loop."""
        return self._reconciler

    @property
    def status(self) -> ConnectionStatus:
        """Get the last published connection status."""
        return self._status

    async def __aenter__(self) -> TwinklyClient:
        """Enter the context manager.

        Creates the session if needed and starts polling when enabled.

        Returns:
            Self for use in async with statements.
        """
        await self._api.__aenter__()
        self._reconciler.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager.

        Stops polling, logs out and closes the session if owned.
        """
        await self._reconciler.stop()
        await self._api.__aexit__(exc_type, exc_val, exc_tb)
        self.publish_status(ConnectionStatus(ThingStatus.OFFLINE))

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def handle_command(self, channel: Channel | str, command: Any) -> bool:
        """Dispatch a refresh or set command for a channel.

        Returns:
            True if the command completed, False otherwise.
        """
        return await self._dispatcher.handle_command(channel, command)

    async def refresh(self, channel: Channel | str) -> bool:
        """Read a channel from the device and publish its value."""
        return await self._dispatcher.handle_command(channel, REFRESH)

    # -------------------------------------------------------------------------
    # Linked channels
    # -------------------------------------------------------------------------

    def linked_channels(self) -> list[Channel]:
        """Get the channels polled on each tick, in declaration order."""
        return [channel for channel in Channel if channel in self._linked]

    def link(self, channel: Channel | str) -> None:
        """Include a channel in polling."""
        self._linked.add(Channel(channel))

    def unlink(self, channel: Channel | str) -> None:
        """Exclude a channel from polling."""
        self._linked.discard(Channel(channel))

    # -------------------------------------------------------------------------
    # State sink
    # -------------------------------------------------------------------------

    def publish_state(self, channel: Channel, value: Any) -> None:
        """Notify state listeners of a channel value.

        A listener that raises is logged and does not affect other listeners.
        """
        for listener in list(self._listeners):
            try:
                listener(channel, value)
            except Exception:
                _LOGGER.exception("Error in state listener for channel %s", channel)

    def publish_status(self, status: ConnectionStatus) -> None:
        """Record the connection status and notify status listeners."""
        if status != self._status:
            _LOGGER.debug("Device %s status: %s (%s)", self.config.host, status.status, status.detail)
        self._status = status

        for listener in list(self._status_listeners):
            try:
                listener(status)
            except Exception:
                _LOGGER.exception("Error in status listener for device %s", self.config.host)

    def add_listener(self, callback: Callable[[Channel, Any], None]) -> None:
        """Register a callback receiving (channel, value) on every publish."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[Channel, Any], None]) -> None:
        """Unregister a state callback."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def add_status_listener(self, callback: Callable[[ConnectionStatus], None]) -> None:
        """Register a callback receiving every connection status change."""
        if callback not in self._status_listeners:
            self._status_listeners.append(callback)

    def remove_status_listener(self, callback: Callable[[ConnectionStatus], None]) -> None:
        """Unregister a status callback."""
        if callback in self._status_listeners:
            self._status_listeners.remove(callback)

    def _handle_session_established(self, manager: SessionManager) -> None:
        self.publish_status(ConnectionStatus(ThingStatus.ONLINE))

    def __repr__(self) -> str:
        """Return detailed string representation of the client."""
        return f"TwinklyClient(host='{self.config.host}')"
