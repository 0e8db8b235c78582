"""Map channel commands onto device operations and publish the results."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from pytwinkly.exceptions import ConfigurationError, InvalidParameterError, TwinklyError
from pytwinkly.models import (
    REFRESH,
    Channel,
    ConnectionStatus,
    RefreshType,
    ThingStatus,
    ThingStatusDetail,
)


if TYPE_CHECKING:
    from pytwinkly.auth import SessionManager
    from pytwinkly.devices import TwinklyDevice

_LOGGER = logging.getLogger(__name__)

_ON_VALUES = frozenset({"on", "true", "1"})
_OFF_VALUES = frozenset({"off", "false", "0"})


class StateSink(Protocol):
    """Receiver of channel values and connection status."""

    def publish_state(self, channel: Channel, value: Any) -> None:
        """Publish the latest value of a channel."""

    def publish_status(self, status: ConnectionStatus) -> None:
        """Publish the connection status of the device."""


def is_refresh(command: Any) -> bool:
    """Check if a command asks for the current value rather than a change."""
    if isinstance(command, RefreshType):
        return True
    return isinstance(command, str) and command.strip().upper() == REFRESH.value


class CommandDispatcher:
    """Dispatch one external command to one device operation.

    A refresh command reads the channel and publishes the value. Any other
    command writes the channel; the switch channel then publishes the
    requested state without reading it back.

    Communication failures never escape: the device is reported offline, the
    session is dropped so the next command logs in from scratch, and the
    command is not retried.
    """

    def __init__(self, device: TwinklyDevice, session_manager: SessionManager, sink: StateSink) -> None:
        """Initialize the dispatcher.

        Args:
            device: Device facade to call.
            session_manager: Session manager to invalidate on failure.
            sink: Receiver of published values and status.
        """
        self._device = device
        self._session_manager = session_manager
        self._sink = sink

    async def handle_command(self, channel: Channel | str, command: Any) -> bool:
        """Handle a refresh or set command for a channel.

        Args:
            channel: Target channel.
            command: REFRESH (or the string "refresh") to read, otherwise the new value.

        Returns:
            True if the command completed, False if it failed or was dropped.
        """
        _LOGGER.debug("Handle command %s with channel %s", command, channel)

        try:
            channel = Channel(channel)
        except ValueError:
            _LOGGER.warning("Unknown channel for Twinkly: %s", channel)
            return False

        try:
            if is_refresh(command):
                await self._refresh(channel)
            else:
                await self._apply(channel, command)

        except InvalidParameterError as exc:
            _LOGGER.warning("Dropping invalid command %r for %s: %s", command, channel, exc)
            return False

        except ConfigurationError as exc:
            self._sink.publish_status(
                ConnectionStatus(
                    ThingStatus.OFFLINE,
                    ThingStatusDetail.CONFIGURATION_ERROR,
                    str(exc),
                )
            )
            _LOGGER.error("Invalid configuration for Twinkly: %s", exc)
            self._session_manager.invalidate()
            return False

        except TwinklyError as exc:
            self._sink.publish_status(
                ConnectionStatus(
                    ThingStatus.OFFLINE,
                    ThingStatusDetail.COMMUNICATION_ERROR,
                    f"Could not control device at IP address {self._device.host}",
                )
            )
            _LOGGER.error("Error communicating with Twinkly: %s", exc)
            self._session_manager.invalidate()
            return False

        return True

    async def _refresh(self, channel: Channel) -> None:
        device = self._device

        if channel is Channel.SWITCH:
            value: Any = await device.is_on()
        elif channel is Channel.DIMMER:
            value = await device.get_brightness()
        elif channel is Channel.MODE:
            value = await device.get_mode()
        elif channel is Channel.CURRENT_EFFECT:
            value = await device.get_current_effect()
        else:
            value = await device.get_current_movie()

        self._sink.publish_state(channel, value)

    async def _apply(self, channel: Channel, command: Any) -> None:
        device = self._device

        if channel is Channel.SWITCH:
            power_on = _parse_switch(command)
            if power_on:
                await device.turn_on()
            else:
                await device.turn_off()
            self._sink.publish_state(channel, power_on)
        elif channel is Channel.DIMMER:
            await device.set_brightness(_parse_int(command, "brightness"))
        elif channel is Channel.MODE:
            await device.set_mode(str(command))
        elif channel is Channel.CURRENT_EFFECT:
            await device.set_current_effect(_parse_int(command, "effect"))
        else:
            await device.set_current_movie(_parse_int(command, "movie"))


def _parse_switch(command: Any) -> bool:
    if isinstance(command, bool):
        return command

    text = str(command).strip().lower()
    if text in _ON_VALUES:
        return True
    if text in _OFF_VALUES:
        return False

    msg = f"Unexpected command for switch: {command!r}"
    raise InvalidParameterError(msg, parameter_name="switch", value=command)


def _parse_int(command: Any, name: str) -> int:
    if isinstance(command, bool):
        msg = f"Expected a number for {name}, got {command!r}"
        raise InvalidParameterError(msg, parameter_name=name, value=command)

    try:
        number = float(command)
    except (TypeError, ValueError):
        msg = f"Expected a number for {name}, got {command!r}"
        raise InvalidParameterError(msg, parameter_name=name, value=command) from None

    if not number.is_integer():
        msg = f"Expected a whole number for {name}, got {command!r}"
        raise InvalidParameterError(msg, parameter_name=name, value=command)

    return int(number)
