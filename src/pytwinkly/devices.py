"""Typed operations for a Twinkly device.

Each operation is a single call through TwinklyAPI.execute(); the only logic
here is input validation and reading the relevant field from the response.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pytwinkly.const import (
    BRIGHTNESS_MAX,
    BRIGHTNESS_MIN,
    BRIGHTNESS_TYPE_ABSOLUTE,
    ENDPOINT_BRIGHTNESS,
    ENDPOINT_CURRENT_EFFECT,
    ENDPOINT_CURRENT_MOVIE,
    ENDPOINT_MODE,
    MODE_OFF,
    POWER_ON_MODE,
)
from pytwinkly.exceptions import InvalidParameterError
from pytwinkly.models import DeviceMode
from pytwinkly.parsers import parse_brightness, parse_current_effect, parse_current_movie, parse_mode


if TYPE_CHECKING:
    from pytwinkly.api import TwinklyAPI

_LOGGER = logging.getLogger(__name__)


class TwinklyDevice:
    """Facade over the controllable properties of a Twinkly device.

    The device keeps no local state: every getter asks the device.

    Example:
        ```python
        async with TwinklyClient(host="192.168.1.40") as client:
            device = client.device

            await device.turn_on()
            await device.set_brightness(42)
            print(await device.get_mode())
        ```
    """

    def __init__(self, api: TwinklyAPI) -> None:
        """Initialize the device.

        Args:
            api: TwinklyAPI instance used for every request.
        """
        self._api = api

    @property
    def host(self) -> str:
        """Get the configured device host."""
        return self._api.session_manager.config.host

    # -------------------------------------------------------------------------
    # Mode / power
    # -------------------------------------------------------------------------

    async def get_mode(self) -> str:
        """Get the current device mode (off, color, demo, effect, movie, playlist, rt)."""
        data = await self._api.execute("GET", ENDPOINT_MODE)
        return parse_mode(data, ENDPOINT_MODE)

    async def set_mode(self, mode: DeviceMode | str) -> None:
        """Set the device mode.

        Args:
            mode: One of the DeviceMode values (case-insensitive).

        Raises:
            InvalidParameterError: If the mode is not a known mode.
        """
        validated = self._validate_mode(mode)
        await self._api.execute("POST", ENDPOINT_MODE, json_data={"mode": validated.value})
        _LOGGER.debug("Set mode of %s to %s", self.host, validated.value)

    async def is_on(self) -> bool:
        """Check if the device is on (any mode other than off)."""
        return (await self.get_mode()).lower() != MODE_OFF

    async def turn_on(self) -> None:
        """Turn the device on by switching to movie mode."""
        await self.set_mode(POWER_ON_MODE)

    async def turn_off(self) -> None:
        """Turn the device off."""
        await self.set_mode(MODE_OFF)

    # -------------------------------------------------------------------------
    # Brightness
    # -------------------------------------------------------------------------

    async def get_brightness(self) -> int:
        """Get the brightness percentage.

        Brightness of a device that is off is 0; in that case the brightness
        endpoint is not queried.

        Returns:
            Brightness (0-100).
        """
        if not await self.is_on():
            return 0

        data = await self._api.execute("GET", ENDPOINT_BRIGHTNESS)
        return parse_brightness(data, ENDPOINT_BRIGHTNESS)

    async def set_brightness(self, brightness: int) -> None:
        """Set the absolute brightness percentage.

        Args:
            brightness: Brightness level (0-100).

        Raises:
            InvalidParameterError: If brightness is outside valid range.
        """
        if isinstance(brightness, bool) or not isinstance(brightness, int):
            msg = f"Brightness must be an integer, got {brightness!r}"
            raise InvalidParameterError(msg, parameter_name="brightness", value=brightness)

        if not BRIGHTNESS_MIN <= brightness <= BRIGHTNESS_MAX:
            msg = f"Brightness must be {BRIGHTNESS_MIN}-{BRIGHTNESS_MAX}, got {brightness}"
            raise InvalidParameterError(msg, parameter_name="brightness", value=brightness)

        payload: dict[str, Any] = {"mode": "enabled", "type": BRIGHTNESS_TYPE_ABSOLUTE, "value": brightness}
        await self._api.execute("POST", ENDPOINT_BRIGHTNESS, json_data=payload)

    # -------------------------------------------------------------------------
    # Effects and movies
    # -------------------------------------------------------------------------

    async def get_current_effect(self) -> int:
        """Get the index of the current effect."""
        data = await self._api.execute("GET", ENDPOINT_CURRENT_EFFECT)
        return parse_current_effect(data, ENDPOINT_CURRENT_EFFECT)

    async def set_current_effect(self, effect: int) -> None:
        """Select the current effect.

        The index is sent as both ``preset_id`` and ``effect_id`` because
        firmware versions differ in which one they read.

        Args:
            effect: Effect index.

        Raises:
            InvalidParameterError: If the index is not a non-negative integer.
        """
        self._validate_index(effect, "effect")
        await self._api.execute(
            "POST",
            ENDPOINT_CURRENT_EFFECT,
            json_data={"preset_id": effect, "effect_id": effect},
        )

    async def get_current_movie(self) -> int:
        """Get the index of the current movie."""
        data = await self._api.execute("GET", ENDPOINT_CURRENT_MOVIE)
        return parse_current_movie(data, ENDPOINT_CURRENT_MOVIE)

    async def set_current_movie(self, movie: int) -> None:
        """Select the current movie.

        Raises:
            InvalidParameterError: If the index is not a non-negative integer.
        """
        self._validate_index(movie, "movie")
        await self._api.execute("POST", ENDPOINT_CURRENT_MOVIE, json_data={"id": movie})

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate_mode(mode: DeviceMode | str) -> DeviceMode:
        try:
            return DeviceMode(str(mode).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in DeviceMode)
            msg = f"Unknown mode {mode!r}, expected one of: {valid}"
            raise InvalidParameterError(msg, parameter_name="mode", value=mode) from None

    @staticmethod
    def _validate_index(value: int, name: str) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            msg = f"{name.capitalize()} index must be a non-negative integer, got {value!r}"
            raise InvalidParameterError(msg, parameter_name=name, value=value)

    def __repr__(self) -> str:
        """Return detailed string representation of device."""
        return f"TwinklyDevice(host='{self.host}')"
