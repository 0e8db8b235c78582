"""Parsing utilities for Twinkly device responses.

This module provides the stateless functions used by the session manager,
the command executor and the device facade to turn raw HTTP responses into
plain values. Every parser raises DeviceResponseError when a field the caller
relies on is missing or has the wrong shape.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from pytwinkly.const import RESULT_CODE_OK
from pytwinkly.exceptions import AuthenticationError, DeviceResponseError
from pytwinkly.models import LoginResponse


if TYPE_CHECKING:
    from aiohttp import ClientResponse


__all__ = [
    "parse_brightness",
    "parse_current_effect",
    "parse_current_movie",
    "parse_login_response",
    "parse_mode",
    "read_json_body",
]


async def read_json_body(response: ClientResponse, endpoint: str) -> dict[str, Any]:
    """Validate a device response and decode its JSON object body.

    Args:
        response: The aiohttp response to read.
        endpoint: Endpoint path, used in error messages.

    Returns:
        Decoded JSON object.

    Raises:
        AuthenticationError: If the device rejected the token (401/403).
        DeviceResponseError: If the status is not 200, the body is not a JSON
            object, or the body carries a result code other than 1000.
    """
    if response.status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
        msg = f"Device rejected authentication for {endpoint} (status {response.status})"
        raise AuthenticationError(msg)

    if response.status != HTTPStatus.OK:
        msg = f"Request to {endpoint} failed with status {response.status}"
        raise DeviceResponseError(msg, endpoint=endpoint, status=response.status)

    try:
        # Firmware versions disagree on the content type they send
        data = await response.json(content_type=None)
    except ValueError as exc:
        msg = f"Invalid JSON response from {endpoint}: {exc}"
        raise DeviceResponseError(msg, endpoint=endpoint, status=response.status) from exc

    if not isinstance(data, dict):
        msg = f"Expected JSON object from {endpoint}, got {type(data).__name__}"
        raise DeviceResponseError(msg, endpoint=endpoint, status=response.status)

    code = data.get("code")
    if code is not None and code != RESULT_CODE_OK:
        msg = f"Device returned result code {code} for {endpoint}"
        raise DeviceResponseError(msg, endpoint=endpoint, status=response.status)

    return data


def _require_int(data: dict[str, Any], key: str, endpoint: str) -> int:
    if key not in data:
        msg = f"Missing '{key}' in response from {endpoint}"
        raise DeviceResponseError(msg, endpoint=endpoint)

    value = data[key]
    if isinstance(value, bool):
        msg = f"Expected integer '{key}' from {endpoint}, got {value!r}"
        raise DeviceResponseError(msg, endpoint=endpoint)

    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        msg = f"Expected integer '{key}' from {endpoint}, got {value!r}"
        raise DeviceResponseError(msg, endpoint=endpoint) from exc


def parse_login_response(data: dict[str, Any]) -> LoginResponse:
    """Parse the /login response.

    Args:
        data: Raw response in format:
              {"authentication_token": str, "challenge-response": str,
               "authentication_token_expires_in": int}

    Returns:
        LoginResponse with the unverified token.

    Raises:
        AuthenticationError: If any of the three fields is missing or invalid.
    """
    token = data.get("authentication_token")
    challenge_response = data.get("challenge-response")
    expires_in = data.get("authentication_token_expires_in")

    if not token:
        msg = "Missing authentication token in login response"
        raise AuthenticationError(msg)

    if not challenge_response:
        msg = "Missing challenge-response in login response"
        raise AuthenticationError(msg)

    if isinstance(expires_in, bool) or not isinstance(expires_in, int | float) or expires_in <= 0:
        msg = f"Invalid token lifetime in login response: {expires_in!r}"
        raise AuthenticationError(msg)

    return LoginResponse(
        token=str(token),
        challenge_response=str(challenge_response),
        expires_in=int(expires_in),
    )


def parse_mode(data: dict[str, Any], endpoint: str = "/led/mode") -> str:
    """Parse the current mode from a /led/mode response."""
    mode = data.get("mode")
    if not isinstance(mode, str):
        msg = f"Missing 'mode' in response from {endpoint}"
        raise DeviceResponseError(msg, endpoint=endpoint)
    return mode


def parse_brightness(data: dict[str, Any], endpoint: str = "/led/out/brightness") -> int:
    """Parse the brightness percentage from a /led/out/brightness response."""
    return _require_int(data, "value", endpoint)


def parse_current_effect(data: dict[str, Any], endpoint: str = "/led/effects/current") -> int:
    """Parse the current effect index.

    Depending on firmware, the device reports the index as ``preset_id`` or as
    ``effect_id``. ``preset_id`` wins when both are present.
    """
    if "preset_id" in data:
        return _require_int(data, "preset_id", endpoint)
    return _require_int(data, "effect_id", endpoint)


def parse_current_movie(data: dict[str, Any], endpoint: str = "/movies/current") -> int:
    """Parse the current movie index from a /movies/current response."""
    return _require_int(data, "id", endpoint)
