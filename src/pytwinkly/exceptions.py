"""Custom exceptions for pytwinkly library."""

from __future__ import annotations

from typing import Any


class TwinklyError(Exception):
    """Base exception for all Twinkly errors."""


class AuthenticationError(TwinklyError):
    """Exception raised for authentication failures."""


class TwinklyConnectionError(TwinklyError):
    """Exception raised for connection failures."""


class TwinklyTimeoutError(TwinklyError):
    """Exception raised when device requests timeout."""


class ConfigurationError(TwinklyError):
    """Exception raised when the client configuration cannot be used."""


class DeviceResponseError(TwinklyError):
    """Exception raised when the device answers with an unusable response.

    Attributes:
        endpoint: Optional endpoint that produced the response.
        status: Optional HTTP status of the response.
    """

    def __init__(self, message: str = "", endpoint: str | None = None, status: int | None = None) -> None:
        """Initialize DeviceResponseError.

        Args:
            message: Error message.
            endpoint: Optional endpoint that produced the response.
            status: Optional HTTP status of the response.
        """
        super().__init__(message)
        self.endpoint = endpoint
        self.status = status


class InvalidParameterError(TwinklyError):
    """Exception raised for invalid parameter values.

    Attributes:
        parameter_name: Optional name of the invalid parameter.
        value: Optional value that was invalid.
    """

    def __init__(
        self,
        message: str = "",
        parameter_name: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize InvalidParameterError.

        Args:
            message: Error message.
            parameter_name: Optional name of the invalid parameter.
            value: Optional value that was invalid.
        """
        super().__init__(message)
        self.parameter_name = parameter_name
        self.value = value
