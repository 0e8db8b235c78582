"""Client configuration for pytwinkly."""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import urlsplit

from pytwinkly.const import (
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_TIMEOUT,
    ENV_HOST,
    ENV_REFRESH_INTERVAL,
    ENV_REQUEST_TIMEOUT,
)
from pytwinkly.exceptions import ConfigurationError


@dataclass(frozen=True)
class TwinklyConfig:
    """Configuration for a single Twinkly device.

    Attributes:
        host: Host name or IP address of the device, optionally with a port.
        refresh_interval: Seconds between reconciliation ticks (<= 0 disables polling).
        request_timeout: Total timeout in seconds for a single HTTP request.
    """

    host: str
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    request_timeout: float = DEFAULT_TIMEOUT

    @property
    def base_url(self) -> str:
        """Build the device base URL.

        The host is validated lazily so that a bad address only fails the
        operation that needs it.

        Returns:
            URL of the form ``http://<host>[:port]`` without trailing slash.

        Raises:
            ConfigurationError: If the host cannot be parsed into a URL.
        """
        host = (self.host or "").strip().rstrip("/")
        if not host or any(char.isspace() for char in host):
            msg = f"Invalid device host: {self.host!r}"
            raise ConfigurationError(msg)

        url = f"http://{host}"
        try:
            parts = urlsplit(url)
            # Accessing port validates it
            _ = parts.port
        except ValueError as exc:
            msg = f"Invalid device host: {self.host!r}"
            raise ConfigurationError(msg) from exc

        if not parts.hostname or parts.path or parts.query or parts.fragment:
            msg = f"Invalid device host: {self.host!r}"
            raise ConfigurationError(msg)

        return url

    @property
    def polling_enabled(self) -> bool:
        """Check if the reconciliation loop should run."""
        return self.refresh_interval > 0

    @classmethod
    def from_env(cls) -> TwinklyConfig:
        """Create a configuration from TWINKLY_* environment variables.

        Returns:
            TwinklyConfig populated from the environment.

        Raises:
            ConfigurationError: If the host is missing or a number is malformed.
        """
        host = os.getenv(ENV_HOST)
        if not host:
            msg = f"Missing required environment variable {ENV_HOST}"
            raise ConfigurationError(msg)

        try:
            refresh_interval = float(os.getenv(ENV_REFRESH_INTERVAL, str(DEFAULT_REFRESH_INTERVAL)))
            request_timeout = float(os.getenv(ENV_REQUEST_TIMEOUT, str(DEFAULT_TIMEOUT)))
        except ValueError as exc:
            msg = f"Invalid numeric value in environment: {exc}"
            raise ConfigurationError(msg) from exc

        return cls(host=host, refresh_interval=refresh_interval, request_timeout=request_timeout)
