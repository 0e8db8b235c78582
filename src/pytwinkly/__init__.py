"""Python client library for Twinkly LED controllers.

This package provides an async client for the local JSON/HTTP API of a
Twinkly device, including the challenge-response login it requires.

The library is organized into layers:
1. **Session Layer** (pytwinkly.auth): Token acquisition, expiry and logout
2. **API Layer** (pytwinkly.api): Requests with one re-authenticating retry
3. **Device Layer** (pytwinkly.devices): Typed get/set operations
4. **Client Layer** (pytwinkly.client): Command dispatch, polling and listeners

Example:
    ```python
    from pytwinkly import Channel, TwinklyClient

    async with TwinklyClient(host="192.168.1.40", refresh_interval=30) as client:
        client.add_listener(lambda channel, value: print(channel, value))

        await client.handle_command(Channel.SWITCH, True)
        await client.handle_command(Channel.DIMMER, 80)

        # Direct device access
        print(await client.device.get_current_effect())
    ```
"""

from __future__ import annotations

from pytwinkly.api import TwinklyAPI
from pytwinkly.auth import SessionManager
from pytwinkly.client import TwinklyClient
from pytwinkly.config import TwinklyConfig
from pytwinkly.devices import TwinklyDevice
from pytwinkly.dispatcher import CommandDispatcher
from pytwinkly.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DeviceResponseError,
    InvalidParameterError,
    TwinklyConnectionError,
    TwinklyError,
    TwinklyTimeoutError,
)
from pytwinkly.models import (
    REFRESH,
    Channel,
    ConnectionStatus,
    DeviceMode,
    LoginResponse,
    RefreshType,
    ThingStatus,
    ThingStatusDetail,
)
from pytwinkly.reconciler import StateReconciler
from pytwinkly.resilience import retry_with_recovery


__version__ = "0.1.0"

__all__ = [
    "REFRESH",
    "AuthenticationError",
    "Channel",
    "CommandDispatcher",
    "ConfigurationError",
    "ConnectionStatus",
    "DeviceMode",
    "DeviceResponseError",
    "InvalidParameterError",
    "LoginResponse",
    "RefreshType",
    "SessionManager",
    "StateReconciler",
    "ThingStatus",
    "ThingStatusDetail",
    "TwinklyAPI",
    "TwinklyClient",
    "TwinklyConfig",
    "TwinklyConnectionError",
    "TwinklyDevice",
    "TwinklyError",
    "TwinklyTimeoutError",
    "__version__",
    "retry_with_recovery",
]
