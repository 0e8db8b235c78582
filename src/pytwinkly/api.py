"""Resilient command executor for the Twinkly JSON/HTTP API.

Every privileged request goes through TwinklyAPI.execute(), which makes sure
a session exists, sends the request with the current token and, on any
failure, re-authenticates and retries exactly once.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from pytwinkly.const import API_PREFIX, AUTH_HEADER, DEFAULT_TIMEOUT
from pytwinkly.exceptions import (
    AuthenticationError,
    DeviceResponseError,
    TwinklyConnectionError,
    TwinklyTimeoutError,
)
from pytwinkly.parsers import read_json_body
from pytwinkly.resilience import retry_with_recovery


if TYPE_CHECKING:
    from types import TracebackType

    from pytwinkly.auth import SessionManager

_LOGGER = logging.getLogger(__name__)

# The device answers a stale token and an unreachable network the same way,
# so every one of these gets one re-login and one retry.
RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    AuthenticationError,
    DeviceResponseError,
    TwinklyConnectionError,
    TwinklyTimeoutError,
)


class TwinklyAPI:
    """Low-level API client for a Twinkly device.

    Example:
        ```python
        from aiohttp import ClientSession
        from pytwinkly.api import TwinklyAPI
        from pytwinkly.auth import SessionManager
        from pytwinkly.config import TwinklyConfig

        async with ClientSession() as session:
            config = TwinklyConfig(host="192.168.1.40")
            manager = SessionManager(config, session=session)
            api = TwinklyAPI(session_manager=manager, session=session)

            async with api:
                data = await api.execute("GET", "/led/mode")
                print(data["mode"])
        ```
    """

    def __init__(
        self,
        *,
        session_manager: SessionManager,
        session: ClientSession | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            session_manager: SessionManager owning the device token.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
        """
        self._session_manager = session_manager
        self._session = session
        self._owns_session = session is None

    @property
    def session_manager(self) -> SessionManager:
        """Get the session manager used for authentication."""
        return self._session_manager

    async def __aenter__(self) -> TwinklyAPI:
        """Enter the context manager, creating the shared session if needed.

        Returns:
            Self for use in async with statements.
        """
        if self._session is None:
            self._session = ClientSession()
            self._owns_session = True

        self._session_manager.set_session(self._session)
        await self._session_manager.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager, logging out and closing an owned session."""
        await self._session_manager.__aexit__(exc_type, exc_val, exc_tb)

        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def execute(
        self,
        method: str,
        endpoint: str,
        *,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request with one re-authenticating retry.

        1. Ensure a valid session (failure propagates, nothing is sent).
        2. Send the request with the current token.
        3. On failure, drop the token that was used, log in again and
           resend exactly once with the new token.
        4. If the retry also fails, its error propagates.

        Args:
            method: HTTP method (GET or POST).
            endpoint: Endpoint path relative to /xled/v1 (e.g., "/led/mode").
            json_data: Optional JSON body.

        Returns:
            Decoded JSON object from the device.

        Raises:
            AuthenticationError: If login fails or the token is rejected twice.
            DeviceResponseError: If the device answers with an unusable response.
            TwinklyConnectionError: If the device cannot be reached.
            TwinklyTimeoutError: If the request times out.
            ConfigurationError: If the configured host is unusable.
        """
        token = await self._session_manager.ensure_valid_session()

        async def attempt() -> dict[str, Any]:
            return await self._send(method, endpoint, json_data, token)

        async def recover(exc: BaseException) -> None:
            nonlocal token
            _LOGGER.debug("Invalid token or connection failure on %s, attempting to reconnect", endpoint)
            self._session_manager.invalidate(token)
            token = await self._session_manager.ensure_valid_session()

        return await retry_with_recovery(
            attempt,
            recover,
            retryable_exceptions=RETRYABLE_EXCEPTIONS,
            description=f"{method} {endpoint}",
        )

    async def _send(
        self,
        method: str,
        endpoint: str,
        json_data: dict[str, Any] | None,
        token: str,
    ) -> dict[str, Any]:
        """Send a single request; the HTTP transport boundary."""
        if self._session is None:
            msg = "Session not initialized. Use 'async with' or provide a session."
            raise RuntimeError(msg)

        if self._session.closed:
            msg = "Session is closed. Cannot make request."
            raise RuntimeError(msg)

        config = self._session_manager.config
        url = f"{config.base_url}{API_PREFIX}{endpoint}"
        headers = {AUTH_HEADER: token}
        timeout = ClientTimeout(total=config.request_timeout or DEFAULT_TIMEOUT)

        try:
            async with self._session.request(
                method,
                url,
                json=json_data,
                headers=headers,
                timeout=timeout,
            ) as response:
                data = await read_json_body(response, endpoint)

        except TimeoutError as exc:
            msg = f"Request to {url} timed out"
            raise TwinklyTimeoutError(msg) from exc

        except ClientError as exc:
            msg = f"Connection error for {url}: {exc}"
            raise TwinklyConnectionError(msg) from exc

        _LOGGER.debug("Request %s %s %s got response %s", method, url, json_data, data)
        return data
