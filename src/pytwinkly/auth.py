"""Session manager for the Twinkly challenge-response authentication."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from pytwinkly.const import (
    API_PREFIX,
    AUTH_HEADER,
    DEFAULT_TIMEOUT,
    ENDPOINT_LOGIN,
    ENDPOINT_LOGOUT,
    ENDPOINT_VERIFY,
    LOGIN_CHALLENGE,
)
from pytwinkly.exceptions import (
    AuthenticationError,
    DeviceResponseError,
    TwinklyConnectionError,
    TwinklyError,
    TwinklyTimeoutError,
)
from pytwinkly.parsers import parse_login_response, read_json_body


if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from pytwinkly.config import TwinklyConfig

_LOGGER = logging.getLogger(__name__)


class SessionManager:
    """Own the authentication token of one Twinkly device.

    The device issues a bearer token through a two-step exchange: /login
    returns an unverified token plus a challenge-response, and /verify with
    that challenge-response promotes the token to valid. The token carries a
    validity window reported by the device at login time.

    All login, logout and expiry handling happens inside one asyncio lock.
    A caller that waits on the lock while another caller is logging in sees
    the freshly acquired token when it gets the lock and does not log in
    again.

    Session Update Callback:
        on_session_updated is invoked with the manager after every successful
        login. The client uses it to mark the device online.

    Attributes:
        config: Device configuration (host, timeout).
        token: Verified token, or None when no session is held.
        expires_at: Instant after which the token must not be used.
        last_authenticated_at: Timestamp of the last successful login.
    """

    def __init__(
        self,
        config: TwinklyConfig,
        *,
        session: ClientSession | None = None,
        on_session_updated: Callable[[SessionManager], None] | None = None,
    ) -> None:
        """Initialize the session manager.

        Args:
            config: Device configuration.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            on_session_updated: Optional callback invoked after a successful login.
        """
        self.config = config
        self._token: str | None = None
        self._expires_at: datetime | None = None
        self._last_authenticated_at: datetime | None = None

        self._session = session
        self._owns_session = session is None
        self._lock = asyncio.Lock()
        self._on_session_updated = on_session_updated

    @property
    def token(self) -> str | None:
        """Get the current verified token."""
        return self._token

    @property
    def expires_at(self) -> datetime | None:
        """Get the token expiry instant."""
        return self._expires_at

    @property
    def last_authenticated_at(self) -> datetime | None:
        """Get the timestamp of the last successful login."""
        return self._last_authenticated_at

    def set_session(self, session: ClientSession) -> None:
        """Set the aiohttp session for this manager.

        The manager will not take ownership and will not close this session.

        Args:
            session: The aiohttp ClientSession to use for requests.
        """
        self._session = session
        self._owns_session = False

    async def __aenter__(self) -> SessionManager:
        """Enter the context manager, creating a session if none was provided."""
        if self._session is None:
            self._session = ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager, logging out and closing an owned session."""
        await self.logout()
        if self._owns_session and self._session is not None:
            await self._session.close()

    def is_authenticated(self) -> bool:
        """Check if a token is currently held."""
        return self._token is not None

    def is_expired(self) -> bool:
        """Check if the held token's validity window has elapsed."""
        if self._expires_at is None:
            return True
        return datetime.now(UTC) >= self._expires_at

    def needs_reauthentication(self) -> bool:
        """Check if the next privileged call must log in first."""
        return not self.is_authenticated() or self.is_expired()

    def _validate_session(self) -> ClientSession:
        if self._session is None:
            msg = "Session not initialized. Use 'async with' or provide a session."
            raise RuntimeError(msg)

        if self._session.closed:
            msg = "Session is closed. Cannot make requests."
            raise RuntimeError(msg)

        return self._session

    async def ensure_valid_session(self) -> str:
        """Return a valid token, logging in first when needed.

        A login happens only when no token is held or the current time is at
        or past the expiry. An expired token is logged out (best effort)
        before the new login.

        Returns:
            The verified token.

        Raises:
            AuthenticationError: If login or verify is rejected.
            TwinklyConnectionError: If the device cannot be reached.
            TwinklyTimeoutError: If a request times out.
            ConfigurationError: If the configured host is unusable.
        """
        token = self._token
        if token is not None and not self.is_expired():
            return token

        async with self._lock:
            # Another caller may have logged in while we waited
            token = self._token
            if token is not None and not self.is_expired():
                _LOGGER.debug("Skipping login - valid token already exists")
                return token

            if token is not None:
                _LOGGER.debug("Token expired at %s, logging out", self._expires_at)
                await self._logout_token(token)

            return await self._login()

    def invalidate(self, expected_token: str | None = None) -> None:
        """Drop the held token without contacting the device.

        Args:
            expected_token: If given, the token is only dropped when it is still
                the held one. A caller whose stale token was already replaced by
                a concurrent login leaves the fresh token in place.
        """
        if expected_token is not None and expected_token != self._token:
            _LOGGER.debug("Token already replaced, not invalidating")
            return

        self._token = None
        self._expires_at = None
        _LOGGER.debug("Session invalidated")

    async def logout(self) -> None:
        """Log out the held token (best effort) and clear the session."""
        async with self._lock:
            token = self._token
            if token is None:
                return
            await self._logout_token(token)

    async def _logout_token(self, token: str) -> None:
        self._token = None
        self._expires_at = None
        try:
            await self._post(ENDPOINT_LOGOUT, {}, token)
        except (TwinklyError, RuntimeError) as exc:
            _LOGGER.debug("Error while logging out: %s", exc)
        else:
            _LOGGER.info("Logged out from %s", self.config.host)

    async def _login(self) -> str:
        """Run the login/verify exchange. Must be called with the lock held."""
        self._token = None
        self._expires_at = None

        login_data = await self._post(ENDPOINT_LOGIN, {"challenge": LOGIN_CHALLENGE}, None)
        login = parse_login_response(login_data)
        _LOGGER.debug("Device sent login token %s with challenge %s", login.token, login.challenge_response)

        await self._post(ENDPOINT_VERIFY, {"challenge-response": login.challenge_response}, login.token)

        now = datetime.now(UTC)
        self._token = login.token
        self._expires_at = now + timedelta(seconds=login.expires_in)
        self._last_authenticated_at = now

        _LOGGER.info("Authenticated with %s, token valid for %ds", self.config.host, login.expires_in)

        if self._on_session_updated is not None:
            self._on_session_updated(self)

        return login.token

    async def _post(self, endpoint: str, data: dict[str, Any], token: str | None) -> dict[str, Any]:
        """Send one authentication-related POST.

        Raises:
            AuthenticationError: If the device rejects the request.
            TwinklyConnectionError: If a connection error occurs.
            TwinklyTimeoutError: If the request times out.
        """
        session = self._validate_session()
        url = f"{self.config.base_url}{API_PREFIX}{endpoint}"
        headers = {AUTH_HEADER: token} if token is not None else {}
        timeout = ClientTimeout(total=self.config.request_timeout or DEFAULT_TIMEOUT)

        _LOGGER.debug("POST %s", url)

        try:
            async with session.post(url, json=data, headers=headers, timeout=timeout) as response:
                return await read_json_body(response, endpoint)

        except DeviceResponseError as exc:
            msg = f"Authentication request to {endpoint} failed: {exc}"
            raise AuthenticationError(msg) from exc

        except TimeoutError as exc:
            msg = f"Request to {endpoint} timed out"
            raise TwinklyTimeoutError(msg) from exc

        except ClientError as exc:
            msg = f"Failed to connect to device: {exc}"
            raise TwinklyConnectionError(msg) from exc
