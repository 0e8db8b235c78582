"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import ClientSession

from pytwinkly.api import TwinklyAPI
from pytwinkly.auth import SessionManager
from pytwinkly.config import TwinklyConfig
from pytwinkly.devices import TwinklyDevice
from pytwinkly.models import Channel, ConnectionStatus


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


DEVICE_HOST = "192.168.1.40"


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse used as an async context manager."""

    def __init__(
        self,
        status: int = 200,
        payload: Any = None,
        *,
        raw: str | None = None,
        latency: float = 0.0,
    ) -> None:
        self.status = status
        self.content_type = "application/json"
        self._payload = payload if payload is not None else {}
        self._raw = raw
        self._latency = latency

    async def json(self, content_type: str | None = "application/json") -> Any:
        if self._raw is not None:
            return json.loads(self._raw)
        return self._payload

    async def __aenter__(self) -> FakeResponse:
        if self._latency:
            await asyncio.sleep(self._latency)
        return self

    async def __aexit__(self, *args: object) -> None:
        return None


@dataclass
class Call:
    """A request received by the fake device."""

    method: str
    path: str
    json: dict[str, Any] | None
    token: str | None


class FakeTwinkly:
    """In-memory Twinkly device speaking the /xled/v1 API.

    Tokens are issued as T1, T2, ... with challenge-responses R1, R2, ...
    Failures can be queued per path with fail(); each queued entry is either
    an exception raised by the transport or a FakeResponse returned as-is.
    """

    def __init__(self) -> None:
        self.mode = "movie"
        self.brightness = 100
        self.effect = 0
        self.effect_key = "preset_id"
        self.movie = 0
        self.expires_in = 14400
        self.latency = 0.0

        self.calls: list[Call] = []
        self._issued = 0
        self._pending: dict[str, str] = {}
        self._valid: set[str] = set()
        self._failures: dict[str, list[BaseException | FakeResponse]] = {}

    # -- test helpers ---------------------------------------------------------

    def fail(self, path: str, *failures: BaseException | FakeResponse) -> None:
        self._failures.setdefault(path, []).extend(failures)

    def revoke_tokens(self) -> None:
        self._valid.clear()

    def count(self, path: str, method: str | None = None) -> int:
        return sum(1 for call in self.calls if call.path == path and (method is None or call.method == method))

    def calls_to(self, path: str) -> list[Call]:
        return [call for call in self.calls if call.path == path]

    @property
    def paths(self) -> list[str]:
        return [call.path for call in self.calls]

    # -- transport ------------------------------------------------------------

    def request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: Any = None,
    ) -> FakeResponse:
        path = url.split("/xled/v1", 1)[1]
        token = (headers or {}).get("X-Auth-Token")
        self.calls.append(Call(method, path, json, token))

        queued = self._failures.get(path)
        if queued:
            failure = queued.pop(0)
            if isinstance(failure, BaseException):
                raise failure
            return failure

        status, payload = self._handle(method, path, json or {}, token)
        return FakeResponse(status, payload, latency=self.latency)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("POST", url, **kwargs)

    def _handle(self, method: str, path: str, body: dict[str, Any], token: str | None) -> tuple[int, dict[str, Any]]:
        ok = {"code": 1000}

        if path == "/login":
            self._issued += 1
            new_token = f"T{self._issued}"
            self._pending[new_token] = f"R{self._issued}"
            return 200, {
                "authentication_token": new_token,
                "challenge-response": self._pending[new_token],
                "authentication_token_expires_in": self.expires_in,
                **ok,
            }

        if path == "/verify":
            expected = self._pending.get(token) if token is not None else None
            if expected is None or expected != body.get("challenge-response"):
                return 401, {}
            del self._pending[token]
            self._valid.add(token)
            return 200, ok

        if token not in self._valid:
            return 401, {}

        if path == "/logout":
            self._valid.discard(token)
            return 200, ok

        if path == "/led/mode":
            if method == "POST":
                self.mode = body["mode"]
                return 200, ok
            return 200, {"mode": self.mode, **ok}

        if path == "/led/out/brightness":
            if method == "POST":
                self.brightness = body["value"]
                return 200, ok
            return 200, {"mode": "enabled", "value": self.brightness, **ok}

        if path == "/led/effects/current":
            if method == "POST":
                self.effect = int(body["preset_id"])
                return 200, ok
            return 200, {self.effect_key: self.effect, **ok}

        if path == "/movies/current":
            if method == "POST":
                self.movie = int(body["id"])
                return 200, ok
            return 200, {"id": self.movie, **ok}

        return 404, {}


class RecordingSink:
    """State sink that records everything published to it."""

    def __init__(self) -> None:
        self.states: list[tuple[Channel, Any]] = []
        self.statuses: list[ConnectionStatus] = []

    def publish_state(self, channel: Channel, value: Any) -> None:
        self.states.append((channel, value))

    def publish_status(self, status: ConnectionStatus) -> None:
        self.statuses.append(status)

    def values(self, channel: Channel) -> list[Any]:
        return [value for published, value in self.states if published is channel]


@pytest.fixture
async def mock_session() -> AsyncGenerator[ClientSession]:
    """Create a mock aiohttp ClientSession.

    Yields:
        Mock ClientSession for testing.
    """
    session = AsyncMock(spec=ClientSession)
    session.closed = False

    async def mock_close() -> None:
        session.closed = True

    session.close = mock_close

    yield session

    if not session.closed:
        await session.close()


@pytest.fixture
def fake_device() -> FakeTwinkly:
    """Create an in-memory Twinkly device."""
    return FakeTwinkly()


@pytest.fixture
def device_session(mock_session: ClientSession, fake_device: FakeTwinkly) -> ClientSession:
    """Mock session whose requests are answered by the fake device."""
    mock_session.request = MagicMock(side_effect=fake_device.request)
    mock_session.post = MagicMock(side_effect=fake_device.post)
    return mock_session


@pytest.fixture
def config() -> TwinklyConfig:
    """Configuration for the fake device with polling disabled."""
    return TwinklyConfig(host=DEVICE_HOST, refresh_interval=0)


@pytest.fixture
def session_manager(config: TwinklyConfig, device_session: ClientSession) -> SessionManager:
    """Session manager bound to the fake device."""
    return SessionManager(config, session=device_session)


@pytest.fixture
def api(session_manager: SessionManager, device_session: ClientSession) -> TwinklyAPI:
    """Command executor bound to the fake device."""
    return TwinklyAPI(session_manager=session_manager, session=device_session)


@pytest.fixture
def device(api: TwinklyAPI) -> TwinklyDevice:
    """Device facade bound to the fake device."""
    return TwinklyDevice(api)


@pytest.fixture
def sink() -> RecordingSink:
    """Recording state sink."""
    return RecordingSink()


@pytest.fixture
def response() -> type[FakeResponse]:
    """Factory for canned responses queued with FakeTwinkly.fail()."""
    return FakeResponse
