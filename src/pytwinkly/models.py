"""Data models for Twinkly device requests and responses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum


__all__ = [
    "REFRESH",
    "Channel",
    "ConnectionStatus",
    "DeviceMode",
    "LoginResponse",
    "RefreshType",
    "ThingStatus",
    "ThingStatusDetail",
]


class DeviceMode(StrEnum):
    """Device-level operating modes accepted by /led/mode."""

    OFF = "off"
    COLOR = "color"
    DEMO = "demo"
    EFFECT = "effect"
    MOVIE = "movie"
    PLAYLIST = "playlist"
    RT = "rt"


class Channel(StrEnum):
    """Caller-facing properties that can be refreshed or commanded."""

    SWITCH = "switch"
    DIMMER = "dimmer"
    MODE = "mode"
    CURRENT_EFFECT = "current_effect"
    CURRENT_MOVIE = "current_movie"


class RefreshType(Enum):
    """Command asking for the current value instead of setting a new one."""

    REFRESH = "REFRESH"


REFRESH = RefreshType.REFRESH


class ThingStatus(StrEnum):
    """Connection status published to the state sink."""

    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"


class ThingStatusDetail(StrEnum):
    """Reason attached to a non-online status."""

    NONE = "none"
    COMMUNICATION_ERROR = "communication_error"
    CONFIGURATION_ERROR = "configuration_error"


@dataclass(frozen=True)
class ConnectionStatus:
    """Connection status of the device as seen by the client.

    Attributes:
        status: Online/offline/unknown.
        detail: Reason for the status.
        message: Optional human-readable description.
    """

    status: ThingStatus
    detail: ThingStatusDetail = ThingStatusDetail.NONE
    message: str | None = None

    @property
    def is_online(self) -> bool:
        """Check if the device is online."""
        return self.status is ThingStatus.ONLINE


@dataclass
class LoginResponse:
    """Response from the /login endpoint.

    Attributes:
        token: Unverified authentication token.
        challenge_response: Value that must be echoed to /verify.
        expires_in: Token validity window in seconds.
    """

    token: str
    challenge_response: str
    expires_in: int
