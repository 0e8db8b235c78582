"""Constants for pytwinkly library."""

from __future__ import annotations


# API Configuration
API_PREFIX = "/xled/v1"
AUTH_HEADER = "X-Auth-Token"
DEFAULT_TIMEOUT = 10  # seconds
DEFAULT_REFRESH_INTERVAL = 60  # seconds, <= 0 disables polling

# The device derives the challenge-response from whatever it receives, so a
# constant 64-byte value is accepted.
LOGIN_CHALLENGE = "A" * 64

# Endpoints (relative to API_PREFIX)
ENDPOINT_LOGIN = "/login"
ENDPOINT_VERIFY = "/verify"
ENDPOINT_LOGOUT = "/logout"
ENDPOINT_MODE = "/led/mode"
ENDPOINT_BRIGHTNESS = "/led/out/brightness"
ENDPOINT_CURRENT_EFFECT = "/led/effects/current"
ENDPOINT_CURRENT_MOVIE = "/movies/current"

# Response result codes
RESULT_CODE_OK = 1000

# Parameter Validation
BRIGHTNESS_MIN = 0
BRIGHTNESS_MAX = 100
BRIGHTNESS_TYPE_ABSOLUTE = "A"

# Power mapping
MODE_OFF = "off"
POWER_ON_MODE = "movie"

# Environment variables read by TwinklyConfig.from_env()
ENV_HOST = "TWINKLY_HOST"
ENV_REFRESH_INTERVAL = "TWINKLY_REFRESH_INTERVAL"
ENV_REQUEST_TIMEOUT = "TWINKLY_REQUEST_TIMEOUT"
