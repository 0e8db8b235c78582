"""Tests for client configuration."""

from __future__ import annotations

import pytest

from pytwinkly.config import TwinklyConfig
from pytwinkly.exceptions import ConfigurationError


class TestBaseUrl:
    """Test base URL construction."""

    @pytest.mark.parametrize(
        ("host", "expected"),
        [
            ("192.168.1.40", "http://192.168.1.40"),
            ("twinkly.local", "http://twinkly.local"),
            ("192.168.1.40:8080", "http://192.168.1.40:8080"),
            (" 192.168.1.40/ ", "http://192.168.1.40"),
        ],
    )
    def test_valid_hosts(self, host: str, expected: str) -> None:
        """Test hosts that form a usable URL."""
        assert TwinklyConfig(host=host).base_url == expected

    @pytest.mark.parametrize("host", ["", "   ", "bad host", "192.168.1.40:notaport", "host/path", "host?x=1", ":80"])
    def test_invalid_hosts(self, host: str) -> None:
        """Test hosts that cannot form a URL."""
        config = TwinklyConfig(host=host)

        with pytest.raises(ConfigurationError, match="Invalid device host"):
            _ = config.base_url

    def test_invalid_host_accepted_at_construction(self) -> None:
        """Test a bad host only fails when a URL is needed."""
        config = TwinklyConfig(host="bad host")
        assert config.host == "bad host"


class TestDefaults:
    """Test default values."""

    def test_defaults(self) -> None:
        """Test the default timings."""
        config = TwinklyConfig(host="192.168.1.40")

        assert config.refresh_interval == 60
        assert config.request_timeout == 10
        assert config.polling_enabled is True

    @pytest.mark.parametrize("interval", [0, -1])
    def test_polling_disabled(self, interval: float) -> None:
        """Test non-positive intervals disable polling."""
        assert TwinklyConfig(host="192.168.1.40", refresh_interval=interval).polling_enabled is False


class TestFromEnv:
    """Test loading configuration from the environment."""

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test all variables are read."""
        monkeypatch.setenv("TWINKLY_HOST", "10.0.0.7")
        monkeypatch.setenv("TWINKLY_REFRESH_INTERVAL", "30")
        monkeypatch.setenv("TWINKLY_REQUEST_TIMEOUT", "2.5")

        config = TwinklyConfig.from_env()

        assert config == TwinklyConfig(host="10.0.0.7", refresh_interval=30, request_timeout=2.5)

    def test_from_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test optional variables fall back to defaults."""
        monkeypatch.setenv("TWINKLY_HOST", "10.0.0.7")
        monkeypatch.delenv("TWINKLY_REFRESH_INTERVAL", raising=False)
        monkeypatch.delenv("TWINKLY_REQUEST_TIMEOUT", raising=False)

        config = TwinklyConfig.from_env()

        assert config.refresh_interval == 60
        assert config.request_timeout == 10

    def test_from_env_missing_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the host is required."""
        monkeypatch.delenv("TWINKLY_HOST", raising=False)

        with pytest.raises(ConfigurationError, match="TWINKLY_HOST"):
            TwinklyConfig.from_env()

    def test_from_env_bad_number(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test malformed numbers are configuration errors."""
        monkeypatch.setenv("TWINKLY_HOST", "10.0.0.7")
        monkeypatch.setenv("TWINKLY_REFRESH_INTERVAL", "often")

        with pytest.raises(ConfigurationError):
            TwinklyConfig.from_env()
