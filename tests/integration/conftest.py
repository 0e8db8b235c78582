"""Pytest configuration and fixtures for integration tests."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from pytwinkly import TwinklyClient, TwinklyConfig


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


# Load .env file from project root
env_path = Path(__file__).parents[2] / ".env"
load_dotenv(env_path)


@pytest.fixture(scope="session")
def integration_config() -> TwinklyConfig:
    """Load integration test configuration from environment.

    Tests are skipped when TWINKLY_HOST is not set.
    """
    if not os.getenv("TWINKLY_HOST"):
        pytest.skip("TWINKLY_HOST not set; create a .env file to run integration tests")

    return TwinklyConfig.from_env()


@pytest.fixture
async def integration_client(integration_config: TwinklyConfig) -> AsyncGenerator[TwinklyClient]:
    """Client connected to the real device, without background polling."""
    async with TwinklyClient(config=integration_config, refresh_interval=0) as client:
        yield client


@pytest.fixture(autouse=True)
async def command_delay(request: pytest.FixtureRequest) -> AsyncGenerator[None]:
    """Give the device firmware a moment between integration tests."""
    yield
    if "integration" in request.keywords:
        await asyncio.sleep(1.0)
