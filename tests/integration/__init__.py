"""Integration tests for pytwinkly.

These tests talk to a real Twinkly device on the local network. They are
marked with @pytest.mark.integration and skipped unless TWINKLY_HOST is set.

To run integration tests:
    pytest tests/integration -v -m integration

Environment variables (or a .env file in the project root):
    TWINKLY_HOST: Host name or IP address of the device
    TWINKLY_REQUEST_TIMEOUT: Request timeout in seconds (optional)
"""
