"""Monitor a Twinkly device example.

This example demonstrates:
- Polling linked channels in the background
- Receiving channel values through listeners
- Tracking the connection status
"""

import asyncio
from datetime import datetime

from pytwinkly import Channel, ConnectionStatus, TwinklyClient


def on_state(channel: Channel, value: object) -> None:
    """Print every published channel value."""
    print(f"[{datetime.now():%H:%M:%S}] {channel:<15} {value}")


def on_status(status: ConnectionStatus) -> None:
    """Print connection status changes."""
    line = f"[{datetime.now():%H:%M:%S}] status          {status.status}"
    if status.message:
        line += f" ({status.message})"
    print(line)


async def main() -> None:
    """Poll switch, brightness and mode every 10 seconds for a minute."""
    client = TwinklyClient(
        host="192.168.1.40",
        refresh_interval=10,
        linked_channels=[Channel.SWITCH, Channel.DIMMER, Channel.MODE],
    )
    client.add_listener(on_state)
    client.add_status_listener(on_status)

    async with client:
        await asyncio.sleep(60)

        # Commands can be sent while polling runs
        await client.handle_command(Channel.DIMMER, 75)
        await client.refresh(Channel.DIMMER)


if __name__ == "__main__":
    asyncio.run(main())
