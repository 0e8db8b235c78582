"""Example showing session injection for Home Assistant integration."""

import asyncio

from aiohttp import ClientSession

from pytwinkly import Channel, TwinklyClient


async def main() -> None:
    """Demonstrate session injection pattern for HA integration."""
    # This pattern is useful for Home Assistant integrations where
    # the session is managed by the application

    async with ClientSession() as session:
        print("Using application-managed aiohttp session")

        # Client will use the provided session instead of creating its own
        client = TwinklyClient(
            host="192.168.1.40",
            session=session,  # Inject existing session
            refresh_interval=0,
        )

        async with client:
            await client.handle_command(Channel.SWITCH, True)
            print(f"Mode: {await client.device.get_mode()}")

        # Session remains open after client exits
        print("\nClient closed, but session still available for other requests")


if __name__ == "__main__":
    asyncio.run(main())
