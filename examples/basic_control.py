"""Basic device control example for pytwinkly.

This example demonstrates:
- Connecting to a Twinkly device on the local network
- Turning the lights on and off
- Setting brightness, effect and movie
"""

import asyncio
import logging

from pytwinkly import DeviceMode, TwinklyClient


# Configure logging to see what's happening
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


async def main() -> None:
    """Main example function."""
    # Replace with the address of your device
    host = "192.168.1.40"

    print(f"Connecting to Twinkly at {host}...")

    async with TwinklyClient(host=host, refresh_interval=0) as client:
        device = client.device

        print(f"  Mode: {await device.get_mode()}")
        print(f"  Brightness: {await device.get_brightness()}%")
        print()

        print("Turning lights ON...")
        await device.turn_on()

        print("Setting brightness to 40%...")
        await device.set_brightness(40)

        print("Selecting effect 2...")
        await device.set_mode(DeviceMode.EFFECT)
        await device.set_current_effect(2)

        await asyncio.sleep(5)

        print("Back to movie 0...")
        await device.set_current_movie(0)
        await device.set_mode(DeviceMode.MOVIE)

        print("\nCurrent Device State:")
        print(f"  On: {await device.is_on()}")
        print(f"  Mode: {await device.get_mode()}")
        print(f"  Brightness: {await device.get_brightness()}%")
        print(f"  Movie: {await device.get_current_movie()}")


if __name__ == "__main__":
    asyncio.run(main())
