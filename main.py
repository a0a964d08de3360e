"""Example usage of the lumistrip library (dry run, prints the packets)."""

import asyncio
import logging

from lumistrip import LumiStripError, RecordingTransport, StripController

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


async def main() -> None:
    """Demonstrate segment colors, effects and active segments."""
    transport = RecordingTransport()
    controller = StripController(transport)
    state = {"state": "OFF", "length": 2}

    try:
        state.update(await controller.convert_set("segment_brightness", 80, state))
        state.update(
            await controller.convert_set(
                "segment_colors",
                [
                    {"segment": 1, "color": "#FF0000"},
                    {"segment": 2, "color": "#00FF00"},
                    {"segment": 3, "color": "#ff0000"},
                ],
                state,
            )
        )
        state.update(await controller.convert_set("rgb_effect_colors", "#FF8800,#0088FF", state))
        state.update(await controller.convert_set("active_segments", "1,2,5,8", state))
        state.update(await controller.convert_set("dimming_range_minimum", 10, state))
    except LumiStripError as e:
        print(f"Strip error: {e}")

    for write in transport.writes:
        shown = write.value.hex(" ") if isinstance(write.value, bytes) else write.value
        print(f"0x{write.attribute_id:04x}: {shown}")
    print(f"State: {state}")


if __name__ == "__main__":
    asyncio.run(main())
