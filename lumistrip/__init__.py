"""
lumistrip - command encoder for the Aqara T1 segmented light strip.

This library turns segment colors, effect color lists, brightness
percentages and active-segment selections into the byte packets the strip's
firmware expects, and sends them in order through an attribute transport
you provide.

Example:
    from lumistrip import RecordingTransport, StripController

    async def main():
        transport = RecordingTransport()
        controller = StripController(transport)
        state = {"state": "OFF", "length": 2}
        state.update(
            await controller.convert_set(
                "segment_colors",
                [{"segment": 1, "color": "#FF0000"}, {"segment": 2, "color": "#00FF00"}],
                state,
            )
        )

    asyncio.run(main())
"""

from __future__ import annotations

from .color import encode_color, normalize_hex_color, parse_hex_color, rgb_to_xy
from .commands import (
    Attribute,
    DataType,
    StripDeviceInfo,
    build_activation_packet,
    build_dimming_packet,
    build_effect_packet,
    build_segment_packet,
)
from .config import StripSettings, Timing
from .dispatcher import (
    ActiveSegmentsRequest,
    DimmingBound,
    DimmingRangeRequest,
    EffectColorsRequest,
    SegmentBrightnessRequest,
    SegmentColor,
    SegmentColorsRequest,
    StripController,
    get_state_key,
    request_from_key,
)
from .exceptions import (
    EmptySegmentColorsError,
    IncompleteSegmentColorError,
    InvalidBrightnessError,
    InvalidColorFormatError,
    InvalidEffectColorCountError,
    InvalidSegmentError,
    LumiStripError,
    NoValidSegmentsError,
    PartialWriteError,
    RangeInvertedError,
    StripValueError,
    TransportError,
    UnsupportedKeyError,
)
from .segments import calculate_segment_count, generate_segment_mask, parse_active_segments
from .transport import AttributeTransport, DeviceTopology, RecordingTransport, WriteOptions

__all__ = [
    # Main classes
    "StripController",
    "StripSettings",
    "Timing",
    # Requests
    "ActiveSegmentsRequest",
    "DimmingBound",
    "DimmingRangeRequest",
    "EffectColorsRequest",
    "SegmentBrightnessRequest",
    "SegmentColor",
    "SegmentColorsRequest",
    "get_state_key",
    "request_from_key",
    # Transport
    "AttributeTransport",
    "DeviceTopology",
    "RecordingTransport",
    "WriteOptions",
    # Exceptions
    "EmptySegmentColorsError",
    "IncompleteSegmentColorError",
    "InvalidBrightnessError",
    "InvalidColorFormatError",
    "InvalidEffectColorCountError",
    "InvalidSegmentError",
    "LumiStripError",
    "NoValidSegmentsError",
    "PartialWriteError",
    "RangeInvertedError",
    "StripValueError",
    "TransportError",
    "UnsupportedKeyError",
    # Encoding and packets
    "Attribute",
    "DataType",
    "StripDeviceInfo",
    "build_activation_packet",
    "build_dimming_packet",
    "build_effect_packet",
    "build_segment_packet",
    "calculate_segment_count",
    "encode_color",
    "generate_segment_mask",
    "normalize_hex_color",
    "parse_active_segments",
    "parse_hex_color",
    "rgb_to_xy",
]

__version__ = "1.0.0"
