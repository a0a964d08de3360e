"""Attribute constants and packet builders for the Aqara T1 light strip."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

from .color import encode_color, round_half_up
from .exceptions import InvalidBrightnessError
from .segments import generate_segment_mask

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


class Attribute(IntEnum):
    """Manufacturer-specific attribute ids on the Lumi cluster."""

    MIN_BRIGHTNESS = 0x0515
    MAX_BRIGHTNESS = 0x0516
    LENGTH = 0x051B
    AUDIO = 0x051C
    AUDIO_EFFECT = 0x051D
    AUDIO_SENSITIVITY = 0x051E
    RGB_EFFECT = 0x051F
    EFFECT_SPEED = 0x0520
    SEGMENT_CONTROL = 0x0527
    ACTIVE_SEGMENTS = 0x0530


class DataType(IntEnum):
    """Zigbee data types used by the strip's attributes."""

    UINT8 = 0x20
    ENUM8 = 0x23
    OCTET_STR = 0x41


class PacketHeader(Enum):
    """Fixed framing bytes for the segment control attribute."""

    STATIC_SEGMENT = bytes.fromhex("01 01 01 0f")
    STATIC_FOOTER = bytes.fromhex("00 14")
    EFFECT_COLORS = bytes.fromhex("01 01 03")


@dataclass(frozen=True)
class StripDeviceInfo:
    """Information about the T1 light strip."""

    CLUSTER: str = "manuSpecificLumi"
    MANUFACTURER_CODE: int = 0x115F
    DEFAULT_LENGTH: float = 2.0
    MIN_PERCENT: int = 1
    MAX_PERCENT: int = 100
    MAX_EFFECT_COLORS: int = 8
    STATIC_BRIGHTNESS_SCALE: int = 255
    EFFECT_BRIGHTNESS_SCALE: int = 254


DEFAULT_EFFECT_COLORS = "#FF0000,#00FF00,#0000FF"


def validate_percent(value: object, name: str = "Brightness") -> int:
    """
    Validate that a percentage is within the valid range (1-100).

    Args:
        value: The value to validate
        name: The name of the parameter (for error messages)

    Returns:
        int: The validated value

    Raises:
        InvalidBrightnessError: If the value is not a number between 1 and 100
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidBrightnessError(value, name)
    if value < StripDeviceInfo.MIN_PERCENT or value > StripDeviceInfo.MAX_PERCENT:
        raise InvalidBrightnessError(value, name)
    return value


def percent_to_level(percent: float, scale: int) -> int:
    """Convert a 1-100 percentage to the device's 0-``scale`` level."""
    return round_half_up(percent / 100 * scale)


def build_segment_packet(
    segment_ids: Iterable[int],
    hex_color: str,
    brightness: float,
    max_segments: int,
) -> bytes:
    """
    Build a static color packet for a group of segments.

    Layout: ``01 01 01 0f | brightness | mask (8) | xy color (4) | 00 14``.

    Args:
        segment_ids: Segments that take the color
        hex_color: Color as ``#RRGGBB``
        brightness: Level 0-255; out-of-range values are saturated
        max_segments: Highest valid segment id

    Returns:
        bytes: The 19-byte packet
    """
    brightness_byte = max(0, min(255, round_half_up(brightness)))

    packet = bytearray(PacketHeader.STATIC_SEGMENT.value)
    packet.append(brightness_byte)
    packet.extend(generate_segment_mask(segment_ids, max_segments))
    packet.extend(encode_color(hex_color))
    packet.extend(PacketHeader.STATIC_FOOTER.value)
    return bytes(packet)


def build_effect_packet(hex_colors: Sequence[str], brightness: int) -> bytes:
    """
    Build the color list packet for the dynamic RGB effects.

    Layout: ``01 01 03 len | brightness | 00 | count | colors (4 each)`` where
    ``len`` is ``3 + 4 * count``. The caller bounds the color count.
    """
    packet = bytearray(PacketHeader.EFFECT_COLORS.value)
    packet.append(3 + 4 * len(hex_colors))
    packet.append(brightness)
    packet.append(0x00)
    packet.append(len(hex_colors))
    for color in hex_colors:
        packet.extend(encode_color(color))
    return bytes(packet)


def build_activation_packet(segment_ids: Iterable[int], max_segments: int) -> bytes:
    """Build the bare segment mask written to the active segments attribute."""
    return generate_segment_mask(segment_ids, max_segments)


def build_dimming_packet(percent: int) -> bytes:
    """Build the single byte written to a dimming range attribute."""
    return bytes([int(percent)])
