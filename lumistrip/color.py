"""RGB to CIE 1931 xy conversion for the strip's color packets."""

from __future__ import annotations

import math
import re
import struct

from .exceptions import InvalidColorFormatError

_HEX_COLOR = re.compile(r"^[0-9A-F]{6}$")

# sRGB -> XYZ, D65 white point
_SRGB_TO_XYZ = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)

XY_SCALE = 65535


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, as the firmware tools do."""
    return math.floor(value + 0.5)


def _linearize(channel: float) -> float:
    if channel > 0.04045:
        return ((channel + 0.055) / 1.055) ** 2.4
    return channel / 12.92


def rgb_to_xy(red: int, green: int, blue: int) -> tuple[float, float]:
    """
    Convert an 8-bit sRGB color to CIE xy chromaticity.

    Args:
        red: Red channel (0-255)
        green: Green channel (0-255)
        blue: Blue channel (0-255)

    Returns:
        tuple[float, float]: The (x, y) coordinates. Black maps to (0.0, 0.0).
    """
    rgb = [_linearize(c / 255.0) for c in (red, green, blue)]
    x_, y_, z_ = (sum(k * c for k, c in zip(row, rgb)) for row in _SRGB_TO_XYZ)

    total = x_ + y_ + z_
    if total == 0:
        return 0.0, 0.0
    return x_ / total, y_ / total


def parse_hex_color(hex_color: str) -> tuple[int, int, int]:
    """
    Parse a ``#RRGGBB`` (or ``RRGGBB``) string into an RGB tuple.

    Raises:
        InvalidColorFormatError: If the string is not exactly 6 hex digits.
    """
    if not isinstance(hex_color, str):
        raise InvalidColorFormatError(hex_color)
    normalized = hex_color.upper()
    if normalized.startswith("#"):
        normalized = normalized[1:]
    if not _HEX_COLOR.match(normalized):
        raise InvalidColorFormatError(hex_color)
    return int(normalized[0:2], 16), int(normalized[2:4], 16), int(normalized[4:6], 16)


def normalize_hex_color(hex_color: str) -> str:
    """Return the canonical ``#RRGGBB`` uppercase form of a color."""
    red, green, blue = parse_hex_color(hex_color)
    return f"#{red:02X}{green:02X}{blue:02X}"


def encode_color(hex_color: str) -> bytes:
    """
    Encode a hex color as the 4-byte xy value the strip expects.

    Args:
        hex_color: Color as ``#RRGGBB``, case-insensitive

    Returns:
        bytes: Big-endian uint16 x followed by big-endian uint16 y

    Raises:
        InvalidColorFormatError: If the color is malformed.
    """
    x, y = rgb_to_xy(*parse_hex_color(hex_color))
    return struct.pack(">HH", round_half_up(x * XY_SCALE), round_half_up(y * XY_SCALE))
