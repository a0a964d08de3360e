"""Segment addressing for the T1 light strip."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .color import round_half_up
from .exceptions import InvalidSegmentError, NoValidSegmentsError

if TYPE_CHECKING:
    from collections.abc import Iterable

LOGGER = logging.getLogger(__name__)

SEGMENTS_PER_METER = 5
MASK_SIZE = 8


def calculate_segment_count(length_meters: float) -> int:
    """Number of addressable segments on a strip of the given length."""
    return round_half_up(length_meters * SEGMENTS_PER_METER)


def generate_segment_mask(segment_ids: Iterable[int], max_segments: int) -> bytes:
    """
    Pack segment ids into the 8-byte mask used by the firmware.

    Segment 1 is the most significant bit of the first byte, segment 9 the
    most significant bit of the second byte, and so on.

    Args:
        segment_ids: 1-based segment ids. Order and duplicates are irrelevant.
        max_segments: Highest valid id for the current strip length.

    Returns:
        bytes: The 8-byte mask.

    Raises:
        InvalidSegmentError: If any id is outside 1..max_segments.
    """
    mask = bytearray(MASK_SIZE)
    for segment in segment_ids:
        if segment < 1 or segment > max_segments or segment > MASK_SIZE * 8:
            raise InvalidSegmentError(segment, max_segments)
        bit_pos = segment - 1
        mask[bit_pos // 8] |= 1 << (7 - bit_pos % 8)
    return bytes(mask)


def parse_active_segments(text: str | None, max_segments: int) -> list[int]:
    """
    Parse a comma-separated segment list such as ``"1,2,5,8"``.

    An empty or missing value selects every segment. Tokens that are not
    integers or fall outside 1..max_segments are dropped.

    Raises:
        NoValidSegmentsError: If tokens were given but none were usable.
    """
    if not text or not text.strip():
        return list(range(1, max_segments + 1))

    segments: list[int] = []
    for token in text.split(","):
        try:
            segment = int(token.strip(), 10)
        except ValueError:
            LOGGER.debug(f"Ignoring non-numeric segment token {token!r}")
            continue
        if 1 <= segment <= max_segments:
            segments.append(segment)
        else:
            LOGGER.debug(f"Ignoring out-of-range segment {segment} (max {max_segments})")

    if not segments:
        raise NoValidSegmentsError(max_segments)
    return segments
