"""Custom exceptions for the lumistrip library."""

from __future__ import annotations


class LumiStripError(Exception):
    """Base exception for all lumistrip errors."""

    pass


class StripValueError(LumiStripError, ValueError):
    """Raised when a request carries a value the strip cannot accept."""

    pass


class InvalidColorFormatError(StripValueError):
    """Raised when a color is not a 6-digit hex string."""

    def __init__(self, color: object) -> None:
        self.color = color
        super().__init__(f"Invalid color format: {color}. Use format #RRGGBB (e.g., #FF0000)")


class InvalidSegmentError(StripValueError):
    """Raised when a segment id is outside the strip's current range."""

    def __init__(self, segment: object, max_segments: int) -> None:
        self.segment = segment
        self.max_segments = max_segments
        super().__init__(f"Invalid segment: {segment}. Must be 1-{max_segments}")


class EmptySegmentColorsError(StripValueError):
    """Raised when segment_colors is not a non-empty list."""

    def __init__(self, message: str = "segment_colors must be a non-empty list") -> None:
        super().__init__(message)


class IncompleteSegmentColorError(StripValueError):
    """Raised when a segment_colors entry lacks a segment or a color."""

    def __init__(self, entry: object) -> None:
        self.entry = entry
        super().__init__(f'Each segment must have "segment" and "color" fields, got {entry!r}')


class InvalidBrightnessError(StripValueError):
    """Raised when a percentage is outside 1-100."""

    def __init__(self, value: object, name: str = "Brightness") -> None:
        self.value = value
        super().__init__(f"Invalid {name.lower()}: {value}. Must be 1-100%")


class InvalidEffectColorCountError(StripValueError):
    """Raised when an effect carries fewer than 1 or more than 8 colors."""

    def __init__(self, count: int, maximum: int = 8) -> None:
        self.count = count
        super().__init__(f"Must provide 1-{maximum} colors, got {count}")


class RangeInvertedError(StripValueError):
    """Raised when the dimming range minimum would exceed its maximum."""

    def __init__(self, minimum: int, maximum: int) -> None:
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"Minimum ({minimum}%) cannot exceed maximum ({maximum}%)")


class NoValidSegmentsError(StripValueError):
    """Raised when an active-segments list contains no usable segment."""

    def __init__(self, max_segments: int) -> None:
        self.max_segments = max_segments
        super().__init__(f"Invalid segment numbers. Must be 1-{max_segments}")


class UnsupportedKeyError(StripValueError):
    """Raised when a set request names a key this library does not handle."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unsupported key: {key}")


class TransportError(LumiStripError):
    """Raised by transports when an attribute write or command is rejected."""

    def __init__(
        self,
        message: str = "Failed to write attribute",
        attribute_id: int | None = None,
        payload: bytes | None = None,
    ) -> None:
        self.attribute_id = attribute_id
        self.payload = payload
        if attribute_id is not None:
            message = f"{message} (attribute: 0x{attribute_id:04x})"
        if payload:
            message = f"{message} (payload: {payload.hex()})"
        super().__init__(message)


class PartialWriteError(LumiStripError):
    """Raised when a multi-packet request fails after some packets were sent.

    The device is left with the first ``sent`` packets applied; nothing is
    rolled back. The transport's original exception is chained as
    ``__cause__``.
    """

    def __init__(self, sent: int, total: int, message: str = "Segment color write interrupted") -> None:
        self.sent = sent
        self.total = total
        super().__init__(f"{message}: {sent} of {total} packets applied")
