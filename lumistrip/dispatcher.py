"""Command dispatch for the Aqara T1 light strip."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from .color import normalize_hex_color
from .commands import (
    DEFAULT_EFFECT_COLORS,
    Attribute,
    DataType,
    StripDeviceInfo,
    build_activation_packet,
    build_dimming_packet,
    build_effect_packet,
    build_segment_packet,
    percent_to_level,
    validate_percent,
)
from .config import StripSettings
from .exceptions import (
    EmptySegmentColorsError,
    IncompleteSegmentColorError,
    InvalidEffectColorCountError,
    InvalidSegmentError,
    PartialWriteError,
    RangeInvertedError,
    UnsupportedKeyError,
)
from .segments import calculate_segment_count, parse_active_segments
from .transport import ON_OFF_CLUSTER, WriteOptions

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .transport import AttributeTransport, DeviceTopology

LOGGER = logging.getLogger(__name__)

StatePatch = dict[str, Any]

LUMI_WRITE = WriteOptions(disable_default_response=False)
LUMI_CONFIG_WRITE = WriteOptions()


@dataclass(frozen=True)
class SegmentColor:
    """A single segment and the color it should show."""

    segment: int
    color: str


class DimmingBound(str, Enum):
    """The two ends of the dimming range and their attributes."""

    MINIMUM = "dimming_range_minimum"
    MAXIMUM = "dimming_range_maximum"

    @property
    def attribute(self) -> Attribute:
        return Attribute.MIN_BRIGHTNESS if self is DimmingBound.MINIMUM else Attribute.MAX_BRIGHTNESS

    @property
    def other(self) -> DimmingBound:
        return DimmingBound.MAXIMUM if self is DimmingBound.MINIMUM else DimmingBound.MINIMUM


@dataclass(frozen=True)
class SegmentColorsRequest:
    """Paint segments with static colors at the stored segment brightness."""

    entries: Sequence[Any]


@dataclass(frozen=True)
class SegmentBrightnessRequest:
    """Store the brightness used by the next segment colors request."""

    brightness: Any


@dataclass(frozen=True)
class EffectColorsRequest:
    """Set the color list and brightness of the dynamic RGB effects."""

    colors: str | None = None
    brightness: Any = None


@dataclass(frozen=True)
class ActiveSegmentsRequest:
    """Choose which segments take part in dynamic effects."""

    segments: str | None = None


@dataclass(frozen=True)
class DimmingRangeRequest:
    """Move one end of the dimming range."""

    bound: DimmingBound
    value: Any


StripRequest = Union[
    SegmentColorsRequest,
    SegmentBrightnessRequest,
    EffectColorsRequest,
    ActiveSegmentsRequest,
    DimmingRangeRequest,
]

SETTABLE_KEYS = (
    "segment_colors",
    "segment_brightness",
    "rgb_effect_colors",
    "rgb_effect_brightness",
    "active_segments",
    DimmingBound.MINIMUM.value,
    DimmingBound.MAXIMUM.value,
)


def request_from_key(key: str, value: Any, message: Mapping[str, Any] | None = None) -> StripRequest:
    """
    Turn a ``key: value`` set command into a typed request.

    Args:
        key: One of ``SETTABLE_KEYS``
        value: The value being set
        message: The full incoming message; the effect keys read their
            sibling from it so both can be set in one payload

    Raises:
        UnsupportedKeyError: If the key is not handled here
    """
    if key not in SETTABLE_KEYS:
        raise UnsupportedKeyError(key)
    if key == "segment_colors":
        return SegmentColorsRequest(entries=value)
    if key == "segment_brightness":
        return SegmentBrightnessRequest(brightness=value)
    if key in ("rgb_effect_colors", "rgb_effect_brightness"):
        merged = {**(message or {}), key: value}
        return EffectColorsRequest(
            colors=merged.get("rgb_effect_colors"),
            brightness=merged.get("rgb_effect_brightness"),
        )
    if key == "active_segments":
        return ActiveSegmentsRequest(segments=value)
    return DimmingRangeRequest(bound=DimmingBound(key), value=value)


def get_state_key(topology: DeviceTopology | None) -> str:
    """
    Pick the on/off key of the channel that carries the RGB output.

    Devices with a separate RGB endpoint (the T1M ceiling light) report it as
    ``state_rgb``; the single-endpoint strip uses ``state``.
    """
    if topology is None:
        return "state"
    if topology.get_endpoint(2) is not None:
        endpoints = topology.endpoints
        if endpoints and len(endpoints) > 1:
            return "state_rgb"
    return "state"


def _segment_id(segment: Any, max_segments: int) -> int:
    """Accept ints and integral floats within 1..max_segments; reject bools."""
    if isinstance(segment, bool) or not isinstance(segment, (int, float)):
        raise InvalidSegmentError(segment, max_segments)
    if not float(segment).is_integer() or segment < 1 or segment > max_segments:
        raise InvalidSegmentError(segment, max_segments)
    return int(segment)


def _first_set(*sources: Any, default: Any) -> Any:
    for source in sources:
        if source is not None:
            return source
    return default


class StripController:
    """
    Encodes and sequences commands for an Aqara T1 light strip.

    Each request is validated and all packets are built before anything is
    sent. Packets go out one at a time, in order, through the transport.

    Attributes:
        transport: Delivers attribute writes and commands to the device
        topology: Device endpoint layout, used to pick the on/off state key
        settings: Default strip length and the write sequence timing

    Example:
        controller = StripController(transport)
        patch = await controller.convert_set(
            "segment_colors",
            [{"segment": 1, "color": "#FF0000"}],
            state={"state": "OFF", "length": 2},
        )
        state.update(patch)
    """

    def __init__(
        self,
        transport: AttributeTransport,
        topology: DeviceTopology | None = None,
        settings: StripSettings | None = None,
    ) -> None:
        self._transport = transport
        self._topology = topology
        self._settings = settings or StripSettings.from_env()
        self._handlers = {
            SegmentColorsRequest: self._set_segment_colors,
            SegmentBrightnessRequest: self._set_segment_brightness,
            EffectColorsRequest: self._set_effect_colors,
            ActiveSegmentsRequest: self._set_active_segments,
            DimmingRangeRequest: self._set_dimming_range,
        }

    @property
    def transport(self) -> AttributeTransport:
        return self._transport

    @property
    def settings(self) -> StripSettings:
        return self._settings

    @property
    def state_key(self) -> str:
        """The state key that holds the RGB channel's on/off value."""
        return get_state_key(self._topology)

    def max_segments(self, state: Mapping[str, Any]) -> int:
        """Segment count for the strip length currently in ``state``."""
        length = state.get("length") or self._settings.default_length
        return calculate_segment_count(length)

    async def convert_set(
        self,
        key: str,
        value: Any,
        state: Mapping[str, Any],
        message: Mapping[str, Any] | None = None,
    ) -> StatePatch:
        """
        Handle a ``key: value`` set command.

        Args:
            key: One of ``SETTABLE_KEYS``
            value: The value being set
            state: Current entity state; read only
            message: The full incoming message, if any

        Returns:
            StatePatch: Keys to merge into the entity state

        Raises:
            StripValueError: If the request is invalid. Nothing is sent.
            PartialWriteError: If a multi-packet request failed part way.
        """
        return await self.dispatch(request_from_key(key, value, message), state)

    async def dispatch(self, request: StripRequest, state: Mapping[str, Any]) -> StatePatch:
        """Run a typed request against the device and return the state patch."""
        handler = self._handlers.get(type(request))
        if handler is None:
            raise TypeError(f"Unsupported request type: {type(request).__name__}")
        return await handler(request, state)

    async def set_segment_colors(
        self,
        entries: Sequence[SegmentColor | Mapping[str, Any]],
        state: Mapping[str, Any],
    ) -> StatePatch:
        """Shortcut for ``dispatch(SegmentColorsRequest(entries), state)``."""
        return await self.dispatch(SegmentColorsRequest(entries), state)

    async def set_effect_colors(
        self,
        state: Mapping[str, Any],
        colors: str | None = None,
        brightness: int | None = None,
    ) -> StatePatch:
        """Shortcut for ``dispatch(EffectColorsRequest(colors, brightness), state)``."""
        return await self.dispatch(EffectColorsRequest(colors, brightness), state)

    async def set_active_segments(self, segments: str | None, state: Mapping[str, Any]) -> StatePatch:
        """Shortcut for ``dispatch(ActiveSegmentsRequest(segments), state)``."""
        return await self.dispatch(ActiveSegmentsRequest(segments), state)

    async def set_dimming_range(
        self,
        state: Mapping[str, Any],
        minimum: int | None = None,
        maximum: int | None = None,
    ) -> StatePatch:
        """
        Set one or both ends of the dimming range.

        When both are given, the pair is checked against each other and the
        minimum is written first.
        """
        patch: StatePatch = {}
        merged = dict(state)
        if minimum is not None and maximum is not None:
            validate_percent(minimum, "Minimum")
            validate_percent(maximum, "Maximum")
            if minimum > maximum:
                raise RangeInvertedError(minimum, maximum)
            # each write is checked against the new pair, not the stored one
            merged[DimmingBound.MINIMUM.value] = minimum
            merged[DimmingBound.MAXIMUM.value] = maximum
        for bound, value in ((DimmingBound.MINIMUM, minimum), (DimmingBound.MAXIMUM, maximum)):
            if value is None:
                continue
            patch.update(await self.dispatch(DimmingRangeRequest(bound, value), merged))
            merged.update(patch)
        return patch

    async def _power_on(self) -> None:
        await self._transport.send_command(ON_OFF_CLUSTER, "on")
        LOGGER.debug("Power on sent")

    async def _write_segment_control(self, packet: bytes) -> None:
        await self._transport.write_attribute(
            StripDeviceInfo.CLUSTER,
            Attribute.SEGMENT_CONTROL,
            packet,
            DataType.OCTET_STR,
            LUMI_WRITE,
        )
        LOGGER.debug(f"Segment control packet {packet.hex()} sent")

    async def _set_segment_colors(self, request: SegmentColorsRequest, state: Mapping[str, Any]) -> StatePatch:
        entries = request.entries
        if not isinstance(entries, (list, tuple)) or not entries:
            raise EmptySegmentColorsError()

        max_segments = self.max_segments(state)
        brightness = percent_to_level(
            _first_set(state.get("segment_brightness"), default=100),
            StripDeviceInfo.STATIC_BRIGHTNESS_SCALE,
        )

        groups: dict[str, list[int]] = {}
        for entry in entries:
            if isinstance(entry, SegmentColor):
                segment, color = entry.segment, entry.color
            elif isinstance(entry, Mapping):
                segment, color = entry.get("segment"), entry.get("color")
            else:
                raise IncompleteSegmentColorError(entry)
            if not segment or not color:
                raise IncompleteSegmentColorError(entry)
            groups.setdefault(normalize_hex_color(color), []).append(_segment_id(segment, max_segments))

        packets = [
            build_segment_packet(segments, color, brightness, max_segments) for color, segments in groups.items()
        ]

        state_key = self.state_key
        if state.get(state_key) == "OFF":
            await self._power_on()
            await asyncio.sleep(self._settings.timing.settle_delay)

        for index, packet in enumerate(packets):
            try:
                await self._write_segment_control(packet)
            except Exception as e:
                if index == 0:
                    raise
                LOGGER.warning(f"Segment colors failed after {index} of {len(packets)} packets: {e}")
                raise PartialWriteError(index, len(packets)) from e
            if index < len(packets) - 1:
                await asyncio.sleep(self._settings.timing.inter_packet_gap)

        LOGGER.info(f"Set {len(entries)} segment colors in {len(packets)} packets")
        return {"segment_colors": entries, state_key: "ON"}

    async def _set_segment_brightness(
        self, request: SegmentBrightnessRequest, state: Mapping[str, Any]
    ) -> StatePatch:
        brightness = validate_percent(request.brightness)
        return {"segment_brightness": brightness}

    async def _set_effect_colors(self, request: EffectColorsRequest, state: Mapping[str, Any]) -> StatePatch:
        colors = request.colors or state.get("rgb_effect_colors") or DEFAULT_EFFECT_COLORS
        brightness = _first_set(request.brightness, state.get("rgb_effect_brightness"), default=100)

        color_list = [c.strip() for c in colors.split(",")]
        if len(color_list) < 1 or len(color_list) > StripDeviceInfo.MAX_EFFECT_COLORS:
            raise InvalidEffectColorCountError(len(color_list), StripDeviceInfo.MAX_EFFECT_COLORS)
        validate_percent(brightness)

        packet = build_effect_packet(
            color_list,
            percent_to_level(brightness, StripDeviceInfo.EFFECT_BRIGHTNESS_SCALE),
        )

        await self._power_on()
        await self._write_segment_control(packet)

        LOGGER.info(f"Set {len(color_list)} effect colors at {brightness}%")
        return {
            "rgb_effect_colors": colors,
            "rgb_effect_brightness": brightness,
            self.state_key: "ON",
        }

    async def _set_active_segments(self, request: ActiveSegmentsRequest, state: Mapping[str, Any]) -> StatePatch:
        max_segments = self.max_segments(state)
        segments = parse_active_segments(request.segments, max_segments)
        mask = build_activation_packet(segments, max_segments)

        await self._transport.write_attribute(
            StripDeviceInfo.CLUSTER,
            Attribute.ACTIVE_SEGMENTS,
            mask,
            DataType.OCTET_STR,
            LUMI_WRITE,
        )

        LOGGER.info(f"Active segments set to {segments}")
        return {"active_segments": request.segments}

    async def _set_dimming_range(self, request: DimmingRangeRequest, state: Mapping[str, Any]) -> StatePatch:
        bound = request.bound
        value = validate_percent(request.value, bound.name.capitalize())

        bounds = {bound: value, bound.other: state.get(bound.other.value)}
        minimum, maximum = bounds[DimmingBound.MINIMUM], bounds[DimmingBound.MAXIMUM]
        if minimum is not None and maximum is not None and minimum > maximum:
            raise RangeInvertedError(minimum, maximum)

        await self._transport.write_attribute(
            StripDeviceInfo.CLUSTER,
            bound.attribute,
            build_dimming_packet(value)[0],
            DataType.UINT8,
            LUMI_CONFIG_WRITE,
        )

        LOGGER.info(f"{bound.value} set to {value}%")
        return {bound.value: value}
