"""Interfaces to the Zigbee side: attribute transport and device topology."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, Union

from .commands import StripDeviceInfo
from .exceptions import TransportError

if TYPE_CHECKING:
    from collections.abc import Sequence

LOGGER = logging.getLogger(__name__)

ON_OFF_CLUSTER = "genOnOff"


@dataclass(frozen=True)
class WriteOptions:
    """Options passed along with every attribute write."""

    manufacturer_code: int | None = StripDeviceInfo.MANUFACTURER_CODE
    disable_default_response: bool | None = None


class AttributeTransport(Protocol):
    """
    Delivers attribute writes and cluster commands to the device.

    Implementations return normally once the device acknowledged the write
    and raise (ideally ``TransportError``) when it was rejected or timed out.
    """

    async def write_attribute(
        self,
        cluster: str,
        attribute_id: int,
        value: bytes | int,
        data_type: int,
        options: WriteOptions,
    ) -> None: ...

    async def send_command(self, cluster: str, command: str) -> None: ...


class DeviceTopology(Protocol):
    """The part of the device model needed to pick the on/off state key."""

    @property
    def endpoints(self) -> Sequence[Any]: ...

    def get_endpoint(self, endpoint_id: int) -> Any | None: ...


@dataclass(frozen=True)
class AttributeWrite:
    """An attribute write as seen by ``RecordingTransport``."""

    cluster: str
    attribute_id: int
    value: bytes | int
    data_type: int
    options: WriteOptions


@dataclass(frozen=True)
class ClusterCommand:
    """A cluster command as seen by ``RecordingTransport``."""

    cluster: str
    command: str


Operation = Union[AttributeWrite, ClusterCommand]


@dataclass
class RecordingTransport:
    """
    Transport that records operations instead of sending them.

    Useful for dry runs and tests. Set ``fail_on`` to the index of an
    operation to make that call raise ``error``.

    Example:
        transport = RecordingTransport()
        controller = StripController(transport)
        await controller.convert_set("active_segments", "1,2", state={})
        print(transport.writes[0].value.hex())
    """

    operations: list[Operation] = field(default_factory=list)
    fail_on: int | None = None
    error: Exception | None = None

    @property
    def writes(self) -> list[AttributeWrite]:
        """Recorded attribute writes, in order."""
        return [op for op in self.operations if isinstance(op, AttributeWrite)]

    @property
    def commands(self) -> list[ClusterCommand]:
        """Recorded cluster commands, in order."""
        return [op for op in self.operations if isinstance(op, ClusterCommand)]

    def _record(self, operation: Operation) -> None:
        if self.fail_on is not None and len(self.operations) == self.fail_on:
            self.fail_on = None
            if self.error is not None:
                raise self.error
            raise TransportError("Simulated failure")
        self.operations.append(operation)

    async def write_attribute(
        self,
        cluster: str,
        attribute_id: int,
        value: bytes | int,
        data_type: int,
        options: WriteOptions,
    ) -> None:
        self._record(AttributeWrite(cluster, attribute_id, value, data_type, options))
        shown = value.hex() if isinstance(value, bytes) else value
        LOGGER.debug(f"Write {cluster} 0x{attribute_id:04x} (type 0x{data_type:02x}): {shown}")

    async def send_command(self, cluster: str, command: str) -> None:
        self._record(ClusterCommand(cluster, command))
        LOGGER.debug(f"Command {cluster}.{command}")
