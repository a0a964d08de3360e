"""Environment-driven settings for lumistrip."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .commands import StripDeviceInfo

LOGGER = logging.getLogger(__name__)
load_dotenv()


@dataclass(frozen=True)
class Timing:
    """Named waits in the write sequence, in seconds."""

    # firmware ignores color writes until it has settled after power-on
    settle_delay: float = 0.1
    # gap between packets of the same request; the command buffer is serial
    inter_packet_gap: float = 0.05


@dataclass(frozen=True)
class StripSettings:
    """Defaults used when the state store has no value for the strip."""

    default_length: float = StripDeviceInfo.DEFAULT_LENGTH
    timing: Timing = field(default_factory=Timing)

    @classmethod
    def from_env(cls) -> StripSettings:
        """
        Build settings from ``LUMISTRIP_*`` environment variables.

        Reads ``LUMISTRIP_DEFAULT_LENGTH`` (meters), ``LUMISTRIP_SETTLE_DELAY_MS``
        and ``LUMISTRIP_INTER_PACKET_GAP_MS``. Values that are missing or not
        numbers keep their defaults.
        """
        defaults = cls()
        return cls(
            default_length=_env_float("LUMISTRIP_DEFAULT_LENGTH", defaults.default_length),
            timing=Timing(
                settle_delay=_env_float("LUMISTRIP_SETTLE_DELAY_MS", defaults.timing.settle_delay * 1000) / 1000,
                inter_packet_gap=_env_float(
                    "LUMISTRIP_INTER_PACKET_GAP_MS", defaults.timing.inter_packet_gap * 1000
                )
                / 1000,
            ),
        )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning(f"Ignoring {name}={raw!r}: not a number")
        return default
    if value < 0:
        LOGGER.warning(f"Ignoring {name}={raw!r}: must not be negative")
        return default
    return value
