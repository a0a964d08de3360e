"""Pytest fixtures for tests."""

from unittest.mock import AsyncMock, patch

import pytest

from lumistrip import RecordingTransport, StripController, StripSettings, Timing


class FakeTopology:
    """Device with the given endpoint ids."""

    def __init__(self, *endpoint_ids):
        self._endpoints = {endpoint_id: object() for endpoint_id in endpoint_ids}

    @property
    def endpoints(self):
        return list(self._endpoints.values())

    def get_endpoint(self, endpoint_id):
        return self._endpoints.get(endpoint_id)


@pytest.fixture
def transport():
    """Create a transport that records every operation."""
    return RecordingTransport()


@pytest.fixture
def settings():
    """Default strip settings, independent of the environment."""
    return StripSettings(default_length=2.0, timing=Timing(settle_delay=0.1, inter_packet_gap=0.05))


@pytest.fixture
def controller(transport, settings):
    """Create a controller for a single-endpoint strip."""
    return StripController(transport, topology=FakeTopology(1), settings=settings)


@pytest.fixture
def sleeps(transport):
    """
    Patch the dispatcher's sleeps.

    Yields a list of ``(operations_sent_so_far, seconds)`` tuples so tests can
    check where in the write sequence each wait happened.
    """
    recorded = []

    def record(seconds):
        recorded.append((len(transport.operations), seconds))

    with patch("lumistrip.dispatcher.asyncio.sleep", new=AsyncMock(side_effect=record)):
        yield recorded
