"""Shared test fixtures for all test modules."""

from collections.abc import Iterator

import pytest
from tests.helpers import RecordingTransport, UDPServer

from logstash_reporter.metrics.registry import MetricsRegistry


@pytest.fixture
def registry() -> MetricsRegistry:
    """Provide an empty, isolated metrics registry."""
    return MetricsRegistry()


@pytest.fixture
def transport() -> RecordingTransport:
    """Provide a transport that records payloads instead of sending them."""
    return RecordingTransport()


@pytest.fixture
def udp_server() -> Iterator[UDPServer]:
    """Provide a UDP listener on an ephemeral localhost port."""
    server = UDPServer()
    yield server
    server.close()


@pytest.fixture
def percentiles() -> tuple[float, ...]:
    """The default percentile configuration."""
    return (0.50, 0.75, 0.95, 0.99, 0.999)
