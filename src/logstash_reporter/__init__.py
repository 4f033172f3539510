"""logstash_reporter - ship in-process metrics to Logstash as JSON over UDP."""

from logstash_reporter.adapters.logging import get_logger
from logstash_reporter.adapters.transport.udp import UDPTransport
from logstash_reporter.core.encoding import encode_measure
from logstash_reporter.core.exceptions import (
    AddressResolutionError,
    EncodeError,
    ReporterError,
    SocketError,
)
from logstash_reporter.core.measure import Measure, percentile_key
from logstash_reporter.core.models import (
    DEFAULT_PERCENTILES,
    HistogramSnapshot,
    MeterSnapshot,
    ReporterConfig,
    TimerSnapshot,
)
from logstash_reporter.core.reporter import Reporter
from logstash_reporter.metrics import (
    Counter,
    DuplicateMetricError,
    Gauge,
    GaugeFloat64,
    Histogram,
    Meter,
    MetricsRegistry,
    Timer,
    default_registry,
)

__all__ = [
    "DEFAULT_PERCENTILES",
    "AddressResolutionError",
    "Counter",
    "DuplicateMetricError",
    "EncodeError",
    "Gauge",
    "GaugeFloat64",
    "Histogram",
    "HistogramSnapshot",
    "Measure",
    "Meter",
    "MeterSnapshot",
    "MetricsRegistry",
    "Reporter",
    "ReporterConfig",
    "ReporterError",
    "SocketError",
    "Timer",
    "TimerSnapshot",
    "UDPTransport",
    "default_registry",
    "encode_measure",
    "get_logger",
    "percentile_key",
]
