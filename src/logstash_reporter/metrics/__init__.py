"""In-process metrics: counters, gauges, histograms, meters and timers."""

from logstash_reporter.metrics.instruments import (
    Counter,
    Gauge,
    GaugeFloat64,
    Histogram,
    Meter,
    Timer,
)
from logstash_reporter.metrics.registry import (
    DuplicateMetricError,
    MetricsRegistry,
    default_registry,
)
from logstash_reporter.metrics.sample import EWMA, UniformSample

__all__ = [
    "EWMA",
    "Counter",
    "DuplicateMetricError",
    "Gauge",
    "GaugeFloat64",
    "Histogram",
    "Meter",
    "MetricsRegistry",
    "Timer",
    "UniformSample",
    "default_registry",
]
