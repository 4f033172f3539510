"""In-process metrics registry."""

import threading
from collections.abc import Callable
from typing import TypeVar

from logstash_reporter.metrics.instruments import (
    Counter,
    Gauge,
    GaugeFloat64,
    Histogram,
    Meter,
    Timer,
)

M = TypeVar("M")


class DuplicateMetricError(ValueError):
    """A metric is already registered under the requested name."""


class MetricsRegistry:
    """Named collection of metrics, safe for concurrent use.

    Enumeration works on a copy taken under the lock, so metrics can be
    registered or updated by other threads while a reporter walks the
    registry.

    Example:
        ```python
        registry = MetricsRegistry()
        registry.counter("api.requests").inc()
        registry.timer("api.latency").update(0.012)
        ```
    """

    def __init__(self) -> None:
        self._metrics: dict[str, object] = {}
        self._lock = threading.Lock()

    def register(self, name: str, metric: object) -> None:
        """Register ``metric`` under ``name``.

        Raises:
            DuplicateMetricError: If ``name`` is already registered.
        """
        with self._lock:
            if name in self._metrics:
                raise DuplicateMetricError(f"metric {name!r} already registered")
            self._metrics[name] = metric

    def get(self, name: str) -> object | None:
        with self._lock:
            return self._metrics.get(name)

    def unregister(self, name: str) -> None:
        with self._lock:
            self._metrics.pop(name, None)

    def unregister_all(self) -> None:
        with self._lock:
            self._metrics.clear()

    def get_or_register(self, name: str, factory: Callable[[], M]) -> M:
        """Return the metric under ``name``, creating it with ``factory``.

        Raises:
            TypeError: If an existing metric is not of the type ``factory``
                would produce.
        """
        with self._lock:
            existing = self._metrics.get(name)
            if existing is None:
                created = factory()
                self._metrics[name] = created
                return created
        if isinstance(factory, type) and not isinstance(existing, factory):
            raise TypeError(
                f"metric {name!r} is a {type(existing).__name__}, "
                f"not a {factory.__name__}"
            )
        return existing  # type: ignore[return-value]

    def each(self, callback: Callable[[str, object], None]) -> None:
        """Call ``callback(name, metric)`` once for every registered metric."""
        with self._lock:
            items = list(self._metrics.items())
        for name, metric in items:
            callback(name, metric)

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._metrics

    def counter(self, name: str) -> Counter:
        return self.get_or_register(name, Counter)

    def gauge(self, name: str) -> Gauge:
        return self.get_or_register(name, Gauge)

    def gauge_float64(self, name: str) -> GaugeFloat64:
        return self.get_or_register(name, GaugeFloat64)

    def histogram(self, name: str) -> Histogram:
        return self.get_or_register(name, Histogram)

    def meter(self, name: str) -> Meter:
        return self.get_or_register(name, Meter)

    def timer(self, name: str) -> Timer:
        return self.get_or_register(name, Timer)


default_registry = MetricsRegistry()
