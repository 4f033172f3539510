"""Metric kinds held by the registry.

Each kind implements ``describe``, which hands the metric to the matching
``Measure.add_*`` builder method.
"""

import threading
import time
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING

from logstash_reporter.core.models import (
    HistogramSnapshot,
    MeterSnapshot,
    TimerSnapshot,
)
from logstash_reporter.metrics.sample import EWMA, TICK_INTERVAL, UniformSample

if TYPE_CHECKING:
    from logstash_reporter.core.measure import Measure

_NANOS_PER_SECOND = 1_000_000_000


class Counter:
    """Integer count that can be incremented and decremented."""

    def __init__(self) -> None:
        self._count = 0
        self._lock = threading.Lock()

    def inc(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    def dec(self, n: int = 1) -> None:
        with self._lock:
            self._count -= n

    def clear(self) -> None:
        with self._lock:
            self._count = 0

    def count(self) -> int:
        return self._count

    def describe(self, measure: "Measure", percentiles: Sequence[float]) -> None:
        measure.add_counter(self)


class Gauge:
    """Integer value that holds whatever was last set."""

    def __init__(self) -> None:
        self._value = 0

    def update(self, value: int) -> None:
        self._value = int(value)

    def value(self) -> int:
        return self._value

    def describe(self, measure: "Measure", percentiles: Sequence[float]) -> None:
        measure.add_gauge(self)


class GaugeFloat64:
    """Floating point value that holds whatever was last set."""

    def __init__(self) -> None:
        self._value = 0.0

    def update(self, value: float) -> None:
        self._value = float(value)

    def value(self) -> float:
        return self._value

    def describe(self, measure: "Measure", percentiles: Sequence[float]) -> None:
        measure.add_gauge_float64(self)


class Histogram:
    """Distribution of integer values backed by a reservoir sample."""

    def __init__(self, sample: UniformSample | None = None) -> None:
        self._sample = sample or UniformSample()

    def update(self, value: int) -> None:
        self._sample.update(int(value))

    def clear(self) -> None:
        self._sample.clear()

    def count(self) -> int:
        return self._sample.count()

    def snapshot(self) -> HistogramSnapshot:
        return self._sample.snapshot()

    def describe(self, measure: "Measure", percentiles: Sequence[float]) -> None:
        measure.add_histogram(self, percentiles)


class Meter:
    """Event rate with 1, 5 and 15 minute moving averages.

    Moving averages are ticked lazily: every mark or snapshot first applies
    the ticks that elapsed since the previous one.

    Args:
        clock: Monotonic time source in seconds, injectable for tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._start = clock()
        self._last_tick = self._start
        self._count = 0
        self._m1 = EWMA(1)
        self._m5 = EWMA(5)
        self._m15 = EWMA(15)
        self._lock = threading.Lock()

    def _tick_if_necessary(self) -> None:
        now = self._clock()
        elapsed = now - self._last_tick
        if elapsed < TICK_INTERVAL:
            return
        ticks = int(elapsed // TICK_INTERVAL)
        self._last_tick += ticks * TICK_INTERVAL
        for _ in range(ticks):
            self._m1.tick()
            self._m5.tick()
            self._m15.tick()

    def mark(self, n: int = 1) -> None:
        with self._lock:
            self._tick_if_necessary()
            self._count += n
            self._m1.update(n)
            self._m5.update(n)
            self._m15.update(n)

    def count(self) -> int:
        return self._count

    def snapshot(self) -> MeterSnapshot:
        with self._lock:
            self._tick_if_necessary()
            elapsed = self._clock() - self._start
            rate_mean = self._count / elapsed if elapsed > 0 else 0.0
            return MeterSnapshot(
                count=self._count,
                rate1=self._m1.rate(),
                rate5=self._m5.rate(),
                rate15=self._m15.rate(),
                rate_mean=rate_mean,
            )

    def describe(self, measure: "Measure", percentiles: Sequence[float]) -> None:
        measure.add_meter(self)


class Timer:
    """Duration histogram combined with a meter of how often it fires.

    Durations are stored in nanoseconds.

    Example:
        ```python
        timer = registry.timer("db.query")
        with timer.time():
            run_query()
        ```
    """

    def __init__(
        self,
        sample: UniformSample | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._histogram = Histogram(sample)
        self._meter = Meter(clock)

    def update(self, seconds: float) -> None:
        """Record a duration given in seconds."""
        self.update_ns(int(seconds * _NANOS_PER_SECOND))

    def update_ns(self, nanoseconds: int) -> None:
        self._histogram.update(nanoseconds)
        self._meter.mark()

    @contextmanager
    def time(self) -> Iterator[None]:
        """Record how long the ``with`` block takes."""
        started = time.perf_counter_ns()
        try:
            yield
        finally:
            self.update_ns(time.perf_counter_ns() - started)

    def count(self) -> int:
        return self._histogram.count()

    def snapshot(self) -> TimerSnapshot:
        hist = self._histogram.snapshot()
        meter = self._meter.snapshot()
        return TimerSnapshot(
            count=hist.count,
            values=hist.values,
            rate1=meter.rate1,
            rate5=meter.rate5,
            rate15=meter.rate15,
            rate_mean=meter.rate_mean,
        )

    def describe(self, measure: "Measure", percentiles: Sequence[float]) -> None:
        measure.add_timer(self, percentiles)
