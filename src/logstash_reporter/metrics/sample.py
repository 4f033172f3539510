"""Sampling primitives backing histograms, meters and timers."""

import math
import random
import threading

from logstash_reporter.core.models import HistogramSnapshot

DEFAULT_RESERVOIR_SIZE = 1028

# Meters tick their moving averages every five seconds.
TICK_INTERVAL = 5.0


class UniformSample:
    """Fixed-size reservoir that keeps a uniform sample of a stream.

    Uses Vitter's algorithm R: the first ``reservoir_size`` values are kept,
    after which each new value replaces a random slot with probability
    ``reservoir_size / count``.

    Args:
        reservoir_size: Maximum number of retained values.
        rng: Random source, injectable for deterministic tests.
    """

    def __init__(
        self,
        reservoir_size: int = DEFAULT_RESERVOIR_SIZE,
        rng: random.Random | None = None,
    ) -> None:
        if reservoir_size <= 0:
            raise ValueError(f"reservoir_size must be positive, got {reservoir_size}")
        self._size = reservoir_size
        self._rng = rng or random.Random()
        self._values: list[int] = []
        self._count = 0
        self._lock = threading.Lock()

    def update(self, value: int) -> None:
        with self._lock:
            self._count += 1
            if len(self._values) < self._size:
                self._values.append(value)
                return
            slot = self._rng.randrange(self._count)
            if slot < self._size:
                self._values[slot] = value

    def clear(self) -> None:
        with self._lock:
            self._values = []
            self._count = 0

    def count(self) -> int:
        return self._count

    def size(self) -> int:
        return len(self._values)

    def snapshot(self) -> HistogramSnapshot:
        with self._lock:
            return HistogramSnapshot(count=self._count, values=tuple(self._values))


class EWMA:
    """Exponentially weighted moving average of an event rate.

    ``tick`` must be called every ``TICK_INTERVAL`` seconds; the owning meter
    takes care of that.

    Args:
        minutes: Averaging window in minutes (1, 5 and 15 are customary).
    """

    def __init__(self, minutes: float) -> None:
        self._alpha = 1 - math.exp(-TICK_INTERVAL / 60.0 / minutes)
        self._uncounted = 0
        self._rate = 0.0
        self._initialized = False

    def update(self, n: int) -> None:
        self._uncounted += n

    def tick(self) -> None:
        instant_rate = self._uncounted / TICK_INTERVAL
        self._uncounted = 0
        if self._initialized:
            self._rate += self._alpha * (instant_rate - self._rate)
        else:
            self._rate = instant_rate
            self._initialized = True

    def rate(self) -> float:
        """Current rate in events per second."""
        return self._rate
