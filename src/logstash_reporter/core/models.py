"""Core domain models for metric documents and snapshots."""

from dataclasses import dataclass, field

MeasureValue = str | int | float | dict[str, "MeasureValue"]

DEFAULT_PERCENTILES: tuple[float, ...] = (0.50, 0.75, 0.95, 0.99, 0.999)

WIRE_VERSION = "1.0.1"


@dataclass(frozen=True)
class HistogramSnapshot:
    """Read-only view of a histogram's sample at one point in time.

    Attributes:
        count: Total number of recorded values (not just those retained).
        values: Retained sample values.
    """

    count: int
    values: tuple[int, ...] = ()

    @property
    def max(self) -> int:
        return max(self.values) if self.values else 0

    @property
    def min(self) -> int:
        return min(self.values) if self.values else 0

    @property
    def mean(self) -> float:
        if not self.values:
            return 0.0
        return float(sum(self.values)) / len(self.values)

    @property
    def variance(self) -> float:
        """Population variance of the retained values."""
        if not self.values:
            return 0.0
        mean = self.mean
        total = 0.0
        for value in self.values:
            delta = float(value) - mean
            total += delta * delta
        return total / len(self.values)

    @property
    def stddev(self) -> float:
        return self.variance**0.5

    def percentile(self, p: float) -> float:
        """Interpolated percentile of the retained values.

        Uses the ``p * (n + 1)`` rank, clamped to the first and last values.
        Returns 0.0 for an empty sample.
        """
        if not self.values:
            return 0.0
        ordered = sorted(self.values)
        size = len(ordered)
        pos = p * (size + 1)
        if pos < 1.0:
            return float(ordered[0])
        if pos >= size:
            return float(ordered[-1])
        lower = float(ordered[int(pos) - 1])
        upper = float(ordered[int(pos)])
        return lower + (pos - int(pos)) * (upper - lower)


@dataclass(frozen=True)
class MeterSnapshot:
    """Read-only view of a meter.

    Attributes:
        count: Number of events marked.
        rate1: One-minute exponentially weighted rate, events/second.
        rate5: Five-minute exponentially weighted rate, events/second.
        rate15: Fifteen-minute exponentially weighted rate, events/second.
        rate_mean: Mean rate since the meter was created, events/second.
    """

    count: int
    rate1: float = 0.0
    rate5: float = 0.0
    rate15: float = 0.0
    rate_mean: float = 0.0


@dataclass(frozen=True)
class TimerSnapshot(HistogramSnapshot):
    """Read-only view of a timer.

    Durations are in nanoseconds. Rates are carried from the timer's meter.
    """

    rate1: float = 0.0
    rate5: float = 0.0
    rate15: float = 0.0
    rate_mean: float = 0.0


@dataclass(frozen=True)
class ReporterConfig:
    """Settings for building a Reporter.

    Attributes:
        address: Collector address as ``host:port``.
        default_values: Fields added to every document.
        percentiles: Quantiles reported for histograms and timers.
        interval: Seconds between flushes in periodic mode.
    """

    address: str
    default_values: dict[str, MeasureValue] = field(default_factory=dict)
    percentiles: tuple[float, ...] = DEFAULT_PERCENTILES
    interval: float = 10.0

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ValueError(f"interval must be positive, got {self.interval}")
        for p in self.percentiles:
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"percentile out of range [0, 1]: {p}")
