"""Measure builder: flattens one metric into a JSON-ready document."""

from collections.abc import Mapping, Sequence

from logstash_reporter.core.models import MeasureValue
from logstash_reporter.core.ports import (
    CounterPort,
    GaugePort,
    HistogramPort,
    MeterPort,
    TimerPort,
)

_NANOS_PER_SECOND = 1_000_000_000


def percentile_key(p: float) -> str:
    """Render a quantile as a document key.

    The quantile is scaled to a percentage, written in its shortest decimal
    form and the decimal point replaced by an underscore:
    ``0.5 -> "p50"``, ``0.999 -> "p99_9"``.
    """
    text = repr(float(p) * 100)
    if text.endswith(".0"):
        text = text[:-2]
    return "p" + text.replace(".", "_")


def _nanos_to_millis(value: float) -> float:
    # Truncate to whole nanoseconds first, as a duration would.
    nanos = int(value)
    seconds, remainder = divmod(nanos, _NANOS_PER_SECOND)
    return (seconds + remainder / 1e9) * 1000


class Measure(dict[str, MeasureValue]):
    """Flat document describing a single metric.

    Example:
        ```python
        measure = Measure.create("api.requests", {"client": "web"})
        measure.add_counter(counter)
        # {"identifier0": "api", "identifier1": "requests",
        #  "client": "web", "kind": "counter", "counter": 3}
        ```
    """

    @classmethod
    def create(
        cls,
        name: str,
        default_values: Mapping[str, MeasureValue] | None = None,
    ) -> "Measure":
        """Create a measure holding the name segments and default values.

        Each dot-separated segment of ``name`` is stored as
        ``identifier<index>``. Default values are applied afterwards, in
        the mapping's iteration order, and overwrite colliding keys.

        Args:
            name: Registry name of the metric, e.g. ``"a.b.c"``.
            default_values: Fields added to every measure. May be None.

        Returns:
            A new Measure with identifier and default keys set.
        """
        measure = cls()
        for index, segment in enumerate(name.split(".")):
            measure[f"identifier{index}"] = segment
        if default_values:
            for key, value in default_values.items():
                measure[key] = value
        return measure

    def add_counter(self, counter: CounterPort) -> None:
        self["kind"] = "counter"
        self["counter"] = counter.count()

    def add_gauge(self, gauge: GaugePort) -> None:
        self["kind"] = "gauge"
        self["gauge"] = gauge.value()

    def add_gauge_float64(self, gauge: GaugePort) -> None:
        self["kind"] = "gauge64"
        self["gauge64"] = gauge.value()

    def add_histogram(
        self, histogram: HistogramPort, percentiles: Sequence[float]
    ) -> None:
        """Add a histogram's statistics and raw percentile values."""
        snap = histogram.snapshot()
        fields: dict[str, MeasureValue] = {
            "count": snap.count,
            "max": snap.max,
            "min": snap.min,
            "mean": snap.mean,
            "stddev": snap.stddev,
            "var": snap.variance,
        }
        for p in percentiles:
            fields[percentile_key(p)] = snap.percentile(p)

        self["kind"] = "histogram"
        self["histogram"] = fields

    def add_meter(self, meter: MeterPort) -> None:
        snap = meter.snapshot()
        self["kind"] = "meter"
        self["meter"] = {
            "count": snap.count,
            "rate1": snap.rate1,
            "rate5": snap.rate5,
            "rate15": snap.rate15,
            "mean": snap.rate_mean,
        }

    def add_timer(self, timer: TimerPort, percentiles: Sequence[float]) -> None:
        """Add a timer's statistics.

        Percentiles are reported in milliseconds. ``count``, ``max``,
        ``min``, ``mean``, ``stddev`` and ``var`` stay in nanoseconds, which
        is what downstream collector schemas expect.
        """
        snap = timer.snapshot()
        fields: dict[str, MeasureValue] = {
            "count": snap.count,
            "max": snap.max,
            "min": snap.min,
            "mean": snap.mean,
            "stddev": snap.stddev,
            "var": snap.variance,
        }
        for p in percentiles:
            fields[percentile_key(p)] = _nanos_to_millis(snap.percentile(p))

        self["kind"] = "timer"
        self["timer"] = fields
