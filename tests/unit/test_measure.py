"""Tests for the Measure builder."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from logstash_reporter.core.measure import Measure, percentile_key
from logstash_reporter.metrics.instruments import (
    Counter,
    Gauge,
    GaugeFloat64,
    Histogram,
    Meter,
    Timer,
)

pytestmark = [pytest.mark.core, pytest.mark.tier(0)]

_segment = st.text(alphabet=st.characters(blacklist_characters="."), max_size=8)


def _identifier_keys(measure: Measure) -> list[str]:
    return [key for key in measure if key.startswith("identifier")]


@pytest.mark.tra("Measure.Create.Identifiers")
class TestMeasureCreate:
    """Tests for Measure.create()."""

    def test_single_segment_name(self) -> None:
        """A name without dots yields identifier0 only."""
        measure = Measure.create("dummycounter", None)
        assert measure == {"identifier0": "dummycounter"}

    def test_dotted_name_is_split_in_order(self) -> None:
        """Each dot-separated segment becomes identifier<index>."""
        measure = Measure.create("test_counter.i1.i2.i3", None)
        assert measure == {
            "identifier0": "test_counter",
            "identifier1": "i1",
            "identifier2": "i2",
            "identifier3": "i3",
        }

    def test_empty_name_yields_empty_identifier(self) -> None:
        """An empty name still produces identifier0."""
        assert Measure.create("", None) == {"identifier0": ""}

    def test_empty_segments_are_kept(self) -> None:
        """Consecutive dots keep the empty segment between them."""
        measure = Measure.create("a..b", None)
        assert measure == {"identifier0": "a", "identifier1": "", "identifier2": "b"}

    def test_default_values_are_added(self) -> None:
        """Default values appear next to the identifiers."""
        measure = Measure.create("cpu", {"client": "dummy-client", "metric": "doc"})
        assert measure == {
            "identifier0": "cpu",
            "client": "dummy-client",
            "metric": "doc",
        }

    def test_default_values_overwrite_identifiers(self) -> None:
        """A default value named like an identifier replaces it."""
        measure = Measure.create("a.b", {"identifier1": "override"})
        assert measure["identifier0"] == "a"
        assert measure["identifier1"] == "override"

    def test_default_values_are_not_mutated(self) -> None:
        """Building a measure leaves the default mapping untouched."""
        defaults = {"client": "x"}
        measure = Measure.create("a", defaults)
        measure.add_counter(Counter())
        assert defaults == {"client": "x"}

    @given(segments=st.lists(_segment, min_size=1, max_size=10))
    def test_identifier_count_matches_segments(self, segments: list[str]) -> None:
        """There is exactly one identifier key per segment, in order."""
        measure = Measure.create(".".join(segments), None)
        keys = _identifier_keys(measure)
        assert keys == [f"identifier{i}" for i in range(len(segments))]
        assert [measure[k] for k in keys] == segments


@pytest.mark.tra("Measure.PercentileKey")
class TestPercentileKey:
    """Tests for percentile_key()."""

    @pytest.mark.parametrize(
        ("p", "expected"),
        [
            (0.50, "p50"),
            (0.75, "p75"),
            (0.95, "p95"),
            (0.99, "p99"),
            (0.999, "p99_9"),
            (1.0, "p100"),
            (0.0, "p0"),
        ],
    )
    def test_known_keys(self, p: float, expected: str) -> None:
        """Common quantiles render as the collector expects."""
        assert percentile_key(p) == expected

    @given(p=st.floats(min_value=0.0, max_value=1.0))
    def test_key_has_no_decimal_point(self, p: float) -> None:
        """Keys never contain a dot, so they stay valid field names."""
        key = percentile_key(p)
        assert key.startswith("p")
        assert "." not in key


@pytest.mark.tra("Measure.AddScalar")
class TestScalarKinds:
    """Tests for counters and gauges."""

    def test_add_counter(self) -> None:
        """Counter count is stored under 'counter'."""
        counter = Counter()
        counter.inc(8)
        measure = Measure()
        measure.add_counter(counter)
        assert measure == {"kind": "counter", "counter": 8}

    def test_add_gauge(self) -> None:
        """Gauge value is stored as an integer."""
        gauge = Gauge()
        gauge.update(8)
        measure = Measure()
        measure.add_gauge(gauge)
        assert measure == {"kind": "gauge", "gauge": 8}
        assert isinstance(measure["gauge"], int)

    def test_add_gauge_float64(self) -> None:
        """Float gauge value is stored as a float."""
        gauge = GaugeFloat64()
        gauge.update(7.7)
        measure = Measure()
        measure.add_gauge_float64(gauge)
        assert measure == {"kind": "gauge64", "gauge64": 7.7}
        assert isinstance(measure["gauge64"], float)

    def test_gauge_reflects_last_update(self) -> None:
        """Only the most recent gauge value is reported."""
        gauge = Gauge()
        gauge.update(1)
        gauge.update(42)
        measure = Measure()
        measure.add_gauge(gauge)
        assert measure["gauge"] == 42

    def test_kind_is_merged_over_identifiers(self) -> None:
        """Kind fields are added without removing identifiers or defaults."""
        counter = Counter()
        counter.inc(6)
        measure = Measure.create("dummycounter", {"client": "dummy-client"})
        measure.add_counter(counter)
        assert measure == {
            "identifier0": "dummycounter",
            "client": "dummy-client",
            "kind": "counter",
            "counter": 6,
        }


@pytest.mark.tra("Measure.AddHistogram")
class TestAddHistogram:
    """Tests for Measure.add_histogram()."""

    def test_empty_histogram_reports_zeros(self, percentiles: tuple[float, ...]) -> None:
        """A histogram without samples reports zero for every field."""
        measure = Measure()
        measure.add_histogram(Histogram(), percentiles)
        assert measure == {
            "kind": "histogram",
            "histogram": {
                "count": 0,
                "max": 0,
                "min": 0,
                "mean": 0.0,
                "stddev": 0.0,
                "var": 0.0,
                "p50": 0.0,
                "p75": 0.0,
                "p95": 0.0,
                "p99": 0.0,
                "p99_9": 0.0,
            },
        }

    def test_histogram_statistics(self) -> None:
        """Statistics and interpolated percentiles are computed from samples."""
        histogram = Histogram()
        for value in (1, 2, 3, 4):
            histogram.update(value)
        measure = Measure()
        measure.add_histogram(histogram, (0.5, 0.75, 0.95))

        fields = measure["histogram"]
        assert isinstance(fields, dict)
        assert fields["count"] == 4
        assert fields["min"] == 1
        assert fields["max"] == 4
        assert fields["mean"] == pytest.approx(2.5)
        assert fields["var"] == pytest.approx(1.25)
        assert fields["stddev"] == pytest.approx(1.25**0.5)
        assert fields["p50"] == pytest.approx(2.5)
        assert fields["p75"] == pytest.approx(3.75)
        assert fields["p95"] == pytest.approx(4.0)

    def test_only_configured_percentiles_are_reported(self) -> None:
        """No percentile keys appear beyond the configured ones."""
        measure = Measure()
        measure.add_histogram(Histogram(), (0.9,))
        fields = measure["histogram"]
        assert isinstance(fields, dict)
        assert sorted(k for k in fields if k.startswith("p")) == ["p90"]


@pytest.mark.tra("Measure.AddMeter")
class TestAddMeter:
    """Tests for Measure.add_meter()."""

    def test_meter_fields(self) -> None:
        """Meter count and rates are reported under 'meter'."""
        now = [0.0]
        meter = Meter(clock=lambda: now[0])
        meter.mark(10)
        now[0] = 2.0
        measure = Measure()
        measure.add_meter(meter)

        assert measure["kind"] == "meter"
        fields = measure["meter"]
        assert isinstance(fields, dict)
        assert set(fields) == {"count", "rate1", "rate5", "rate15", "mean"}
        assert fields["count"] == 10
        assert fields["mean"] == pytest.approx(5.0)
        # No tick has elapsed yet.
        assert fields["rate1"] == 0.0

    def test_unused_meter_reports_zeros(self) -> None:
        """A meter that never fired reports zero rates."""
        measure = Measure()
        measure.add_meter(Meter(clock=lambda: 0.0))
        assert measure["meter"] == {
            "count": 0,
            "rate1": 0.0,
            "rate5": 0.0,
            "rate15": 0.0,
            "mean": 0.0,
        }


@pytest.mark.tra("Measure.AddTimer")
class TestAddTimer:
    """Tests for Measure.add_timer()."""

    def test_empty_timer_reports_zeros(self, percentiles: tuple[float, ...]) -> None:
        """A timer without samples reports zero for every field."""
        measure = Measure()
        measure.add_timer(Timer(), percentiles)
        assert measure == {
            "kind": "timer",
            "timer": {
                "count": 0,
                "max": 0,
                "min": 0,
                "mean": 0.0,
                "stddev": 0.0,
                "var": 0.0,
                "p50": 0.0,
                "p75": 0.0,
                "p95": 0.0,
                "p99": 0.0,
                "p99_9": 0.0,
            },
        }

    def test_percentiles_are_milliseconds_other_fields_nanoseconds(self) -> None:
        """Percentiles are converted to ms; the other fields stay in ns."""
        timer = Timer()
        timer.update_ns(2_000_000)
        measure = Measure()
        measure.add_timer(timer, (0.5, 0.99))

        fields = measure["timer"]
        assert isinstance(fields, dict)
        assert fields["count"] == 1
        assert fields["max"] == 2_000_000
        assert fields["min"] == 2_000_000
        assert fields["mean"] == pytest.approx(2_000_000.0)
        assert fields["p50"] == pytest.approx(2.0)
        assert fields["p99"] == pytest.approx(2.0)

    def test_update_in_seconds_is_stored_as_nanoseconds(self) -> None:
        """Timer.update() takes seconds and records nanoseconds."""
        timer = Timer()
        timer.update(1.5)
        measure = Measure()
        measure.add_timer(timer, (0.5,))
        fields = measure["timer"]
        assert isinstance(fields, dict)
        assert fields["max"] == 1_500_000_000
        assert fields["p50"] == pytest.approx(1500.0)

    def test_percentile_is_truncated_to_whole_nanoseconds(self) -> None:
        """Fractional nanosecond percentiles are truncated before conversion."""
        timer = Timer()
        timer.update_ns(1)
        timer.update_ns(2)
        measure = Measure()
        # pos = 0.5 * 3 = 1.5 -> 1.5 ns, truncated to 1 ns.
        measure.add_timer(timer, (0.5,))
        fields = measure["timer"]
        assert isinstance(fields, dict)
        assert fields["p50"] == pytest.approx(1e-6)


@pytest.mark.tra("Measure.Describe")
class TestDescribe:
    """Each metric kind describes itself through the matching builder method."""

    @pytest.mark.parametrize(
        ("metric", "kind"),
        [
            (Counter(), "counter"),
            (Gauge(), "gauge"),
            (GaugeFloat64(), "gauge64"),
            (Histogram(), "histogram"),
            (Meter(), "meter"),
            (Timer(), "timer"),
        ],
    )
    def test_describe_sets_kind(self, metric: object, kind: str) -> None:
        """describe() sets the kind tag and the kind's field."""
        measure = Measure()
        metric.describe(measure, (0.5,))  # type: ignore[attr-defined]
        assert measure["kind"] == kind
        assert kind in measure
