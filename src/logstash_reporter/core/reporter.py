"""Reporter: snapshots a registry and ships one JSON datagram per metric."""

import threading
import time
from collections.abc import Callable, Mapping, Sequence

from logstash_reporter.adapters.logging import get_logger, log_cycle_error
from logstash_reporter.adapters.transport.udp import UDPTransport
from logstash_reporter.core.encoding import encode_measure
from logstash_reporter.core.exceptions import EncodeError
from logstash_reporter.core.measure import Measure
from logstash_reporter.core.models import (
    DEFAULT_PERCENTILES,
    WIRE_VERSION,
    MeasureValue,
    ReporterConfig,
)
from logstash_reporter.core.ports import (
    DatagramTransportPort,
    DescribablePort,
    MetricsRegistryPort,
)
from logstash_reporter.metrics.registry import default_registry

logger = get_logger(__name__)

ErrorSink = Callable[[BaseException], None]


class Reporter:
    """Periodically sends every metric of a registry to a UDP collector.

    Example:
        ```python
        from logstash_reporter import Reporter, default_registry

        default_registry.counter("jobs.done").inc()
        reporter = Reporter(None, "logstash:1984", {"client": "worker"})
        reporter.start(interval=10.0)
        ...
        reporter.close()
        ```
    """

    def __init__(
        self,
        registry: MetricsRegistryPort | None,
        address: str,
        default_values: Mapping[str, MeasureValue] | None = None,
        percentiles: Sequence[float] | None = None,
        transport: DatagramTransportPort | None = None,
    ) -> None:
        """Initialize the reporter and open its transport.

        Args:
            registry: Registry to report. None selects the default registry.
            address: Collector address as ``host:port``.
            default_values: Fields added to every document. If None, only
                the metric data is sent.
            percentiles: Quantiles for histograms and timers. Defaults to
                0.50, 0.75, 0.95, 0.99 and 0.999.
            transport: Pre-built transport; when given, ``address`` is kept
                for reference only and no socket is opened.

        Raises:
            AddressResolutionError: If ``address`` cannot be resolved.
            SocketError: If the UDP socket cannot be opened.
        """
        if registry is None:
            registry = default_registry
        self.registry = registry
        self.address = address
        self.transport = transport if transport is not None else UDPTransport(address)
        self.default_values = dict(default_values) if default_values else None
        self.percentiles = tuple(
            DEFAULT_PERCENTILES if percentiles is None else percentiles
        )
        self.version = WIRE_VERSION
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None

    @classmethod
    def from_config(
        cls,
        config: ReporterConfig,
        registry: MetricsRegistryPort | None = None,
    ) -> "Reporter":
        return cls(
            registry,
            config.address,
            default_values=config.default_values,
            percentiles=config.percentiles,
        )

    def build_measures(self) -> list[Measure]:
        """Snapshot every registered metric into a Measure."""
        measures: list[Measure] = []

        def visit(name: str, metric: object) -> None:
            measure = Measure.create(name, self.default_values)
            if isinstance(metric, DescribablePort):
                metric.describe(measure, self.percentiles)
            else:
                logger.debug(
                    "metric %r (%s) has no describe(); sending identifiers only",
                    name,
                    type(metric).__name__,
                )
            measures.append(measure)

        self.registry.each(visit)
        return measures

    def flush_once(self) -> int:
        """Send a snapshot of the registry, one datagram per metric.

        Metrics whose measure cannot be encoded are skipped. The first
        failed send aborts the flush; metrics after it are not sent.

        Returns:
            Number of datagrams sent.

        Raises:
            SocketError: If a send fails.
        """
        sent = 0
        for measure in self.build_measures():
            try:
                payload = encode_measure(measure)
            except EncodeError as exc:
                logger.debug("skipping metric %s: %s", _measure_name(measure), exc)
                continue
            self.transport.send(payload)
            sent += 1
        logger.debug("flushed %d metrics to %s", sent, self.address)
        return sent

    def flush_each(
        self,
        interval: float,
        stop: threading.Event | None = None,
        on_error: ErrorSink | None = None,
    ) -> None:
        """Flush every ``interval`` seconds until ``stop`` is set.

        Blocks the calling thread. Without ``stop`` it never returns. Cycles
        start on a fixed period measured from the loop's start, so a slow
        flush does not push later cycles back; ticks missed while a flush
        overran are dropped. Errors from a cycle, including unexpected ones,
        are logged and passed to ``on_error``; the loop then waits for the
        next cycle.

        Args:
            interval: Seconds between flushes.
            stop: Event that ends the loop when set.
            on_error: Called with the exception of each failed cycle.
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        stop = stop if stop is not None else threading.Event()
        next_at = time.monotonic() + interval
        while not stop.wait(max(0.0, next_at - time.monotonic())):
            try:
                self.flush_once()
            except Exception as exc:
                log_cycle_error(logger, exc)
                if on_error is not None:
                    _report(on_error, exc)
            next_at = _next_tick(next_at, interval, time.monotonic())

    def start(self, interval: float, on_error: ErrorSink | None = None) -> threading.Thread:
        """Run ``flush_each`` on a daemon thread.

        Raises:
            RuntimeError: If the reporter is already running, including a
                previous loop that did not finish within ``stop``'s timeout.
        """
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("reporter is already running")
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self.flush_each,
            args=(interval, self._stop_event, on_error),
            name="logstash-reporter",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def stop(self, timeout: float | None = None) -> bool:
        """Stop the background loop started by ``start``.

        Safe to call from inside the loop thread (e.g. from an error sink);
        the loop then ends once the current cycle returns.

        Returns:
            True if no loop thread is left running.
        """
        thread = self._thread
        if self._stop_event is not None:
            self._stop_event.set()
        if thread is None:
            return True
        if thread is threading.current_thread():
            return False
        thread.join(timeout)
        if thread.is_alive():
            logger.warning("reporter loop still running after stop timeout")
            return False
        self._thread = None
        self._stop_event = None
        return True

    def close(self, timeout: float | None = None) -> None:
        """Stop any background loop and close the transport.

        Args:
            timeout: Seconds to wait for the loop thread. The transport is
                closed even if the thread is still inside a send.
        """
        self.stop(timeout)
        self.transport.close()

    def __enter__(self) -> "Reporter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _next_tick(next_at: float, interval: float, now: float) -> float:
    """Advance a deadline by one period, skipping periods already past."""
    next_at += interval
    if next_at <= now:
        next_at += ((now - next_at) // interval + 1) * interval
    return next_at


def _measure_name(measure: Measure) -> str:
    segments = []
    index = 0
    while f"identifier{index}" in measure:
        segments.append(str(measure[f"identifier{index}"]))
        index += 1
    return ".".join(segments)


def _report(on_error: ErrorSink, exc: BaseException) -> None:
    # A failing sink must not end the loop either.
    try:
        on_error(exc)
    except Exception:
        logger.exception("error sink raised while reporting a flush failure")
