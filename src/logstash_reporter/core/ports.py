"""Port interfaces for the reporter's collaborators.

These protocols define what the reporter needs from a metrics registry,
from the metric kinds it holds, and from the datagram transport. The core
depends only on these interfaces, not on concrete implementations.
"""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from logstash_reporter.core.models import (
    HistogramSnapshot,
    MeterSnapshot,
    TimerSnapshot,
)

if TYPE_CHECKING:
    from logstash_reporter.core.measure import Measure


@runtime_checkable
class CounterPort(Protocol):
    """A monotonically adjusted integer count."""

    def count(self) -> int: ...


@runtime_checkable
class GaugePort(Protocol):
    """An integer or floating point value that is set, not accumulated."""

    def value(self) -> int | float: ...


@runtime_checkable
class HistogramPort(Protocol):
    def snapshot(self) -> HistogramSnapshot: ...


@runtime_checkable
class MeterPort(Protocol):
    def snapshot(self) -> MeterSnapshot: ...


@runtime_checkable
class TimerPort(Protocol):
    def snapshot(self) -> TimerSnapshot: ...


@runtime_checkable
class DescribablePort(Protocol):
    """A metric that knows which Measure builder method describes it.

    Implementations call exactly one ``Measure.add_*`` method.
    """

    def describe(self, measure: "Measure", percentiles: Sequence[float]) -> None: ...


@runtime_checkable
class MetricsRegistryPort(Protocol):
    """Port for enumerating registered metrics.

    ``each`` must visit every currently registered metric exactly once per
    call and must be safe to call while metrics are being updated.
    """

    def each(self, callback: Callable[[str, object], None]) -> None:
        """Call ``callback(name, metric)`` for every registered metric."""
        ...


@runtime_checkable
class DatagramTransportPort(Protocol):
    """Port for a connectionless transport bound to one remote endpoint."""

    def send(self, data: bytes) -> None:
        """Send one datagram.

        Raises:
            SocketError: If the datagram could not be sent.
        """
        ...

    def close(self) -> None:
        """Release the underlying socket."""
        ...
