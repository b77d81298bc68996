"""Snapshot shape consumed by the reporter.

A ``Snapshot`` is an ordered sequence of ``Context`` objects, each holding
collections of value sources for the six measurement kinds. Snapshots are
produced by the instrumentation layer right before a flush and are treated
as read-only here.

Counter and meter sources are special: their value is obtained through a
``ValueProvider`` that may reset the underlying accumulator on read. Callers
must go through ``read()`` exactly once per flush.
"""

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Protocol, TypeVar

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class MetricKind(Enum):
    """The six measurement kinds a context can hold."""

    APDEX = "apdex"
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    METER = "meter"
    TIMER = "timer"


# === Value objects ===


@dataclass(frozen=True)
class ApdexValue:
    """Apdex score with its sub-score breakdown."""

    score: float = 0.0
    satisfied: int = 0
    tolerating: int = 0
    frustrating: int = 0
    sample_size: int = 0


@dataclass(frozen=True)
class SetItem:
    """One distinct item tracked by a set counter."""

    item: str
    count: int
    percent: float = 0.0


@dataclass(frozen=True)
class CounterValue:
    """Current count plus the optional per-item breakdown."""

    count: int = 0
    items: tuple[SetItem, ...] = ()


@dataclass(frozen=True)
class HistogramValue:
    """Summary of a sampled distribution."""

    count: int = 0
    sum: float = 0.0
    min: float = 0.0
    max: float = 0.0
    mean: float = 0.0
    median: float = 0.0
    std_dev: float = 0.0


@dataclass(frozen=True)
class MeterValue:
    """Event count and exponentially-weighted rates."""

    count: int = 0
    mean_rate: float = 0.0
    one_minute_rate: float = 0.0
    five_minute_rate: float = 0.0
    fifteen_minute_rate: float = 0.0


@dataclass(frozen=True)
class TimerValue:
    """Invocation rate plus the duration distribution."""

    rate: MeterValue = field(default_factory=MeterValue)
    histogram: HistogramValue = field(default_factory=HistogramValue)


# === Value providers ===


class ValueProvider(Protocol[T_co]):
    """Read access to a live accumulator, optionally resetting it."""

    def get_value(self, reset_metric: bool = False) -> T_co:
        """Return the current value, resetting the accumulator if asked."""
        ...


class ConstantProvider(Generic[T]):
    """Provider returning a fixed value; resetting has no effect."""

    def __init__(self, value: T) -> None:
        self._value = value

    def get_value(self, reset_metric: bool = False) -> T:
        return self._value


class CounterProvider:
    """Thread-safe in-process counter with per-item tracking.

    ``get_value(reset_metric=True)`` returns the current value and zeroes
    the counter under a single lock acquisition, so no increment is lost
    between the read and the reset.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._count = 0
        self._items: dict[str, int] = {}

    def increment(self, amount: int = 1, item: str | None = None) -> None:
        """Increment the counter, optionally attributing it to an item."""
        with self._lock:
            self._count += amount
            if item is not None:
                self._items[item] = self._items.get(item, 0) + amount

    def decrement(self, amount: int = 1, item: str | None = None) -> None:
        """Decrement the counter, optionally attributing it to an item."""
        self.increment(-amount, item)

    def get_value(self, reset_metric: bool = False) -> CounterValue:
        with self._lock:
            value = _counter_value(self._count, self._items)
            if reset_metric:
                self._count = 0
                self._items = {}
        return value


def _counter_value(count: int, items: dict[str, int]) -> CounterValue:
    """Build a CounterValue with per-item percentages of the total."""
    set_items = tuple(
        SetItem(
            item=name,
            count=item_count,
            percent=(item_count / count * 100.0) if count else 0.0,
        )
        for name, item_count in items.items()
    )
    return CounterValue(count=count, items=set_items)


# === Value sources ===


@dataclass(frozen=True)
class ApdexValueSource:
    name: str
    value: ApdexValue


@dataclass(frozen=True)
class CounterValueSource:
    """A counter as seen by the reporter.

    Attributes:
        name: Metric name.
        provider: Accumulator the value is read from.
        reset_on_reporting: Reset the accumulator when it is read.
        report_set_items: Emit one dimension per tracked item.
    """

    name: str
    provider: ValueProvider[CounterValue]
    reset_on_reporting: bool = False
    report_set_items: bool = False

    def read(self) -> CounterValue:
        """Read the counter, applying the reset-on-reporting flag."""
        return self.provider.get_value(self.reset_on_reporting)


@dataclass(frozen=True)
class GaugeValueSource:
    name: str
    value: float


@dataclass(frozen=True)
class HistogramValueSource:
    name: str
    value: HistogramValue


@dataclass(frozen=True)
class MeterValueSource:
    """A meter as seen by the reporter.

    Attributes:
        name: Metric name.
        provider: Accumulator the rates are read from.
        reset_on_reporting: Reset the accumulator when it is read.
    """

    name: str
    provider: ValueProvider[MeterValue]
    reset_on_reporting: bool = False

    def read(self) -> MeterValue:
        """Read the meter, applying the reset-on-reporting flag."""
        return self.provider.get_value(self.reset_on_reporting)


@dataclass(frozen=True)
class TimerValueSource:
    name: str
    value: TimerValue


# === Snapshot ===


@dataclass(frozen=True)
class Context:
    """A named grouping of measurement sources.

    Collections are stored as tuples; iteration order is insertion order.
    """

    name: str
    apdex_scores: tuple[ApdexValueSource, ...] = ()
    counters: tuple[CounterValueSource, ...] = ()
    gauges: tuple[GaugeValueSource, ...] = ()
    histograms: tuple[HistogramValueSource, ...] = ()
    meters: tuple[MeterValueSource, ...] = ()
    timers: tuple[TimerValueSource, ...] = ()

    def collection(self, kind: MetricKind) -> tuple[object, ...]:
        """Return the source collection for the given kind."""
        return {
            MetricKind.APDEX: self.apdex_scores,
            MetricKind.COUNTER: self.counters,
            MetricKind.GAUGE: self.gauges,
            MetricKind.HISTOGRAM: self.histograms,
            MetricKind.METER: self.meters,
            MetricKind.TIMER: self.timers,
        }[kind]

    @property
    def is_empty(self) -> bool:
        """Return True if the context holds no sources at all."""
        return not any(self.collection(kind) for kind in MetricKind)


@dataclass(frozen=True)
class Snapshot:
    """The full measurement state at one instant."""

    contexts: tuple[Context, ...] = ()

    @classmethod
    def of(cls, contexts: Iterable[Context]) -> "Snapshot":
        """Build a snapshot from any iterable of contexts."""
        return cls(contexts=tuple(contexts))
