"""Builders and test doubles shared across test modules."""

from datetime import UTC, datetime

from metricsflush.core.snapshot import (
    ConstantProvider,
    CounterValue,
    CounterValueSource,
    MeterValue,
    MeterValueSource,
    SetItem,
)

FLUSH_TIME = datetime(2024, 1, 15, 12, 30, 0, tzinfo=UTC)


class ResettableMeter:
    """Meter provider double that counts reads and honours resets."""

    def __init__(self, value: MeterValue) -> None:
        self.value = value
        self.reads = 0

    def get_value(self, reset_metric: bool = False) -> MeterValue:
        self.reads += 1
        current = self.value
        if reset_metric:
            self.value = MeterValue()
        return current


class FailingTransport:
    """Transport double whose put_records always raises."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls = 0
        self.closed = False

    async def put_records(self, namespace, records) -> None:  # noqa: ANN001
        self.calls += 1
        raise self.error

    async def close(self) -> None:
        self.closed = True


def counter_source(
    name: str = "requests",
    count: int = 42,
    items: dict[str, int] | None = None,
    report_set_items: bool = False,
) -> CounterValueSource:
    """Build a counter source over a constant value."""
    set_items = tuple(SetItem(item=k, count=v) for k, v in (items or {}).items())
    return CounterValueSource(
        name=name,
        provider=ConstantProvider(CounterValue(count=count, items=set_items)),
        report_set_items=report_set_items,
    )


def meter_source(name: str = "hits", value: MeterValue | None = None) -> MeterValueSource:
    """Build a meter source over a constant value."""
    return MeterValueSource(name=name, provider=ConstantProvider(value or MeterValue()))
