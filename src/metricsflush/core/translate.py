"""Per-kind translators turning value sources into records.

Every translator is a pure function of ``(source, context name, timestamp)``
except the counter and meter translators, which read their source exactly
once through ``read()`` and may therefore reset the underlying accumulator.
All records of one context share the context's display name.
"""

import math
from collections.abc import Iterator
from datetime import datetime

from metricsflush.core.models import Dimension, Record, StatisticSet
from metricsflush.core.snapshot import (
    ApdexValueSource,
    Context,
    CounterValueSource,
    GaugeValueSource,
    HistogramValue,
    HistogramValueSource,
    MeterValue,
    MeterValueSource,
    TimerValueSource,
)

APDEX_SUBSCORES = ("Satisfied", "Tolerating", "Frustrating")

RATE_DIMENSIONS = ("MeanRate", "OneMinuteRate", "FiveMinuteRate", "FifteenMinuteRate")


def format_number(number: int | float) -> str:
    """Render a number as a dimension value."""
    if isinstance(number, float):
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "Infinity" if number > 0 else "-Infinity"
        if number.is_integer():
            return str(int(number))
        return repr(number)
    return str(number)


def _finite(number: float) -> float:
    return float(number) if math.isfinite(number) else 0.0


def _statistics(histogram: HistogramValue) -> StatisticSet:
    """Summarise a histogram; empty or non-finite fields collapse to zero."""
    if histogram.count == 0:
        return StatisticSet(minimum=0.0, maximum=0.0, sum=0.0, sample_count=0.0)
    return StatisticSet(
        minimum=_finite(histogram.min),
        maximum=_finite(histogram.max),
        sum=_finite(histogram.sum),
        sample_count=float(histogram.count),
    )


def _rate_dimensions(rate: MeterValue) -> tuple[Dimension, ...]:
    values = (
        rate.mean_rate,
        rate.one_minute_rate,
        rate.five_minute_rate,
        rate.fifteen_minute_rate,
    )
    return tuple(
        Dimension(name=name, value=format_number(value))
        for name, value in zip(RATE_DIMENSIONS, values, strict=True)
    )


def translate_apdex(
    source: ApdexValueSource, context_name: str, now: datetime
) -> list[Record]:
    """Translate an Apdex score into one scalar record per sub-score."""
    value = source.value
    scores = (value.satisfied, value.tolerating, value.frustrating)
    return [
        Record(name=f"{context_name}-{subscore}", timestamp=now, value=float(score))
        for subscore, score in zip(APDEX_SUBSCORES, scores, strict=True)
    ]


def translate_counter(
    source: CounterValueSource, context_name: str, now: datetime
) -> Record:
    """Translate a counter into a scalar record of its current count.

    With ``report_set_items`` the record gets one dimension per tracked item,
    taken from the same read as the count.
    """
    value = source.read()
    dimensions: tuple[Dimension, ...] = ()
    if source.report_set_items:
        dimensions = tuple(
            Dimension(name=item.item, value=format_number(item.count))
            for item in value.items
        )
    return Record(
        name=context_name,
        timestamp=now,
        value=float(value.count),
        dimensions=dimensions,
    )


def translate_gauge(
    source: GaugeValueSource, context_name: str, now: datetime
) -> Record:
    """Translate a gauge into a scalar record of its current reading."""
    return Record(name=context_name, timestamp=now, value=float(source.value))


def translate_histogram(
    source: HistogramValueSource, context_name: str, now: datetime
) -> Record:
    """Translate a histogram into a statistical-summary record."""
    return Record(
        name=context_name, timestamp=now, statistics=_statistics(source.value)
    )


def translate_meter(
    source: MeterValueSource, context_name: str, now: datetime
) -> Record:
    """Translate a meter into a scalar mean-rate record with rate dimensions."""
    rate = source.read()
    return Record(
        name=context_name,
        timestamp=now,
        value=float(rate.mean_rate),
        dimensions=_rate_dimensions(rate),
    )


def translate_timer(
    source: TimerValueSource, context_name: str, now: datetime
) -> Record:
    """Translate a timer into a duration summary with invocation-rate dimensions."""
    return Record(
        name=context_name,
        timestamp=now,
        statistics=_statistics(source.value.histogram),
        dimensions=_rate_dimensions(source.value.rate),
    )


def translate_context(context: Context, now: datetime) -> Iterator[Record]:
    """Yield the records of every source in a context.

    Kinds are visited in a fixed order (apdex, counter, gauge, histogram,
    meter, timer); sources within a kind keep their snapshot order.
    """
    name = context.name
    for apdex in context.apdex_scores:
        yield from translate_apdex(apdex, name, now)
    for counter in context.counters:
        yield translate_counter(counter, name, now)
    for gauge in context.gauges:
        yield translate_gauge(gauge, name, now)
    for histogram in context.histograms:
        yield translate_histogram(histogram, name, now)
    for meter in context.meters:
        yield translate_meter(meter, name, now)
    for timer in context.timers:
        yield translate_timer(timer, name, now)
