"""Example: flushing live counters to SQLite on a fixed interval.

Run with:
    python examples/periodic_flush.py

Records accumulate in ./metrics.db; stop with Ctrl+C.
"""

import asyncio
import logging
import random

from metricsflush import Context, MetricsFilter, MetricsReporter, ReporterOptions, Snapshot
from metricsflush.adapters.transport import BatchingTransport, SQLiteTransport
from metricsflush.core.snapshot import (
    CounterProvider,
    CounterValueSource,
    GaugeValueSource,
)

requests = CounterProvider()


def take_snapshot() -> Snapshot:
    """Build the snapshot the reporter will translate."""
    return Snapshot.of(
        [
            Context(
                name="web",
                counters=(
                    CounterValueSource(
                        "requests",
                        requests,
                        reset_on_reporting=True,
                        report_set_items=True,
                    ),
                ),
                gauges=(GaugeValueSource("queue_depth", random.uniform(0, 10)),),
            )
        ]
    )


async def simulate_traffic() -> None:
    while True:
        requests.increment(item=random.choice(["GET", "POST"]))
        await asyncio.sleep(0.05)


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    options = ReporterOptions(
        transport_factory=lambda _: BatchingTransport(SQLiteTransport("metrics.db")),
        filter=MetricsFilter().rename_context(lambda name: f"example.{name}"),
    )
    traffic = asyncio.create_task(simulate_traffic())
    try:
        async with MetricsReporter(options) as reporter:
            while True:
                await asyncio.sleep(reporter.flush_interval.total_seconds())
                await reporter.flush(take_snapshot())
    finally:
        traffic.cancel()


if __name__ == "__main__":
    asyncio.run(main())
