"""Flush orchestrator: snapshot in, one batch of records out.

Example:
    ```python
    from metricsflush import MetricsReporter, ReporterOptions
    from metricsflush.adapters.transport import SQLiteTransport

    options = ReporterOptions(transport_factory=lambda _: SQLiteTransport("m.db"))
    async with MetricsReporter(options) as reporter:
        await reporter.flush(snapshot)
    ```
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from types import TracebackType

from metricsflush.core.exceptions import ConfigurationError, ReporterClosedError
from metricsflush.core.models import Record
from metricsflush.core.ports import (
    ContextFilter,
    FormatterPort,
    TransportFactory,
    TransportPort,
)
from metricsflush.core.snapshot import Snapshot
from metricsflush.core.translate import translate_context

NAMESPACE = "MetricsFlush"

DEFAULT_FLUSH_INTERVAL = timedelta(seconds=10)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class ReporterOptions:
    """Configuration for MetricsReporter.

    Attributes:
        transport_factory: Opens the transport; receives ``profile``.
        profile: Named credential profile, or None for ambient credentials.
        flush_interval: Interval the external scheduler should flush at.
                        Non-positive values fall back to the default.
        filter: Optional transform applied to every context before translation.
        formatter: Optional output formatter, held for callers that render
                   records themselves.
    """

    transport_factory: TransportFactory | None = None
    profile: str | None = None
    flush_interval: timedelta = timedelta(0)
    filter: ContextFilter | None = None
    formatter: FormatterPort | None = None


class MetricsReporter:
    """Translates snapshots into records and submits them to a transport.

    The transport handle is opened in the constructor and released by
    ``close()``. Apart from that handle the reporter keeps no state between
    flushes.
    """

    def __init__(
        self,
        options: ReporterOptions | None,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the reporter and open its transport.

        Args:
            options: Reporter configuration. Required.
            logger: Logger for diagnostics (default: "metricsflush.reporter").
            clock: Source of the per-flush timestamp (default: UTC now).

        Raises:
            ConfigurationError: If options or its transport factory is missing.
        """
        if options is None:
            raise ConfigurationError("options must not be None")
        if options.transport_factory is None:
            raise ConfigurationError("options.transport_factory must not be None")

        self._logger = logger or logging.getLogger("metricsflush.reporter")
        self._clock = clock
        self._transport: TransportPort = options.transport_factory(options.profile)
        self._closed = False

        self.flush_interval = (
            options.flush_interval
            if options.flush_interval > timedelta(0)
            else DEFAULT_FLUSH_INTERVAL
        )
        self.filter = options.filter
        self.formatter = options.formatter

        self._logger.info(
            "Using metrics reporter %s. FlushInterval: %s",
            type(self).__name__,
            self.flush_interval,
        )

    @property
    def closed(self) -> bool:
        """Return True once close() has been called."""
        return self._closed

    def translate(self, snapshot: Snapshot, now: datetime) -> list[Record]:
        """Translate every context of a snapshot into records.

        Contexts that yield no records simply contribute nothing.
        """
        records: list[Record] = []
        for context in snapshot.contexts:
            if self.filter is not None:
                context = self.filter(context)
            records.extend(translate_context(context, now))
        return records

    async def flush(
        self,
        snapshot: Snapshot | None,
        cancellation: asyncio.Event | None = None,
    ) -> bool:
        """Translate a snapshot and submit it in a single transport call.

        Args:
            snapshot: Measurement state to report.
            cancellation: Checked once before any work is done.

        Returns:
            False if cancellation was requested or the snapshot is absent,
            True otherwise (including when there was nothing to send).

        Raises:
            ReporterClosedError: If the reporter has been closed.
            TransportError: If the transport rejects the batch.
        """
        if (cancellation is not None and cancellation.is_set()) or snapshot is None:
            self._logger.debug("Flush skipped: cancelled or no snapshot")
            return False
        if self._closed:
            raise ReporterClosedError("Cannot flush a closed reporter")

        start = time.perf_counter()
        records = self.translate(snapshot, self._clock())

        if not records:
            self._logger.debug("Flush skipped: no records")
            return True

        await self._transport.put_records(NAMESPACE, records)
        elapsed = time.perf_counter() - start
        self._logger.debug(
            "Flushed %d records; elapsed: %.6fs",
            len(records),
            elapsed,
            extra={"records": len(records), "elapsed_seconds": elapsed},
        )
        return True

    async def close(self) -> None:
        """Release the transport. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self._transport.close()

    async def __aenter__(self) -> "MetricsReporter":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
