"""Batching transport that layers backend limits over another transport."""

import logging
from collections.abc import Sequence
from dataclasses import replace

from metricsflush.core.models import Record
from metricsflush.core.ports import TransportPort

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH_SIZE = 1000
DEFAULT_MAX_DIMENSIONS = 30


class BatchingTransport:
    """TransportPort wrapper enforcing batch-size and dimension limits.

    A submitted batch is split into consecutive chunks of at most
    ``max_batch_size`` records, each forwarded to the inner transport in
    order. Records with more than ``max_dimensions`` dimensions keep only
    the first ``max_dimensions``.

    Args:
        inner: Transport that receives the chunks.
        max_batch_size: Maximum records per inner call.
        max_dimensions: Maximum dimensions per record.
    """

    def __init__(
        self,
        inner: TransportPort,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        max_dimensions: int = DEFAULT_MAX_DIMENSIONS,
    ) -> None:
        if max_batch_size < 1:
            raise ValueError("max_batch_size must be at least 1")
        if max_dimensions < 0:
            raise ValueError("max_dimensions must not be negative")
        self._inner = inner
        self._max_batch_size = max_batch_size
        self._max_dimensions = max_dimensions

    def _limit_dimensions(self, record: Record) -> Record:
        if len(record.dimensions) <= self._max_dimensions:
            return record
        logger.warning(
            "Record %s has %d dimensions; keeping the first %d",
            record.name,
            len(record.dimensions),
            self._max_dimensions,
        )
        return replace(record, dimensions=record.dimensions[: self._max_dimensions])

    async def put_records(self, namespace: str, records: Sequence[Record]) -> None:
        """Forward records to the inner transport in bounded chunks."""
        limited = [self._limit_dimensions(record) for record in records]
        for start in range(0, len(limited), self._max_batch_size):
            await self._inner.put_records(
                namespace, limited[start : start + self._max_batch_size]
            )

    async def close(self) -> None:
        """Close the inner transport."""
        await self._inner.close()
