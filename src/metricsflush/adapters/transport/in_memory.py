"""In-memory transport adapter."""

from collections.abc import Sequence

from metricsflush.core.models import Record


class InMemoryTransport:
    """In-memory implementation of TransportPort.

    Keeps every submitted batch in a list. Suitable for testing and
    local inspection where nothing needs to leave the process.
    """

    def __init__(self) -> None:
        self.batches: list[tuple[str, list[Record]]] = []
        self.closed = False

    async def put_records(self, namespace: str, records: Sequence[Record]) -> None:
        """Store one batch of records."""
        self.batches.append((namespace, list(records)))

    async def close(self) -> None:
        """Mark the transport closed."""
        self.closed = True

    @property
    def records(self) -> list[Record]:
        """All submitted records across batches, in submission order."""
        return [record for _, batch in self.batches for record in batch]
