"""Port interfaces for reporter collaborators.

These protocols define the contracts that transport and formatter adapters
must implement. The reporter depends only on these interfaces, not on
concrete implementations.
"""

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from metricsflush.core.models import Record
from metricsflush.core.snapshot import Context

ContextFilter = Callable[[Context], Context]


@runtime_checkable
class TransportPort(Protocol):
    """Port for submitting record batches to a remote backend.

    Examples: InMemoryTransport, SQLiteTransport, HttpTransport.
    """

    async def put_records(self, namespace: str, records: Sequence[Record]) -> None:
        """Submit one batch of records under the given namespace.

        Raises:
            TransportError: If the batch could not be delivered.
        """
        ...

    async def close(self) -> None:
        """Release the underlying connection or session."""
        ...


@runtime_checkable
class FormatterPort(Protocol):
    """Port for rendering records into a wire payload."""

    media_type: str

    def encode(self, records: Sequence[Record]) -> str:
        """Render records to a text payload."""
        ...


TransportFactory = Callable[[str | None], TransportPort]
