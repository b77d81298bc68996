"""Transport adapters implementing TransportPort."""

from metricsflush.adapters.transport.batching import BatchingTransport
from metricsflush.adapters.transport.http import HttpTransport, resolve_headers
from metricsflush.adapters.transport.in_memory import InMemoryTransport
from metricsflush.adapters.transport.sqlite import SQLiteTransport

__all__ = [
    "BatchingTransport",
    "HttpTransport",
    "InMemoryTransport",
    "SQLiteTransport",
    "resolve_headers",
]
