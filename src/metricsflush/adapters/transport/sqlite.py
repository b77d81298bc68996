"""SQLite transport adapter.

Persists submitted records to a local SQLite database using aiosqlite.
Useful as a durable local sink and for inspecting what a flush produced.
"""

import asyncio
import json
import math
import sqlite3
from collections.abc import AsyncIterable, AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import aiosqlite

from metricsflush.core.exceptions import TransportError
from metricsflush.core.models import Dimension, Record, StatisticSet

_RECORDS_SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    namespace TEXT NOT NULL,
    name TEXT NOT NULL,
    timestamp REAL NOT NULL,
    kind TEXT NOT NULL,
    value REAL,
    minimum REAL,
    maximum REAL,
    sum REAL,
    sample_count REAL,
    dimensions TEXT NOT NULL DEFAULT '[]'
);
CREATE INDEX IF NOT EXISTS idx_records_timestamp ON records(timestamp);
"""

_INSERT_RECORD = """
INSERT INTO records
    (namespace, name, timestamp, kind, value, minimum, maximum, sum, sample_count,
     dimensions)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""

_SELECT_RECORDS_SINCE = """
SELECT name, timestamp, kind, value, minimum, maximum, sum, sample_count, dimensions
FROM records
WHERE timestamp > ?
ORDER BY id ASC
"""

_COUNT_RECORDS = """
SELECT COUNT(*) FROM records
"""

_SCALAR = "scalar"
_STATISTICS = "statistics"


def _safe_json_loads(data: str) -> list[Any]:
    """Parse a JSON array, returning an empty list on decode error."""
    try:
        result = json.loads(data)
    except json.JSONDecodeError:
        return []
    return result if isinstance(result, list) else []


def _nan_if_null(number: float | None) -> float:
    """SQLite stores NaN as NULL; map it back."""
    return math.nan if number is None else number


def _to_row(namespace: str, record: Record) -> tuple[Any, ...]:
    stats = record.statistics
    return (
        namespace,
        record.name,
        record.timestamp.timestamp(),
        _SCALAR if stats is None else _STATISTICS,
        record.value,
        stats.minimum if stats else None,
        stats.maximum if stats else None,
        stats.sum if stats else None,
        stats.sample_count if stats else None,
        json.dumps([[d.name, d.value] for d in record.dimensions]),
    )


def _from_row(row: sqlite3.Row | aiosqlite.Row) -> Record:
    name, timestamp, kind, value, minimum, maximum, total, sample_count, dims = row
    statistics = None
    if kind == _STATISTICS:
        statistics = StatisticSet(
            minimum=_nan_if_null(minimum),
            maximum=_nan_if_null(maximum),
            sum=_nan_if_null(total),
            sample_count=_nan_if_null(sample_count),
        )
        value = None
    else:
        value = _nan_if_null(value)
    return Record(
        name=name,
        timestamp=datetime.fromtimestamp(timestamp, UTC),
        value=value,
        statistics=statistics,
        dimensions=tuple(Dimension(name=k, value=v) for k, v in _safe_json_loads(dims)),
    )


class SQLiteTransport:
    """SQLite implementation of TransportPort.

    Each ``put_records`` call is written in a single transaction. Uses WAL
    mode for file databases. For :memory: databases a persistent connection
    is maintained since in-memory databases are connection-scoped in SQLite.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._initialized = False
        self._init_lock: asyncio.Lock | None = None
        self._persistent_conn: aiosqlite.Connection | None = None

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the initialization lock (lazy to avoid event loop issues)."""
        if self._init_lock is None:
            self._init_lock = asyncio.Lock()
        return self._init_lock

    async def _ensure_initialized(self) -> None:
        """Initialize database schema once."""
        if self._initialized:
            return
        async with self._get_lock():
            if self._initialized:
                return
            if self._db_path == ":memory:":
                self._persistent_conn = await aiosqlite.connect(":memory:")
                await self._persistent_conn.executescript(_RECORDS_SCHEMA)
            else:
                async with aiosqlite.connect(self._db_path) as db:
                    await db.execute("PRAGMA journal_mode=WAL")
                    await db.executescript(_RECORDS_SCHEMA)
            self._initialized = True

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection, closing it afterwards for file databases."""
        await self._ensure_initialized()
        if self._persistent_conn is not None:
            yield self._persistent_conn
            return
        db = await aiosqlite.connect(self._db_path)
        try:
            yield db
        finally:
            await db.close()

    async def put_records(self, namespace: str, records: Sequence[Record]) -> None:
        """Write one batch of records.

        Raises:
            TransportError: If the database rejects the write.
        """
        try:
            async with self._connection() as db:
                await db.executemany(
                    _INSERT_RECORD, [_to_row(namespace, r) for r in records]
                )
                await db.commit()
        except sqlite3.Error as exc:
            raise TransportError(f"Failed to write records: {exc}") from exc

    async def read(self, since: float = 0) -> AsyncIterable[Record]:
        """Read records with a timestamp after ``since`` in write order."""
        async with self._connection() as db:
            async with db.execute(_SELECT_RECORDS_SINCE, (since,)) as cursor:
                async for row in cursor:
                    yield _from_row(row)

    async def count(self) -> int:
        """Return total number of stored records."""
        async with self._connection() as db:
            async with db.execute(_COUNT_RECORDS) as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    async def close(self) -> None:
        """Close the persistent connection (for :memory: databases)."""
        if self._persistent_conn is not None:
            await self._persistent_conn.close()
            self._persistent_conn = None
            self._initialized = False
