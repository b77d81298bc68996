"""Shared test fixtures for all test modules."""

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest
from tests.helpers import FLUSH_TIME

from metricsflush.adapters.transport.in_memory import InMemoryTransport
from metricsflush.reporter import MetricsReporter, ReporterOptions


@pytest.fixture
def now() -> datetime:
    """Fixed flush timestamp."""
    return FLUSH_TIME


@pytest.fixture
def records_db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for SQLite transport tests."""
    return str(tmp_path / "records.db")


@pytest.fixture
def transport() -> InMemoryTransport:
    """Fixture providing an empty in-memory transport."""
    return InMemoryTransport()


@pytest.fixture
def make_reporter(
    transport: InMemoryTransport,
) -> Callable[..., MetricsReporter]:
    """Factory fixture building reporters bound to the in-memory transport.

    Usage:
        def test_something(make_reporter):
            reporter = make_reporter(filter=MetricsFilter().where_context("web"))
    """

    def _make(**options: object) -> MetricsReporter:
        return MetricsReporter(
            ReporterOptions(transport_factory=lambda _: transport, **options),  # type: ignore[arg-type]
            clock=lambda: FLUSH_TIME,
        )

    return _make
