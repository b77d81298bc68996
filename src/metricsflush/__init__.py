"""metricsflush: translate metrics snapshots into records and ship them."""

from metricsflush.core.exceptions import (
    ConfigurationError,
    MetricsFlushError,
    ReporterClosedError,
    TransportError,
)
from metricsflush.core.filtering import MetricsFilter
from metricsflush.core.models import Dimension, Record, StatisticSet
from metricsflush.core.snapshot import Context, MetricKind, Snapshot
from metricsflush.reporter import MetricsReporter, ReporterOptions

__all__ = [
    "ConfigurationError",
    "Context",
    "Dimension",
    "MetricKind",
    "MetricsFilter",
    "MetricsFlushError",
    "MetricsReporter",
    "Record",
    "ReporterClosedError",
    "ReporterOptions",
    "Snapshot",
    "StatisticSet",
    "TransportError",
]
