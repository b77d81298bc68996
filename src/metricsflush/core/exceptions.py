"""Exception hierarchy for metricsflush."""


class MetricsFlushError(Exception):
    """Base class for all metricsflush errors."""


class ConfigurationError(MetricsFlushError):
    """Raised when the reporter is constructed with missing inputs."""


class TransportError(MetricsFlushError):
    """Raised when a transport fails to submit a batch of records."""


class ReporterClosedError(MetricsFlushError):
    """Raised when flushing through a reporter that has been closed."""
