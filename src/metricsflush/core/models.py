"""Core output models: the uniform record shape handed to transports."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Dimension:
    """A single named dimension attached to a record.

    Attributes:
        name: Dimension key (e.g., "MeanRate").
        value: Dimension value, always rendered as a string.
    """

    name: str
    value: str


@dataclass(frozen=True)
class StatisticSet:
    """A statistical summary of a distribution.

    Attributes:
        minimum: Smallest observed value.
        maximum: Largest observed value.
        sum: Sum of all observed values.
        sample_count: Number of observations.
    """

    minimum: float
    maximum: float
    sum: float
    sample_count: float


@dataclass(frozen=True)
class Record:
    """A single time-stamped, dimensioned data point.

    A record carries either a scalar ``value`` or a ``statistics`` summary,
    never both and never neither.

    Attributes:
        name: Record name (the context display name, or a derived name).
        timestamp: Flush instant, timezone-aware UTC.
        value: Scalar value, or None when ``statistics`` is set.
        statistics: Statistical summary, or None when ``value`` is set.
        dimensions: Ordered dimensions, possibly empty.
    """

    name: str
    timestamp: datetime
    value: float | None = None
    statistics: StatisticSet | None = None
    dimensions: tuple[Dimension, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if (self.value is None) == (self.statistics is None):
            raise ValueError(
                f"Record {self.name!r} must carry exactly one of value or statistics"
            )
        # Accept any iterable of dimensions but always store an immutable tuple
        if not isinstance(self.dimensions, tuple):
            object.__setattr__(self, "dimensions", tuple(self.dimensions))

    @property
    def is_scalar(self) -> bool:
        """Return True if the record carries a scalar value."""
        return self.value is not None
