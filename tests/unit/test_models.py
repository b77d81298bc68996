"""Tests for the record model."""

import dataclasses
from datetime import datetime

import pytest

from metricsflush.core.models import Dimension, Record, StatisticSet

pytestmark = [pytest.mark.tier(1)]

STATS = StatisticSet(minimum=1.0, maximum=3.0, sum=6.0, sample_count=3.0)


@pytest.mark.core
class TestRecord:
    """Tests for Record construction and invariants."""

    def test_scalar_record(self, now: datetime) -> None:
        """A record can carry a scalar value."""
        record = Record(name="web", timestamp=now, value=42.0)
        assert record.value == 42.0
        assert record.statistics is None
        assert record.is_scalar

    def test_statistics_record(self, now: datetime) -> None:
        """A record can carry a statistical summary."""
        record = Record(name="web", timestamp=now, statistics=STATS)
        assert record.statistics == STATS
        assert record.value is None
        assert not record.is_scalar

    def test_rejects_both_value_and_statistics(self, now: datetime) -> None:
        """A record cannot carry a scalar and a summary at once."""
        with pytest.raises(ValueError, match="exactly one"):
            Record(name="web", timestamp=now, value=1.0, statistics=STATS)

    def test_rejects_neither_value_nor_statistics(self, now: datetime) -> None:
        """A record must carry a scalar or a summary."""
        with pytest.raises(ValueError, match="exactly one"):
            Record(name="web", timestamp=now)

    def test_zero_is_a_valid_scalar(self, now: datetime) -> None:
        """A zero value counts as a populated scalar."""
        record = Record(name="web", timestamp=now, value=0.0)
        assert record.is_scalar

    def test_dimensions_default_to_empty(self, now: datetime) -> None:
        """Dimensions default to an empty tuple."""
        record = Record(name="web", timestamp=now, value=1.0)
        assert record.dimensions == ()

    def test_dimensions_list_is_stored_as_tuple(self, now: datetime) -> None:
        """Dimension lists are frozen into a tuple, keeping order."""
        dims = [Dimension("b", "2"), Dimension("a", "1")]
        record = Record(name="web", timestamp=now, value=1.0, dimensions=dims)  # type: ignore[arg-type]
        assert record.dimensions == (Dimension("b", "2"), Dimension("a", "1"))

    def test_record_is_immutable(self, now: datetime) -> None:
        """Records are frozen."""
        record = Record(name="web", timestamp=now, value=1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.value = 2.0  # type: ignore[misc]
