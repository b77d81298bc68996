"""Tests for the NDJSON record encoder."""

import json
import math
from datetime import datetime

import pytest

from metricsflush.core.encoding.ndjson import NdjsonFormatter, encode_records
from metricsflush.core.models import Dimension, Record, StatisticSet
from metricsflush.core.ports import FormatterPort

pytestmark = [pytest.mark.tier(1)]


@pytest.mark.core
class TestEncodeRecords:
    """Tests for encode_records()."""

    def test_empty_input_returns_empty_string(self) -> None:
        assert encode_records([]) == ""

    def test_scalar_record(self, now: datetime) -> None:
        record = Record(
            name="web", timestamp=now, value=42.0, dimensions=(Dimension("a", "1"),)
        )
        line = encode_records([record])
        assert line.endswith("\n")
        assert json.loads(line) == {
            "name": "web",
            "timestamp": "2024-01-15T12:30:00+00:00",
            "value": 42.0,
            "dimensions": [{"name": "a", "value": "1"}],
        }

    def test_statistics_record(self, now: datetime) -> None:
        record = Record(
            name="web", timestamp=now, statistics=StatisticSet(1.0, 2.0, 3.0, 2.0)
        )
        obj = json.loads(encode_records([record]))
        assert "value" not in obj
        assert obj["statistics"] == {
            "minimum": 1.0,
            "maximum": 2.0,
            "sum": 3.0,
            "sample_count": 2.0,
        }

    def test_nan_value_encodes_as_null(self, now: datetime) -> None:
        record = Record(name="web", timestamp=now, value=math.nan)
        assert json.loads(encode_records([record]))["value"] is None

    def test_one_line_per_record(self, now: datetime) -> None:
        records = [Record(name=f"r{i}", timestamp=now, value=float(i)) for i in range(3)]
        lines = encode_records(records).splitlines()
        assert [json.loads(line)["name"] for line in lines] == ["r0", "r1", "r2"]


@pytest.mark.core
class TestNdjsonFormatter:
    """Tests for NdjsonFormatter."""

    def test_implements_formatter_port(self) -> None:
        assert isinstance(NdjsonFormatter(), FormatterPort)

    def test_media_type(self) -> None:
        assert NdjsonFormatter().media_type == "application/x-ndjson"
