"""NDJSON encoder for records."""

import json
import math
from collections.abc import Iterable, Sequence
from typing import Any

from metricsflush.core.models import Record


def record_to_dict(record: Record) -> dict[str, Any]:
    """Convert a record to a JSON-serialisable dict.

    Scalar records carry a ``value`` key; summary records carry a
    ``statistics`` key. Dimensions become a list of name/value objects.
    """
    obj: dict[str, Any] = {
        "name": record.name,
        "timestamp": record.timestamp.isoformat(),
    }
    if record.statistics is not None:
        obj["statistics"] = {
            "minimum": record.statistics.minimum,
            "maximum": record.statistics.maximum,
            "sum": record.statistics.sum,
            "sample_count": record.statistics.sample_count,
        }
    else:
        # NaN is not valid JSON
        value = record.value
        obj["value"] = value if value is not None and math.isfinite(value) else None
    obj["dimensions"] = [{"name": d.name, "value": d.value} for d in record.dimensions]
    return obj


def encode_records(records: Iterable[Record]) -> str:
    """Encode records to newline-delimited JSON.

    Args:
        records: An iterable of Record objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no records.
    """
    lines = [json.dumps(record_to_dict(record)) for record in records]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"


class NdjsonFormatter:
    """FormatterPort implementation producing NDJSON."""

    media_type = "application/x-ndjson"

    def encode(self, records: Sequence[Record]) -> str:
        return encode_records(records)
