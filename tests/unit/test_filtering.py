"""Tests for MetricsFilter."""

import pytest

from metricsflush.core.filtering import MetricsFilter
from metricsflush.core.snapshot import (
    Context,
    GaugeValueSource,
    HistogramValue,
    HistogramValueSource,
    MetricKind,
)
from tests.helpers import counter_source

pytestmark = [pytest.mark.tier(1)]


def _context(name: str = "web") -> Context:
    return Context(
        name=name,
        counters=(counter_source("requests"), counter_source("errors")),
        gauges=(GaugeValueSource("requests_in_flight", 3.0),),
        histograms=(HistogramValueSource("latency", HistogramValue()),),
    )


@pytest.mark.core
class TestMetricsFilter:
    """Tests for MetricsFilter as a Context -> Context transform."""

    def test_empty_filter_is_identity(self) -> None:
        context = _context()
        assert MetricsFilter()(context) is context

    def test_where_context_by_name_keeps_match(self) -> None:
        context = _context("web")
        assert MetricsFilter().where_context("web")(context) == context

    def test_where_context_excludes_other_contexts(self) -> None:
        filtered = MetricsFilter().where_context("web")(_context("db"))
        assert filtered.name == "db"
        assert filtered.is_empty

    def test_where_context_with_predicate(self) -> None:
        flt = MetricsFilter().where_context(lambda name: name.startswith("w"))
        assert not flt(_context("web")).is_empty
        assert flt(_context("db")).is_empty

    def test_where_name_filters_every_collection(self) -> None:
        flt = MetricsFilter().where_name(lambda name: name.startswith("requests"))
        filtered = flt(_context())
        assert [c.name for c in filtered.counters] == ["requests"]
        assert [g.name for g in filtered.gauges] == ["requests_in_flight"]
        assert filtered.histograms == ()

    def test_where_kind_keeps_only_listed_kinds(self) -> None:
        filtered = MetricsFilter().where_kind(MetricKind.GAUGE)(_context())
        assert filtered.counters == ()
        assert filtered.histograms == ()
        assert len(filtered.gauges) == 1

    def test_where_kind_calls_intersect(self) -> None:
        flt = (
            MetricsFilter()
            .where_kind(MetricKind.GAUGE, MetricKind.COUNTER)
            .where_kind(MetricKind.COUNTER)
        )
        filtered = flt(_context())
        assert len(filtered.counters) == 2
        assert filtered.gauges == ()

    def test_predicates_are_combined(self) -> None:
        flt = MetricsFilter().where_name(lambda n: "e" in n).where_name("errors")
        assert [c.name for c in flt(_context()).counters] == ["errors"]

    def test_rename_context_with_string(self) -> None:
        filtered = MetricsFilter().rename_context("frontend")(_context())
        assert filtered.name == "frontend"
        assert len(filtered.counters) == 2

    def test_rename_context_with_callable(self) -> None:
        filtered = MetricsFilter().rename_context(str.upper)(_context("web"))
        assert filtered.name == "WEB"

    def test_does_not_mutate_source_context(self) -> None:
        context = _context()
        before = (context.name, context.counters, context.gauges)
        MetricsFilter().where_name("errors").rename_context("x")(context)
        assert (context.name, context.counters, context.gauges) == before

    def test_builders_return_new_filters(self) -> None:
        base = MetricsFilter()
        base.where_context("web")
        assert base.context_predicate is None

    def test_filtering_is_idempotent(self) -> None:
        flt = MetricsFilter().where_name("errors")
        once = flt(_context())
        assert flt(once) == once
