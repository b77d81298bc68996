"""Context filter: an immutable ``Context -> Context`` transform.

Example:
    ```python
    from metricsflush.core.filtering import MetricsFilter
    from metricsflush.core.snapshot import MetricKind

    only_web = (
        MetricsFilter()
        .where_context("web")
        .where_kind(MetricKind.COUNTER, MetricKind.TIMER)
        .rename_context(lambda name: f"prod.{name}")
    )
    filtered = only_web(context)
    ```
"""

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass

from metricsflush.core.snapshot import Context, MetricKind

NamePredicate = Callable[[str], bool]

_FIELD_BY_KIND = {
    MetricKind.APDEX: "apdex_scores",
    MetricKind.COUNTER: "counters",
    MetricKind.GAUGE: "gauges",
    MetricKind.HISTOGRAM: "histograms",
    MetricKind.METER: "meters",
    MetricKind.TIMER: "timers",
}


def _as_predicate(match: str | NamePredicate) -> NamePredicate:
    """Turn an exact name into an equality predicate."""
    if isinstance(match, str):
        return lambda name: name == match
    return match


@dataclass(frozen=True)
class MetricsFilter:
    """Filter applied to each context before translation.

    A filter with no predicates is the identity transform. Builder methods
    return a new filter; predicates of the same type are AND-ed together.
    """

    context_predicate: NamePredicate | None = None
    name_predicate: NamePredicate | None = None
    kinds: frozenset[MetricKind] | None = None
    rename: Callable[[str], str] | None = None

    def where_context(self, match: str | NamePredicate) -> "MetricsFilter":
        """Keep only contexts whose name matches."""
        predicate = _both(self.context_predicate, _as_predicate(match))
        return dataclasses.replace(self, context_predicate=predicate)

    def where_name(self, match: str | NamePredicate) -> "MetricsFilter":
        """Keep only sources whose metric name matches."""
        predicate = _both(self.name_predicate, _as_predicate(match))
        return dataclasses.replace(self, name_predicate=predicate)

    def where_kind(self, *kinds: MetricKind) -> "MetricsFilter":
        """Keep only the given measurement kinds."""
        allowed = frozenset(kinds)
        if self.kinds is not None:
            allowed &= self.kinds
        return dataclasses.replace(self, kinds=allowed)

    def rename_context(self, name: str | Callable[[str], str]) -> "MetricsFilter":
        """Change the display name of every context passing the filter."""
        if isinstance(name, str):
            new_name = name
            return dataclasses.replace(self, rename=lambda _: new_name)
        return dataclasses.replace(self, rename=name)

    def __call__(self, context: Context) -> Context:
        """Return a filtered copy of the context; the input is not mutated."""
        if self.context_predicate is not None and not self.context_predicate(
            context.name
        ):
            return Context(name=context.name)

        changes: dict[str, object] = {}
        for kind, field_name in _FIELD_BY_KIND.items():
            sources = context.collection(kind)
            if self.kinds is not None and kind not in self.kinds:
                changes[field_name] = ()
            elif self.name_predicate is not None:
                name_predicate = self.name_predicate
                changes[field_name] = tuple(
                    source
                    for source in sources
                    if name_predicate(source.name)  # type: ignore[attr-defined]
                )
        if self.rename is not None:
            changes["name"] = self.rename(context.name)

        if not changes:
            return context
        return dataclasses.replace(context, **changes)  # type: ignore[arg-type]


def _both(
    first: NamePredicate | None, second: NamePredicate
) -> NamePredicate:
    """AND two predicates, treating None as always-true."""
    if first is None:
        return second
    return lambda name: first(name) and second(name)
