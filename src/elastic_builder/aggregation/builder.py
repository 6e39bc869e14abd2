"""Named aggregation trees.

Entries live in an explicit tuple of (name, node) pairs: insertion order is
part of the output, and `sub_agg` always targets the last pair.

Example:
    aggregations().terms("a", "f").sub_agg(lambda b: b.avg("x", "p")).build()
    -> {"a": {"terms": {"field": "f"}, "aggs": {"x": {"avg": {"field": "p"}}}}}
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Unpack

from loguru import logger as log

from elastic_builder.query import conditional
from elastic_builder.types.dsl import (
    AggregationNode,
    CardinalityAggOptions,
    DateHistogramAggOptions,
    HistogramAggOptions,
    MetricAggOptions,
    PercentilesAggOptions,
    RangeAggOptions,
    TermsAggOptions,
)
from elastic_builder.utils.general import SubAggregationError, detach
from elastic_builder.utils.logs import trace_document

AggregationEntry = tuple[str, AggregationNode]


@dataclass(frozen=True, slots=True)
class AggregationBuilder:
    """An immutable, ordered set of named aggregations."""

    entries: tuple[AggregationEntry, ...] = ()

    def add(self, name: str, agg_type: str, field: str, options: dict[str, Any]) -> AggregationBuilder:
        """Append `{agg_type: {"field": field, **options}}` under `name`.

        Re-using a name drops the earlier entry, so the new one is last.
        """
        node: AggregationNode = {agg_type: {"field": field, **detach(options)}}
        # Redefinition moves the name last rather than keeping its first slot,
        # unlike a plain object-key reassignment.
        kept = tuple(entry for entry in self.entries if entry[0] != name)
        if len(kept) != len(self.entries):
            log.trace(f"Aggregation `{name}` redefined, moving it to the end.")
        return AggregationBuilder((*kept, (name, node)))

    # /// Bucket aggregations ///

    def terms(self, name: str, field: str, **options: Unpack[TermsAggOptions]) -> AggregationBuilder:
        return self.add(name, "terms", field, dict(options))

    def date_histogram(
        self, name: str, field: str, **options: Unpack[DateHistogramAggOptions]
    ) -> AggregationBuilder:
        return self.add(name, "date_histogram", field, dict(options))

    def range(self, name: str, field: str, **options: Unpack[RangeAggOptions]) -> AggregationBuilder:
        return self.add(name, "range", field, dict(options))

    def histogram(
        self, name: str, field: str, **options: Unpack[HistogramAggOptions]
    ) -> AggregationBuilder:
        return self.add(name, "histogram", field, dict(options))

    # /// Metric aggregations ///

    def avg(self, name: str, field: str, **options: Unpack[MetricAggOptions]) -> AggregationBuilder:
        return self.add(name, "avg", field, dict(options))

    def sum(self, name: str, field: str, **options: Unpack[MetricAggOptions]) -> AggregationBuilder:
        return self.add(name, "sum", field, dict(options))

    def min(self, name: str, field: str, **options: Unpack[MetricAggOptions]) -> AggregationBuilder:
        return self.add(name, "min", field, dict(options))

    def max(self, name: str, field: str, **options: Unpack[MetricAggOptions]) -> AggregationBuilder:
        return self.add(name, "max", field, dict(options))

    def cardinality(
        self, name: str, field: str, **options: Unpack[CardinalityAggOptions]
    ) -> AggregationBuilder:
        return self.add(name, "cardinality", field, dict(options))

    def percentiles(
        self, name: str, field: str, **options: Unpack[PercentilesAggOptions]
    ) -> AggregationBuilder:
        return self.add(name, "percentiles", field, dict(options))

    def stats(self, name: str, field: str, **options: Unpack[MetricAggOptions]) -> AggregationBuilder:
        return self.add(name, "stats", field, dict(options))

    def value_count(
        self, name: str, field: str, **options: Unpack[MetricAggOptions]
    ) -> AggregationBuilder:
        return self.add(name, "value_count", field, dict(options))

    # /// Nesting ///

    def sub_agg(self, build: Callable[[AggregationBuilder], AggregationBuilder]) -> AggregationBuilder:
        """Nest the aggregations built by `build` under the most recent entry.

        `build` receives an empty builder; its output replaces any `aggs` the
        entry already had.
        """
        if not self.entries:
            raise SubAggregationError("No aggregation to add sub-aggregation to.")

        result = build(AggregationBuilder())
        if not isinstance(result, AggregationBuilder):
            raise TypeError(
                f"`sub_agg` callback must return an aggregation builder, got {type(result).__name__}."
            )

        *earlier, (name, node) = self.entries
        return AggregationBuilder((*earlier, (name, {**node, "aggs": result.render()})))

    def when[R](
        self,
        condition: Any,
        then: Callable[[AggregationBuilder], R],
        otherwise: Callable[[AggregationBuilder], R] | None = None,
    ) -> R | None:
        """Apply `then` if the condition is truthy, else `otherwise` or None."""
        return conditional.when(self, condition, then, otherwise)

    @property
    def names(self) -> list[str]:
        """Aggregation names in insertion order."""
        return [name for name, _ in self.entries]

    def render(self) -> dict[str, AggregationNode]:
        """Lay the entries out as an ordered dict, sharing nodes with this builder."""
        return dict(self.entries)

    def build(self) -> dict[str, AggregationNode]:
        """Extract the aggregations as a plain dict, in insertion order."""
        document = detach(self.render())
        trace_document("aggregation", document)
        return document


def aggregations() -> AggregationBuilder:
    """Start an empty aggregation tree."""
    return AggregationBuilder()
