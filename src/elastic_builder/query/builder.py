from __future__ import annotations

import dataclasses
import typing
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Self, Unpack

from loguru import logger as log

from elastic_builder.aggregation.builder import AggregationBuilder, aggregations
from elastic_builder.config.general import CONFIG
from elastic_builder.query import clauses, conditional
from elastic_builder.types.dsl import (
    Clause,
    ConstantScoreOptions,
    FuzzyOptions,
    GeoDistanceOptions,
    GeoPoint,
    GeoShapeOptions,
    HighlightOptions,
    HighlightSpec,
    MatchAllOptions,
    MatchOptions,
    MatchPhraseOptions,
    MatchPhrasePrefixOptions,
    MultiMatchOptions,
    NestedOptions,
    QueryState,
    RangeConditions,
    RegexpOptions,
)
from elastic_builder.types.general import SortDirection
from elastic_builder.utils.general import as_list, detach
from elastic_builder.utils.logs import trace_document

if typing.TYPE_CHECKING:
    from elastic_builder.query.bool_builder import BoolQueryBuilder

ClauseCallback = Callable[["QueryBuilder"], "QueryBuilder | Mapping[str, Any] | None"]

HIGHLIGHT_TAG_KEYS = ("pre_tags", "post_tags")


def resolve_clause(result: QueryBuilder | Mapping[str, Any] | None, scope: str) -> Clause:
    """Turn what a scoped callback returned into the clause it describes."""
    if isinstance(result, QueryBuilder):
        clause = result.state.get("query")
        if clause is None:
            raise TypeError(f"`{scope}` callback returned a builder holding no clause.")
        return clause
    if isinstance(result, Mapping):
        return detach(dict(result))
    raise TypeError(
        f"`{scope}` callback must return a query builder or a clause, got {type(result).__name__}."
    )


@dataclass(frozen=True, slots=True)
class QueryBuilder:
    """An immutable snapshot of a search request body.

    Every method returns a new builder and leaves this one untouched, so a
    partially built query can be reused as a template for several others.
    Clause methods replace the top-level query; use `bool()` to combine
    clauses. Request-level setters only overwrite their own key.
    """

    state: QueryState = field(default_factory=lambda: QueryState())

    def _with(self, key: str, value: Any) -> Self:
        return dataclasses.replace(self, state=typing.cast(QueryState, {**self.state, key: value}))

    def _with_query(self, clause: Clause) -> QueryBuilder:
        # A leaf clause always leaves composite mode
        return QueryBuilder({**self.state, "query": detach(clause)})

    # /// Leaf clauses ///

    def match_all(self, **options: Unpack[MatchAllOptions]) -> QueryBuilder:
        return self._with_query(clauses.match_all(**options))

    def match(self, field: str, value: Any, **options: Unpack[MatchOptions]) -> QueryBuilder:
        return self._with_query(clauses.match(field, value, **options))

    def match_phrase(
        self, field: str, value: Any, **options: Unpack[MatchPhraseOptions]
    ) -> QueryBuilder:
        return self._with_query(clauses.match_phrase(field, value, **options))

    def match_phrase_prefix(
        self, field: str, value: str, **options: Unpack[MatchPhrasePrefixOptions]
    ) -> QueryBuilder:
        return self._with_query(clauses.match_phrase_prefix(field, value, **options))

    def multi_match(
        self, fields: str | Iterable[str], value: str, **options: Unpack[MultiMatchOptions]
    ) -> QueryBuilder:
        return self._with_query(clauses.multi_match(fields, value, **options))

    def fuzzy(self, field: str, value: Any, **options: Unpack[FuzzyOptions]) -> QueryBuilder:
        return self._with_query(clauses.fuzzy(field, value, **options))

    def regexp(self, field: str, value: str, **options: Unpack[RegexpOptions]) -> QueryBuilder:
        return self._with_query(clauses.regexp(field, value, **options))

    def term(self, field: str, value: Any) -> QueryBuilder:
        return self._with_query(clauses.term(field, value))

    def terms(self, field: str, values: str | Iterable[Any]) -> QueryBuilder:
        return self._with_query(clauses.terms(field, values))

    def range(self, field: str, **conditions: Unpack[RangeConditions]) -> QueryBuilder:
        return self._with_query(clauses.range(field, **conditions))

    def exists(self, field: str) -> QueryBuilder:
        return self._with_query(clauses.exists(field))

    def prefix(self, field: str, value: str) -> QueryBuilder:
        return self._with_query(clauses.prefix(field, value))

    def wildcard(self, field: str, value: str) -> QueryBuilder:
        return self._with_query(clauses.wildcard(field, value))

    def ids(self, values: str | Iterable[str]) -> QueryBuilder:
        return self._with_query(clauses.ids(values))

    def geo_distance(
        self, field: str, point: GeoPoint, **options: Unpack[GeoDistanceOptions]
    ) -> QueryBuilder:
        return self._with_query(clauses.geo_distance(field, point, **options))

    def geo_bounding_box(
        self, field: str, box: dict[str, GeoPoint], **options: Unpack[GeoShapeOptions]
    ) -> QueryBuilder:
        return self._with_query(clauses.geo_bounding_box(field, box, **options))

    def geo_polygon(
        self, field: str, points: Iterable[GeoPoint], **options: Unpack[GeoShapeOptions]
    ) -> QueryBuilder:
        return self._with_query(clauses.geo_polygon(field, points, **options))

    # /// Wrapping clauses ///

    def nested(
        self, path: str, build: ClauseCallback, **options: Unpack[NestedOptions]
    ) -> QueryBuilder:
        """Query nested objects under `path`; `build` receives an empty builder."""
        inner = resolve_clause(build(QueryBuilder()), "nested")
        return self._with_query(clauses.nested(path, inner, **options))

    def constant_score(
        self, build: ClauseCallback, **options: Unpack[ConstantScoreOptions]
    ) -> QueryBuilder:
        """Wrap the clause built by `build` as a constant-score filter."""
        inner = resolve_clause(build(QueryBuilder()), "constant_score")
        return self._with_query(clauses.constant_score(inner, **options))

    # /// Request parameters ///

    def from_(self, offset: int) -> Self:
        """Set the `from` pagination offset."""
        return self._with("from", offset)

    def to(self, limit: int) -> Self:
        return self._with("to", limit)

    def size(self, size: int) -> Self:
        return self._with("size", size)

    def timeout(self, duration: str) -> Self:
        """Set the server-side search timeout, e.g. "5s"."""
        return self._with("timeout", duration)

    def track_scores(self, enabled: bool = True) -> Self:
        return self._with("track_scores", enabled)

    def explain(self, enabled: bool = True) -> Self:
        return self._with("explain", enabled)

    def min_score(self, score: float) -> Self:
        return self._with("min_score", score)

    def version(self, enabled: bool = True) -> Self:
        return self._with("version", enabled)

    def seq_no_primary_term(self, enabled: bool = True) -> Self:
        return self._with("seq_no_primary_term", enabled)

    def track_total_hits(self, track: bool | int = True) -> Self:
        """Track hit counts exactly, not at all, or up to an integer limit."""
        return self._with("track_total_hits", track)

    def source(self, fields: str | Iterable[str]) -> Self:
        """Restrict the returned `_source` to the given fields."""
        return self._with("_source", as_list(fields))

    def sort(self, field: str, direction: SortDirection | None = None) -> Self:
        """Append a sort criterion; earlier criteria take precedence."""
        direction = direction or CONFIG.builder.default_sort_direction
        return self._with("sort", [*self.state.get("sort", []), {field: direction}])

    def highlight(self, fields: Iterable[str], **options: Unpack[HighlightOptions]) -> Self:
        """Highlight the given fields, applying every option to each of them.

        `pre_tags` and `post_tags` are also set on the highlight object
        itself, so both global and per-field tags are present.
        """
        spec = HighlightSpec(fields={name: detach(options) for name in fields})
        for key in HIGHLIGHT_TAG_KEYS:
            if key in options:
                spec[key] = detach(options[key])
        return self._with("highlight", spec)

    def aggs(self, build: Callable[[AggregationBuilder], AggregationBuilder]) -> Self:
        """Attach an aggregation tree, built from an empty aggregation builder."""
        result = build(aggregations())
        if not isinstance(result, AggregationBuilder):
            raise TypeError(
                f"`aggs` callback must return an aggregation builder, got {type(result).__name__}."
            )
        return self._with("aggs", result.build())

    # /// Composition ///

    def when[R](
        self,
        condition: Any,
        then: Callable[[Self], R],
        otherwise: Callable[[Self], R] | None = None,
    ) -> R | None:
        """Apply `then` if the condition is truthy, else `otherwise` or None."""
        return conditional.when(self, condition, then, otherwise)

    def bool(self) -> BoolQueryBuilder:
        """Switch to boolean composition, keeping every request parameter."""
        from elastic_builder.query.bool_builder import BoolQueryBuilder

        current = self.state.get("query")
        if clauses.is_bool(current):
            return BoolQueryBuilder(self.state)
        if current is not None:
            log.trace(f"Dropping top-level {next(iter(current), 'empty')} clause for a bool composite.")
        return BoolQueryBuilder({**self.state, "query": clauses.bool_query()})

    def build(self) -> QueryState:
        """Extract the request body as a plain dict holding only the keys that were set."""
        document = detach(self.state)
        trace_document("query", document)
        return document


def query() -> QueryBuilder:
    """Start an empty query."""
    return QueryBuilder()
