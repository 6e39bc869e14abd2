from dataclasses import dataclass
from typing import Literal, Self

from elastic_builder.query import clauses
from elastic_builder.query.builder import ClauseCallback, QueryBuilder, resolve_clause
from elastic_builder.types.dsl import BoolQuery

Occurrence = Literal["must", "should", "filter", "must_not"]


@dataclass(frozen=True, slots=True)
class BoolQueryBuilder(QueryBuilder):
    """A query builder in boolean composition mode.

    Each occurrence method hands its callback a fresh, empty query builder,
    builds whatever the callback returns and appends that clause to the
    matching array. Arrays keep call order; nothing is merged or deduplicated.

    Example:
        query().bool().must(lambda q: q.match("a", "b")).filter(lambda q: q.term("c", "d"))
    """

    def _composite(self) -> BoolQuery:
        current = self.state.get("query")
        if clauses.is_bool(current):
            return current["bool"]
        return BoolQuery()

    def _with_composite(self, composite: BoolQuery) -> Self:
        return self._with("query", {"bool": composite})

    def _append(self, occurrence: Occurrence, build: ClauseCallback) -> Self:
        clause = resolve_clause(build(QueryBuilder()), occurrence)
        composite = self._composite()
        return self._with_composite(
            {**composite, occurrence: [*composite.get(occurrence, []), clause]}
        )

    def must(self, build: ClauseCallback) -> Self:
        """Append a clause that must match and contributes to the score."""
        return self._append("must", build)

    def should(self, build: ClauseCallback) -> Self:
        """Append a clause that should match."""
        return self._append("should", build)

    def must_not(self, build: ClauseCallback) -> Self:
        """Append a clause that must not match."""
        return self._append("must_not", build)

    def filter(self, build: ClauseCallback) -> Self:
        """Append a clause that must match, without scoring."""
        return self._append("filter", build)

    def minimum_should_match(self, threshold: int | str) -> Self:
        """Set how many `should` clauses must match, as a count or e.g. "75%"."""
        return self._with_composite({**self._composite(), "minimum_should_match": threshold})
