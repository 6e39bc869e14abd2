"""Shapes of the documents and option sets handled by the builders.

Option TypedDicts are used for keyword typing only; nothing is checked at
runtime and unknown keys pass straight through into the document.
"""

from typing import Any, Literal, Required, TypedDict

from elastic_builder.types.general import SortDirection

# A single tagged query node, e.g. {"match": {"title": "x"}}
Clause = dict[str, Any]

GeoPoint = dict[str, float] | list[float] | str


class BoolQuery(TypedDict, total=False):
    """A boolean composite query."""

    must: list[Clause]
    should: list[Clause]
    filter: list[Clause]
    must_not: list[Clause]
    minimum_should_match: int | str


# /// Clause options ///


class MatchOptions(TypedDict, total=False):
    """Tuning options for a `match` clause."""

    operator: Literal["and", "or"]
    boost: float
    fuzziness: int | str
    zero_terms_query: Literal["none", "all"]
    analyzer: str


class MultiMatchOptions(TypedDict, total=False):
    """Tuning options for a `multi_match` clause."""

    type: Literal[
        "best_fields",
        "most_fields",
        "cross_fields",
        "phrase",
        "phrase_prefix",
        "bool_prefix",
    ]
    tie_breaker: float
    operator: Literal["and", "or"]
    boost: float


class MatchPhraseOptions(TypedDict, total=False):
    """Tuning options for a `match_phrase` clause."""

    slop: int
    analyzer: str
    boost: float


class MatchPhrasePrefixOptions(TypedDict, total=False):
    """Tuning options for a `match_phrase_prefix` clause."""

    max_expansions: int
    slop: int
    boost: float


class FuzzyOptions(TypedDict, total=False):
    """Tuning options for a `fuzzy` clause."""

    fuzziness: int | str
    boost: float
    prefix_length: int
    max_expansions: int
    transpositions: bool


class RegexpOptions(TypedDict, total=False):
    """Tuning options for a `regexp` clause."""

    flags: str
    boost: float
    max_determinized_states: int
    case_insensitive: bool


class RangeConditions(TypedDict, total=False):
    """Bounds of a `range` clause."""

    gte: Any
    lte: Any
    gt: Any
    lt: Any
    format: str
    time_zone: str
    boost: float


class MatchAllOptions(TypedDict, total=False):
    """Options for a `match_all` clause."""

    boost: float


class GeoDistanceOptions(TypedDict, total=False):
    """Options for a `geo_distance` clause."""

    distance: Required[str]
    distance_type: Literal["arc", "plane"]
    validation_method: Literal["STRICT", "IGNORE_MALFORMED", "COERCE"]


class GeoShapeOptions(TypedDict, total=False):
    """Options shared by `geo_bounding_box` and `geo_polygon` clauses."""

    validation_method: Literal["STRICT", "IGNORE_MALFORMED", "COERCE"]
    ignore_unmapped: bool


class NestedOptions(TypedDict, total=False):
    """Options for a `nested` clause."""

    score_mode: Literal["avg", "sum", "min", "max", "none"]
    ignore_unmapped: bool


class ConstantScoreOptions(TypedDict, total=False):
    """Options for a `constant_score` clause."""

    boost: float


class HighlightOptions(TypedDict, total=False):
    """Options applied to every highlighted field."""

    fragment_size: int
    number_of_fragments: int
    pre_tags: list[str]
    post_tags: list[str]
    type: Literal["unified", "plain", "fvh"]
    require_field_match: bool


class HighlightSpec(TypedDict, total=False):
    """The highlight section of a request body."""

    fields: Required[dict[str, HighlightOptions]]
    pre_tags: list[str]
    post_tags: list[str]


# /// Aggregations ///

AggregationNode = dict[str, Any]


class TermsAggOptions(TypedDict, total=False):
    """Options for a `terms` bucket aggregation."""

    size: int
    min_doc_count: int
    order: dict[str, SortDirection]
    missing: str


class DateHistogramAggOptions(TypedDict, total=False):
    """Options for a `date_histogram` bucket aggregation."""

    interval: str
    calendar_interval: str
    fixed_interval: str
    min_doc_count: int
    order: dict[str, SortDirection]
    extended_bounds: dict[str, int | str]
    time_zone: str
    format: str


AggRange = TypedDict(
    "AggRange",
    {"from": float | str, "to": float | str, "key": str},
    total=False,
)
"""A single bucket of a `range` aggregation."""


class RangeAggOptions(TypedDict, total=False):
    """Options for a `range` bucket aggregation."""

    ranges: Required[list[AggRange]]
    keyed: bool


class HistogramAggOptions(TypedDict, total=False):
    """Options for a `histogram` bucket aggregation."""

    interval: Required[float]
    min_doc_count: int
    order: dict[str, SortDirection]
    extended_bounds: dict[str, float]


class MetricAggOptions(TypedDict, total=False):
    """Options for the simple metric aggregations."""

    missing: Any


class CardinalityAggOptions(TypedDict, total=False):
    """Options for a `cardinality` metric aggregation."""

    precision_threshold: int
    missing: Any


class PercentilesAggOptions(TypedDict, total=False):
    """Options for a `percentiles` metric aggregation."""

    percents: list[float]
    keyed: bool
    missing: float


# `from` is a keyword, so the request body has to use the functional form
QueryState = TypedDict(
    "QueryState",
    {
        "query": Clause,
        "from": int,
        "to": int,
        "size": int,
        "sort": list[dict[str, SortDirection]],
        "_source": list[str],
        "highlight": HighlightSpec,
        "timeout": str,
        "track_scores": bool,
        "explain": bool,
        "min_score": float,
        "version": bool,
        "seq_no_primary_term": bool,
        "track_total_hits": bool | int,
        "aggs": dict[str, AggregationNode],
    },
    total=False,
)
"""A search request body as accumulated by the query builders."""
