"""Stateless constructors for leaf and wrapper query clauses.

Clauses with tuning options follow one rule: called without options they
stay compact, `{kind: {field: value}}`; with any option the value moves
under its value key, `{kind: {field: {value_key: value, **options}}}`.

Example:
    match("title", "x") -> {"match": {"title": "x"}}
    match("title", "x", boost=2) -> {"match": {"title": {"query": "x", "boost": 2}}}
"""

from collections.abc import Iterable
from typing import Any, Unpack

from elastic_builder.types.dsl import (
    Clause,
    ConstantScoreOptions,
    FuzzyOptions,
    GeoDistanceOptions,
    GeoPoint,
    GeoShapeOptions,
    MatchAllOptions,
    MatchOptions,
    MatchPhraseOptions,
    MatchPhrasePrefixOptions,
    MultiMatchOptions,
    NestedOptions,
    RangeConditions,
    RegexpOptions,
)
from elastic_builder.utils.general import as_list, with_options


def match_all(**options: Unpack[MatchAllOptions]) -> Clause:
    """Match every document."""
    return {"match_all": {**options}}


def match(field: str, value: Any, **options: Unpack[MatchOptions]) -> Clause:
    """Full-text match against a single field."""
    return {"match": {field: with_options("query", value, options)}}


def match_phrase(
    field: str, value: Any, **options: Unpack[MatchPhraseOptions]
) -> Clause:
    """Match an exact phrase."""
    return {"match_phrase": {field: with_options("query", value, options)}}


def match_phrase_prefix(
    field: str, value: str, **options: Unpack[MatchPhrasePrefixOptions]
) -> Clause:
    """Match a phrase whose last term is treated as a prefix."""
    return {"match_phrase_prefix": {field: with_options("query", value, options)}}


def multi_match(
    fields: str | Iterable[str], value: str, **options: Unpack[MultiMatchOptions]
) -> Clause:
    """Full-text match across several fields."""
    return {"multi_match": {"query": value, "fields": as_list(fields), **options}}


def fuzzy(field: str, value: Any, **options: Unpack[FuzzyOptions]) -> Clause:
    """Match terms within an edit distance of the value."""
    return {"fuzzy": {field: with_options("value", value, options)}}


def regexp(field: str, value: str, **options: Unpack[RegexpOptions]) -> Clause:
    """Match terms against a regular expression."""
    return {"regexp": {field: with_options("value", value, options)}}


def term(field: str, value: Any) -> Clause:
    return {"term": {field: value}}


def terms(field: str, values: str | Iterable[Any]) -> Clause:
    return {"terms": {field: as_list(values)}}


def range(field: str, **conditions: Unpack[RangeConditions]) -> Clause:  # noqa: A001
    """Bound a field by any of gte/lte/gt/lt."""
    return {"range": {field: {**conditions}}}


def exists(field: str) -> Clause:
    return {"exists": {"field": field}}


def prefix(field: str, value: str) -> Clause:
    return {"prefix": {field: value}}


def wildcard(field: str, value: str) -> Clause:
    return {"wildcard": {field: value}}


def ids(values: str | Iterable[str]) -> Clause:
    return {"ids": {"values": as_list(values)}}


def geo_distance(
    field: str, point: GeoPoint, **options: Unpack[GeoDistanceOptions]
) -> Clause:
    """Match documents within a distance of a point.

    Example return value: {"geo_distance": {"distance": "5km", "location": {"lat": 40.7, "lon": -74.0}}}
    """
    return {"geo_distance": {field: point, **options}}


def geo_bounding_box(
    field: str, box: dict[str, GeoPoint], **options: Unpack[GeoShapeOptions]
) -> Clause:
    """Match documents inside a box given as top_left/bottom_right corners."""
    return {"geo_bounding_box": {field: box, **options}}


def geo_polygon(
    field: str, points: Iterable[GeoPoint], **options: Unpack[GeoShapeOptions]
) -> Clause:
    """Match documents inside a polygon."""
    return {"geo_polygon": {field: {"points": list(points)}, **options}}


def nested(path: str, query: Clause, **options: Unpack[NestedOptions]) -> Clause:
    """Run a query against nested objects under a path."""
    return {"nested": {"path": path, "query": query, **options}}


def constant_score(
    filter: Clause,  # noqa: A002
    **options: Unpack[ConstantScoreOptions],
) -> Clause:
    """Wrap a filter so every match gets the same score."""
    return {"constant_score": {"filter": filter, **options}}


def bool_query() -> Clause:
    """An empty boolean composite, ready for must/should/filter/must_not."""
    return {"bool": {}}


def is_bool(clause: Clause | None) -> bool:
    """Check whether a clause is a boolean composite."""
    return clause is not None and "bool" in clause
