import pytest

from elastic_builder.config.general import CONFIG
from elastic_builder.query.bool_builder import BoolQueryBuilder
from elastic_builder.query.builder import QueryBuilder, query


@pytest.fixture
def paginated() -> QueryBuilder:
    return query().from_(0).size(20)


def test_empty_builder_builds_empty_document() -> None:
    assert query().build() == {}


def test_top_level_match() -> None:
    assert query().match("title", "x").build() == {"query": {"match": {"title": "x"}}}


def test_top_level_match_with_options() -> None:
    assert query().match("name", "laptop", operator="and", boost=2).build() == {
        "query": {"match": {"name": {"query": "laptop", "operator": "and", "boost": 2}}}
    }


def test_clause_methods_replace_the_query() -> None:
    result = (
        query().match("description", "electronics").range("price", gte=100).build()
    )
    assert result == {"query": {"range": {"price": {"gte": 100}}}}


def test_leaf_clause_keeps_request_parameters(paginated: QueryBuilder) -> None:
    assert paginated.term("category", "books").build() == {
        "query": {"term": {"category": "books"}},
        "from": 0,
        "size": 20,
    }


def test_meta_setters_only_emit_what_was_set() -> None:
    result = (
        query()
        .match_all()
        .from_(10)
        .to(30)
        .size(20)
        .timeout("5s")
        .track_scores(True)
        .explain(True)
        .min_score(0.5)
        .version(True)
        .seq_no_primary_term(True)
        .track_total_hits(10000)
        .source(["title", "price"])
        .build()
    )
    assert result == {
        "query": {"match_all": {}},
        "from": 10,
        "to": 30,
        "size": 20,
        "timeout": "5s",
        "track_scores": True,
        "explain": True,
        "min_score": 0.5,
        "version": True,
        "seq_no_primary_term": True,
        "track_total_hits": 10000,
        "_source": ["title", "price"],
    }


def test_source_accepts_a_single_field() -> None:
    assert query().source("title").build() == {"_source": ["title"]}


def test_meta_setters_overwrite_their_own_key(paginated: QueryBuilder) -> None:
    assert paginated.size(50).size(5).build() == {"from": 0, "size": 5}


def test_sort_appends_in_call_order() -> None:
    result = (
        query()
        .sort("price", "asc")
        .sort("rating", "desc")
        .sort("published_date", "desc")
        .build()
    )
    assert result["sort"] == [
        {"price": "asc"},
        {"rating": "desc"},
        {"published_date": "desc"},
    ]


def test_sort_uses_configured_default_direction(monkeypatch: pytest.MonkeyPatch) -> None:
    assert query().sort("price").build() == {"sort": [{"price": "asc"}]}

    monkeypatch.setattr(CONFIG.builder, "default_sort_direction", "desc")
    assert query().sort("price").build() == {"sort": [{"price": "desc"}]}


def test_highlight_without_options() -> None:
    assert query().highlight(["name", "description"]).build() == {
        "highlight": {"fields": {"name": {}, "description": {}}}
    }


def test_highlight_copies_tags_to_top_level() -> None:
    result = (
        query()
        .highlight(
            ["name", "description"],
            fragment_size=150,
            number_of_fragments=2,
            pre_tags=["<mark>"],
            post_tags=["</mark>"],
        )
        .build()
    )
    per_field = {
        "fragment_size": 150,
        "number_of_fragments": 2,
        "pre_tags": ["<mark>"],
        "post_tags": ["</mark>"],
    }
    assert result == {
        "highlight": {
            "fields": {"name": per_field, "description": per_field},
            "pre_tags": ["<mark>"],
            "post_tags": ["</mark>"],
        }
    }


def test_highlight_without_tags_has_no_top_level_tags() -> None:
    result = query().highlight(["title"], fragment_size=100).build()
    assert result == {"highlight": {"fields": {"title": {"fragment_size": 100}}}}


def test_nested_clause() -> None:
    result = (
        query()
        .nested("comments", lambda q: q.match("comments.text", "great"), score_mode="max")
        .build()
    )
    assert result == {
        "query": {
            "nested": {
                "path": "comments",
                "query": {"match": {"comments.text": "great"}},
                "score_mode": "max",
            }
        }
    }


def test_nested_accepts_a_bool_scope() -> None:
    result = (
        query()
        .nested(
            "variants",
            lambda q: q.bool()
            .filter(lambda f: f.term("variants.color", "red"))
            .filter(lambda f: f.range("variants.stock", gt=0)),
        )
        .build()
    )
    assert result["query"]["nested"]["query"] == {
        "bool": {
            "filter": [
                {"term": {"variants.color": "red"}},
                {"range": {"variants.stock": {"gt": 0}}},
            ]
        }
    }


def test_constant_score() -> None:
    result = (
        query().constant_score(lambda q: q.term("category", "electronics"), boost=1.2).build()
    )
    assert result == {
        "query": {
            "constant_score": {
                "filter": {"term": {"category": "electronics"}},
                "boost": 1.2,
            }
        }
    }


def test_geo_distance_query() -> None:
    result = (
        query()
        .geo_distance("location", {"lat": 40.7128, "lon": -74.006}, distance="5km")
        .size(20)
        .build()
    )
    assert result == {
        "query": {
            "geo_distance": {
                "distance": "5km",
                "location": {"lat": 40.7128, "lon": -74.006},
            }
        },
        "size": 20,
    }


def test_aggs_attaches_aggregation_tree() -> None:
    result = (
        query()
        .match("name", "convenience")
        .aggs(lambda a: a.terms("by_district", "district", size=5))
        .size(0)
        .build()
    )
    assert result == {
        "query": {"match": {"name": "convenience"}},
        "aggs": {"by_district": {"terms": {"field": "district", "size": 5}}},
        "size": 0,
    }


def test_aggs_rejects_non_builder_result() -> None:
    with pytest.raises(TypeError):
        query().aggs(lambda a: None)  # pyright:ignore[reportArgumentType]


def test_bool_keeps_request_parameters(paginated: QueryBuilder) -> None:
    builder = paginated.timeout("5s").bool()

    assert isinstance(builder, BoolQueryBuilder)
    assert builder.build() == {
        "from": 0,
        "size": 20,
        "timeout": "5s",
        "query": {"bool": {}},
    }


def test_bool_replaces_a_leaf_clause() -> None:
    assert query().match("a", "b").bool().build() == {"query": {"bool": {}}}


def test_bool_reuses_existing_composite() -> None:
    builder = query().bool().must(lambda q: q.term("a", 1))
    assert builder.bool().build() == builder.build()


def test_setters_keep_bool_mode() -> None:
    builder = query().bool().size(10).sort("price", "asc")
    assert isinstance(builder, BoolQueryBuilder)
    assert builder.must(lambda q: q.term("a", 1)).build() == {
        "query": {"bool": {"must": [{"term": {"a": 1}}]}},
        "size": 10,
        "sort": [{"price": "asc"}],
    }


def test_leaf_clause_leaves_bool_mode() -> None:
    builder = query().bool().must(lambda q: q.term("a", 1)).match("title", "x")
    assert type(builder) is QueryBuilder
    assert builder.build() == {"query": {"match": {"title": "x"}}}


def test_build_is_idempotent() -> None:
    builder = query().bool().must(lambda q: q.match("a", "b")).sort("c", "desc")
    assert builder.build() == builder.build()


def test_build_output_is_detached() -> None:
    builder = query().bool().filter(lambda q: q.terms("tags", ["x"])).sort("c", "asc")
    document = builder.build()
    document["query"]["bool"]["filter"].append({"term": {"z": 1}})
    document["sort"].clear()

    assert builder.build() == {
        "query": {"bool": {"filter": [{"terms": {"tags": ["x"]}}]}},
        "sort": [{"c": "asc"}],
    }


def test_earlier_snapshots_are_unaffected() -> None:
    base = query().size(10).sort("price", "asc")
    base_document = base.build()

    cheap = base.sort("rating", "desc").range("price", lte=100)
    pricey = base.from_(20).range("price", gte=1000)

    assert base.build() == base_document
    assert cheap.build() == {
        "size": 10,
        "sort": [{"price": "asc"}, {"rating": "desc"}],
        "query": {"range": {"price": {"lte": 100}}},
    }
    assert pricey.build() == {
        "size": 10,
        "sort": [{"price": "asc"}],
        "from": 20,
        "query": {"range": {"price": {"gte": 1000}}},
    }


def test_builders_are_frozen() -> None:
    builder = query()
    with pytest.raises(AttributeError):
        builder.state = {}  # pyright:ignore[reportAttributeAccessIssue]
