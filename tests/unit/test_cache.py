from datetime import datetime, timezone

import pytest

from facilitator_analytics.cache import (
    create_cached_paginated_query,
    create_cached_query,
    create_standard_cache_key,
    revalidate_tag,
)


def test_cache_key_ignores_dict_order():
    first = create_standard_cache_key({"tokens": ["0x1"], "start_date": datetime(2025, 1, 1, tzinfo=timezone.utc)})
    second = create_standard_cache_key({"start_date": datetime(2025, 1, 1, tzinfo=timezone.utc), "tokens": ["0x1"]})

    assert first == second
    assert first != create_standard_cache_key({"tokens": ["0x2"]})


def test_cache_key_of_no_input():
    assert create_standard_cache_key() == create_standard_cache_key(None)


def test_cache_key_rejects_unserializable_values():
    with pytest.raises(TypeError):
        create_standard_cache_key({"value": object()})


def test_cached_query_calls_through_once_per_key():
    calls = []

    def query(value=None):
        calls.append(value)
        return {"value": value}

    cached = create_cached_query(query, cache_key_prefix="test-once")

    assert cached({"a": 1}) == {"value": {"a": 1}}
    assert cached({"a": 1}) == {"value": {"a": 1}}
    assert cached({"a": 2}) == {"value": {"a": 2}}
    assert len(calls) == 2
    assert len(cached) == 2
    assert cached.cache_key({"a": 1}).startswith("test-once:")


def test_exceptions_propagate_and_are_not_cached():
    attempts = []

    def flaky(value=None):
        attempts.append(value)
        if len(attempts) == 1:
            raise RuntimeError("boom")
        return "ok"

    cached = create_cached_query(flaky, cache_key_prefix="test-flaky")

    with pytest.raises(RuntimeError):
        cached()
    assert cached() == "ok"
    assert len(attempts) == 2


def test_revalidate_tag_only_clears_tagged_queries():
    tagged = create_cached_query(lambda value=None: value, cache_key_prefix="test-tagged", tags=["test-tag"])
    other = create_cached_query(lambda value=None: value, cache_key_prefix="test-other", tags=["other-tag"])
    tagged(1)
    other(1)

    assert revalidate_tag("test-tag") == 1
    assert len(tagged) == 0
    assert len(other) == 1


def test_revalidate_unknown_tag():
    assert revalidate_tag("no-such-tag") == 0


def test_paginated_key_covers_the_page_window():
    cached = create_cached_paginated_query(lambda query_input, pagination=None: pagination,
                                           cache_key_prefix="test-pages")

    assert cached.cache_key({"x": 1}, {"limit": 10, "cursor": 0}) != cached.cache_key({"x": 1}, {"limit": 10, "cursor": 10})
    assert cached.cache_key({"x": 1}, {"limit": 10, "cursor": 0}) == cached.cache_key({"x": 1}, {"cursor": 0, "limit": 10})


def test_keyword_and_positional_calls_share_a_key():
    calls = []

    def query(query_input=None, pagination=None):
        calls.append((query_input, pagination))
        return len(calls)

    cached = create_cached_query(query, cache_key_prefix="test-keywords")

    assert cached({"a": 1}) == 1
    assert cached(query_input={"a": 1}) == 1
    assert cached({"a": 1}, None) == 1
    assert cached(query_input={"a": 1}, pagination={"limit": 5}) == 2
    assert len(calls) == 2
