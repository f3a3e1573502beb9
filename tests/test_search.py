import asyncio

import pytest

from apps.dashboard.services.search import (
    Debouncer,
    SearchSynchronizer,
    build_search_url,
    initial_search_value,
    set_search_term,
)

PATH = "/dashboard/invoices"


@pytest.mark.parametrize("term", ["abc", "Lee Robinson", "a&b=c", "  "])
def test_non_empty_term_sets_query(term):
    url = build_search_url(PATH, {}, term)
    assert initial_search_value(url.split("?", 1)[1]) == term


def test_empty_term_removes_query_entirely():
    assert build_search_url(PATH, {"query": "old"}, "") == PATH
    assert build_search_url(PATH, "query=old&page=2", "") == f"{PATH}?page=2"
    assert build_search_url(PATH, {"query": "old"}, None) == PATH


def test_other_parameters_are_kept_in_order():
    url = build_search_url(PATH, "page=3&query=old&sort=date", "new")
    assert url == f"{PATH}?page=3&query=new&sort=date"


def test_repeated_query_is_collapsed():
    pairs = set_search_term([("query", "a"), ("x", "1"), ("query", "b")], "c")
    assert pairs == [("query", "c"), ("x", "1")]


def test_spaces_are_form_encoded():
    assert build_search_url(PATH, None, "Lee Robinson") == f"{PATH}?query=Lee+Robinson"


def test_initial_value_from_params():
    assert initial_search_value("?query=paid") == "paid"
    assert initial_search_value({"page": "2"}) == ""
    assert initial_search_value(None) == ""


def test_debouncer_only_fires_last_call():
    calls = []

    async def scenario():
        debounced = Debouncer(calls.append, wait=0.05)
        for term in ("a", "ab", "abc"):
            debounced(term)
            await asyncio.sleep(0.01)
        assert debounced.pending
        await asyncio.sleep(0.15)
        assert not debounced.pending

    asyncio.run(scenario())
    assert calls == ["abc"]


def test_debouncer_fires_again_after_quiet_window():
    calls = []

    async def scenario():
        debounced = Debouncer(calls.append, wait=0.02)
        debounced("first")
        await asyncio.sleep(0.1)
        debounced("second")
        await asyncio.sleep(0.1)

    asyncio.run(scenario())
    assert calls == ["first", "second"]


def test_synchronizer_replaces_url_with_last_term():
    replaced = []

    async def scenario():
        sync = SearchSynchronizer(PATH, "page=2&query=old", replaced.append, wait=0.05)
        assert sync.default_value == "old"
        for term in ("a", "ab", "abc"):
            sync.handle_search(term)
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.15)
        # the displayed default is read once on mount
        assert sync.default_value == "old"
        sync.handle_search("")
        await asyncio.sleep(0.15)

    asyncio.run(scenario())
    assert replaced == [f"{PATH}?page=2&query=abc", f"{PATH}?page=2"]


def test_synchronizer_default_wait_is_750ms():
    sync = SearchSynchronizer(PATH, None, lambda url: None)
    assert sync.handle_search.wait == 0.75
    assert sync.default_value == ""
