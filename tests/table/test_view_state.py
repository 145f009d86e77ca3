from __future__ import annotations

import pytest

from signaldesk.table.view_state import (
    SetFilter,
    SetPage,
    SetPageSize,
    SetSearch,
    ToggleSort,
    ViewState,
    apply,
)


def test_defaults_from_empty_params():
    state = ViewState.from_query_params({}, default_limit=10, default_sort="roi")

    assert state == ViewState(sort_field="roi", items_per_page=10)


def test_parses_all_params():
    params = {"q": " btc ", "filter": "crypto", "sort": "win_rate", "dir": "ASC", "page": "3", "limit": "50"}

    state = ViewState.from_query_params(
        params,
        default_limit=20,
        categories=["all", "crypto"],
        sortable=["roi", "win_rate"],
    )

    assert state == ViewState("btc", "crypto", "win_rate", "asc", 3, 50)


@pytest.mark.parametrize(
    "params,expected",
    [
        ({"filter": "stocks"}, {"filter_category": "all"}),
        ({"sort": "secret"}, {"sort_field": "roi"}),
        ({"dir": "sideways"}, {"sort_direction": "desc"}),
        ({"page": "abc"}, {"page": 1}),
        ({"page": "-4"}, {"page": 1}),
        ({"limit": "7"}, {"items_per_page": 20}),
        ({"limit": ""}, {"items_per_page": 20}),
    ],
)
def test_bad_params_fall_back(params, expected):
    state = ViewState.from_query_params(
        params,
        default_limit=20,
        categories=["all", "forex"],
        sortable=["roi"],
        default_sort="roi",
    )

    for attr, value in expected.items():
        assert getattr(state, attr) == value


def test_list_valued_params_take_first():
    state = ViewState.from_query_params({"q": ["eth", "btc"]}, default_limit=20)

    assert state.search_query == "eth"


def test_to_query_params_omits_defaults():
    state = ViewState(sort_field="roi", items_per_page=20)

    assert state.to_query_params(default_limit=20, default_sort="roi") == {}

    changed = ViewState("eth", "crypto", "profit", "asc", 2, 10)
    assert changed.to_query_params(default_limit=20, default_sort="roi") == {
        "q": "eth",
        "filter": "crypto",
        "sort": "profit",
        "dir": "asc",
        "page": "2",
        "limit": "10",
    }


def test_query_params_round_trip():
    state = ViewState("eth", "crypto", "profit", "asc", 2, 10)

    params = state.to_query_params(default_limit=20, default_sort="roi")

    assert ViewState.from_query_params(params, default_limit=20, default_sort="roi") == state


@pytest.mark.parametrize(
    "action",
    [SetSearch("eth"), SetFilter("crypto"), ToggleSort("roi"), SetPageSize(50)],
)
def test_view_changes_reset_page(action):
    state = ViewState(page=4)

    assert apply(state, action).page == 1


def test_page_navigation_keeps_everything_else():
    state = ViewState("eth", "crypto", "roi", "asc", 2, 10)

    moved = apply(state, SetPage(3))

    assert moved == ViewState("eth", "crypto", "roi", "asc", 3, 10)
    assert apply(state, SetPage(0)).page == 1


def test_sort_toggle():
    state = ViewState(sort_field="roi", sort_direction="desc")

    once = state.toggle_sort("roi")
    twice = once.toggle_sort("roi")
    other = once.toggle_sort("profit")

    assert once.sort_direction == "asc"
    assert twice.sort_direction == "desc"
    assert (other.sort_field, other.sort_direction) == ("profit", "desc")


def test_page_size_must_be_a_choice():
    with pytest.raises(ValueError):
        ViewState().with_page_size(7)


def test_unknown_action_rejected():
    with pytest.raises(TypeError):
        apply(ViewState(), "next")  # type: ignore[arg-type]


def test_reconcile():
    state = ViewState(page=5)

    assert state.reconcile(3).page == 1
    assert state.reconcile(5) is state
    assert ViewState(page=2).reconcile(0).page == 1
    assert ViewState(page=1).reconcile(0).page == 1
