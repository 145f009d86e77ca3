from __future__ import annotations

from datetime import timedelta

import pytest

from signaldesk.core.exceptions import InvalidFieldPathError, UnknownFilterError
from signaldesk.metrics.deriver import derive_many
from signaldesk.table.pipeline import PAIRS_TABLE, PAYMENTS_TABLE, run_table
from signaldesk.table.view_state import ViewState
from tests.support.builders import backtest_record


def _pair_rows():
    records = [
        backtest_record("BTC/USDT", record_id="btc", net_profit=2000),
        backtest_record("EURUSD", record_id="eur", net_profit=500),
        backtest_record("XAUUSD", record_id="xau", net_profit=-250),
        backtest_record("GBPJPY", record_id="gbp", net_profit=None),
    ]
    return derive_many(records)


def _ids(result):
    return [row.id for row in result.page.items]


def test_default_view_sorts_by_roi_desc():
    result = run_table(_pair_rows(), PAIRS_TABLE, ViewState(sort_field="roi"))

    # roi: eur 2000, btc 500, gbp 0, xau -4000
    assert _ids(result) == ["eur", "btc", "gbp", "xau"]
    assert result.total_unfiltered == 4
    assert result.page.total_items == 4


def test_missing_sort_field_uses_table_default():
    result = run_table(_pair_rows(), PAIRS_TABLE, ViewState())

    assert _ids(result)[0] == "eur"


def test_filter_search_and_sort_compose():
    state = ViewState(filter_category="forex", search_query="usd", sort_field="name", sort_direction="asc")

    result = run_table(_pair_rows(), PAIRS_TABLE, state)

    assert _ids(result) == ["eur"]
    assert result.page.total_items == 1
    assert result.total_unfiltered == 4


def test_profitable_filter_uses_derived_profit():
    result = run_table(_pair_rows(), PAIRS_TABLE, ViewState(filter_category="profitable"))

    assert sorted(_ids(result)) == ["btc", "eur"]


def test_out_of_range_page_is_reset():
    state = ViewState(sort_field="roi", page=3, items_per_page=5)

    result = run_table(_pair_rows(), PAIRS_TABLE, state)

    assert result.state.page == 1
    assert result.page.page == 1
    assert len(result.page.items) == 4


def test_in_range_page_is_kept():
    state = ViewState(sort_field="roi", page=2, items_per_page=5)

    records = derive_many(
        [backtest_record(f"PAIR{i}", record_id=str(i), net_profit=i + 1) for i in range(7)]
    )
    result = run_table(records, PAIRS_TABLE, state)

    assert result.state is state
    assert result.page.total_pages == 2
    assert len(result.page.items) == 2


def test_payments_recent_sorted_by_created(fixed_now):
    payments = [
        {"id": "old", "status": "PAID", "created_at": fixed_now - timedelta(days=20)},
        {"id": "new", "status": "PAID", "created_at": fixed_now - timedelta(days=1)},
        {"id": "mid", "status": "PENDING", "created_at": fixed_now - timedelta(days=3)},
    ]

    result = run_table(payments, PAYMENTS_TABLE, ViewState(filter_category="recent"), now=fixed_now)

    assert [p["id"] for p in result.page.items] == ["new", "mid"]


def test_errors_surface_to_caller():
    with pytest.raises(UnknownFilterError):
        run_table(_pair_rows(), PAIRS_TABLE, ViewState(filter_category="stocks"))
    with pytest.raises(InvalidFieldPathError):
        run_table(_pair_rows(), PAIRS_TABLE, ViewState(sort_field="bad field"))


def test_view_from_query_uses_table_defaults():
    state = PAIRS_TABLE.view_from_query({"sort": "password", "filter": "weird"}, default_limit=10)

    assert state.sort_field == "roi"
    assert state.filter_category == "all"
    assert PAIRS_TABLE.view_to_query(state, default_limit=10) == {}
