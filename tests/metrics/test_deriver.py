from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from signaldesk.metrics import deriver
from signaldesk.metrics.deriver import DerivedMetrics
from tests.support.builders import backtest_record, sheet


def test_derive_reads_fixed_sheet_positions():
    metrics = deriver.derive(backtest_record())

    assert metrics.profit == 2000
    assert metrics.roi == pytest.approx(500.0)
    assert metrics.total_trades == 40
    assert metrics.win_rate == pytest.approx(62.5)
    assert metrics.risk_reward == pytest.approx(1.8)
    assert metrics.max_drawdown == 150


def test_derive_is_deterministic():
    record = backtest_record(net_profit=-500)

    first = deriver.derive(record)
    second = deriver.derive(record)

    assert first == second
    assert first.roi == pytest.approx(-2000.0)


@pytest.mark.parametrize("bad", [None, "", "{not json", '{"All USDT": 5}', 42])
def test_bad_performance_blob_defaults_to_zero(bad):
    record = backtest_record()
    record["performance"] = bad

    metrics = deriver.derive(record)

    assert metrics.profit == 0
    assert metrics.roi == 0
    assert metrics.max_drawdown == 0
    # trades sheet is still intact
    assert metrics.total_trades == 40


@pytest.mark.parametrize("bad", [None, "", "{not json"])
def test_bad_trades_blob_defaults_to_zero(bad):
    record = backtest_record()
    record["trades_analysis"] = bad

    metrics = deriver.derive(record)

    assert metrics.total_trades == 0
    assert metrics.win_rate == 0
    assert metrics.risk_reward == 0
    assert metrics.profit == 2000


def test_missing_blobs_yield_empty_metrics():
    assert deriver.derive({"symbol": "EURUSD"}) == DerivedMetrics()


def test_risk_reward_from_tenth_trades_row():
    record = {
        "symbol": "ETH/USDT",
        "trades_analysis": sheet({0: 0, 2: 0, 9: 1.5}, 10),
    }

    metrics = deriver.derive(record)

    assert metrics.risk_reward == 1.5
    assert metrics.total_trades == 0
    assert metrics.win_rate == 0


def test_short_sheet_reads_zero_for_missing_rows():
    record = {"performance": json.dumps([{}, {"All USDT": 100}])}

    metrics = deriver.derive(record)

    assert metrics.profit == 100
    assert metrics.max_drawdown == 0


def test_numeric_strings_and_junk_cells():
    record = backtest_record(net_profit="1,250.5", total_trades="ten", winning_trades=4)

    metrics = deriver.derive(record)

    assert metrics.profit == pytest.approx(1250.5)
    assert metrics.total_trades == 0
    assert metrics.win_rate == 0


def test_alternate_column():
    record = {"performance": sheet({1: 400}, 8, column="Long")}

    assert deriver.derive(record).profit == 0
    assert deriver.derive(record, column="Long").profit == 400


def test_camel_case_keys_and_attribute_records():
    mapping = {"tradesAnalysis": sheet({0: 10, 2: 5}, 10)}
    obj = SimpleNamespace(
        performance=sheet({1: 1000}, 8),
        trades_analysis=None,
        symbol="XAU/USD",
    )

    assert deriver.derive(mapping).win_rate == pytest.approx(50.0)
    assert deriver.derive(obj).roi == pytest.approx(1000.0)


def test_parse_sheet_variants():
    rows = [{"All USDT": 1}]

    assert deriver.parse_sheet(rows) is rows
    assert deriver.parse_sheet(json.dumps(rows).encode()) == rows
    assert deriver.parse_sheet("   ") == []
    assert deriver.parse_sheet('{"a": 1}') == []


def test_parse_sheets_keys_every_sheet():
    sheets = deriver.parse_sheets(backtest_record())

    assert set(sheets) == {
        "performance",
        "tradesAnalysis",
        "riskPerformanceRatios",
        "properties",
        "listOfTrades",
    }
    assert len(sheets["tradesAnalysis"]) == 10
    assert sheets["properties"] == []


def test_derive_pair_builds_display_row():
    row = deriver.derive_pair(backtest_record("BTC/USDT", record_id="abc"))

    assert row.id == "abc"
    assert row.name == "BTC"
    assert row.symbol == "BTC/USDT"
    assert row.timeframe == "4H"
    assert row.metrics.profit == 2000


def test_display_name_without_separator():
    assert deriver.display_name("EURUSD") == "EURUSD"
    assert deriver.display_name("/USD") == "/USD"


def test_derive_many_preserves_order():
    records = [backtest_record("BTC/USDT", record_id="1"), backtest_record("EURUSD", record_id="2")]

    rows = deriver.derive_many(records)

    assert [r.id for r in rows] == ["1", "2"]
