from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from signaldesk.table.pipeline import PAIRS_TABLE
from ui.components.error_banner import render_error
from ui.components.kpi import render_kpi_row
from ui.components.table_view import render_table_view
from ui.components.toast import error as toast_error
from ui.components.toast import success as toast_success
from ui.services.http_client import ServiceError
from ui.state.session import get_services, get_session_state

COLUMNS = {
    "name": "Pair",
    "timeframe": "Timeframe",
    "version": "Version",
    "strategy": "Strategy",
    "metrics.roi": "ROI %",
    "metrics.riskReward": "Risk/Reward",
    "metrics.totalTrades": "Trades",
    "metrics.winRate": "Win Rate %",
    "metrics.maxDrawdown": "Max Drawdown",
    "metrics.profit": "Net Profit",
    "createdAt": "Created",
    "id": "ID",
}

PRICE_INPUTS = (
    ("priceOneMonth", "1 month price"),
    ("priceThreeMonths", "3 months price"),
    ("priceSixMonths", "6 months price"),
    ("priceTwelveMonths", "12 months price"),
    ("discountOneMonth", "1 month discount %"),
    ("discountThreeMonths", "3 months discount %"),
    ("discountSixMonths", "6 months discount %"),
    ("discountTwelveMonths", "12 months discount %"),
)

SHEET_INPUTS = (
    ("performance", "Performance rows (JSON array)"),
    ("tradesAnalysis", "Trades analysis rows (JSON array)"),
)


def _stats_cards() -> None:
    services = get_services()
    try:
        stats = services.backtests.stats() or {}
    except ServiceError as err:
        render_error(err)
        stats = {}
    best = stats.get("bestPerformer") or {}
    render_kpi_row(
        [
            ("Backtests", str(stats.get("totalBacktests", 0))),
            ("Profitable", str(stats.get("profitableBacktests", 0))),
            ("Total profit", f"{stats.get('totalProfit', 0.0):,.2f}"),
            ("Best performer", f"{best.get('symbol', 'N/A')} ({best.get('roi', 0.0):.1f}%)"),
            ("Average ROI", f"{stats.get('averageRoi', 0.0):.1f}%"),
        ]
    )


def _render_sheet(title: str, rows: List[Any]) -> None:
    st.markdown(f"**{title}**")
    if not rows:
        st.caption("No data.")
        return
    st.dataframe(pd.json_normalize(rows), use_container_width=True, hide_index=True)


def _inspect(items: List[Dict[str, Any]]) -> None:
    if not items:
        return
    labels = {f"{row['symbol']} {row.get('timeframe') or ''} {row.get('version') or ''}": row["id"] for row in items}
    choice: Optional[str] = st.selectbox("Inspect backtest", ["-"] + list(labels), key="backtests-inspect")
    if not choice or choice == "-":
        return
    services = get_services()
    state = get_session_state()
    pair_id = labels[choice]
    try:
        detail = services.backtests.detail(pair_id)
    except ServiceError as err:
        render_error(err)
        return
    sheets = detail.get("sheets") or {}
    tabs = st.tabs(["Performance", "Trades analysis", "Risk ratios", "Properties", "Prices"])
    with tabs[0]:
        _render_sheet("Performance", sheets.get("performance") or [])
    with tabs[1]:
        _render_sheet("Trades analysis", sheets.get("tradesAnalysis") or [])
    with tabs[2]:
        _render_sheet("Risk performance ratios", sheets.get("riskPerformanceRatios") or [])
    with tabs[3]:
        _render_sheet("Properties", sheets.get("properties") or [])
    with tabs[4]:
        st.json(detail.get("prices") or {})

    if st.button("Delete backtest", key=f"delete-{pair_id}", type="secondary"):
        request_id = state.new_request_id()
        try:
            services.backtests.delete(pair_id, request_id=request_id)
        except ServiceError as err:
            state.record_action("backtest.delete", "error", time.time())
            render_error(err)
            toast_error("Failed to delete backtest")
            return
        state.record_action("backtest.delete", "ok", time.time())
        toast_success(f"Deleted {choice.strip()} ({request_id})")
        st.rerun()


def _save_form() -> None:
    """Create a backtest, or update the stored one with the same symbol/timeframe/version."""
    with st.expander("Save backtest"):
        with st.form("backtest-save", clear_on_submit=False):
            cols = st.columns(4)
            payload: Dict[str, Any] = {
                "symbol": cols[0].text_input("Symbol").strip(),
                "timeframe": cols[1].text_input("Timeframe").strip(),
                "version": cols[2].text_input("Version").strip() or None,
                "strategy": cols[3].text_input("Strategy").strip() or None,
            }
            price_cols = st.columns(4)
            for index, (name, label) in enumerate(PRICE_INPUTS):
                payload[name] = price_cols[index % 4].text_input(label, value="")
            for name, label in SHEET_INPUTS:
                raw = st.text_area(label, value="")
                if raw.strip():
                    payload[name] = raw.strip()
            submitted = st.form_submit_button("Save")

    if not submitted:
        return
    if not payload["symbol"] or not payload["timeframe"]:
        toast_error("Symbol and timeframe are required")
        return

    state = get_session_state()
    request_id = state.new_request_id()
    try:
        action, _ = get_services().backtests.save(payload, request_id=request_id)
    except ServiceError as err:
        state.record_action("backtest.save", "error", time.time())
        render_error(err)
        return
    state.record_action(f"backtest.{action}", "ok", time.time())
    toast_success(f"Backtest {payload['symbol']} {action} ({request_id})")
    st.rerun()


def render() -> None:
    st.title("Backtests")
    _stats_cards()
    _save_form()
    services = get_services()
    data = render_table_view(
        spec=PAIRS_TABLE,
        collection="backtests",
        title="Pairs",
        fetch=services.backtests.list_backtests,
        columns=COLUMNS,
    )
    if data:
        _inspect(data.get("items") or [])
