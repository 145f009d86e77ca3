from __future__ import annotations

import streamlit as st

from signaldesk.table.pipeline import SUBSCRIPTIONS_TABLE
from ui.components.error_banner import render_error
from ui.components.kpi import render_kpi_row
from ui.components.table_view import render_table_view
from ui.services.http_client import ServiceError
from ui.state.session import get_services

COLUMNS = {
    "pair.symbol": "Pair",
    "pair.version": "Version",
    "period": "Period",
    "status": "Status",
    "finalPrice": "Price",
    "paymentStatus": "Payment",
    "expiryDate": "Expires",
    "createdAt": "Created",
}


def render() -> None:
    st.title("Subscriptions")
    services = get_services()
    try:
        stats = services.subscriptions.stats() or {}
    except ServiceError as err:
        render_error(err)
        stats = {}
    render_kpi_row(
        [
            ("Subscriptions", str(stats.get("totalSubscriptions", 0))),
            ("Active", str(stats.get("activeSubscriptions", 0))),
            ("Revenue", f"{stats.get('totalRevenue', 0.0):,.2f}"),
            ("Expiring this month", str(stats.get("expiringThisMonth", 0))),
        ]
    )
    render_table_view(
        spec=SUBSCRIPTIONS_TABLE,
        collection="subscriptions",
        title="All subscriptions",
        fetch=services.subscriptions.list_subscriptions,
        columns=COLUMNS,
    )
