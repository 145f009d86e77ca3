from __future__ import annotations

import streamlit as st

from signaldesk.table.pipeline import PAYMENTS_TABLE
from ui.components.error_banner import render_error
from ui.components.kpi import render_kpi_row
from ui.components.table_view import render_table_view
from ui.services.http_client import ServiceError
from ui.state.session import get_services

COLUMNS = {
    "orderId": "Order",
    "userName": "Name",
    "userEmail": "Email",
    "network": "Network",
    "status": "Status",
    "totalAmount": "Amount",
    "txHash": "Tx hash",
    "createdAt": "Created",
}


def render() -> None:
    st.title("Billing")
    services = get_services()
    try:
        stats = services.payments.stats() or {}
    except ServiceError as err:
        render_error(err)
        stats = {}
    render_kpi_row(
        [
            ("Payments", str(stats.get("totalPayments", 0))),
            ("Paid", str(stats.get("paidPayments", 0))),
            ("Revenue", f"{stats.get('totalRevenue', 0.0):,.2f}"),
            ("Pending", str(stats.get("pendingPayments", 0))),
        ]
    )
    render_table_view(
        spec=PAYMENTS_TABLE,
        collection="payments",
        title="Payments",
        fetch=services.payments.list_payments,
        columns=COLUMNS,
    )
