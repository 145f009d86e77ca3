from __future__ import annotations

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Request

from signaldesk.adapters.db.postgres import get_session
from signaldesk.api.schemas import BillingStatsOut, PaymentOut, TablePage
from signaldesk.api.tables import table_page
from signaldesk.db.repositories.billing import PaymentRepository
from signaldesk.metrics.stats import billing_stats
from signaldesk.table.pipeline import PAYMENTS_TABLE

router = APIRouter(prefix="/payments", tags=["payments"])


def _list_payments() -> List[PaymentOut]:
    with get_session() as session:
        repo = PaymentRepository(session)
        return [PaymentOut.model_validate(payment) for payment in repo.list_payments()]


@router.get("", response_model=TablePage[PaymentOut])
def list_payments(request: Request) -> TablePage:
    return table_page(_list_payments(), PAYMENTS_TABLE, request.query_params)


@router.get("/stats", response_model=BillingStatsOut)
def payments_stats() -> BillingStatsOut:
    stats = billing_stats(_list_payments())
    return BillingStatsOut.model_validate(asdict(stats))
