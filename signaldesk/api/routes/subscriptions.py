from __future__ import annotations

from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Request

from signaldesk.adapters.db.postgres import get_session
from signaldesk.api.schemas import SubscriptionOut, SubscriptionStatsOut, TablePage
from signaldesk.api.tables import table_page
from signaldesk.db.repositories.billing import SubscriptionRepository
from signaldesk.metrics.stats import subscription_stats
from signaldesk.table.pipeline import SUBSCRIPTIONS_TABLE

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def _list_subscriptions(status: Optional[str] = None) -> List[SubscriptionOut]:
    with get_session() as session:
        repo = SubscriptionRepository(session)
        return [SubscriptionOut.from_model(sub) for sub in repo.list_subscriptions(status)]


@router.get("", response_model=TablePage[SubscriptionOut])
def list_subscriptions(request: Request) -> TablePage:
    return table_page(_list_subscriptions(), SUBSCRIPTIONS_TABLE, request.query_params)


@router.get("/stats", response_model=SubscriptionStatsOut)
def subscriptions_stats() -> SubscriptionStatsOut:
    stats = subscription_stats(_list_subscriptions())
    return SubscriptionStatsOut.model_validate(asdict(stats))
