from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ApiRoutes:
    health_live: str = "/health/live"
    health_db: str = "/health/db"
    backtests: str = "/backtests"
    backtest_stats: str = "/backtests/stats"
    backtest_lookup: str = "/backtests/lookup"
    backtest_detail: str = "/backtests/{pair_id}"
    subscriptions: str = "/subscriptions"
    subscription_stats: str = "/subscriptions/stats"
    payments: str = "/payments"
    payment_stats: str = "/payments/stats"


ROUTES = ApiRoutes()
