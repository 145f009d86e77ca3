from __future__ import annotations

from dataclasses import dataclass

from ui.services.backtests import BacktestService
from ui.services.billing import PaymentService, SubscriptionService
from ui.services.health import HealthService
from ui.services.http_client import HttpClient
from ui.settings.config import AppSettings


@dataclass
class ServicesRegistry:
    client: HttpClient
    backtests: BacktestService
    subscriptions: SubscriptionService
    payments: PaymentService
    health: HealthService


def build_services(settings: AppSettings) -> ServicesRegistry:
    client = HttpClient(settings)
    return ServicesRegistry(
        client=client,
        backtests=BacktestService(client),
        subscriptions=SubscriptionService(client),
        payments=PaymentService(client),
        health=HealthService(client),
    )
