from __future__ import annotations

from typing import Any, Dict

from ui.services.api_routes import ROUTES
from ui.services.http_client import HttpClient


class SubscriptionService:
    def __init__(self, client: HttpClient) -> None:
        self.client = client

    def list_subscriptions(self, params: Dict[str, str] | None = None) -> Any:
        return self.client.request(
            "GET", ROUTES.subscriptions, params=params, ui_action="subscriptions.list"
        )

    def stats(self) -> Any:
        return self.client.request(
            "GET", ROUTES.subscription_stats, ui_action="subscriptions.stats"
        )


class PaymentService:
    def __init__(self, client: HttpClient) -> None:
        self.client = client

    def list_payments(self, params: Dict[str, str] | None = None) -> Any:
        return self.client.request(
            "GET", ROUTES.payments, params=params, ui_action="payments.list"
        )

    def stats(self) -> Any:
        return self.client.request("GET", ROUTES.payment_stats, ui_action="payments.stats")
