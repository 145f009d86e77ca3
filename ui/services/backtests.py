from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from ui.services.api_routes import ROUTES
from ui.services.http_client import HttpClient


class BacktestService:
    def __init__(self, client: HttpClient) -> None:
        self.client = client

    def list_backtests(self, params: Dict[str, str] | None = None) -> Any:
        return self.client.request(
            "GET", ROUTES.backtests, params=params, ui_action="backtests.list"
        )

    def stats(self) -> Any:
        return self.client.request("GET", ROUTES.backtest_stats, ui_action="backtests.stats")

    def detail(self, pair_id: str) -> Any:
        path = ROUTES.backtest_detail.format(pair_id=pair_id)
        return self.client.request("GET", path, ui_action="backtests.detail")

    def create(self, payload: Dict[str, Any], *, request_id: str | None = None) -> Any:
        return self.client.request(
            "POST",
            ROUTES.backtests,
            json=payload,
            ui_action="backtests.create",
            request_id=request_id,
        )

    def update(self, payload: Dict[str, Any], *, request_id: str | None = None) -> Any:
        return self.client.request(
            "PATCH",
            ROUTES.backtests,
            json=payload,
            ui_action="backtests.update",
            request_id=request_id,
        )

    def delete(self, pair_id: str, *, request_id: str | None = None) -> Any:
        path = ROUTES.backtest_detail.format(pair_id=pair_id)
        return self.client.request(
            "DELETE", path, ui_action="backtests.delete", request_id=request_id
        )

    def lookup(self, symbol: str, timeframe: str, version: Optional[str] = None) -> Any:
        params = {"symbol": symbol, "timeframe": timeframe}
        if version:
            params["version"] = version
        return self.client.request(
            "GET", ROUTES.backtest_lookup, params=params, ui_action="backtests.lookup"
        )

    def save(
        self, payload: Dict[str, Any], *, request_id: str | None = None
    ) -> Tuple[str, Any]:
        """Update the stored pair with the same key, or create it when none exists."""
        found = self.lookup(
            payload.get("symbol", ""), payload.get("timeframe", ""), payload.get("version")
        ) or {}
        if found.get("found"):
            return "updated", self.update(payload, request_id=request_id)
        return "created", self.create(payload, request_id=request_id)
