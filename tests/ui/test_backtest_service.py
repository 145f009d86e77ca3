from __future__ import annotations

from ui.services.backtests import BacktestService


class RecordingClient:
    def __init__(self, found: bool):
        self.found = found
        self.calls = []

    def request(self, method, path, **kwargs):
        self.calls.append((method, path, kwargs))
        if path == "/backtests/lookup":
            return {"found": self.found}
        return {"row": {"symbol": kwargs["json"]["symbol"]}}


PAYLOAD = {"symbol": "BTC/USDT", "timeframe": "4H", "version": "v2", "priceOneMonth": ""}


def test_save_creates_when_key_is_new():
    client = RecordingClient(found=False)

    action, result = BacktestService(client).save(PAYLOAD, request_id="req-1")

    assert action == "created"
    assert result == {"row": {"symbol": "BTC/USDT"}}
    lookup, create = client.calls
    assert lookup[2]["params"] == {"symbol": "BTC/USDT", "timeframe": "4H", "version": "v2"}
    assert (create[0], create[1]) == ("POST", "/backtests")
    assert create[2]["request_id"] == "req-1"


def test_save_updates_existing_pair():
    client = RecordingClient(found=True)

    action, _ = BacktestService(client).save({**PAYLOAD, "version": None})

    assert action == "updated"
    lookup, update = client.calls
    assert "version" not in lookup[2]["params"]
    assert (update[0], update[1]) == ("PATCH", "/backtests")
    assert update[2]["json"]["version"] is None
