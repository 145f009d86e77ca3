from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

from fastapi.testclient import TestClient

import signaldesk.main as main_module
from signaldesk.api.routes import backtests as backtests_module
from signaldesk.core.exceptions import RecordNotFoundError
from signaldesk.metrics.deriver import derive_many
from tests.support.builders import backtest_record

client = TestClient(main_module.app)


def _rows():
    created = datetime(2025, 1, 2, tzinfo=timezone.utc)
    return derive_many(
        [
            backtest_record("BTC/USDT", record_id="btc", net_profit=2000, created_at=created),
            backtest_record("EURUSD", record_id="eur", net_profit=500, created_at=created),
            backtest_record("ETHUSDT", record_id="eth", net_profit=-1000, created_at=created),
        ]
    )


class DummySession:
    def __init__(self):
        self.commits = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def commit(self):
        self.commits += 1


def _stored_pair(**overrides):
    data = dict(backtest_record("BTC/USDT", record_id="btc"))
    data.update(
        price_one_month=10.0,
        price_three_months=0.0,
        price_six_months=0.0,
        price_twelve_months=0.0,
        discount_one_month=0.0,
        discount_three_months=0.0,
        discount_six_months=0.0,
        discount_twelve_months=0.0,
        updated_at=None,
        risk_performance_ratios=None,
        properties=None,
        list_of_trades=None,
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def test_list_backtests_default_view(monkeypatch):
    monkeypatch.setattr(backtests_module, "_list_pair_rows", _rows)

    resp = client.get("/backtests")

    assert resp.status_code == 200
    data = resp.json()
    assert [item["id"] for item in data["items"]] == ["eur", "btc", "eth"]
    assert data["items"][0]["metrics"]["roi"] == 2000.0
    assert data["items"][0]["name"] == "EURUSD"
    assert data["totalItems"] == 3
    assert data["totalUnfiltered"] == 3
    assert data["pageSize"] == 20
    assert (data["startIndex"], data["endIndex"]) == (1, 3)
    assert data["view"] == {}


def test_list_backtests_filter_sort_and_page(monkeypatch):
    monkeypatch.setattr(backtests_module, "_list_pair_rows", _rows)

    resp = client.get("/backtests?filter=crypto&sort=profit&dir=asc&limit=5&page=1")

    data = resp.json()
    assert [item["id"] for item in data["items"]] == ["eth", "btc"]
    assert (data["startIndex"], data["endIndex"]) == (1, 2)
    assert data["view"] == {"filter": "crypto", "sort": "profit", "dir": "asc", "limit": "5"}


def test_list_backtests_resets_page_and_ignores_unknown_filter(monkeypatch):
    monkeypatch.setattr(backtests_module, "_list_pair_rows", _rows)

    resp = client.get("/backtests?filter=stocks&page=9")

    data = resp.json()
    assert data["page"] == 1
    assert len(data["items"]) == 3
    assert "page" not in data["view"]


def test_backtest_stats(monkeypatch):
    monkeypatch.setattr(backtests_module, "_list_pair_rows", _rows)

    resp = client.get("/backtests/stats")

    assert resp.status_code == 200
    data = resp.json()
    assert data["totalBacktests"] == 3
    assert data["profitableBacktests"] == 2
    assert data["totalProfit"] == 1500.0
    assert data["bestPerformer"] == {"symbol": "EURUSD", "roi": 2000.0}


def test_get_backtest_detail(monkeypatch):
    class DummyRepo:
        def __init__(self, session):
            self.session = session

        def get(self, pair_id):
            return _stored_pair() if pair_id == "btc" else None

    monkeypatch.setattr(backtests_module, "PairRepository", DummyRepo)
    monkeypatch.setattr(backtests_module, "get_session", DummySession)

    resp = client.get("/backtests/btc")
    assert resp.status_code == 200
    data = resp.json()
    assert data["row"]["symbol"] == "BTC/USDT"
    assert data["prices"]["priceOneMonth"] == 10.0
    assert len(data["sheets"]["tradesAnalysis"]) == 10
    assert data["sheets"]["properties"] == []

    assert client.get("/backtests/missing").status_code == 404


def test_create_backtest_requires_symbol_and_timeframe():
    resp = client.post("/backtests", json={"symbol": "BTC/USDT"})

    assert resp.status_code == 400


def test_create_backtest(monkeypatch):
    captured = {}
    session = DummySession()

    class DummyRepo:
        def __init__(self, session):
            self.session = session

        def create(self, payload):
            captured.update(payload)
            return _stored_pair(symbol=payload["symbol"], timeframe=payload["timeframe"])

    monkeypatch.setattr(backtests_module, "PairRepository", DummyRepo)
    monkeypatch.setattr(backtests_module, "get_session", lambda: session)

    resp = client.post(
        "/backtests",
        json={
            "symbol": "ETH/USDT",
            "timeframe": "1H",
            "priceOneMonth": "",
            "performance": [{"All USDT": 1}, {"All USDT": 250}],
        },
    )

    assert resp.status_code == 201
    assert captured["symbol"] == "ETH/USDT"
    assert captured["price_one_month"] == ""
    assert captured["performance"] == '[{"All USDT": 1}, {"All USDT": 250}]'
    assert session.commits == 1
    assert resp.json()["row"]["name"] == "ETH"


def test_update_backtest_not_found(monkeypatch):
    class DummyRepo:
        def __init__(self, session):
            self.session = session

        def update_by_key(self, payload):
            raise RecordNotFoundError("no pair")

    monkeypatch.setattr(backtests_module, "PairRepository", DummyRepo)
    monkeypatch.setattr(backtests_module, "get_session", DummySession)

    resp = client.patch("/backtests", json={"symbol": "BTC/USDT", "timeframe": "4H", "version": "v9"})

    assert resp.status_code == 404


def test_delete_backtest(monkeypatch):
    deleted = []

    class DummyRepo:
        def __init__(self, session):
            self.session = session

        def delete(self, pair_id):
            if pair_id != "btc":
                raise RecordNotFoundError(pair_id)
            deleted.append(pair_id)

    monkeypatch.setattr(backtests_module, "PairRepository", DummyRepo)
    monkeypatch.setattr(backtests_module, "get_session", DummySession)

    assert client.delete("/backtests/btc").json() == {"ok": True, "id": "btc"}
    assert client.delete("/backtests/nope").status_code == 404
    assert deleted == ["btc"]
