from __future__ import annotations

import pytest
import requests

from ui.services.backtests import BacktestService
from ui.services.http_client import HttpClient, ServiceError
from ui.settings.config import AppSettings, SettingsError, load_settings


class DummyResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.content = b"{}" if payload is not None else b""

    def json(self):
        return self._payload


def _settings(retries=3):
    return AppSettings(
        api_base_url="http://api.test",
        service_name="signaldesk-ui",
        environment="test",
        app_version="0.0.0",
        default_page_size=20,
        request_retries=retries,
    )


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    monkeypatch.setattr("ui.services.http_client.time.sleep", lambda _s: None)


def test_request_sends_params_and_request_id(monkeypatch):
    client = HttpClient(_settings())
    calls = []

    def fake_request(method, url, **kwargs):
        calls.append((method, url, kwargs))
        return DummyResponse(payload={"items": []})

    monkeypatch.setattr(client.session, "request", fake_request)

    data = BacktestService(client).list_backtests({"page": "2", "limit": "10"})

    assert data == {"items": []}
    method, url, kwargs = calls[0]
    assert (method, url) == ("GET", "http://api.test/backtests")
    assert kwargs["params"] == {"page": "2", "limit": "10"}
    assert kwargs["headers"]["x-ui-action"] == "backtests.list"
    assert kwargs["headers"]["x-request-id"]


@pytest.mark.parametrize(
    "status,category",
    [(400, "user"), (422, "user"), (404, "not_found"), (500, "server"), (503, "server")],
)
def test_error_status_maps_to_category(monkeypatch, status, category):
    client = HttpClient(_settings())
    attempts = []

    def fake_request(method, url, **kwargs):
        attempts.append(url)
        return DummyResponse(status_code=status, text="boom")

    monkeypatch.setattr(client.session, "request", fake_request)

    with pytest.raises(ServiceError) as excinfo:
        client.request("GET", "/payments")

    assert excinfo.value.category == category
    assert len(attempts) == 1


def test_network_errors_retry_then_fail(monkeypatch):
    client = HttpClient(_settings(retries=2))
    attempts = []

    def fake_request(method, url, **kwargs):
        attempts.append(url)
        raise requests.ConnectionError("down")

    monkeypatch.setattr(client.session, "request", fake_request)

    with pytest.raises(ServiceError) as excinfo:
        client.request("GET", "/payments")

    assert excinfo.value.category == "network"
    assert len(attempts) == 2


def test_timeout_then_success(monkeypatch):
    client = HttpClient(_settings())
    responses = [requests.Timeout("slow"), DummyResponse(payload={"ok": True})]

    def fake_request(method, url, **kwargs):
        item = responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr(client.session, "request", fake_request)

    assert client.request("GET", "/health/live") == {"ok": True}


def test_load_settings(monkeypatch):
    monkeypatch.delenv("API_BASE_URL", raising=False)
    with pytest.raises(SettingsError):
        load_settings()

    monkeypatch.setenv("API_BASE_URL", "http://api.test/")
    monkeypatch.setenv("TABLE_DEFAULT_PAGE_SIZE", "7")
    settings = load_settings()

    assert settings.api_base_url == "http://api.test"
    assert settings.default_page_size == 20


def test_api_detail_is_surfaced(monkeypatch):
    client = HttpClient(_settings())
    response = DummyResponse(status_code=400, payload={"detail": "Missing symbol or timeframe"})
    monkeypatch.setattr(client.session, "request", lambda *a, **k: response)

    with pytest.raises(ServiceError) as excinfo:
        client.request("POST", "/backtests", json={"symbol": "BTC/USDT"})

    assert excinfo.value.status == 400
    assert "Missing symbol or timeframe" in str(excinfo.value)
