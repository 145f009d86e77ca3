from __future__ import annotations

import pytest

from signaldesk import settings as settings_module
from signaldesk.core.exceptions import ConfigError


def test_table_settings_defaults():
    tables = settings_module.get_table_settings()
    assert tables.default_page_size == 20
    assert tables.recent_days == 7
    assert tables.metrics_column == "All USDT"


@pytest.mark.parametrize(
    "raw,expected",
    [("10", 10), ("50", 50), ("7", 20), ("abc", 20), ("", 20)],
)
def test_table_page_size_falls_back_to_default(monkeypatch, raw, expected):
    monkeypatch.setenv("TABLE_DEFAULT_PAGE_SIZE", raw)
    assert settings_module.get_table_settings().default_page_size == expected


def test_recent_days_rejects_non_positive(monkeypatch):
    monkeypatch.setenv("TABLE_RECENT_DAYS", "-3")
    assert settings_module.get_table_settings().recent_days == 7

    monkeypatch.setenv("TABLE_RECENT_DAYS", "14")
    assert settings_module.get_table_settings().recent_days == 14


def test_blank_metrics_column_is_a_config_error(monkeypatch):
    monkeypatch.setenv("METRICS_COLUMN", "   ")
    with pytest.raises(ConfigError):
        settings_module.TableSettings()


def test_database_settings_fallback(monkeypatch):
    for key in ("DATABASE_URL", "TEST_DATABASE_URL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("PGUSER", "user")
    monkeypatch.setenv("PGPASSWORD", "p@ss word")
    monkeypatch.setenv("PGHOST", "db.local")
    monkeypatch.setenv("PGPORT", "6543")
    monkeypatch.setenv("PGDATABASE", "signals")
    monkeypatch.setenv("PGSSLMODE", "require")

    db = settings_module.get_database_settings()
    assert db.primary_dsn is None
    assembled = db.assembled_dsn
    assert "p%40ss+word" in assembled
    assert "db.local:6543/signals" in assembled
    assert assembled.endswith("sslmode=require")
    assert db.effective_dsn() == assembled


def test_database_url_wins(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///signals.db")
    monkeypatch.setenv("TEST_DATABASE_URL", "sqlite:///other.db")
    assert settings_module.get_database_settings().effective_dsn() == "sqlite:///signals.db"


def test_reload_settings_returns_fresh_instance(monkeypatch):
    monkeypatch.setenv("SENTRY_DSN", "https://public@sentry.example/1")
    s1 = settings_module.get_settings()
    s2 = settings_module.reload_settings()
    assert s1.sentry.enabled is True
    assert s2.sentry.dsn == "https://public@sentry.example/1"
    assert s1 is not s2
