from __future__ import annotations

import os
import warnings
from datetime import datetime, timezone

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

from signaldesk.logging_utils import setup_test_logging
from signaldesk.main import app

warnings.filterwarnings(
    "ignore",
    category=DeprecationWarning,
    module=r"sentry_sdk\.integrations\.fastapi",
)
warnings.filterwarnings(
    "ignore",
    category=DeprecationWarning,
    module=r"sentry_sdk\.integrations\.starlette",
)

os.environ.setdefault("ENV", "test")


@pytest.fixture(scope="session", autouse=True)
def load_env():
    load_dotenv(override=False)


@pytest.fixture(scope="session", autouse=True)
def configure_logging(tmp_path_factory):
    setup_test_logging(tmp_path_factory.mktemp("signaldesk-logs"))
    yield


@pytest.fixture(autouse=True)
def _table_env(monkeypatch):
    for key in ("TABLE_DEFAULT_PAGE_SIZE", "TABLE_RECENT_DAYS", "METRICS_COLUMN"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fixed_now():
    return datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def client():
    return TestClient(app)
