from __future__ import annotations

import os
from dataclasses import dataclass

from signaldesk.settings import PAGE_SIZE_CHOICES


class SettingsError(RuntimeError):
    """Raised when required UI settings are missing or invalid."""


@dataclass(frozen=True)
class AppSettings:
    api_base_url: str
    service_name: str
    environment: str
    app_version: str
    default_page_size: int
    request_retries: int


REQUIRED_ENV_VARS = ["API_BASE_URL"]


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise SettingsError(f"{name} must be an integer, got {value!r}") from None


def load_settings() -> AppSettings:
    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    if missing:
        raise SettingsError(
            "Missing required environment variables: " + ", ".join(missing)
        )

    page_size = _get_int("TABLE_DEFAULT_PAGE_SIZE", 20)
    if page_size not in PAGE_SIZE_CHOICES:
        page_size = 20

    return AppSettings(
        api_base_url=os.environ["API_BASE_URL"].rstrip("/"),
        service_name=os.getenv("SERVICE_NAME", "signaldesk-ui"),
        environment=os.getenv("ENV", "dev"),
        app_version=os.getenv("APP_VERSION", "0.0.0"),
        default_page_size=page_size,
        request_retries=max(1, _get_int("UI_REQUEST_RETRIES", 3)),
    )
