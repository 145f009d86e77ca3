"""Centralized application settings powered by Pydantic.

Environment matrix:

| Section  | Environment Variable            | Default       | Purpose                                   |
|----------|---------------------------------|---------------|-------------------------------------------|
| App      | `ENV`                           | `local`       | Deployment environment label              |
| App      | `PORT`                          | `8000`        | HTTP port for the API server              |
| Sentry   | `SENTRY_DSN`                    | `None`        | Sentry ingest DSN                         |
| Sentry   | `SENTRY_TRACES_SAMPLE_RATE`     | `0.0`         | Fraction of transactions to trace         |
| Sentry   | `SENTRY_ENVIRONMENT`            | `None`        | Deployment environment label              |
| Database | `DATABASE_URL`                  | `None`        | Primary Postgres connection URI           |
| Database | `TEST_DATABASE_URL`             | `None`        | Fallback Postgres URI for tests/CI        |
| Database | `PGHOST`                        | `localhost`   | Postgres host when building DSN manually  |
| Database | `PGPORT`                        | `5432`        | Postgres port                             |
| Database | `PGDATABASE`                    | `signaldesk`  | Postgres database                         |
| Database | `PGUSER`                        | `postgres`    | Postgres user                             |
| Database | `PGPASSWORD`                    | `""`          | Postgres password                         |
| Database | `PGSSLMODE`                     | `prefer`      | Postgres SSL mode                         |
| Tables   | `TABLE_DEFAULT_PAGE_SIZE`       | `20`          | Page size when the URL carries no `limit` |
| Tables   | `TABLE_RECENT_DAYS`             | `7`           | Window used by the `recent` filters       |
| Metrics  | `METRICS_COLUMN`                | `All USDT`    | Sheet column the pair metrics are read from |

The settings objects below source environment variables at instantiation time and
are intended to be treated as read-only.
"""

from __future__ import annotations

from functools import cached_property
from urllib.parse import quote_plus

from pydantic import BaseModel, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from signaldesk.core.exceptions import ConfigError

PAGE_SIZE_CHOICES = (5, 10, 20, 50)


class _SettingsBase(BaseSettings):
    """Common configuration for BaseSettings subclasses."""

    model_config = SettingsConfigDict(
        env_prefix="",
        populate_by_name=True,
        extra="ignore",
        case_sensitive=True,
        frozen=True,
    )


class AppSettings(_SettingsBase):
    environment: str = Field(default="local", alias="ENV")
    port: int = Field(default=8000, alias="PORT")


class SentrySettings(_SettingsBase):
    """Sentry SDK configuration."""

    dsn: str | None = Field(default=None, alias="SENTRY_DSN")
    traces_sample_rate: float = Field(default=0.0, alias="SENTRY_TRACES_SAMPLE_RATE")
    environment: str | None = Field(default=None, alias="SENTRY_ENVIRONMENT")

    @computed_field
    @property
    def enabled(self) -> bool:
        return bool(self.dsn)


class DatabaseSettings(_SettingsBase):
    """Postgres configuration, supports DSN override or manual assembly."""

    url: str | None = Field(default=None, alias="DATABASE_URL")
    test_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    host: str = Field(default="localhost", alias="PGHOST")
    port: int = Field(default=5432, alias="PGPORT")
    name: str = Field(default="signaldesk", alias="PGDATABASE")
    user: str = Field(default="postgres", alias="PGUSER")
    password: str = Field(default="", alias="PGPASSWORD")
    sslmode: str = Field(default="prefer", alias="PGSSLMODE")

    @field_validator("port", mode="before")
    @classmethod
    def _coerce_port(cls, value: int | str | None) -> int:
        if value in (None, ""):
            return 5432
        try:
            return int(value)
        except (TypeError, ValueError):
            return 5432

    @computed_field
    @property
    def primary_dsn(self) -> str | None:
        return self.url or self.test_url

    @cached_property
    def assembled_dsn(self) -> str:
        user = quote_plus(self.user or "")
        password = quote_plus(self.password or "")
        return (
            f"postgresql+psycopg2://{user}:{password}@"
            f"{self.host}:{self.port}/{self.name}?sslmode={self.sslmode}"
        )

    def effective_dsn(self) -> str:
        return self.primary_dsn or self.assembled_dsn


class TableSettings(_SettingsBase):
    """Defaults shared by every filtered/sorted/paginated table."""

    default_page_size: int = Field(default=20, alias="TABLE_DEFAULT_PAGE_SIZE")
    recent_days: int = Field(default=7, alias="TABLE_RECENT_DAYS")
    metrics_column: str = Field(default="All USDT", alias="METRICS_COLUMN")

    @field_validator("default_page_size", mode="before")
    @classmethod
    def _coerce_page_size(cls, value: int | str | None) -> int:
        try:
            size = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 20
        return size if size in PAGE_SIZE_CHOICES else 20

    @field_validator("recent_days", mode="before")
    @classmethod
    def _coerce_recent_days(cls, value: int | str | None) -> int:
        try:
            days = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 7
        return days if days > 0 else 7

    @field_validator("metrics_column")
    @classmethod
    def _require_column(cls, value: str) -> str:
        if not value.strip():
            raise ConfigError("METRICS_COLUMN must name a sheet column")
        return value


class Settings(BaseModel):
    """Aggregate accessor for domain-specific settings."""

    app: AppSettings = Field(default_factory=AppSettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    tables: TableSettings = Field(default_factory=TableSettings)

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }


def get_settings() -> Settings:
    """Instantiate settings from the current environment."""
    return Settings()


def reload_settings() -> Settings:
    """Alias for get_settings to maintain a consistent API."""
    return get_settings()


def get_app_settings() -> AppSettings:
    return get_settings().app


def get_sentry_settings() -> SentrySettings:
    return get_settings().sentry


def get_database_settings() -> DatabaseSettings:
    return get_settings().database


def get_table_settings() -> TableSettings:
    return get_settings().tables


__all__ = [
    "PAGE_SIZE_CHOICES",
    "Settings",
    "get_settings",
    "reload_settings",
    "get_app_settings",
    "get_sentry_settings",
    "get_database_settings",
    "get_table_settings",
    "AppSettings",
    "SentrySettings",
    "DatabaseSettings",
    "TableSettings",
]
