"""
Postgres engine/session helpers with safe DSN building, minimal logging, and
resilient health checks. Prefers DATABASE_URL when set; otherwise builds from
individual PG* env vars (see signaldesk.settings.DatabaseSettings).
"""

from __future__ import annotations

import time
from typing import Optional

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from signaldesk.settings import get_database_settings


class Base(DeclarativeBase):
    pass


metadata = Base.metadata

# ----------------------------------------------------------------------------
# DSN helpers
# ----------------------------------------------------------------------------


def get_db_url() -> str:
    """DATABASE_URL, then TEST_DATABASE_URL, then a DSN assembled from PG* vars."""
    return get_database_settings().effective_dsn()


def _sanitize_dsn(dsn: str) -> str:
    """
    Redacts the password from a DSN string for safe logging.

    Args:
        dsn (str): The DSN string.

    Returns:
        str: The sanitized DSN string.
    """
    if "@" not in dsn or "://" not in dsn:
        return dsn
    scheme, rest = dsn.split("://", 1)
    user_part, tail = rest.rsplit("@", 1)
    if ":" in user_part:
        user_only = user_part.split(":", 1)[0]
        return f"{scheme}://{user_only}:***@{tail}"
    return dsn


# ----------------------------------------------------------------------------
# Engine / sessions (cached)
# ----------------------------------------------------------------------------

_ENGINE: Optional[Engine] = None
_SESSION_FACTORY: Optional[sessionmaker] = None


def make_engine(
    dsn: Optional[str] = None, pool_size: int = 5, max_overflow: int = 5
) -> Engine:
    """
    Creates a new SQLAlchemy Engine.

    Args:
        dsn (Optional[str]): The database DSN; defaults to the configured one.
        pool_size (int): The connection pool size.
        max_overflow (int): The maximum number of connections to allow in the pool.
    """
    dsn = dsn or get_db_url()
    kwargs = {"pool_pre_ping": True}
    if not dsn.startswith("sqlite"):
        kwargs.update(pool_size=pool_size, max_overflow=max_overflow, pool_recycle=1800)
    eng = create_engine(dsn, **kwargs)
    logger.info("[postgres] engine created dsn={}", _sanitize_dsn(dsn))
    return eng


def get_engine() -> Engine:
    """Singleton Engine for the configured DSN."""
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = make_engine()
    return _ENGINE


def make_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    global _SESSION_FACTORY
    eng = engine if engine is not None else get_engine()
    if _SESSION_FACTORY is None or _SESSION_FACTORY.kw.get("bind") is not eng:
        _SESSION_FACTORY = sessionmaker(bind=eng, expire_on_commit=False, autoflush=False)
    return _SESSION_FACTORY


def get_session() -> Session:
    """
    Retrieves a new SQLAlchemy Session.

    Sessions are context managers; callers use ``with get_session() as session``
    and commit explicitly.
    """
    return make_session_factory()()


def reset_engine() -> None:
    """Dispose the cached engine; the next call rebuilds it from settings."""
    global _ENGINE, _SESSION_FACTORY
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _SESSION_FACTORY = None


# ----------------------------------------------------------------------------
# Health / diagnostics
# ----------------------------------------------------------------------------


def ping(
    engine: Optional[Engine] = None,
    retries: int = 0,
    backoff: float = 0.75,
) -> bool:
    """
    Pings the database to check for connectivity.

    Args:
        engine (Optional[Engine]): The Engine to use for the ping.
        retries (int): The number of times to retry the ping.
        backoff (float): The backoff factor for retries.

    Returns:
        bool: True if the ping is successful, False otherwise.
    """
    attempts = 0
    while True:
        attempts += 1
        try:
            eng = engine or get_engine()
            with eng.connect() as cx:
                cx.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(
                "[postgres] ping failed (attempt {}/{}): {}", attempts, retries + 1, e
            )
            if attempts > retries:
                return False
            time.sleep(backoff * attempts)


__all__ = [
    "Base",
    "metadata",
    "get_db_url",
    "make_engine",
    "get_engine",
    "make_session_factory",
    "get_session",
    "reset_engine",
    "ping",
]
