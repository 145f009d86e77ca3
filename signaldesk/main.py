# signaldesk/main.py
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from loguru import logger

import signaldesk as signaldesk_package  # noqa: F401  # ensure package __init__ (Sentry) runs
from signaldesk import __version__
from signaldesk.adapters.db.postgres import reset_engine
from signaldesk.api.routes import mount as mount_routes
from signaldesk.logging_utils import logging_context, setup_logging
from signaldesk.settings import get_settings

__all__ = ["app"]


setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    settings = get_settings()
    if not settings.database.primary_dsn:
        logger.warning("DATABASE_URL not set; using DSN assembled from PG* variables")
    logger.info(
        "SignalDesk {} port={} env={} page_size={} recent_days={}",
        __version__,
        settings.app.port,
        settings.app.environment,
        settings.tables.default_page_size,
        settings.tables.recent_days,
    )
    yield
    reset_engine()
    logger.info("SignalDesk shutdown; database engine disposed")


app = FastAPI(title="SignalDesk", version=__version__, lifespan=lifespan)
mount_routes(app)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    request.state.request_id = request_id
    with logging_context(request_id=request_id):
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000.0
            logger.exception(
                "request method={} path={} status=500 duration_ms={:.2f}",
                request.method,
                request.url.path,
                duration_ms,
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000.0
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request method={} path={} status={} duration_ms={:.2f}",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response
