from __future__ import annotations

import time
from typing import Any, Dict

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from signaldesk import __version__ as APP_VERSION
from signaldesk.adapters.db.postgres import ping

router = APIRouter(tags=["health"])


@router.get("/live")
async def health_live() -> Dict[str, Any]:
    """
    A lightweight liveness probe.

    Returns:
        Dict[str, Any]: A dictionary with the service status and version.
    """
    return {"ok": True, "service": "signaldesk", "version": APP_VERSION}


@router.get("/db")
async def health_db() -> Dict[str, Any]:
    """
    Database connectivity probe.

    Returns:
        Dict[str, Any]: A dictionary with the database status and latency.
    """
    t0 = time.perf_counter()
    ok = await run_in_threadpool(ping, retries=1)
    latency_ms = round((time.perf_counter() - t0) * 1000.0, 1)
    return {"status": "ok" if ok else "degraded", "latency_ms": latency_ms}
