"""
Aggregate API routes for SignalDesk.

Usage in signaldesk.main:
    from signaldesk.api.routes import mount as mount_routes
    mount_routes(app)
"""

from __future__ import annotations

from fastapi import APIRouter, FastAPI

from .backtests import router as backtests_router
from .health import router as health_router
from .payments import router as payments_router
from .subscriptions import router as subscriptions_router

router = APIRouter()
router.include_router(health_router, prefix="/health", tags=["health"])
router.include_router(backtests_router)
router.include_router(subscriptions_router)
router.include_router(payments_router)


def mount(app: FastAPI) -> None:
    """Convenience helper to attach all aggregated routes to the app."""
    app.include_router(router)
