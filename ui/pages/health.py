from __future__ import annotations

from typing import Any, Callable, Dict

import streamlit as st

from ui.components.error_banner import render_error
from ui.services.http_client import ServiceError
from ui.state.session import get_services, get_settings


def _probe(label: str, func: Callable[[], Any]) -> Dict[str, Any]:
    try:
        return func() or {}
    except ServiceError as err:
        st.caption(f"{label} probe failed")
        render_error(err)
        return {}


def render() -> None:
    st.title("Health")
    services = get_services()
    settings = get_settings()
    live = _probe("live", services.health.live)
    database = _probe("database", services.health.database)

    cols = st.columns(3)
    cols[0].metric("/health/live", "ok" if live.get("ok") else "down")
    cols[1].metric("/health/db", database.get("status", "unknown"))
    cols[2].metric("DB latency (ms)", database.get("latency_ms", "n/a"))
    st.caption(f"API base: {settings.api_base_url} | API version: {live.get('version', '?')}")
    st.subheader("Live payload")
    st.json(live)
