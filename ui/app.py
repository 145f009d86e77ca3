from __future__ import annotations

import logging

import streamlit as st

from ui.pages import backtests, billing, health, subscriptions
from ui.services.registry import build_services
from ui.settings.config import SettingsError, load_settings
from ui.state.query_view import clear_view
from ui.state.session import (
    get_session_state,
    set_services,
    set_settings,
)

logger = logging.getLogger(__name__)

PAGE_MAP = {
    "Backtests": backtests.render,
    "Subscriptions": subscriptions.render,
    "Billing": billing.render,
    "Health": health.render,
}


def main() -> None:
    st.set_page_config(page_title="SignalDesk Console", layout="wide")
    try:
        settings = load_settings()
    except SettingsError as exc:
        st.error(f"Configuration error: {exc}\nSet API_BASE_URL to continue.")
        logger.error("UI failed fast: %s", exc)
        return

    set_settings(settings)
    if "_ui_services" not in st.session_state:
        set_services(build_services(settings))

    state = get_session_state()
    st.sidebar.title("Navigation")
    st.sidebar.caption(
        f"API base: {settings.api_base_url}\n\nEnv: {settings.environment}\nVersion: {settings.app_version}"
    )
    page_name = st.sidebar.radio("Go to", list(PAGE_MAP.keys()), key="nav")
    if state.current_page is not None and state.current_page != page_name:
        # each table owns the URL params; drop the previous page's view
        clear_view()
    state.current_page = page_name

    PAGE_MAP[page_name]()


if __name__ == "__main__":
    main()
