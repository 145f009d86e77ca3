"""Table view state persisted in the page URL (``st.query_params``)."""

from __future__ import annotations

from typing import Dict

import streamlit as st

from signaldesk.table.pipeline import TableSpec
from signaldesk.table.view_state import ViewState


def read_view(spec: TableSpec, default_limit: int) -> ViewState:
    return spec.view_from_query(st.query_params.to_dict(), default_limit=default_limit)


def write_view(spec: TableSpec, state: ViewState, default_limit: int) -> None:
    """Replace the URL params with the non-default parts of ``state``."""
    params = spec.view_to_query(state, default_limit=default_limit)
    if params != st.query_params.to_dict():
        st.query_params.clear()
        st.query_params.update(params)


def request_params(state: ViewState) -> Dict[str, str]:
    """Explicit params for the API so both sides agree on every value."""
    params = {
        "page": str(state.page),
        "limit": str(state.items_per_page),
        "dir": state.sort_direction,
    }
    if state.search_query:
        params["q"] = state.search_query
    if state.filter_category:
        params["filter"] = state.filter_category
    if state.sort_field:
        params["sort"] = state.sort_field
    return params


def clear_view() -> None:
    st.query_params.clear()
