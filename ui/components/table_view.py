from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

import streamlit as st

from signaldesk.table.pipeline import TableSpec
from ui.components.error_banner import render_error
from ui.components.table_with_toolbar import render_pager, render_table, render_toolbar
from ui.services.http_client import ServiceError
from ui.state.query_view import read_view, request_params, write_view
from ui.state.session import get_session_state, get_settings

EMPTY_PAGE: Dict[str, Any] = {"items": [], "totalItems": 0, "totalPages": 0}


def render_table_view(
    *,
    spec: TableSpec,
    collection: str,
    title: str,
    fetch: Callable[[Dict[str, str]], Any],
    columns: Dict[str, str],
) -> Optional[Mapping[str, Any]]:
    """
    URL-driven table: toolbar, guarded fetch, grid and pager.

    A failed fetch shows the error banner and an empty table. Streamlit runs one
    script at a time per session, so a single render never overlaps itself;
    the fetch still goes through ``SessionState.load`` so that whichever load
    of ``collection`` started last is the one stored and rendered.
    """
    default_limit = get_settings().default_page_size
    session = get_session_state()

    view = read_view(spec, default_limit)
    view = render_toolbar(spec, view, key=collection)

    try:
        data = session.load(
            collection, lambda: fetch(request_params(view)), empty=EMPTY_PAGE
        ) or EMPTY_PAGE
    except ServiceError as err:
        render_error(err)
        write_view(spec, view, default_limit)
        render_table(title, [], columns)
        return None

    view = view.reconcile(int(data.get("totalPages") or 0))
    write_view(spec, view, default_limit)
    render_table(title, data.get("items") or [], columns)

    next_view = render_pager(data, view, key=collection)
    if next_view != view:
        write_view(spec, next_view, default_limit)
        st.rerun()
    return data
