from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

import pandas as pd
import streamlit as st

from signaldesk.settings import PAGE_SIZE_CHOICES
from signaldesk.table.pipeline import TableSpec
from signaldesk.table.view_state import ViewState


def render_toolbar(spec: TableSpec, state: ViewState, *, key: str) -> ViewState:
    """Search, filter, sort and page-size controls; every change goes through the reducer."""
    cols = st.columns([3, 2, 2, 1, 1])
    query = cols[0].text_input("Search", value=state.search_query, key=f"{key}-q")
    if query.strip() != state.search_query:
        state = state.with_search(query)

    categories = spec.categories.keys()
    current = state.filter_category if state.filter_category in categories else categories[0]
    category = cols[1].selectbox(
        "Filter", categories, index=categories.index(current), key=f"{key}-filter"
    )
    if category != state.filter_category:
        state = state.with_filter(category)

    sortable = spec.sortable
    active_sort = state.sort_field or spec.default_sort[0]
    headers = {c.key: c.header for c in spec.columns}
    sort_field = cols[2].selectbox(
        "Sort by",
        sortable,
        index=sortable.index(active_sort) if active_sort in sortable else 0,
        format_func=lambda k: headers.get(k, k),
        key=f"{key}-sort",
    )
    if sort_field != active_sort:
        state = state.toggle_sort(sort_field)
    arrow = "↑" if state.sort_direction == "asc" else "↓"
    if cols[3].button(arrow, key=f"{key}-dir", help="Toggle sort direction"):
        state = state.toggle_sort(sort_field)

    size = cols[4].selectbox(
        "Rows",
        PAGE_SIZE_CHOICES,
        index=PAGE_SIZE_CHOICES.index(state.items_per_page)
        if state.items_per_page in PAGE_SIZE_CHOICES
        else 0,
        key=f"{key}-limit",
    )
    if size != state.items_per_page:
        state = state.with_page_size(size)
    return state


def render_table(
    title: str,
    rows: Iterable[Mapping[str, Any]],
    columns: Dict[str, str],
) -> None:
    """Flatten API rows with pandas and show the mapped columns under their headers."""
    st.subheader(title)
    frame = pd.json_normalize(list(rows))
    if frame.empty:
        st.info("No records match the current view.")
        return
    present = [c for c in columns if c in frame.columns]
    st.dataframe(
        frame[present].rename(columns=columns),
        use_container_width=True,
        hide_index=True,
    )


def render_pager(data: Mapping[str, Any], state: ViewState, *, key: str) -> ViewState:
    """Previous/next controls plus the "Showing X to Y of Z" caption."""
    total = int(data.get("totalItems") or 0)
    pages = int(data.get("totalPages") or 0)
    start = int(data.get("startIndex") or 0)
    end = int(data.get("endIndex") or 0)
    cols = st.columns([4, 1, 1])
    cols[0].caption(
        f"Showing {start} to {end} of {total} (page {state.page} of {max(pages, 1)})"
    )
    if cols[1].button("Previous", key=f"{key}-prev", disabled=state.page <= 1):
        return state.with_page(state.page - 1)
    if cols[2].button("Next", key=f"{key}-next", disabled=state.page >= pages):
        return state.with_page(state.page + 1)
    return state
