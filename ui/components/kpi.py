from __future__ import annotations

from typing import Sequence, Tuple

import streamlit as st


def render_kpi(label: str, value: str, delta: str | None = None) -> None:
    st.metric(label, value, delta)


def render_kpi_row(cards: Sequence[Tuple[str, str]]) -> None:
    cols = st.columns(len(cards))
    for col, (label, value) in zip(cols, cards):
        with col:
            render_kpi(label, value)
