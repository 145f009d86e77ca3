from __future__ import annotations

import streamlit as st


def success(message: str) -> None:
    st.toast(message, icon="✅")


def error(message: str) -> None:
    st.toast(message, icon="⚠️")
