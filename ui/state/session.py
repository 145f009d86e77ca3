from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import streamlit as st

from ui.settings.config import AppSettings
from ui.services.http_client import ServiceError
from ui.services.registry import ServicesRegistry
from ui.state.fetch_guard import FetchSequencer
from ui.utils.request_id import generate_request_id


@dataclass
class LastAction:
    name: str
    status: str
    timestamp: float
    request_id: str


@dataclass
class SessionState:
    current_page: Optional[str] = None
    fetches: FetchSequencer = field(default_factory=FetchSequencer)
    collections: Dict[str, Any] = field(default_factory=dict)
    last_request_id: str = field(default_factory=generate_request_id)
    last_actions: List[LastAction] = field(default_factory=list)

    def new_request_id(self) -> str:
        self.last_request_id = generate_request_id()
        return self.last_request_id

    def record_action(self, name: str, status: str, ts: float) -> None:
        self.last_actions.append(
            LastAction(name=name, status=status, timestamp=ts, request_id=self.last_request_id)
        )
        self.last_actions = self.last_actions[-20:]

    def store(self, collection: str):
        """Sink for FetchSequencer.apply that keeps the latest payload per collection."""

        def _sink(payload: Any) -> None:
            self.collections[collection] = payload

        return _sink

    def load(
        self, collection: str, loader: Callable[[], Any], *, empty: Any = None
    ) -> Any:
        """Run ``loader`` under a fetch token and return the stored payload.

        Only the newest load of ``collection`` reaches ``collections``; a load
        that finishes after a newer one began is dropped and the newer payload
        is returned. A failing load stores ``empty`` (if still current) and
        re-raises.
        """
        token = self.fetches.begin(collection)
        try:
            payload = loader()
        except ServiceError:
            self.fetches.apply(token, empty, self.store(collection))
            raise
        self.fetches.apply(token, payload, self.store(collection))
        return self.collections.get(collection, empty)


def get_session_state() -> SessionState:
    if "_signaldesk_state" not in st.session_state:
        st.session_state["_signaldesk_state"] = SessionState()
    return st.session_state["_signaldesk_state"]


def set_settings(settings: AppSettings) -> None:
    st.session_state["_ui_settings"] = settings


def get_settings() -> AppSettings:
    return st.session_state["_ui_settings"]


def set_services(services: ServicesRegistry) -> None:
    st.session_state["_ui_services"] = services


def get_services() -> ServicesRegistry:
    return st.session_state["_ui_services"]
