from dataclasses import dataclass

import streamlit as st

from core.api_client import ApiClient
from core.config import Settings, get_settings
from core.query_cache import QueryCache
from core.session_manager import SessionStore, expire_session

CONTEXT_KEY = "_hms_context"


@dataclass
class AppContext:
    """Everything a page or service needs, created once per browser session."""

    settings: Settings
    session: SessionStore
    api: ApiClient
    cache: QueryCache

    @property
    def user(self):
        return self.session.current_user


def build_context(state, settings: Settings | None = None, http=None) -> AppContext:
    settings = settings or get_settings()
    session = SessionStore(state)
    session.init()
    api = ApiClient(
        settings.api_base_url,
        token_provider=lambda: session.token,
        timeout=settings.api_timeout,
        session=http,
    )
    ctx = AppContext(settings=settings, session=session, api=api, cache=QueryCache())
    api.on_unauthorized = lambda: expire_session(ctx)
    return ctx


def get_context() -> AppContext:
    ctx = st.session_state.get(CONTEXT_KEY)
    if ctx is None:
        ctx = build_context(st.session_state)
        st.session_state[CONTEXT_KEY] = ctx
    return ctx
