"""SiteLedger Streamlit application entrypoint."""

from __future__ import annotations

import logging

import streamlit as st

from app.layout import (
    NAV_LINKS,
    determine_active_page,
    inject_css,
    render_navbar,
    selected_project_id,
)
from app.pages import render_dashboard_page, render_project_page, render_settings_page
from config import Settings, configure_logging, get_settings
from core.ai import MISSING_KEY_MESSAGE
from core.state import AppState
from core.storage import JsonStore

logger = logging.getLogger(__name__)

STATE_KEY = "app_state"


def _load_state(settings: Settings) -> AppState:
    """Return the session's state handle, reading the store on first use."""

    if STATE_KEY not in st.session_state:
        logger.info("Loading collections from %s", settings.data_dir)
        st.session_state[STATE_KEY] = AppState.load(JsonStore(settings.data_dir))
        if not settings.ai_enabled:
            logger.warning("OpenAI API key not configured; AI features disabled")
    return st.session_state[STATE_KEY]


def main() -> None:
    """Application entrypoint for the SiteLedger app."""

    st.set_page_config(
        page_title="SiteLedger",
        page_icon="🏗️",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    settings = get_settings()
    configure_logging(settings.log_level)
    inject_css()

    state = _load_state(settings)
    valid_pages = [link.slug for link in NAV_LINKS if link.enabled]
    active_page = determine_active_page(valid_pages)

    project_id = selected_project_id()
    state.select_project(project_id)
    render_navbar(active_page, project_id if state.active_project else None)

    if not settings.ai_enabled:
        st.caption(MISSING_KEY_MESSAGE)

    if active_page == "settings":
        render_settings_page(state)
    elif active_page == "project":
        render_project_page(state, settings)
    else:
        render_dashboard_page(state)


if __name__ == "__main__":
    main()
