# app.py
from __future__ import annotations
import logging

import streamlit as st

from core.api_client import StudentApiClient
from core.controller import AppController
from core.nav_registry import ROUTE_INDEX, SIDEBAR_ROUTES
from core.navigation import View
from core.settings import Settings, load_settings
from core.ui import hide_sidebar, render_flash, render_footer
from screens.login import render as login_render

log = logging.getLogger(__name__)


@st.cache_resource(show_spinner=False)
def _settings() -> Settings:
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.app.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return settings


@st.cache_resource(show_spinner=False)
def _api_client() -> StudentApiClient:
    # one connection pool for every browser session
    api = _settings().api
    return StudentApiClient(api.base_url, timeout=api.timeout_seconds)


# The controller (store + router) lives for the whole browser session and is
# rebuilt after logout. The API client is shared and never closed here.
def _ensure_controller() -> AppController:
    if "controller" not in st.session_state:
        st.session_state["controller"] = AppController(_settings(), st.session_state, api=_api_client())
    return st.session_state["controller"]


def _render_sidebar(controller: AppController):
    app_cfg = controller.settings.app
    current = controller.current_view()
    with st.sidebar:
        st.markdown(f"## 🎓 {app_cfg.school_name}")
        st.caption(app_cfg.name)
        st.markdown("---")
        for route in SIDEBAR_ROUTES:
            is_active = route.view is current
            if st.button(
                f"{route.icon} {route.label}",
                key=f"nav__{route.view.value}",
                type="primary" if is_active else "secondary",
                use_container_width=True,
            ):
                controller.navigate(route.view)
                st.rerun()
        st.markdown("---")
        if st.button("🚪 Logout", key="nav__logout", use_container_width=True):
            controller.logout()
            for key in list(st.session_state.keys()):
                del st.session_state[key]
            st.session_state["_flash"] = ("info", "You have been logged out")
            st.rerun()


def main():
    settings = _settings()
    st.set_page_config(page_title=settings.app.name, page_icon="🎓", layout="wide")

    controller = _ensure_controller()
    render_flash()

    if not controller.is_authenticated:
        hide_sidebar()
        login_render(controller)
        return

    _render_sidebar(controller)

    display_name = (controller.user.get("full_name") or controller.user.get("username") or "").strip() or "User"
    st.caption(f"Signed in as **{display_name}**")

    view = controller.current_view()
    route = ROUTE_INDEX.get(view) or ROUTE_INDEX[View.DASHBOARD]
    try:
        route.render(controller)
    except Exception as e:
        log.exception(f"Screen {view.value} failed")
        st.error(f"{route.label} failed to render.")
        with st.expander("Diagnostics"):
            st.exception(e)

    render_footer(settings.app)


if __name__ == "__main__":
    main()
