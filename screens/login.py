# screens/login.py
from __future__ import annotations
import streamlit as st

from core.ui import flash, hide_sidebar, render_footer


def render(controller):
    hide_sidebar()
    app_cfg = controller.settings.app

    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.title(f"🎓 {app_cfg.school_name}")
        st.caption("Student Records & Fee Management")

        with st.form("login_form"):
            username = st.text_input("Username", placeholder="Enter username")
            password = st.text_input("Password", type="password", placeholder="Enter password")
            submitted = st.form_submit_button("Sign In", type="primary", use_container_width=True)

        if submitted:
            result = controller.login(username, password)
            if result.ok:
                flash(result.message)
                st.rerun()
            else:
                st.error(result.message)

    render_footer(app_cfg)
