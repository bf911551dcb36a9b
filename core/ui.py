# core/ui.py
from __future__ import annotations
import datetime
from typing import Dict, Optional

import streamlit as st

from core.settings import AppConfig

FOOTER_TEMPLATE = '"{motto}" - {school_name} · © {year}'


def _expand(text: str, cfg: AppConfig) -> str:
    year = str(datetime.datetime.now().year)
    return (
        (text or "")
        .replace("{year}", year)
        .replace("{motto}", cfg.motto)
        .replace("{school_name}", cfg.school_name)
    )


def render_footer(cfg: AppConfig):
    """School motto footer; call this at the end of every screen."""
    if not cfg.motto:
        return
    footer_text = _expand(FOOTER_TEMPLATE, cfg)
    st.markdown(
        f"""
        <div style="
            margin-top: 2rem;
            padding: 0.75rem 0;
            font-size: 0.9rem;
            border-top: 1px solid rgba(0,0,0,0.15);
            opacity: 0.9;
            text-align: center;
        ">
          <span>{footer_text}</span>
        </div>
        """,
        unsafe_allow_html=True,
    )


def hide_sidebar():
    st.markdown(
        """
        <style>
            section[data-testid="stSidebar"] {
                display: none;
            }
        </style>
        """,
        unsafe_allow_html=True,
    )


def field_error(errors: Dict[str, str], key: str):
    msg = (errors or {}).get(key)
    if msg:
        st.caption(f":red[{msg}]")


def flash(message: str, kind: str = "success"):
    """Queue a toast that survives the next st.rerun()."""
    st.session_state["_flash"] = (kind, message)


def render_flash():
    item: Optional[tuple] = st.session_state.pop("_flash", None)
    if not item:
        return
    kind, message = item
    icon = {"success": "✅", "info": "ℹ️", "error": "⚠️"}.get(kind, "ℹ️")
    st.toast(message, icon=icon)
