# screens/students/page.py
from __future__ import annotations
from typing import List

import pandas as pd
import streamlit as st

from core.fees import format_currency
from core.models import StudentRecord


def _k(s: str) -> str:
    """Per-page key namespace to avoid collisions if rendered twice."""
    return f"students__{s}"


def _students_frame(records: List[StudentRecord]) -> pd.DataFrame:
    if not records:
        return pd.DataFrame()
    return pd.DataFrame(
        [
            {
                "Admission No.": r.admission_number,
                "Full Name": r.full_name,
                "Gender": r.gender.value if r.gender else "—",
                "Class": r.student_class,
                "NEMIS No.": r.nemis_number,
                "Balance": format_currency(r.fee_status.balance),
            }
            for r in records
        ]
    )


def _load(controller, search: str, force: bool = False):
    """Fetch once per search term; the Refresh button forces a new request."""
    cache = st.session_state.setdefault(_k("cache"), {})
    if force or search not in cache:
        cache[search] = controller.list_students(search)
    return cache[search]


def render(controller):
    st.title("🎓 All Students")

    c1, c2 = st.columns([0.8, 0.2])
    search = c1.text_input("Search", key=_k("search"), placeholder="Search by name or admission no...",
                           label_visibility="collapsed").strip()
    force = c2.button("🔄 Refresh", key=_k("refresh"), use_container_width=True)

    with st.spinner("Loading students..."):
        result = _load(controller, search, force=force)
    if not result.ok:
        st.warning(f"{result.message} Showing students from this session only.")

    records = controller.visible_students(result.records, search)

    df = _students_frame(records)
    if df.empty:
        st.info("No students found.")
        return

    st.caption(f"{len(df)} student(s)")
    st.dataframe(df, use_container_width=True, hide_index=True)

    by_label = {f"{r.admission_number} — {r.full_name}": r for r in records}
    c1, c2 = st.columns([0.8, 0.2])
    choice = c1.selectbox("Open profile", list(by_label), key=_k("pick"), label_visibility="collapsed")
    if c2.button("👁 View Profile", key=_k("view"), use_container_width=True) and choice:
        controller.view_student(by_label[choice].id, record=by_label[choice])
        st.rerun()
