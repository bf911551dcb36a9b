# screens/registration.py
from __future__ import annotations
import datetime

import streamlit as st

from core.models import Gender, NextOfKin, RegistrationForm
from core.ui import field_error, flash

FIELDS = (
    "full_name", "gender", "date_of_birth", "student_class", "nemis_number",
    "kin_name", "kin_relationship", "kin_phone", "kin_email", "kin_address",
)


def _k(s: str) -> str:
    """Per-page key namespace to avoid collisions if rendered twice."""
    return f"register__{s}"


def _clear_form():
    for f in FIELDS:
        st.session_state.pop(_k(f), None)
    st.session_state.pop(_k("errors"), None)


def _form_from_state() -> RegistrationForm:
    ss = st.session_state
    return RegistrationForm(
        full_name=ss.get(_k("full_name"), ""),
        gender=ss.get(_k("gender")) or "",
        date_of_birth=ss.get(_k("date_of_birth")),
        student_class=ss.get(_k("student_class"), ""),
        nemis_number=ss.get(_k("nemis_number"), ""),
        next_of_kin=NextOfKin(
            name=ss.get(_k("kin_name"), ""),
            relationship=ss.get(_k("kin_relationship"), ""),
            phone_number=ss.get(_k("kin_phone"), ""),
            email=ss.get(_k("kin_email"), ""),
            address=ss.get(_k("kin_address"), ""),
        ),
    )


def render(controller):
    st.title("📝 Student Registration")
    st.caption(f"Next admission number (provisional): **{controller.next_admission_number()}**")

    errors = st.session_state.get(_k("errors")) or {}
    if errors:
        st.error("Please correct the highlighted fields.")

    today = datetime.date.today()
    with st.form(_k("form")):
        st.markdown("#### Bio Data")
        c1, c2, c3 = st.columns(3)
        with c1:
            st.text_input("Full Name *", key=_k("full_name"), placeholder="Enter student's full name")
            field_error(errors, "full_name")
        with c2:
            st.selectbox("Gender *", [g.value for g in Gender], index=None,
                         placeholder="Select gender", key=_k("gender"))
            field_error(errors, "gender")
        with c3:
            st.date_input("Date of Birth *", value=None, key=_k("date_of_birth"),
                          min_value=datetime.date(today.year - 30, 1, 1), max_value=today)
            field_error(errors, "date_of_birth")

        st.markdown("#### Government Tracking & Class")
        c1, c2 = st.columns(2)
        with c1:
            st.text_input("NEMIS Number *", key=_k("nemis_number"), max_chars=11,
                          placeholder="11-character unique ID")
            field_error(errors, "nemis_number")
        with c2:
            st.text_input("Academic Class *", key=_k("student_class"), placeholder="e.g. Grade 4")
            field_error(errors, "student_class")

        st.markdown("#### Next of Kin")
        c1, c2 = st.columns(2)
        with c1:
            st.text_input("Guardian Name *", key=_k("kin_name"))
            field_error(errors, "next_of_kin.name")
            st.text_input("Contact Phone *", key=_k("kin_phone"))
            field_error(errors, "next_of_kin.phone_number")
            st.text_input("Physical Address *", key=_k("kin_address"), placeholder="Street, Estate, City")
            field_error(errors, "next_of_kin.address")
        with c2:
            st.text_input("Relationship *", key=_k("kin_relationship"), placeholder="e.g. Father, Mother, Uncle")
            field_error(errors, "next_of_kin.relationship")
            st.text_input("Email Address", key=_k("kin_email"))
            field_error(errors, "next_of_kin.email")

        b1, b2 = st.columns(2)
        submitted = b1.form_submit_button("Register Student", type="primary", use_container_width=True)
        cleared = b2.form_submit_button("Clear Form", use_container_width=True)

    if cleared:
        _clear_form()
        st.rerun()

    if submitted:
        with st.spinner("Registering..."):
            result = controller.register_student(_form_from_state())
        if result.ok:
            _clear_form()
            # cached student searches predate this registration
            st.session_state.pop("students__cache", None)
            flash(result.message)
            st.rerun()
        elif result.errors:
            st.session_state[_k("errors")] = result.errors
            st.rerun()
        else:
            st.session_state.pop(_k("errors"), None)
            st.error(result.message)
