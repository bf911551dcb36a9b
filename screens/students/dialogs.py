# screens/students/dialogs.py
"""Fee management and next-of-kin edit dialogs for the profile screen."""

from __future__ import annotations
import streamlit as st

from core.fees import format_currency
from core.models import NextOfKin
from core.ui import field_error, flash


def _k(s: str) -> str:
    return f"profile_dialog__{s}"


@st.dialog("Manage Fees")
def fee_dialog(controller, student_id: str):
    record = controller.store.find(student_id)
    if record is None:
        st.error("Student not found.")
        return
    fee = record.fee_status
    st.caption(f"{record.full_name} · {record.admission_number}")

    c1, c2, c3 = st.columns(3)
    c1.metric("Total Billed", format_currency(fee.total_billed))
    c2.metric("Total Paid", format_currency(fee.total_paid))
    c3.metric("Balance", format_currency(fee.balance))

    st.markdown("#### Add New Bill")
    b1, b2 = st.columns([0.7, 0.3])
    bill = b1.number_input("Amount (Ksh)", min_value=0.0, step=100.0, format="%.2f", key=_k("bill"))
    add_bill = b2.button("Add Bill", key=_k("add_bill"), disabled=bill <= 0, use_container_width=True)

    st.markdown("#### Record Payment")
    p1, p2 = st.columns([0.7, 0.3])
    paid = p1.number_input("Amount (Ksh)", min_value=0.0, step=100.0, format="%.2f", key=_k("paid"))
    add_paid = p2.button("Add Payment", key=_k("add_paid"), disabled=paid <= 0, use_container_width=True)

    if add_bill or add_paid:
        if add_bill:
            result = controller.update_fees(student_id, bill=f"{bill:.2f}")
        else:
            result = controller.update_fees(student_id, payment=f"{paid:.2f}")
        if result.ok:
            st.session_state.pop(_k("bill"), None)
            st.session_state.pop(_k("paid"), None)
            flash(result.message)
            st.rerun()
        st.error(result.message)

    if st.button("Close", key=_k("close_fees")):
        st.rerun()


@st.dialog("Edit Next of Kin")
def next_of_kin_dialog(controller, student_id: str):
    record = controller.store.find(student_id)
    if record is None:
        st.error("Student not found.")
        return
    kin = record.next_of_kin or NextOfKin("", "", "", "", "")
    errors = st.session_state.get(_k("kin_errors")) or {}

    with st.form(_k("kin_form")):
        name = st.text_input("Name *", value=kin.name, placeholder="Enter next of kin's name")
        field_error(errors, "name")
        relationship = st.text_input("Relationship *", value=kin.relationship, placeholder="e.g. Father, Mother, Guardian")
        field_error(errors, "relationship")
        phone = st.text_input("Phone Number *", value=kin.phone_number)
        field_error(errors, "phone_number")
        email = st.text_input("Email *", value=kin.email)
        field_error(errors, "email")
        address = st.text_input("Address *", value=kin.address)
        field_error(errors, "address")
        saved = st.form_submit_button("Save Changes", type="primary")

    if saved:
        result = controller.update_next_of_kin(
            student_id,
            NextOfKin(name=name, relationship=relationship, phone_number=phone, email=email, address=address),
        )
        if result.ok:
            st.session_state.pop(_k("kin_errors"), None)
            flash(result.message)
            st.rerun()
        if not result.errors:
            st.error(result.message)
            return
        st.session_state[_k("kin_errors")] = result.errors
        # dialog reruns in place; show the errors straight away
        st.rerun(scope="fragment")
