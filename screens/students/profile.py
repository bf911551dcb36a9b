# screens/students/profile.py
from __future__ import annotations
import streamlit as st

from core.fees import format_currency
from core.models import NextOfKin, StudentRecord
from screens.students.dialogs import fee_dialog, next_of_kin_dialog


def _k(s: str) -> str:
    return f"profile__{s}"


def _fmt_date(d) -> str:
    return d.strftime("%B %d, %Y") if d else "—"


def _render_next_of_kin(kin: NextOfKin | None):
    if kin is None:
        st.info("No next of kin on record.")
        return
    c1, c2 = st.columns(2)
    c1.markdown(f"**Name:** {kin.name}")
    c1.markdown(f"**Relationship:** {kin.relationship}")
    c1.markdown(f"**Phone:** {kin.phone_number}")
    c2.markdown(f"**Email:** {kin.email or '—'}")
    c2.markdown(f"**Address:** {kin.address}")


def _render_fee_cards(record: StudentRecord):
    fee = record.fee_status
    c1, c2, c3 = st.columns(3)
    c1.metric("Total Billed", format_currency(fee.total_billed))
    c2.metric("Total Paid", format_currency(fee.total_paid))
    balance_label = "Overpaid" if fee.balance < 0 else "Balance"
    c3.metric(balance_label, format_currency(fee.balance))


def render(controller):
    record = controller.selected_student()
    if record is None:
        st.warning("No student selected.")
        return

    top_l, top_r = st.columns([0.85, 0.15])
    top_l.title(f"👤 {record.full_name}")
    top_l.caption(f"Admission No. **{record.admission_number}** · {controller.settings.app.school_name}")
    if top_r.button("✖ Close", key=_k("close")):
        controller.close_profile()
        st.rerun()

    left, right = st.columns(2)
    with left:
        st.subheader("Personal Information")
        st.markdown(f"**Gender:** {record.gender.value if record.gender else '—'}")
        st.markdown(f"**Date of Birth:** {_fmt_date(record.date_of_birth)}")
        st.markdown(f"**NEMIS Number:** {record.nemis_number or '—'}")
    with right:
        st.subheader("System Information")
        st.markdown(f"**Class:** {record.student_class or '—'}")
        st.markdown(f"**Registered:** {_fmt_date(record.registered_at)}")

    st.divider()
    st.subheader("Next of Kin")
    _render_next_of_kin(record.next_of_kin)

    st.divider()
    st.subheader("Fee Status")
    _render_fee_cards(record)

    c1, c2, _ = st.columns([0.2, 0.25, 0.55])
    if c1.button("💰 Manage Fees", key=_k("fees")):
        fee_dialog(controller, record.id)
    kin_label = "✏️ Edit Next of Kin" if record.next_of_kin else "➕ Add Next of Kin"
    if c2.button(kin_label, key=_k("kin")):
        next_of_kin_dialog(controller, record.id)
