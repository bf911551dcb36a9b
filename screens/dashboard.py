# screens/dashboard.py
from __future__ import annotations
import streamlit as st

from core.navigation import View


def _k(s: str) -> str:
    return f"dashboard__{s}"


def render(controller):
    app_cfg = controller.settings.app
    st.title("📊 Dashboard")
    st.caption(f"Welcome to {app_cfg.school_name}")

    with st.spinner("Loading Dashboard..."):
        result = controller.load_dashboard()
    if not result.ok:
        st.warning(f"{result.message} Showing figures from this session only.")
    stats = result.stats

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Students", stats.total_students, help="Registered in the system")
    c2.metric("Male Students", stats.male_students, help=f"{stats.male_percentage:.1f}% of total")
    c3.metric("Female Students", stats.female_students, help=f"{stats.female_percentage:.1f}% of total")
    c4.metric("This Month", stats.registrations_this_month, help="New registrations")

    left, right = st.columns([0.6, 0.4])
    with left:
        st.subheader("Recent Registrations")
        recent = sorted(controller.store.records, key=lambda r: r.registered_at, reverse=True)[:5]
        if not recent:
            st.info("No students registered in this session yet.")
        for r in recent:
            row_l, row_r = st.columns([0.75, 0.25])
            row_l.markdown(f"**{r.full_name}**  \n{r.admission_number} · {r.student_class}")
            if row_r.button("View", key=_k(f"view_{r.id}")):
                controller.view_student(r.id)
                st.rerun()

    with right:
        st.subheader("Quick Actions")
        if st.button("📝 Register Student", key=_k("go_register"), use_container_width=True):
            controller.navigate(View.REGISTER)
            st.rerun()
        if st.button("🎓 View All Students", key=_k("go_students"), use_container_width=True):
            controller.navigate(View.STUDENTS)
            st.rerun()
