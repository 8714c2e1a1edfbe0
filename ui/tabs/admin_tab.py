# ui/tabs/admin_tab.py
import pandas as pd
import streamlit as st

from core.db import ensure_indexes
from core.errors import AnalyticsUnavailable, RepositoryUnavailable
from core.models import CurrentUser
from services.wiring import Services


def render_admin_tab(services: Services, admin: CurrentUser):
    st.header("🛡️ Admin")

    if services.db is not None and st.button("Initialize Mongo Indexes"):
        try:
            ensure_indexes(services.db)
            st.success("Indexes ensured/created (if not present).")
        except RepositoryUnavailable as e:
            st.warning(f"Index creation notice: {e}")

    try:
        rollup = services.analytics.get_admin_rollup()
    except AnalyticsUnavailable as e:
        st.error(str(e))
        return

    g = rollup.global_totals
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Hours", f"{g.total_hours:.1f}")
    c2.metric("Sessions", g.total_sessions)
    c3.metric("Completed", g.completed_sessions)
    c4.metric("Completion Rate", f"{g.completion_rate}%")

    rows = [{
        "name": u.user.name, "email": u.user.email, "role": u.user.role,
        "hours": u.totals.total_hours, "sessions": u.totals.total_sessions,
        "completed": u.totals.completed_sessions, "completion %": u.totals.completion_rate,
    } for u in rollup.per_user]
    st.subheader("👥 Per user")
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    st.divider()
    st.subheader("🗂️ All sessions")
    sessions = services.sessions.list_all_sessions(admin)
    if not sessions:
        st.info("No sessions logged yet.")
        return
    names = {u.user.id: u.user.name for u in rollup.per_user}
    st.dataframe(pd.DataFrame([{
        "id": s.id, "user": names.get(s.owner_id, s.owner_id), "subject": s.subject,
        "title": s.title, "minutes": s.duration_minutes, "status": s.status,
    } for s in sessions]), use_container_width=True, hide_index=True)

    sid = st.selectbox("Delete session", [s.id for s in sessions], key="admin_delete_pick")
    if st.button("🗑️ Delete selected", key="admin_delete"):
        if services.sessions.delete_any_session(admin, sid):
            st.rerun()
        st.warning("Session not found.")
