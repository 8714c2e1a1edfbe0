# ui/tabs/sessions_tab.py
from datetime import datetime

import pandas as pd
import streamlit as st

from core.constants import ALLOWED_STATUSES
from core.errors import ValidationError
from core.models import CurrentUser
from core.numbers import as_minutes
from core.time_utils import now_local, to_local
from services.wiring import Services


def _show_errors(e: ValidationError):
    for field, msg in e.errors.items():
        st.error(f"{field}: {msg}")


def _sessions_table(sessions, tz) -> pd.DataFrame:
    rows = []
    for s in sessions:
        when = to_local(s.activity_time, tz)
        rows.append({
            "id": s.id,
            "date": when.strftime("%Y-%m-%d %H:%M") if when else "-",
            "subject": s.subject,
            "title": s.title,
            "minutes": s.duration_minutes,
            "status": s.status,
        })
    return pd.DataFrame(rows, columns=["id", "date", "subject", "title", "minutes", "status"])


def render_sessions_tab(services: Services, user: CurrentUser):
    st.header("📚 Study Sessions")
    tz = services.analytics.tz

    with st.form("log_session", clear_on_submit=True):
        st.subheader("Log a session")
        c1, c2 = st.columns(2)
        with c1:
            title = st.text_input("Title")
            subject = st.text_input("Subject")
            duration = st.number_input("Duration (minutes)", min_value=0, max_value=24 * 60, value=30, step=5)
        with c2:
            status = st.selectbox("Status", ALLOWED_STATUSES)
            day = st.date_input("Date", value=now_local(tz).date())
            at = st.time_input("Time", value=now_local(tz).time().replace(second=0, microsecond=0))
        description = st.text_area("Description", height=80)
        if st.form_submit_button("💾 Save session", use_container_width=True):
            when = datetime.combine(day, at)
            when = tz.localize(when) if hasattr(tz, "localize") else when.replace(tzinfo=tz)
            try:
                services.sessions.log_session(user, {
                    "title": title, "subject": subject, "description": description,
                    "duration": duration, "status": status, "date": when,
                })
                st.success("Saved!")
            except ValidationError as e:
                _show_errors(e)

    st.divider()
    c1, c2 = st.columns([3, 1])
    with c1:
        search = st.text_input("🔍 Search title or subject", key="session_search")
    with c2:
        status_filter = st.selectbox("Status", ["All"] + list(ALLOWED_STATUSES), key="session_status_filter")

    sessions = services.sessions.list_sessions(
        user, search=search, status=None if status_filter == "All" else status_filter)
    if not sessions:
        st.info("No sessions yet. Log one above to populate analytics.")
        return
    st.dataframe(_sessions_table(sessions, tz), use_container_width=True, hide_index=True)

    st.subheader("✏️ Edit or delete")
    by_id = {s.id: s for s in sessions}
    sid = st.selectbox("Session", list(by_id), format_func=lambda i: f"{by_id[i].subject} - {by_id[i].title}")
    picked = by_id[sid]
    with st.form(f"edit_{sid}"):
        new_title = st.text_input("Title", value=picked.title)
        new_subject = st.text_input("Subject", value=picked.subject)
        current_status = picked.status if picked.status in ALLOWED_STATUSES else ALLOWED_STATUSES[0]
        new_status = st.selectbox("Status", ALLOWED_STATUSES, index=ALLOWED_STATUSES.index(current_status))
        new_minutes = st.number_input("Duration (minutes)", min_value=0, max_value=24 * 60,
                                      value=min(24 * 60, max(0, int(as_minutes(picked.duration_minutes)))))
        c1, c2 = st.columns(2)
        save = c1.form_submit_button("Update", use_container_width=True)
        delete = c2.form_submit_button("🗑️ Delete", use_container_width=True)
    if save:
        try:
            updated = services.sessions.update_session(user, sid, {
                "title": new_title, "subject": new_subject, "status": new_status, "duration": new_minutes,
            })
        except ValidationError as e:
            _show_errors(e)
        else:
            if updated is None:
                st.warning("Session not found.")
            else:
                st.rerun()
    if delete:
        if services.sessions.delete_session(user, sid):
            st.rerun()
        st.warning("Session not found.")
