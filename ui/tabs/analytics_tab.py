# ui/tabs/analytics_tab.py
import pandas as pd
import plotly.express as px
import streamlit as st

from core.constants import LEVEL_AVERAGE, LEVEL_EXCELLENT
from core.errors import AnalyticsUnavailable
from core.models import CurrentUser
from services.wiring import Services

LEVEL_BADGE = {LEVEL_EXCELLENT: "🟢", LEVEL_AVERAGE: "🟡"}


def _shares_frame(shares) -> pd.DataFrame:
    return pd.DataFrame([s.to_dict() for s in shares], columns=["subject", "totalTime", "percentage"])


def render_analytics_tab(services: Services, user: CurrentUser):
    st.header("📊 Study Analytics")

    try:
        dash = services.analytics.get_dashboard(user.id)
    except AnalyticsUnavailable as e:
        st.error(str(e))
        return

    ov = dash.overview
    if ov.total_sessions == 0:
        st.info("No sessions yet. Log a study session to populate analytics.")
        return

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Hours", f"{ov.total_hours:.1f}")
    c2.metric("Sessions", ov.total_sessions)
    c3.metric("Completed", ov.completed_sessions)
    c4.metric("Completion Rate", f"{ov.completion_rate}%")

    left, right = st.columns(2)
    with left:
        st.subheader("📆 Last 7 Days (minutes)")
        week = pd.DataFrame([b.to_dict() for b in ov.weekly_activity])
        fig = px.bar(week, x="date", y="duration", hover_data=["fullDate"])
        fig.update_layout(xaxis_title=None, yaxis_title="minutes", height=320)
        st.plotly_chart(fig, use_container_width=True)
    with right:
        st.subheader("🧮 Time by Subject")
        subj = pd.DataFrame([{"subject": k, **v.to_dict()} for k, v in ov.subject_stats.items()])
        if subj.empty:
            st.info("No subjects yet.")
        else:
            fig = px.pie(subj, names="subject", values="duration", hole=0.4)
            fig.update_layout(height=320)
            st.plotly_chart(fig, use_container_width=True)

    st.divider()
    c1, c2 = st.columns(2)
    with c1:
        st.subheader("⚠️ Weak Subjects (< 20% of time)")
        if dash.subjects.weak:
            st.dataframe(_shares_frame(dash.subjects.weak), use_container_width=True, hide_index=True)
        else:
            st.success("No weak subjects.")
    with c2:
        st.subheader("💪 Strong Subjects")
        if dash.subjects.strong:
            st.dataframe(_shares_frame(dash.subjects.strong), use_container_width=True, hide_index=True)
        else:
            st.info("No strong subjects yet.")

    st.divider()
    c1, c2 = st.columns([1, 2])
    with c1:
        st.subheader("🎯 Consistency")
        badge = LEVEL_BADGE.get(dash.consistency.level, "🔴")
        st.metric("Consistency Score", f"{dash.consistency.score}/100", help="Days studied ÷ days since first session")
        st.write(f"{badge} **{dash.consistency.level}**")
        st.progress(dash.consistency.score / 100.0)
    with c2:
        st.subheader("💡 Recommendations")
        if dash.recommendations.messages:
            for msg in dash.recommendations.messages:
                st.write(f"- {msg}")
        else:
            st.success("Nothing to fix right now. Keep going!")
        if ov.insights:
            st.caption("Insights")
            for text in ov.insights:
                st.write(f"• {text}")
