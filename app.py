# app.py
import streamlit as st
from streamlit.errors import StreamlitAPIException

from core.config import APP_TITLE, PAGE_ICON, load_settings
from core.errors import ValidationError
from core.logging_config import init_logging
from data_access.memory_store import MemoryStore
from services.wiring import build_services, connect_or_none
from ui.tabs.admin_tab import render_admin_tab
from ui.tabs.analytics_tab import render_analytics_tab
from ui.tabs.sessions_tab import render_sessions_tab

st.set_page_config(page_title=APP_TITLE, page_icon=PAGE_ICON, layout="wide")


def _secrets() -> dict:
    try:
        return {k: st.secrets[k] for k in st.secrets.keys()}
    except (FileNotFoundError, StreamlitAPIException):
        return {}


@st.cache_resource
def get_memory_store() -> MemoryStore:
    return MemoryStore()


@st.cache_resource
def get_services():
    settings = load_settings(_secrets())
    init_logging(settings)
    return settings, build_services(settings, get_memory_store(), connect_or_none(settings))


settings, services = get_services()

# Sidebar
st.sidebar.header("⚙️ Connection")
if services.db is not None:
    st.sidebar.write(f"**DB:** `{services.db.name}`")
else:
    st.sidebar.warning("MongoDB unavailable: sessions are kept in memory until restart.")

users = services.users.list_all()
default_user = services.users.get(settings.user_id) if settings.user_id else None
options = {f"{u.name} <{u.email}>": u for u in users}
current = None
if options:
    labels = list(options)
    index = 0
    if default_user is not None:
        index = next((i for i, u in enumerate(options.values()) if u.id == default_user.id), 0)
    current = options[st.sidebar.selectbox("User", labels, index=index)]
    st.sidebar.caption(f"id `{current.id}` • role `{current.role}`")

with st.sidebar.expander("➕ New profile", expanded=not options):
    name = st.text_input("Name", key="new_user_name")
    email = st.text_input("Email", key="new_user_email")
    admin = st.checkbox("Admin", key="new_user_admin")
    if st.button("Create profile"):
        try:
            services.users.add(name, email, role="admin" if admin else "user")
            st.rerun()
        except ValidationError as e:
            for field, msg in e.errors.items():
                st.error(f"{field}: {msg}")

if current is None:
    st.info("Create a profile in the sidebar to start logging study sessions.")
    st.stop()

# Tabs
labels = ["📚 Sessions", "📊 Analytics"] + (["🛡️ Admin"] if current.is_admin else [])
tabs = st.tabs(labels)

with tabs[0]:
    render_sessions_tab(services, current)

with tabs[1]:
    render_analytics_tab(services, current)

if current.is_admin:
    with tabs[2]:
        render_admin_tab(services, current)
