"""
InfoMed - Admin Console

Main entry point for the Streamlit application.
Run with: streamlit run app.py
"""

import streamlit as st

from infomed.api_client import APIError
from infomed.auth import logout_user
from infomed.core.config import get_settings
from infomed.routes import CREATE, DASHBOARD, HOME, LOGIN, SIGNUP, VIEW
from infomed.state import (
    apply_pending_redirect,
    get_admin_name,
    get_api_client,
    init_session_state,
    is_authenticated,
    reset_session_state,
)

settings = get_settings()

st.set_page_config(
    page_title=settings.APP_NAME,
    page_icon="💊",
    layout="wide",
    initial_sidebar_state="expanded",
)

init_session_state()
apply_pending_redirect(HOME)

with st.sidebar:
    st.title(f"💊 {settings.APP_NAME}")
    st.caption("Medicine information QR codes")

    st.divider()

    st.subheader("⚙️ Configuration")
    base_url = st.text_input(
        "API URL",
        value=st.session_state.base_url,
        help="Base URL of the InfoMed API (including /api)",
    )
    if base_url and base_url != st.session_state.base_url:
        reset_session_state(base_url)
        st.rerun()

    if st.button("Check API", use_container_width=True):
        try:
            get_api_client().health()
            st.success("API is reachable")
        except APIError as e:
            st.error(e.message)

    st.divider()

    if is_authenticated():
        st.success(f"👤 {get_admin_name()}")

        if st.button("🚪 Logout", use_container_width=True):
            logout_user()
            st.rerun()
    else:
        st.warning("Not logged in")

    st.divider()

    st.subheader("📖 Navigation")

    if is_authenticated():
        st.page_link(DASHBOARD.page, label=DASHBOARD.title, icon="📋")
        st.page_link(CREATE.page, label=CREATE.title, icon="➕")
    else:
        st.page_link(LOGIN.page, label=LOGIN.title, icon="🔐")
        st.page_link(SIGNUP.page, label=SIGNUP.title, icon="📝")

st.title("Medicine information, one scan away")

st.markdown("""
Create a QR code for any medicine. Anyone who scans it sees the medicine's
usage, dosage, expiry and storage instructions, and can read them in their
own language.

### How it works

1. **Create** a record with the medicine's details
2. **Print** the generated QR code on the packaging
3. **Scan**: the public page shows the information, translated on demand
""")

if not is_authenticated():
    st.info("👆 Log in or create an admin account to start generating QR codes.")

    col1, col2 = st.columns(2)
    with col1:
        st.page_link(LOGIN.page, label="Go to Login", icon="🔐", use_container_width=True)
    with col2:
        st.page_link(SIGNUP.page, label="Create an account", icon="📝", use_container_width=True)

else:
    st.success(f"Welcome back, **{get_admin_name()}**!")

    col1, col2 = st.columns(2)
    with col1:
        st.page_link(DASHBOARD.page, label="📋 Dashboard", use_container_width=True)
    with col2:
        st.page_link(CREATE.page, label="➕ Create QR Code", use_container_width=True)

st.divider()

with st.expander("Look up a record"):
    unique_id = st.text_input("Record ID", placeholder="Paste the ID from a QR code link")
    if st.button("View record", disabled=not unique_id):
        st.session_state.view_id = unique_id.strip()
        st.switch_page(VIEW.page)

st.caption(f"{settings.APP_NAME} Admin Console")
