"""
Login page.

Authenticates an admin and returns to the page that required the login.
"""

import streamlit as st

from infomed.auth import login_user
from infomed.routes import LOGIN, SIGNUP, post_login_target
from infomed.state import apply_pending_redirect, init_session_state, pop_next_route
from infomed.validation import clear_field_error, validate_login

st.set_page_config(page_title="Login - InfoMed", page_icon="🔐", layout="centered")

service = init_session_state()
apply_pending_redirect(LOGIN)

if "login_errors" not in st.session_state:
    st.session_state.login_errors = {}


def _clear(field: str) -> None:
    st.session_state.login_errors = clear_field_error(st.session_state.login_errors, field)


if service.state.is_authenticated:
    st.switch_page(post_login_target(pop_next_route()).page)

st.title("🔐 Sign in to your account")
st.caption("Manage your medicine QR codes")

if service.state.error:
    col_msg, col_close = st.columns([5, 1])
    with col_msg:
        st.error(service.state.error)
    with col_close:
        if st.button("✕", key="dismiss_login_error"):
            service.clear_error()
            st.rerun()

errors = st.session_state.login_errors

email = st.text_input(
    "Email address",
    placeholder="admin@example.com",
    key="login_email",
    on_change=_clear,
    args=("email",),
)
if errors.get("email"):
    st.caption(f":red[{errors['email']}]")

password = st.text_input(
    "Password",
    type="password",
    key="login_password",
    on_change=_clear,
    args=("password",),
)
if errors.get("password"):
    st.caption(f":red[{errors['password']}]")

if st.button("Sign in", use_container_width=True, type="primary", disabled=service.state.loading):
    st.session_state.login_errors = validate_login(email, password)
    if not st.session_state.login_errors:
        with st.spinner("Signing in..."):
            result = login_user(email, password)
        if result.success:
            st.switch_page(post_login_target(pop_next_route()).page)
    st.rerun()

st.divider()
st.page_link(SIGNUP.page, label="Don't have an account? Sign up", icon="📝")
