"""
Signup page.

Creates a new admin account and logs it in.
"""

import streamlit as st

from infomed.auth import signup_user
from infomed.routes import DASHBOARD, LOGIN, SIGNUP
from infomed.state import apply_pending_redirect, init_session_state
from infomed.validation import clear_field_error, validate_signup

st.set_page_config(page_title="Sign Up - InfoMed", page_icon="📝", layout="centered")

service = init_session_state()
apply_pending_redirect(SIGNUP)

if "signup_errors" not in st.session_state:
    st.session_state.signup_errors = {}


def _clear(field: str) -> None:
    st.session_state.signup_errors = clear_field_error(st.session_state.signup_errors, field)


if service.state.is_authenticated:
    st.switch_page(DASHBOARD.page)

st.title("📝 Create your admin account")
st.caption("Start generating medicine QR codes")

if service.state.error:
    col_msg, col_close = st.columns([5, 1])
    with col_msg:
        st.error(service.state.error)
    with col_close:
        if st.button("✕", key="dismiss_signup_error"):
            service.clear_error()
            st.rerun()

errors = st.session_state.signup_errors

FIELDS = [
    ("name", "Full name", "text", "Jane Doe"),
    ("email", "Email address", "text", "admin@example.com"),
    ("password", "Password", "password", "At least 6 characters"),
    ("confirmPassword", "Confirm password", "password", "Repeat the password"),
]

values = {}
for field, label, input_type, placeholder in FIELDS:
    values[field] = st.text_input(
        label,
        type=input_type,
        placeholder=placeholder,
        key=f"signup_{field}",
        on_change=_clear,
        args=(field,),
    )
    if errors.get(field):
        st.caption(f":red[{errors[field]}]")

if st.button("Create account", use_container_width=True, type="primary", disabled=service.state.loading):
    st.session_state.signup_errors = validate_signup(
        values["name"], values["email"], values["password"], values["confirmPassword"]
    )
    if not st.session_state.signup_errors:
        with st.spinner("Creating account..."):
            result = signup_user(
                values["name"], values["email"], values["password"], values["confirmPassword"]
            )
        if result.success:
            st.switch_page(DASHBOARD.page)
    st.rerun()

st.divider()
st.page_link(LOGIN.page, label="Already have an account? Sign in", icon="🔐")
