"""
Authentication utilities for the Streamlit pages.

Provides login, signup, logout and access control.
"""

import streamlit as st

from infomed.routes import LOGIN, GuardAction, Route, guard
from infomed.session import AuthResult
from infomed.state import apply_pending_redirect, get_session_service, remember_next_route
from infomed.validation import validate_signup


def login_user(email: str, password: str) -> AuthResult:
    """Authenticate the admin; the result carries the error message on failure."""
    service = get_session_service()
    service.clear_error()
    return service.login(email.strip(), password)


def signup_user(name: str, email: str, password: str, confirm_password: str) -> AuthResult:
    """
    Register a new admin.

    The form is validated again here so an invalid signup never reaches
    the network.
    """
    errors = validate_signup(name, email, password, confirm_password)
    if errors:
        return AuthResult(success=False, error=next(iter(errors.values())))

    service = get_session_service()
    service.clear_error()
    return service.signup(name.strip(), email.strip(), password)


def logout_user() -> None:
    """Log out the current admin."""
    get_session_service().logout()


def require_auth(route: Route) -> bool:
    """
    Check whether ``route`` may render.

    Waits for the session to resolve, and sends anonymous visitors to the
    login page with the requested route preserved.

    Returns:
        True if the page may render
    """
    apply_pending_redirect(route)
    service = get_session_service()
    decision = guard(service.state, route)

    if decision.action is GuardAction.WAIT:
        with st.spinner("Checking session..."):
            service.init()
        decision = guard(service.state, route)

    if decision.action is GuardAction.REDIRECT:
        remember_next_route(decision.next_route)
        st.switch_page((decision.redirect_to or LOGIN).page)
        return False

    return True
