"""
Session state management for the Streamlit pages.

One SessionService (with its API client and credential store) is built per
browser session and kept in ``st.session_state``.
"""

from typing import Optional

import streamlit as st

from infomed.api_client import APIClient, SessionExpiredError
from infomed.core.config import get_settings
from infomed.core.logging import get_logger, setup_logging
from infomed.routes import LOGIN, Route
from infomed.session import SessionService
from infomed.storage import CredentialStore, build_storage

logger = get_logger(__name__)

SERVICE_KEY = "session_service"
REDIRECT_KEY = "redirect_to_login"
NEXT_KEY = "next_route"


def _on_session_expired(error: SessionExpiredError) -> None:
    """Navigation half of the 401 policy: send the admin to login on next render."""
    st.session_state[REDIRECT_KEY] = True


def _build_service(base_url: str) -> SessionService:
    settings = get_settings()
    store = CredentialStore(build_storage(settings, st.session_state))
    api = APIClient(
        base_url,
        store,
        timeout=settings.REQUEST_TIMEOUT,
        retries=settings.REQUEST_RETRIES,
        retry_delay=settings.RETRY_DELAY,
    )
    api.subscribe(_on_session_expired)
    return SessionService(api, store)


def init_session_state() -> SessionService:
    """
    Initialize session state and run the startup revalidation once.

    Should be called at the start of every page.
    """
    if "base_url" not in st.session_state:
        st.session_state.base_url = get_settings().API_BASE_URL

    if SERVICE_KEY not in st.session_state:
        setup_logging()
        service = _build_service(st.session_state.base_url)
        st.session_state[SERVICE_KEY] = service
        service.init()
    return st.session_state[SERVICE_KEY]


def reset_session_state(base_url: Optional[str] = None) -> SessionService:
    """Tear the current service down and build a fresh one (e.g. new API URL)."""
    service = st.session_state.pop(SERVICE_KEY, None)
    if service is not None:
        service.api.unsubscribe(_on_session_expired)
        service.teardown()
    if base_url:
        st.session_state.base_url = base_url
    logger.info(f"Session reset against {st.session_state.get('base_url')}")
    return init_session_state()


def get_session_service() -> SessionService:
    return init_session_state()


def get_api_client() -> APIClient:
    """Get the API client of the current browser session."""
    return get_session_service().api


def is_authenticated() -> bool:
    return get_session_service().state.is_authenticated


def get_admin_name() -> Optional[str]:
    admin = get_session_service().state.admin
    return admin.name if admin else None


def remember_next_route(route: Optional[Route]) -> None:
    if route is None:
        st.session_state.pop(NEXT_KEY, None)
    else:
        st.session_state[NEXT_KEY] = route.name


def pop_next_route() -> Optional[str]:
    return st.session_state.pop(NEXT_KEY, None)


def apply_pending_redirect(current: Route) -> None:
    """Follow a redirect requested by a 401, unless already on the login page."""
    if not st.session_state.pop(REDIRECT_KEY, False):
        return
    if current != LOGIN:
        st.switch_page(LOGIN.page)
