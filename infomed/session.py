"""
Admin session state machine.

``Session`` is an immutable snapshot; the module-level transition functions
are pure and map one snapshot to the next. ``SessionService`` performs the
remote calls, persists credentials and applies the transitions.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from infomed.api_client import (
    APIClient,
    APIError,
    MalformedResponseError,
    SessionExpiredError,
    unwrap,
)
from infomed.core.logging import get_logger
from infomed.schemas import AdminProfile
from infomed.storage import CredentialStore

logger = get_logger(__name__)


class SessionStatus(str, Enum):
    LOADING = "loading"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Session:
    """Who is logged in, plus the in-flight and last-error flags."""
    status: SessionStatus = SessionStatus.LOADING
    admin: Optional[AdminProfile] = None
    loading: bool = True
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.admin is not None


INITIAL_SESSION = Session()


def begin_request(state: Session) -> Session:
    """A login or signup is in flight; the previous error is dropped."""
    return replace(state, loading=True, error=None)


def resolve_admin(state: Session, admin: Optional[AdminProfile]) -> Session:
    """Settle on an identity: authenticated with ``admin`` or anonymous."""
    status = SessionStatus.AUTHENTICATED if admin is not None else SessionStatus.ANONYMOUS
    return replace(state, status=status, admin=admin, loading=False)


def fail(state: Session, message: str) -> Session:
    """Record a failed request. A failure while loading settles anonymous."""
    if state.status is SessionStatus.LOADING:
        state = resolve_admin(state, None)
    return replace(state, loading=False, error=message)


def clear_error(state: Session) -> Session:
    if state.error is None:
        return state
    return replace(state, error=None)


def logged_out(state: Session) -> Session:
    return Session(status=SessionStatus.ANONYMOUS, admin=None, loading=False, error=None)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of login/signup as seen by the view layer."""
    success: bool
    data: Optional[dict] = None
    error: Optional[str] = None


SessionListener = Callable[[Session], None]


class SessionService:
    """
    Single source of truth for the logged-in admin.

    Constructed explicitly with its collaborators and handed to the views.
    ``init()`` runs the startup revalidation; ``teardown()`` detaches it from
    the API client.
    """

    def __init__(self, api: APIClient, store: CredentialStore):
        self.api = api
        self.store = store
        self._state = INITIAL_SESSION
        self._listeners: list[SessionListener] = []
        self.api.subscribe(self._on_session_expired)

    @property
    def state(self) -> Session:
        return self._state

    def on_change(self, listener: SessionListener) -> None:
        """Register a callback invoked after every state change."""
        self._listeners.append(listener)

    def _set(self, state: Session) -> None:
        if state is self._state:
            return
        previous = self._state
        self._state = state
        if previous.status is not state.status:
            logger.info(f"Session {previous.status.value} -> {state.status.value}")
        for listener in list(self._listeners):
            listener(state)

    def init(self) -> Session:
        """
        Revalidate persisted credentials.

        Without a persisted pair the session settles anonymous without
        touching the network. Otherwise GET /auth/me decides; any failure
        removes the persisted pair.
        """
        persisted = self.store.load()
        if persisted is None:
            if self.store.has_any():
                logger.warning("Discarding incomplete persisted credentials")
                self.store.clear()
            self._set(resolve_admin(self._state, None))
            return self._state

        token, _ = persisted
        try:
            admin = self._parse_admin(unwrap(self.api.auth.me()))
        except APIError as e:
            logger.warning(f"Token verification failed: {e.message}")
            # 401 is already cleared by the client
            if not isinstance(e, SessionExpiredError):
                self.store.clear()
            self._set(resolve_admin(self._state, None))
            return self._state

        self.store.save(token, admin)
        self._set(resolve_admin(self._state, admin))
        return self._state

    def teardown(self) -> None:
        self.api.unsubscribe(self._on_session_expired)
        self._listeners.clear()

    def login(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password."""
        logger.info(f"Login attempt for {email}")
        return self._authenticate(
            lambda: self.api.auth.login({"email": email, "password": password}),
            "An error occurred during login",
        )

    def signup(self, name: str, email: str, password: str) -> AuthResult:
        """
        Register a new admin and log it in.

        Callers validate the form first (see ``validation.validate_signup``).
        """
        logger.info(f"Signup attempt for {email}")
        return self._authenticate(
            lambda: self.api.auth.signup({"name": name, "email": email, "password": password}),
            "An error occurred during signup",
        )

    def logout(self) -> None:
        self.store.clear()
        self._set(logged_out(self._state))

    def clear_error(self) -> None:
        self._set(clear_error(self._state))

    def _authenticate(self, call: Callable[[], dict], fallback: str) -> AuthResult:
        self._set(begin_request(self._state))
        try:
            payload = unwrap(call())
            token = payload.get("token")
            raw_admin = payload.get("admin")
            if not token or not raw_admin:
                raise MalformedResponseError("Invalid response: missing admin or token")
            admin = self._parse_admin(payload)
        except APIError as e:
            message = e.message or fallback
            logger.warning(f"Authentication failed: {message}")
            self._set(fail(self._state, message))
            return AuthResult(success=False, error=message)

        self.store.save(token, admin)
        self._set(resolve_admin(self._state, admin))
        return AuthResult(success=True, data=payload)

    @staticmethod
    def _parse_admin(payload: dict[str, Any]) -> AdminProfile:
        raw_admin = payload.get("admin")
        if not isinstance(raw_admin, dict):
            raise MalformedResponseError("Invalid response: missing admin")
        try:
            return AdminProfile.model_validate(raw_admin)
        except PydanticValidationError as e:
            raise MalformedResponseError("Invalid response: unreadable admin profile") from e

    def _on_session_expired(self, error: SessionExpiredError) -> None:
        self._set(logged_out(self._state))
