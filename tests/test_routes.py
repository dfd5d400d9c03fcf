"""
Tests for the route guard.
"""

import pytest

from infomed.routes import (
    CREATE,
    DASHBOARD,
    HOME,
    LOGIN,
    NOT_FOUND,
    SIGNUP,
    VIEW,
    GuardAction,
    guard,
    post_login_target,
    resolve,
)
from infomed.schemas import AdminProfile
from infomed.session import INITIAL_SESSION, Session, SessionStatus

ANONYMOUS = Session(SessionStatus.ANONYMOUS, None, False, None)
AUTHENTICATED = Session(SessionStatus.AUTHENTICATED, AdminProfile(name="Alice"), False, None)


class TestGuard:

    @pytest.mark.parametrize("route", [DASHBOARD, CREATE])
    def test_protected_waits_while_loading(self, route):
        assert guard(INITIAL_SESSION, route).action is GuardAction.WAIT

    @pytest.mark.parametrize("route", [DASHBOARD, CREATE])
    def test_protected_redirects_anonymous_with_next(self, route):
        decision = guard(ANONYMOUS, route)

        assert decision.action is GuardAction.REDIRECT
        assert decision.redirect_to == LOGIN
        assert decision.next_route == route

    @pytest.mark.parametrize("route", [DASHBOARD, CREATE])
    def test_protected_renders_when_authenticated(self, route):
        assert guard(AUTHENTICATED, route).action is GuardAction.RENDER

    @pytest.mark.parametrize("route", [HOME, LOGIN, SIGNUP, VIEW])
    @pytest.mark.parametrize("session", [INITIAL_SESSION, ANONYMOUS, AUTHENTICATED])
    def test_public_routes_always_render(self, route, session):
        assert guard(session, route).action is GuardAction.RENDER


class TestRouteTable:

    def test_resolve_known(self):
        assert resolve("create") == CREATE

    @pytest.mark.parametrize("name", ["admin", "", None])
    def test_resolve_unknown_is_not_found(self, name):
        assert resolve(name) == NOT_FOUND

    def test_post_login_returns_to_preserved_route(self):
        assert post_login_target("create") == CREATE

    @pytest.mark.parametrize("name", [None, "login", "signup", "nowhere"])
    def test_post_login_defaults_to_dashboard(self, name):
        assert post_login_target(name) == DASHBOARD
