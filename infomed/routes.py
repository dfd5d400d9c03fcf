"""
Route table and the access guard for protected pages.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from infomed.session import Session, SessionStatus


@dataclass(frozen=True)
class Route:
    name: str
    page: str
    title: str
    protected: bool = False


HOME = Route("home", "app.py", "Home")
LOGIN = Route("login", "pages/1_Login.py", "Login")
SIGNUP = Route("signup", "pages/2_Signup.py", "Sign Up")
DASHBOARD = Route("dashboard", "pages/3_Dashboard.py", "Dashboard", protected=True)
CREATE = Route("create", "pages/4_Create_QR.py", "Create QR", protected=True)
VIEW = Route("view", "pages/5_View_Info.py", "View Info")
NOT_FOUND = Route("not_found", "", "Page not found")

ROUTES = {route.name: route for route in (HOME, LOGIN, SIGNUP, DASHBOARD, CREATE, VIEW)}


def resolve(name: Optional[str]) -> Route:
    """Look a route up by name; unknown names resolve to NOT_FOUND."""
    return ROUTES.get(name or "", NOT_FOUND)


class GuardAction(str, Enum):
    RENDER = "render"
    WAIT = "wait"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GuardDecision:
    action: GuardAction
    redirect_to: Optional[Route] = None
    next_route: Optional[Route] = None


def guard(session: Session, route: Route) -> GuardDecision:
    """
    Decide whether ``route`` may render for ``session``.

    Protected routes wait while the session is still loading and redirect
    anonymous visitors to login, remembering where they were going.
    """
    if not route.protected:
        return GuardDecision(GuardAction.RENDER)
    if session.status is SessionStatus.LOADING:
        return GuardDecision(GuardAction.WAIT)
    if session.is_authenticated:
        return GuardDecision(GuardAction.RENDER)
    return GuardDecision(GuardAction.REDIRECT, redirect_to=LOGIN, next_route=route)


def post_login_target(next_name: Optional[str]) -> Route:
    """Where to go after a successful login: the preserved route or the dashboard."""
    route = resolve(next_name)
    if route in (NOT_FOUND, LOGIN, SIGNUP):
        return DASHBOARD
    return route
