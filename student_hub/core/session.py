# student_hub/core/session.py
"""
Session context and role-gated route resolution.

A ``SessionContext`` starts in the LOADING state, is updated on every
identity change and is torn down on sign-out. Protected routes never
redirect while the session is still loading; they resolve to a neutral
loading decision instead.
"""
import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from student_hub.models.user import Role, UserProfile
from student_hub.repositories.users import UserRepository

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/login"
REGISTER_ROUTE = "/register"
ROOT_ROUTE = "/"
PORTFOLIO_PREFIX = "/portfolio/"

DASHBOARDS = {
    Role.STUDENT: "/student-dashboard",
    Role.FACULTY: "/faculty-dashboard",
}

AREA_PAGES = {
    Role.STUDENT: ("profile", "achievements", "recommendations", "pathway", "find-teammates"),
    Role.FACULTY: ("profile", "approval", "class-view", "reports", "analytics"),
}


class SessionState(str, Enum):
    LOADING = "loading"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class RouteAction(str, Enum):
    RENDER = "render"
    LOADING = "loading"
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"


class RouteDecision(BaseModel):
    action: RouteAction
    target: Optional[str] = None
    reason: Optional[str] = None


class Identity(BaseModel):
    uid: str
    email: Optional[str] = None


class SessionContext:

    def __init__(self, users: UserRepository):
        self.users = users
        self.state = SessionState.LOADING
        self.identity: Optional[Identity] = None
        self.profile: Optional[UserProfile] = None

    async def on_identity_changed(self, identity: Optional[Identity]) -> "SessionContext":
        """Resolve a new identity to its profile and role"""
        self.state = SessionState.LOADING
        self.identity = identity
        self.profile = None
        if identity is None:
            self.state = SessionState.ANONYMOUS
            return self

        self.profile = self.users.get(identity.uid)
        if self.profile is None:
            logger.warning(f"No profile document for identity {identity.uid}")
        self.state = SessionState.AUTHENTICATED
        return self

    def sign_out(self):
        self.identity = None
        self.profile = None
        self.state = SessionState.ANONYMOUS

    @property
    def uid(self) -> Optional[str]:
        return self.identity.uid if self.identity else None

    @property
    def role(self) -> Optional[Role]:
        return self.profile.role if self.profile else None

    def authorize(self, required_role: Role) -> RouteDecision:
        if self.state == SessionState.LOADING:
            return RouteDecision(action=RouteAction.LOADING)
        if self.identity is None:
            return RouteDecision(action=RouteAction.REDIRECT, target=LOGIN_ROUTE, reason="unauthenticated")
        if self.role != required_role:
            # Mismatched roles go to login, not to their own dashboard
            return RouteDecision(action=RouteAction.REDIRECT, target=LOGIN_ROUTE, reason="role_mismatch")
        return RouteDecision(action=RouteAction.RENDER)

    def landing(self) -> RouteDecision:
        """Where ``/`` sends this session"""
        if self.state == SessionState.LOADING:
            return RouteDecision(action=RouteAction.LOADING)
        if self.identity is None or self.role not in DASHBOARDS:
            return RouteDecision(action=RouteAction.REDIRECT, target=LOGIN_ROUTE)
        return RouteDecision(action=RouteAction.REDIRECT, target=DASHBOARDS[self.role])


def resolve_route(session: SessionContext, path: str) -> RouteDecision:
    """Decide what a client-side route should do for the given session"""
    path = "/" + path.strip("/")

    if path == ROOT_ROUTE:
        return session.landing()

    if path in (LOGIN_ROUTE, REGISTER_ROUTE):
        if session.state == SessionState.AUTHENTICATED:
            return RouteDecision(action=RouteAction.REDIRECT, target=ROOT_ROUTE)
        return RouteDecision(action=RouteAction.RENDER)

    if path.startswith(PORTFOLIO_PREFIX) and len(path) > len(PORTFOLIO_PREFIX):
        return RouteDecision(action=RouteAction.RENDER)

    for role, dashboard in DASHBOARDS.items():
        if path != dashboard and not path.startswith(dashboard + "/"):
            continue
        decision = session.authorize(role)
        if decision.action != RouteAction.RENDER:
            return decision
        page = path[len(dashboard):].strip("/")
        if not page:
            return RouteDecision(action=RouteAction.REDIRECT, target=f"{dashboard}/profile")
        if page not in AREA_PAGES[role]:
            return RouteDecision(action=RouteAction.NOT_FOUND)
        return decision

    return RouteDecision(action=RouteAction.NOT_FOUND)
