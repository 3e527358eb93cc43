# student_hub/core/security.py
import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from student_hub.api.deps import get_identity_provider, get_user_repository
from student_hub.core.exceptions import AuthFailure, Forbidden, PreconditionFailed, StudentHubError
from student_hub.core.session import LOGIN_ROUTE, Identity, RouteAction, SessionContext
from student_hub.models.user import Role, UserProfile
from student_hub.repositories.users import UserRepository

logger = logging.getLogger(__name__)

# auto_error=False so a missing header resolves to an anonymous session
security = HTTPBearer(auto_error=False)


async def verify_firebase_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity_provider=Depends(get_identity_provider)
) -> Optional[Dict[str, Any]]:
    """
    Verify Firebase ID token
    """
    if credentials is None:
        return None
    return identity_provider.verify_id_token(credentials.credentials)


async def get_current_user(
    token_data: Optional[Dict[str, Any]] = Depends(verify_firebase_token)
) -> Optional[Dict[str, Any]]:
    """
    Get current user from Firebase token
    """
    if token_data is None:
        return None
    return {
        "uid": token_data["uid"],
        "email": token_data.get("email"),
        "email_verified": token_data.get("email_verified", False),
        "name": token_data.get("name", ""),
    }


async def get_session(
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository)
) -> SessionContext:
    session = SessionContext(users)
    identity = Identity(uid=current_user["uid"], email=current_user["email"]) if current_user else None
    return await session.on_identity_changed(identity)


async def get_ws_session(
    token: Optional[str] = Query(None),
    identity_provider=Depends(get_identity_provider),
    users: UserRepository = Depends(get_user_repository)
) -> SessionContext:
    """
    Session for WebSocket endpoints, which pass the ID token as ?token=.
    An invalid token yields an anonymous session; the endpoint then closes
    the socket instead of failing the handshake with a server error.
    """
    session = SessionContext(users)
    identity = None
    if token:
        try:
            claims = identity_provider.verify_id_token(token)
            identity = Identity(uid=claims["uid"], email=claims.get("email"))
        except StudentHubError as e:
            logger.info(f"WebSocket token rejected: {e.detail}")
    return await session.on_identity_changed(identity)


def enforce_role(session: SessionContext, role: Role) -> UserProfile:
    decision = session.authorize(role)
    if decision.action == RouteAction.RENDER:
        return session.profile
    if decision.action == RouteAction.LOADING:
        raise PreconditionFailed("Session is still loading")
    if decision.reason == "unauthenticated":
        raise AuthFailure("Not authenticated", redirect=decision.target)
    raise Forbidden(f"This area is only available to {role.value} accounts", redirect=decision.target)


def require_role(role: Role):
    """Dependency yielding the caller's profile, or failing with a redirect to login"""

    async def dependency(session: SessionContext = Depends(get_session)) -> UserProfile:
        return enforce_role(session, role)

    return dependency


async def require_signed_in(session: SessionContext = Depends(get_session)) -> SessionContext:
    if session.identity is None:
        raise AuthFailure("Not authenticated", redirect=LOGIN_ROUTE)
    return session


require_student = require_role(Role.STUDENT)
require_faculty = require_role(Role.FACULTY)
