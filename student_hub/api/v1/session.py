# student_hub/api/v1/session.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from student_hub.core.security import get_session
from student_hub.core.session import RouteDecision, SessionContext, SessionState, resolve_route
from student_hub.models.user import Role, UserProfile

router = APIRouter()


class SessionResponse(BaseModel):
    state: SessionState
    uid: Optional[str] = None
    role: Optional[Role] = None
    profile: Optional[UserProfile] = None
    landing: RouteDecision


@router.get("/session", response_model=SessionResponse)
async def get_current_session(session: SessionContext = Depends(get_session)):
    return SessionResponse(
        state=session.state,
        uid=session.uid,
        role=session.role,
        profile=session.profile,
        landing=session.landing(),
    )


@router.get("/session/route", response_model=RouteDecision)
async def route_decision(
    path: str = Query(..., min_length=1),
    session: SessionContext = Depends(get_session)
):
    """
    What the client should do when navigating to ``path``
    """
    return resolve_route(session, path)
