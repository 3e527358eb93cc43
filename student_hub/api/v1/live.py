# student_hub/api/v1/live.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, status

from student_hub.api.deps import (
    get_achievement_repository,
    get_portfolio_service,
    get_teammate_repository,
    get_ws_manager,
)
from student_hub.core.exceptions import NotFound, StudentHubError, ValidationError
from student_hub.core.security import enforce_role, get_ws_session
from student_hub.core.session import SessionContext
from student_hub.models.user import Role
from student_hub.repositories.achievements import AchievementRepository
from student_hub.repositories.teammates import TeammatePostRepository
from student_hub.services.portfolio_service import PortfolioService, assemble_portfolio
from student_hub.services.profile_service import select_class
from student_hub.services.websocket_manager import WebSocketManager

logger = logging.getLogger(__name__)

router = APIRouter()


async def close_with_error(websocket: WebSocket, error: StudentHubError):
    logger.info(f"Rejected live stream: {error.detail}")
    await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=error.detail)


@router.websocket("/live/achievements")
async def live_own_achievements(
    websocket: WebSocket,
    session: SessionContext = Depends(get_ws_session),
    achievements: AchievementRepository = Depends(get_achievement_repository),
    ws_manager: WebSocketManager = Depends(get_ws_manager)
):
    """The caller's submissions, newest first, re-sent on every change"""
    try:
        student = enforce_role(session, Role.STUDENT)
    except StudentHubError as e:
        await close_with_error(websocket, e)
        return

    await ws_manager.stream(
        student.uid, websocket, "achievements",
        lambda callback: achievements.listen_student(student.uid, callback)
    )


@router.websocket("/live/approvals")
async def live_pending_queue(
    websocket: WebSocket,
    department: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    section: Optional[str] = Query(None),
    session: SessionContext = Depends(get_ws_session),
    achievements: AchievementRepository = Depends(get_achievement_repository),
    ws_manager: WebSocketManager = Depends(get_ws_manager)
):
    """Pending queue of the selected class, oldest first"""
    try:
        faculty = enforce_role(session, Role.FACULTY)
        partition = select_class(faculty, department, year, section)
    except StudentHubError as e:
        await close_with_error(websocket, e)
        return

    if not partition.is_complete:
        await close_with_error(websocket, ValidationError("Select a department, year and section"))
        return

    await ws_manager.stream(
        faculty.uid, websocket, "approvals",
        lambda callback: achievements.listen_pending_queue(partition, callback)
    )


@router.websocket("/live/class-view")
async def live_class_view(
    websocket: WebSocket,
    department: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    section: Optional[str] = Query(None),
    session: SessionContext = Depends(get_ws_session),
    achievements: AchievementRepository = Depends(get_achievement_repository),
    ws_manager: WebSocketManager = Depends(get_ws_manager)
):
    try:
        faculty = enforce_role(session, Role.FACULTY)
        partition = select_class(faculty, department, year, section)
    except StudentHubError as e:
        await close_with_error(websocket, e)
        return

    if not partition.is_complete:
        await close_with_error(websocket, ValidationError("Select a department, year and section"))
        return

    await ws_manager.stream(
        faculty.uid, websocket, "class-view",
        lambda callback: achievements.listen_class(partition, callback)
    )


@router.websocket("/live/teammates")
async def live_teammate_board(
    websocket: WebSocket,
    session: SessionContext = Depends(get_ws_session),
    posts: TeammatePostRepository = Depends(get_teammate_repository),
    ws_manager: WebSocketManager = Depends(get_ws_manager)
):
    """Teammate posts, newest first"""
    try:
        student = enforce_role(session, Role.STUDENT)
    except StudentHubError as e:
        await close_with_error(websocket, e)
        return

    await ws_manager.stream(student.uid, websocket, "teammates", posts.listen_newest_first)


@router.websocket("/live/portfolio/{student_id}")
async def live_portfolio(
    websocket: WebSocket,
    student_id: str,
    achievements: AchievementRepository = Depends(get_achievement_repository),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
    ws_manager: WebSocketManager = Depends(get_ws_manager)
):
    """Public: verified achievements of one student, newest event first"""
    try:
        name = portfolio_service.student_name(student_id)
    except NotFound as e:
        await close_with_error(websocket, e)
        return

    def subscribe(callback):
        return achievements.listen_verified_for_student(
            student_id,
            lambda records: callback(assemble_portfolio(student_id, name, records).achievements)
        )

    await ws_manager.stream(f"public:{student_id}", websocket, "portfolio", subscribe)
