# student_hub/api/v1/approvals.py
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from student_hub.api.deps import get_achievement_repository, get_approval_workflow
from student_hub.core.security import require_faculty
from student_hub.models.achievement import AchievementRecord
from student_hub.models.user import UserProfile
from student_hub.repositories.achievements import AchievementRepository
from student_hub.schemas.achievement import RejectRequest
from student_hub.services.approval_service import ApprovalWorkflow
from student_hub.services.profile_service import select_class

router = APIRouter()


@router.get("/approvals", response_model=List[AchievementRecord])
async def get_pending_queue(
    department: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    section: Optional[str] = Query(None),
    faculty: UserProfile = Depends(require_faculty),
    achievements: AchievementRepository = Depends(get_achievement_repository)
):
    """
    Pending submissions of the selected class, oldest first
    """
    partition = select_class(faculty, department, year, section)
    return achievements.pending_for_class(partition)


@router.post("/approvals/{achievement_id}/approve", response_model=AchievementRecord)
async def approve_achievement(
    achievement_id: str,
    background_tasks: BackgroundTasks,
    faculty: UserProfile = Depends(require_faculty),
    workflow: ApprovalWorkflow = Depends(get_approval_workflow)
):
    """
    Verify an achievement, then grow the student's skill set in the background
    """
    record = await workflow.approve(achievement_id, faculty)
    background_tasks.add_task(workflow.extract_skills, record)
    return record


@router.post("/approvals/{achievement_id}/reject", response_model=AchievementRecord)
async def reject_achievement(
    achievement_id: str,
    request: RejectRequest,
    faculty: UserProfile = Depends(require_faculty),
    workflow: ApprovalWorkflow = Depends(get_approval_workflow)
):
    return await workflow.reject(achievement_id, faculty, request.reason)
