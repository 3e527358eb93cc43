# student_hub/api/v1/reports.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from student_hub.api.deps import get_ai_service
from student_hub.core.security import require_faculty
from student_hub.models.user import UserProfile
from student_hub.schemas.ai import Report, ReportRequest
from student_hub.services.ai_service import AIService
from student_hub.services.profile_service import select_class

router = APIRouter()


@router.post("/reports", response_model=Report)
async def generate_report(
    request: ReportRequest,
    department: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    section: Optional[str] = Query(None),
    faculty: UserProfile = Depends(require_faculty),
    ai_service: AIService = Depends(get_ai_service)
):
    """
    Progress report or recommendation letter from the verified achievements
    of a student in the selected class
    """
    partition = select_class(faculty, department, year, section)
    return await ai_service.report(faculty, request, partition)
