# student_hub/api/v1/recommendations.py
from fastapi import APIRouter, Depends

from student_hub.api.deps import get_ai_service
from student_hub.core.security import require_student
from student_hub.models.user import UserProfile
from student_hub.schemas.ai import Pathway, PathwayRequest, Recommendations
from student_hub.services.ai_service import AIService

router = APIRouter()


@router.get("/recommendations", response_model=Recommendations)
async def get_recommendations(
    student: UserProfile = Depends(require_student),
    ai_service: AIService = Depends(get_ai_service)
):
    """
    Courses, competitions and project ideas matched to the student's skills
    """
    return await ai_service.recommendations(student)


@router.post("/pathway", response_model=Pathway)
async def generate_pathway(
    request: PathwayRequest,
    student: UserProfile = Depends(require_student),
    ai_service: AIService = Depends(get_ai_service)
):
    return await ai_service.pathway(student, request.goal)
