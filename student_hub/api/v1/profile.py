# student_hub/api/v1/profile.py
from typing import Dict, List

from fastapi import APIRouter, Depends

from student_hub.api.deps import get_profile_service
from student_hub.core.exceptions import NotFound
from student_hub.core.security import require_signed_in, require_student
from student_hub.core.session import SessionContext
from student_hub.models.user import UserProfile
from student_hub.schemas.forms import FORM_OPTIONS
from student_hub.schemas.profile import ProfileUpdate
from student_hub.services.profile_service import ProfileService

router = APIRouter()


@router.get("/profile/options", response_model=Dict[str, List[str]])
async def get_form_options():
    return FORM_OPTIONS


@router.get("/profile", response_model=UserProfile)
async def get_profile(session: SessionContext = Depends(require_signed_in)):
    if session.profile is None:
        raise NotFound("Profile not found")
    return session.profile


@router.patch("/profile", response_model=UserProfile)
async def update_profile(
    data: ProfileUpdate,
    student: UserProfile = Depends(require_student),
    profile_service: ProfileService = Depends(get_profile_service)
):
    return await profile_service.update_profile(student, data)
