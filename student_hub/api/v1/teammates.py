# student_hub/api/v1/teammates.py
from typing import List

from fastapi import APIRouter, Depends, status

from student_hub.api.deps import get_teammate_service
from student_hub.core.security import require_student
from student_hub.models.teammate import TeammatePost
from student_hub.models.user import UserProfile
from student_hub.schemas.teammate import TeammatePostCreate, TeammatePostUpdate
from student_hub.services.teammate_service import TeammateService

router = APIRouter()


@router.get("/teammates", response_model=List[TeammatePost])
async def get_posts(
    student: UserProfile = Depends(require_student),
    teammate_service: TeammateService = Depends(get_teammate_service)
):
    return await teammate_service.list_posts()


@router.post("/teammates", response_model=TeammatePost, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: TeammatePostCreate,
    student: UserProfile = Depends(require_student),
    teammate_service: TeammateService = Depends(get_teammate_service)
):
    return await teammate_service.create_post(student, data)


@router.patch("/teammates/{post_id}", response_model=TeammatePost)
async def update_post(
    post_id: str,
    data: TeammatePostUpdate,
    student: UserProfile = Depends(require_student),
    teammate_service: TeammateService = Depends(get_teammate_service)
):
    return await teammate_service.update_post(post_id, student, data)


@router.delete("/teammates/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    student: UserProfile = Depends(require_student),
    teammate_service: TeammateService = Depends(get_teammate_service)
):
    await teammate_service.delete_post(post_id, student)
