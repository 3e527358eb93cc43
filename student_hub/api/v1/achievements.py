# student_hub/api/v1/achievements.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from student_hub.api.deps import get_achievement_service
from student_hub.core.security import require_student
from student_hub.models.achievement import AchievementRecord
from student_hub.models.user import UserProfile
from student_hub.schemas.achievement import DescriptionResponse, ImageUpload
from student_hub.services.achievement_service import AchievementService

router = APIRouter()


async def read_upload(upload: Optional[UploadFile]) -> Optional[ImageUpload]:
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    return ImageUpload(
        filename=upload.filename,
        content=content,
        content_type=upload.content_type or "application/octet-stream",
    )


@router.get("/achievements", response_model=List[AchievementRecord])
async def get_my_achievements(
    student: UserProfile = Depends(require_student),
    achievement_service: AchievementService = Depends(get_achievement_service)
):
    """
    The caller's submissions, newest first
    """
    return await achievement_service.list_own(student)


@router.post("/achievements", response_model=AchievementRecord, status_code=status.HTTP_201_CREATED)
async def submit_achievement(
    title: str = Form(""),
    description: str = Form(""),
    date: str = Form(""),
    image: Optional[UploadFile] = File(None),
    student: UserProfile = Depends(require_student),
    achievement_service: AchievementService = Depends(get_achievement_service)
):
    """
    Submit an achievement with its certificate image for verification
    """
    return await achievement_service.submit(student, title, description, date, await read_upload(image))


@router.put("/achievements/{achievement_id}", response_model=AchievementRecord)
async def resubmit_achievement(
    achievement_id: str,
    title: str = Form(""),
    description: str = Form(""),
    date: str = Form(""),
    image: Optional[UploadFile] = File(None),
    student: UserProfile = Depends(require_student),
    achievement_service: AchievementService = Depends(get_achievement_service)
):
    """
    Edit a pending or rejected achievement; it goes back to the review queue
    """
    return await achievement_service.resubmit(
        achievement_id, student, title, description, date, await read_upload(image)
    )


@router.delete("/achievements/{achievement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_achievement(
    achievement_id: str,
    student: UserProfile = Depends(require_student),
    achievement_service: AchievementService = Depends(get_achievement_service)
):
    await achievement_service.delete(achievement_id, student)


@router.post("/achievements/describe", response_model=DescriptionResponse)
async def describe_certificate(
    title: str = Form(""),
    image: Optional[UploadFile] = File(None),
    student: UserProfile = Depends(require_student),
    achievement_service: AchievementService = Depends(get_achievement_service)
):
    """
    Draft a portfolio description from the certificate image
    """
    description = await achievement_service.generate_description(title, await read_upload(image))
    return DescriptionResponse(description=description)
