# student_hub/services/achievement_service.py
import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from student_hub.core.exceptions import Forbidden, ValidationError
from student_hub.models.achievement import AchievementRecord, AchievementStatus
from student_hub.models.user import UserProfile
from student_hub.repositories.achievements import AchievementRepository
from student_hub.schemas.achievement import ImageUpload
from student_hub.services.approval_service import ApprovalWorkflow
from student_hub.services.storage_service import check_image

logger = logging.getLogger(__name__)

# Statuses a student may still delete; verified records are permanent
DELETABLE_STATUSES = {AchievementStatus.PENDING, AchievementStatus.REJECTED}


def parse_event_date(value: Optional[str]) -> dt.date:
    if not value or not value.strip():
        raise ValidationError("Please fill out all fields and upload a certificate.")
    try:
        return dt.date.fromisoformat(value.strip())
    except ValueError as e:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD") from e


def check_fields(title: Optional[str], description: Optional[str]) -> Dict[str, str]:
    title = (title or "").strip()
    description = (description or "").strip()
    if not title or not description:
        raise ValidationError("Please fill out all fields and upload a certificate.")
    return {"title": title, "description": description}


class AchievementService:
    """Student-side lifecycle of achievement records"""

    def __init__(
        self,
        achievements: AchievementRepository,
        blob_storage,
        workflow: ApprovalWorkflow,
        ai_client
    ):
        self.achievements = achievements
        self.blob_storage = blob_storage
        self.workflow = workflow
        self.ai_client = ai_client

    async def submit(
        self,
        student: UserProfile,
        title: Optional[str],
        description: Optional[str],
        date: Optional[str],
        image: Optional[ImageUpload]
    ) -> AchievementRecord:
        """
        Upload the certificate and create a pending record.

        All fields are checked before the upload so an invalid submission
        never reaches blob storage.
        """
        fields = check_fields(title, description)
        event_date = parse_event_date(date)
        if image is None:
            raise ValidationError("Please fill out all fields and upload a certificate.")
        check_image(image.content, image.content_type)

        image_url = self.blob_storage.upload_image(
            student.uid, image.filename, image.content, image.content_type
        )
        now = dt.datetime.now(dt.timezone.utc)
        record = AchievementRecord(
            student_id=student.uid,
            student_name=student.name,
            title=fields["title"],
            description=fields["description"],
            date=event_date,
            image_url=image_url,
            status=AchievementStatus.PENDING,
            department=student.department,
            year=student.year,
            section=student.section,
            submitted_at=now,
            last_updated_at=now,
        )
        record = self.achievements.create(record)
        logger.info(f"Achievement {record.id} submitted by {student.uid}")
        return record

    async def list_own(self, student: UserProfile) -> List[AchievementRecord]:
        return self.achievements.for_student(student.uid)

    async def delete(self, record_id: str, student: UserProfile):
        record = self.achievements.get(record_id)
        if record.student_id != student.uid:
            raise Forbidden("You can only delete your own achievements")
        if record.status not in DELETABLE_STATUSES:
            raise Forbidden("Verified achievements cannot be deleted")
        self.achievements.delete(record_id, student.uid, DELETABLE_STATUSES)
        logger.info(f"Achievement {record_id} deleted by {student.uid}")

    async def resubmit(
        self,
        record_id: str,
        student: UserProfile,
        title: Optional[str],
        description: Optional[str],
        date: Optional[str],
        image: Optional[ImageUpload] = None
    ) -> AchievementRecord:
        """Edit a pending or rejected record and send it back for review"""
        changes: Dict[str, Any] = check_fields(title, description)
        changes["date"] = parse_event_date(date).isoformat()
        if image is not None:
            check_image(image.content, image.content_type)
            changes["imageUrl"] = self.blob_storage.upload_image(
                student.uid, image.filename, image.content, image.content_type
            )
        return await self.workflow.resubmit(record_id, student, changes)

    async def generate_description(self, title: Optional[str], image: Optional[ImageUpload]) -> str:
        title = (title or "").strip()
        if not title or image is None:
            raise ValidationError("Please provide a title and upload an image first.")
        check_image(image.content, image.content_type)

        prompt = (
            f'Analyze the certificate image for an achievement titled "{title}". '
            "Based *only* on the image, write a professional, concise (2-3 sentences) "
            "description for a student's portfolio. Highlight the skills gained."
        )
        text = await self.ai_client.generate(prompt, image=(image.content, image.content_type))
        return text.strip()
