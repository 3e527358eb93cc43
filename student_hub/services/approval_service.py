# student_hub/services/approval_service.py
import hashlib
import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping

from student_hub.core.exceptions import Forbidden, ValidationError
from student_hub.models.achievement import AchievementRecord, AchievementStatus
from student_hub.models.user import Role, UserProfile
from student_hub.repositories.achievements import AchievementRepository
from student_hub.repositories.users import UserRepository
from student_hub.services.skill_extractor import SkillExtractor

logger = logging.getLogger(__name__)


def integrity_stamp(record_id: str, verified_at: datetime) -> str:
    """Verification token for an approved record: sha256 of "<id>-<epoch millis>"."""
    millis = int(verified_at.timestamp() * 1000)
    return hashlib.sha256(f"{record_id}-{millis}".encode("utf-8")).hexdigest()


class ApprovalWorkflow:
    """
    Moves achievements through pending -> verified | rejected, and
    rejected -> pending on resubmission.

    Every transition is a conditional write against the expected source
    status, so a second approval of the same record fails with
    PreconditionFailed instead of overwriting the first stamp.
    """

    def __init__(
        self,
        achievements: AchievementRepository,
        users: UserRepository,
        skill_extractor: SkillExtractor
    ):
        self.achievements = achievements
        self.users = users
        self.skill_extractor = skill_extractor

    async def approve(self, record_id: str, faculty: UserProfile) -> AchievementRecord:
        self._require_faculty(faculty)
        verified_at = datetime.now(timezone.utc)
        record = self.achievements.transition(
            record_id,
            {AchievementStatus.PENDING},
            {
                "status": AchievementStatus.VERIFIED.value,
                "blockchainHash": integrity_stamp(record_id, verified_at),
                "verifiedBy": faculty.uid,
                "verifiedAt": verified_at,
            }
        )
        logger.info(f"Achievement {record_id} verified by {faculty.uid}")
        return record

    async def reject(self, record_id: str, faculty: UserProfile, reason: str) -> AchievementRecord:
        self._require_faculty(faculty)
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Please provide a reason for rejection.")
        record = self.achievements.transition(
            record_id,
            {AchievementStatus.PENDING},
            {
                "status": AchievementStatus.REJECTED.value,
                "rejectionReason": reason,
            }
        )
        logger.info(f"Achievement {record_id} rejected by {faculty.uid}")
        return record

    async def resubmit(
        self,
        record_id: str,
        student: UserProfile,
        changes: Mapping[str, Any]
    ) -> AchievementRecord:
        """
        Apply the student's edits and put the record back in the queue.

        ``changes`` uses stored field names (title, description, date, imageUrl).
        """
        current = self.achievements.get(record_id)
        if current.student_id != student.uid:
            raise Forbidden("Only the submitting student can edit this achievement")

        record = self.achievements.transition(
            record_id,
            {AchievementStatus.PENDING, AchievementStatus.REJECTED},
            {
                **changes,
                "status": AchievementStatus.PENDING.value,
                "rejectionReason": None,
                "blockchainHash": None,
                "verifiedBy": None,
                "verifiedAt": None,
                "lastUpdatedAt": datetime.now(timezone.utc),
            }
        )
        logger.info(f"Achievement {record_id} resubmitted by {student.uid}")
        return record

    async def extract_skills(self, record: AchievementRecord) -> List[str]:
        """
        Grow the student's skillSet from an approved record.

        Runs after the approval is committed and never raises: a failure here
        must leave the verified status untouched.
        """
        try:
            skills = await self.skill_extractor.extract(record.title, record.description)
            profile = self.users.get(record.student_id)
            known = {skill.casefold() for skill in (profile.skill_set if profile else [])}
            fresh = [skill for skill in skills if skill.casefold() not in known]
            if fresh:
                self.users.add_skills(record.student_id, fresh)
            return fresh
        except Exception as e:
            logger.warning(f"Failed to extract or save skills for achievement {record.id}: {e}")
            return []

    @staticmethod
    def _require_faculty(actor: UserProfile):
        if actor.role != Role.FACULTY:
            raise Forbidden("Only faculty members can review achievements")
