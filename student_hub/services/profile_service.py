# student_hub/services/profile_service.py
import logging
from typing import Optional

from student_hub.core.exceptions import ValidationError
from student_hub.models.user import ClassPartition, UserProfile
from student_hub.repositories.users import UserRepository
from student_hub.schemas.forms import FORM_OPTIONS
from student_hub.schemas.profile import ProfileUpdate

logger = logging.getLogger(__name__)


class ProfileService:

    def __init__(self, users: UserRepository):
        self.users = users

    async def update_profile(self, profile: UserProfile, data: ProfileUpdate) -> UserProfile:
        """
        Edit name and class partition. Existing achievements keep the
        partition they were submitted under.
        """
        updates = data.model_dump(exclude_none=True)
        if not updates:
            raise ValidationError("Nothing to update")
        self.users.update(profile.uid, updates)
        logger.info(f"Profile {profile.uid} updated: {', '.join(sorted(updates))}")
        return profile.model_copy(update=updates)


def select_class(
    faculty: UserProfile,
    department: Optional[str] = None,
    year: Optional[str] = None,
    section: Optional[str] = None
) -> ClassPartition:
    """
    The class a faculty view operates on: the faculty profile's own
    partition, with any explicitly chosen component overriding it.
    """
    chosen = {"departments": department, "years": year, "sections": section}
    for field, value in chosen.items():
        if value is not None and value not in FORM_OPTIONS[field]:
            raise ValidationError(f"Unknown {field[:-1]} '{value}'")
    own = faculty.partition
    return ClassPartition(
        department=department or own.department,
        year=year or own.year,
        section=section or own.section,
    )
