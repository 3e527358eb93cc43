# student_hub/services/roster_service.py
from typing import Dict, Iterable, List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from student_hub.models.achievement import AchievementRecord, submitted_timestamp
from student_hub.models.user import ClassPartition
from student_hub.repositories.achievements import AchievementRepository

UNKNOWN_STUDENT = "Unknown Student"


class RosterGroup(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    student_id: str
    student_name: str
    achievements: List[AchievementRecord]


def group_by_student(records: Iterable[AchievementRecord]) -> List[RosterGroup]:
    """
    Group one class partition's records by student.

    Each input record lands in exactly one group. Within a group records
    are ordered by submission time (stable, so fetch order breaks ties);
    groups are ordered by student name.
    """
    grouped: Dict[str, List[AchievementRecord]] = {}
    names: Dict[str, str] = {}
    for record in records:
        grouped.setdefault(record.student_id, []).append(record)
        if record.student_name and not names.get(record.student_id):
            names[record.student_id] = record.student_name

    groups = [
        RosterGroup(
            student_id=student_id,
            student_name=names.get(student_id) or UNKNOWN_STUDENT,
            achievements=sorted(student_records, key=submitted_timestamp),
        )
        for student_id, student_records in grouped.items()
    ]
    groups.sort(key=lambda group: (group.student_name.casefold(), group.student_id))
    return groups


class RosterService:

    def __init__(self, achievements: AchievementRepository):
        self.achievements = achievements

    async def class_roster(self, partition: ClassPartition) -> List[RosterGroup]:
        """All submissions of a class, grouped by student"""
        return group_by_student(self.achievements.for_class(partition))
