# student_hub/models/achievement.py
import datetime as dt
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

ACHIEVEMENTS_COLLECTION = "achievements"


class AchievementStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class AchievementRecord(BaseModel):
    """An achievement document; field aliases match the stored camelCase keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    student_id: str
    student_name: str = ""
    title: str
    description: str = ""
    date: Optional[dt.date] = None
    image_url: Optional[str] = None
    status: AchievementStatus = AchievementStatus.PENDING

    # Class partition, copied from the student's profile at submission time
    department: Optional[str] = None
    year: Optional[str] = None
    section: Optional[str] = None

    submitted_at: Optional[dt.datetime] = None
    last_updated_at: Optional[dt.datetime] = None
    verified_by: Optional[str] = None
    verified_at: Optional[dt.datetime] = None
    blockchain_hash: Optional[str] = None
    rejection_reason: Optional[str] = None

    @field_serializer("date")
    def serialize_date(self, value: Optional[dt.date]) -> Optional[str]:
        return value.isoformat() if value else None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "AchievementRecord":
        return cls.model_validate(document)

    def to_document(self) -> Dict[str, Any]:
        document = self.model_dump(by_alias=True, exclude={"id"})
        document["status"] = self.status.value
        return document

    def __repr__(self):
        return f"<Achievement {self.title} ({self.status.value})>"


def submitted_timestamp(record: AchievementRecord) -> float:
    """Sort key for submission order; records without a timestamp sort first"""
    return record.submitted_at.timestamp() if record.submitted_at else 0.0
