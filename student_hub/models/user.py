# student_hub/models/user.py
import datetime as dt
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

USERS_COLLECTION = "users"


class Role(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"


class ClassPartition(BaseModel):
    """The (department, year, section) triple that routes records to a faculty queue"""

    department: Optional[str] = None
    year: Optional[str] = None
    section: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.department and self.year and self.section)

    def as_filters(self) -> Dict[str, str]:
        return {"department": self.department, "year": self.year, "section": self.section}

    def __str__(self):
        return f"{self.department} - {self.year} - Section {self.section}"


class UserProfile(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    uid: str
    role: Optional[Role] = None
    name: str = ""
    email: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    section: Optional[str] = None
    skill_set: List[str] = []
    created_at: Optional[dt.datetime] = None

    @property
    def partition(self) -> ClassPartition:
        return ClassPartition(department=self.department, year=self.year, section=self.section)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "UserProfile":
        data = dict(document)
        # Profile documents are keyed by uid; older ones only carry it as the id
        data.setdefault("uid", data.get("id"))
        data.pop("id", None)
        return cls.model_validate(data)

    def to_document(self) -> Dict[str, Any]:
        document = self.model_dump(by_alias=True)
        document["role"] = self.role.value if self.role else None
        return document
