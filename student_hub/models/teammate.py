# student_hub/models/teammate.py
import datetime as dt
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

TEAMMATE_POSTS_COLLECTION = "teammatePosts"


class TeammatePost(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    author_id: str
    author_name: str = ""
    author_email: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    goal: str
    message: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "TeammatePost":
        return cls.model_validate(document)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"})
