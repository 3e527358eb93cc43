# student_hub/schemas/ai.py
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Opportunity(CamelModel):
    title: str
    description: str = ""
    link: str = ""


class Recommendations(CamelModel):
    courses: List[Opportunity] = []
    competitions: List[Opportunity] = []
    projects: List[Opportunity] = []


class PathwayRequest(BaseModel):
    goal: str = Field(..., max_length=200)

    @field_validator('goal')
    @classmethod
    def validate_goal(cls, v):
        if not v.strip():
            raise ValueError('Please enter your career goal.')
        return v.strip()


class RoadmapStageDraft(CamelModel):
    title: str
    topics: List[str] = []


class Milestone(CamelModel):
    title: str
    description: str = ""


class PathwayDraft(CamelModel):
    """Pathway exactly as the model returns it"""
    roadmap: List[RoadmapStageDraft]
    learning_resources: List[Opportunity] = []
    project_milestones: List[Milestone] = []
    peer_finder_message: str = ""


class PathwayTopic(CamelModel):
    name: str
    completed: bool = False


class RoadmapStage(CamelModel):
    title: str
    topics: List[PathwayTopic]


class Pathway(CamelModel):
    goal: str
    roadmap: List[RoadmapStage]
    learning_resources: List[Opportunity]
    project_milestones: List[Milestone]
    peer_finder_message: str


class ReportType(str, Enum):
    PROGRESS_REPORT = "Progress Report"
    RECOMMENDATION_LETTER = "Recommendation Letter"


class ReportRequest(CamelModel):
    student_id: str = Field(..., min_length=1)
    report_type: ReportType


class Report(CamelModel):
    student_id: str
    student_name: str
    report_type: ReportType
    content: str
