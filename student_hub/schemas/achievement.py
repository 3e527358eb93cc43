# student_hub/schemas/achievement.py
from pydantic import BaseModel, Field


class RejectRequest(BaseModel):
    reason: str = Field("", max_length=1000)


class DescriptionResponse(BaseModel):
    description: str


class ImageUpload(BaseModel):
    """A certificate image as received from a multipart form"""
    filename: str = "certificate"
    content: bytes
    content_type: str
