# student_hub/schemas/teammate.py
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class TeammatePostCreate(BaseModel):
    goal: str = Field(..., max_length=200)
    message: str = Field(..., max_length=2000)

    @field_validator('goal', 'message')
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError('Please fill out both your goal and message.')
        return v.strip()


class TeammatePostUpdate(BaseModel):
    goal: Optional[str] = Field(None, max_length=200)
    message: Optional[str] = Field(None, max_length=2000)

    @field_validator('goal', 'message')
    @classmethod
    def not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Goal and message cannot be empty.')
        return v.strip() if v else v
