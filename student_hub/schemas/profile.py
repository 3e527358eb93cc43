# student_hub/schemas/profile.py
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from student_hub.schemas.forms import check_option


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    department: Optional[str] = None
    year: Optional[str] = None
    section: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip() if v else v

    @field_validator('department')
    @classmethod
    def validate_department(cls, v):
        return v if v is None else check_option('departments', v)

    @field_validator('year')
    @classmethod
    def validate_year(cls, v):
        return v if v is None else check_option('years', v)

    @field_validator('section')
    @classmethod
    def validate_section(cls, v):
        return v if v is None else check_option('sections', v)
