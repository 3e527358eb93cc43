# student_hub/schemas/auth.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from student_hub.models.user import Role
from student_hub.schemas.forms import check_option


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    role: Role = Role.STUDENT
    department: str
    year: str
    section: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        v = v.strip()
        if '@' not in v or v.startswith('@') or v.endswith('@'):
            raise ValueError('Please provide a valid email address')
        return v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name is required')
        return v.strip()

    @field_validator('department')
    @classmethod
    def validate_department(cls, v):
        return check_option('departments', v)

    @field_validator('year')
    @classmethod
    def validate_year(cls, v):
        return check_option('years', v)

    @field_validator('section')
    @classmethod
    def validate_section(cls, v):
        return check_option('sections', v)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    uid: str
    id_token: str
    refresh_token: Optional[str] = None
    expires_in: int = 3600
    role: Optional[Role] = None
