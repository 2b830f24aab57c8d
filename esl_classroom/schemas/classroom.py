# esl_classroom/schemas/classroom.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from esl_classroom.core.config import settings
from esl_classroom.schemas.user import UserSummary

ClassLevel = Literal[
    "beginner",
    "elementary",
    "intermediate",
    "upper-intermediate",
    "advanced",
]


class ClassSchedule(BaseModel):
    days: list[str] = []  # ["Monday", "Wednesday"]
    time: str | None = None  # "10:00 AM"
    duration: int | None = Field(default=None, gt=0)  # minutes


class ClassroomBase(BaseModel):
    name: str
    description: str | None = None
    level: ClassLevel = "beginner"
    schedule: ClassSchedule | None = None
    max_students: int = Field(default_factory=lambda: settings.DEFAULT_MAX_STUDENTS, ge=1)

    @field_validator("name", "description")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class ClassroomCreate(ClassroomBase):
    @field_validator("name")
    @classmethod
    def _name_required(cls, v):
        if not v:
            raise ValueError("name must not be empty")
        return v


class ClassroomUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    level: ClassLevel | None = None
    schedule: ClassSchedule | None = None
    max_students: int | None = Field(default=None, ge=1)
    is_active: bool | None = None

    @field_validator("name", "description")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v):
        if v is not None and not v:
            raise ValueError("name must not be empty")
        return v


class JoinRequest(BaseModel):
    enrollment_code: str = Field(min_length=1)


class ClassroomPublic(ClassroomBase):
    id: int
    enrollment_code: str
    is_active: bool
    teacher: UserSummary
    students: list[UserSummary] = []
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str


class ClassAnalytics(BaseModel):
    class_id: int
    student_count: int
    max_students: int
    assignment_count: int
    submission_count: int
    graded_count: int
    late_count: int
    # submissions / (students * assignments)
    submission_rate: float
    # mean of grade / points, as a percentage
    average_grade: float | None = None
