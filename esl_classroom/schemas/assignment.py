# esl_classroom/schemas/assignment.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from esl_classroom.schemas.user import UserSummary

AssignmentType = Literal["essay", "grammar", "vocabulary", "listening", "speaking", "reading"]


class AssignmentBase(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: AssignmentType
    points: int = Field(default=100, ge=0)
    due_date: datetime
    attachments: list[str] = []


class AssignmentCreate(AssignmentBase):
    class_id: int


class AssignmentUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    type: AssignmentType | None = None
    points: int | None = Field(default=None, ge=0)
    due_date: datetime | None = None
    attachments: list[str] | None = None


class SubmissionCreate(BaseModel):
    content: str | None = None
    attachments: list[str] = []


class GradeUpdate(BaseModel):
    grade: int = Field(ge=0)
    feedback: str | None = None


class SubmissionPublic(BaseModel):
    id: int
    assignment_id: int
    student: UserSummary
    content: str | None = None
    attachments: list[str] = []
    submitted_at: datetime
    status: str  # on-time / late / graded
    grade: int | None = None
    feedback: str | None = None
    graded_at: datetime | None = None

    model_config = {"from_attributes": True}


class AssignmentPublic(AssignmentBase):
    id: int
    class_id: int
    teacher_id: int
    created_at: datetime | None = None
    submissions: list[SubmissionPublic] = []

    model_config = {"from_attributes": True}


class StudentAssignment(AssignmentBase):
    """An assignment as seen by one student, with their own submission state."""
    id: int
    class_id: int
    class_name: str
    status: str  # pending / on-time / late / graded
    grade: int | None = None
    feedback: str | None = None
    submitted_at: datetime | None = None


class TeacherAssignment(AssignmentBase):
    id: int
    class_id: int
    class_name: str
    total_students: int
    submitted_count: int
    graded_count: int
