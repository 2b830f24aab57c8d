# esl_classroom/schemas/progress.py
from datetime import datetime

from pydantic import BaseModel, Field


class ProgressCreate(BaseModel):
    lesson_id: int
    score: int = Field(ge=0, le=100)


class ProgressPublic(BaseModel):
    id: int
    lesson_id: int
    student_id: int
    score: int
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}


class ProgressSummary(BaseModel):
    completed_lessons: int
    average_score: float | None = None
    records: list[ProgressPublic] = []
