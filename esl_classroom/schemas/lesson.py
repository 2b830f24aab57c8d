# esl_classroom/schemas/lesson.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ActivityType = Literal["speaking", "listening", "reading", "writing", "grammar", "vocabulary"]


class Activity(BaseModel):
    name: str
    type: ActivityType
    duration: int = Field(default=10, gt=0)  # minutes
    description: str | None = None


class VocabularyItem(BaseModel):
    word: str
    translation: str | None = None
    pronunciation: str | None = None
    example: str | None = None


class Phrase(BaseModel):
    english: str
    korean: str | None = None
    pronunciation: str | None = None


class LessonBase(BaseModel):
    title: str = Field(min_length=1)
    title_ko: str | None = None
    level: str = "beginner"
    duration: int | None = Field(default=None, gt=0)
    objectives: list[str] = []
    materials: list[str] = []
    activities: list[Activity] = []
    homework: str | None = None
    notes: str | None = None
    vocabulary: list[VocabularyItem] = []
    phrases: list[Phrase] = []


class LessonCreate(LessonBase):
    pass


class LessonUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    title_ko: str | None = None
    level: str | None = None
    duration: int | None = Field(default=None, gt=0)
    objectives: list[str] | None = None
    materials: list[str] | None = None
    activities: list[Activity] | None = None
    homework: str | None = None
    notes: str | None = None
    vocabulary: list[VocabularyItem] | None = None
    phrases: list[Phrase] | None = None


class LessonPublic(LessonBase):
    id: int
    teacher_id: int | None = None
    times_used: int = 0
    last_used_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class Flashcard(BaseModel):
    lesson_id: int
    word: str
    translation: str | None = None
    example: str | None = None
