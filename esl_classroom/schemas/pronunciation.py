# esl_classroom/schemas/pronunciation.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ScoringMode = Literal["positional", "overlap"]


class ScoreRequest(BaseModel):
    target: str
    transcript: str
    mode: ScoringMode = "positional"
    exercise_id: int | None = None


class ScoreResult(BaseModel):
    accuracy: int  # 0-100
    matched_words: int
    total_words: int
    feedback: list[str]


class ExerciseBase(BaseModel):
    phrase: str = Field(min_length=1)
    ipa: str | None = None
    difficulty: Literal["easy", "medium", "hard"] = "easy"
    category: str | None = None
    tips: list[str] = []
    common_mistakes: list[str] = []


class ExerciseCreate(ExerciseBase):
    pass


class ExercisePublic(ExerciseBase):
    id: int
    created_by: int | None = None

    model_config = {"from_attributes": True}


class AttemptCreate(BaseModel):
    transcript: str
    # either an exercise or a free target phrase
    exercise_id: int | None = None
    target_text: str | None = None
    mode: ScoringMode = "positional"


class AttemptPublic(BaseModel):
    id: int
    student_id: int
    exercise_id: int | None = None
    target_text: str
    transcript: str
    mode: str
    status: str  # pending / scored
    accuracy: int | None = None
    feedback: list[str] | None = None
    scored_at: datetime | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
