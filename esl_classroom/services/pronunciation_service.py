# esl_classroom/services/pronunciation_service.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from esl_classroom.models.pronunciation import PronunciationAttempt, PronunciationExercise
from esl_classroom.models.user import User
from esl_classroom.schemas.pronunciation import AttemptCreate, ExerciseCreate
from esl_classroom.services.pronunciation_scorer import score_transcript
from esl_classroom.workers.queue import enqueue_pronunciation_task

logger = logging.getLogger(__name__)


class ScoringError(Exception):
    pass


def create_exercise(
    db: Session,
    *,
    teacher: User,
    obj_in: ExerciseCreate,
) -> PronunciationExercise:
    db_obj = PronunciationExercise(created_by=teacher.id, **obj_in.model_dump())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def get_exercise(db: Session, exercise_id: int) -> Optional[PronunciationExercise]:
    return db.get(PronunciationExercise, exercise_id)


def list_exercises(
    db: Session,
    *,
    difficulty: str | None = None,
    category: str | None = None,
) -> List[PronunciationExercise]:
    q = db.query(PronunciationExercise)
    if difficulty:
        q = q.filter(PronunciationExercise.difficulty == difficulty)
    if category:
        q = q.filter(PronunciationExercise.category == category)
    return q.order_by(PronunciationExercise.id.asc()).all()


def create_attempt_and_enqueue_task(
    db: Session,
    *,
    student: User,
    obj_in: AttemptCreate,
    exercise: PronunciationExercise | None = None,
) -> PronunciationAttempt:
    """
    Store the attempt as 'pending' and queue the scoring job.
    The target is the exercise phrase when an exercise is given.
    """
    target_text = exercise.phrase if exercise is not None else obj_in.target_text
    attempt = PronunciationAttempt(
        student_id=student.id,
        exercise_id=exercise.id if exercise is not None else None,
        target_text=target_text,
        transcript=obj_in.transcript,
        mode=obj_in.mode,
        status="pending",
    )
    db.add(attempt)
    db.commit()
    db.refresh(attempt)

    enqueue_pronunciation_task(attempt.id)
    return attempt


def get_attempt(db: Session, attempt_id: int) -> Optional[PronunciationAttempt]:
    return db.get(PronunciationAttempt, attempt_id)


def list_attempts_for_student(
    db: Session,
    *,
    student: User,
    skip: int = 0,
    limit: int = 100,
) -> List[PronunciationAttempt]:
    return (
        db.query(PronunciationAttempt)
        .filter(PronunciationAttempt.student_id == student.id)
        .order_by(PronunciationAttempt.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def run_scoring_for_attempt(db: Session, attempt_id: int) -> PronunciationAttempt:
    """
    Worker entry: score one attempt.

    - pronunciation_scorer.score_transcript
    - writes accuracy / feedback
    - status: 'pending' -> 'scored'
    """
    attempt = db.get(PronunciationAttempt, attempt_id)
    if attempt is None:
        raise ScoringError(f"attempt {attempt_id} not found")

    tips = attempt.exercise.tips if attempt.exercise is not None else ()
    try:
        accuracy, _, _, feedback = score_transcript(
            attempt.target_text,
            attempt.transcript,
            mode=attempt.mode,
            tips=tips or (),
        )
    except ValueError as e:
        raise ScoringError(str(e)) from e

    attempt.accuracy = accuracy
    attempt.feedback = feedback
    attempt.scored_at = datetime.now(timezone.utc)
    attempt.status = "scored"

    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    return attempt
