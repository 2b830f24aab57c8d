# esl_classroom/api/v1/endpoints/pronunciation.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from esl_classroom.core.security import get_current_student, get_current_teacher, get_current_user
from esl_classroom.db.session import get_db
from esl_classroom.models.user import User
from esl_classroom.schemas.pronunciation import (
    AttemptCreate,
    AttemptPublic,
    ExerciseCreate,
    ExercisePublic,
    ScoreRequest,
    ScoreResult,
)
from esl_classroom.services import pronunciation_service
from esl_classroom.services.pronunciation_scorer import score_transcript

router = APIRouter(prefix="/pronunciation", tags=["pronunciation"])


@router.post("/score", response_model=ScoreResult)
def score(
    payload: ScoreRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Immediate accuracy check for a live transcript; nothing is stored.
    """
    tips = ()
    if payload.exercise_id is not None:
        exercise = pronunciation_service.get_exercise(db, payload.exercise_id)
        if not exercise:
            raise HTTPException(status_code=404, detail="Exercise not found")
        tips = exercise.tips or ()
    accuracy, matched, total, feedback = score_transcript(
        payload.target, payload.transcript, mode=payload.mode, tips=tips
    )
    return ScoreResult(
        accuracy=accuracy,
        matched_words=matched,
        total_words=total,
        feedback=feedback,
    )


@router.get("/exercises", response_model=List[ExercisePublic])
def list_exercises(
    difficulty: str | None = None,
    category: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return pronunciation_service.list_exercises(db, difficulty=difficulty, category=category)


@router.post("/exercises", response_model=ExercisePublic, status_code=status.HTTP_201_CREATED)
def create_exercise(
    obj_in: ExerciseCreate,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    return pronunciation_service.create_exercise(db, teacher=current_teacher, obj_in=obj_in)


@router.get("/exercises/{exercise_id}", response_model=ExercisePublic)
def get_exercise(
    exercise_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    exercise = pronunciation_service.get_exercise(db, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


@router.post("/attempts", response_model=AttemptPublic, status_code=status.HTTP_201_CREATED)
def create_attempt(
    obj_in: AttemptCreate,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    """
    Store a practice attempt; scoring runs on the worker.
    """
    exercise = None
    if obj_in.exercise_id is not None:
        exercise = pronunciation_service.get_exercise(db, obj_in.exercise_id)
        if not exercise:
            raise HTTPException(status_code=404, detail="Exercise not found")
    elif not obj_in.target_text:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either exercise_id or target_text is required",
        )
    return pronunciation_service.create_attempt_and_enqueue_task(
        db, student=current_student, obj_in=obj_in, exercise=exercise
    )


@router.get("/attempts/me", response_model=List[AttemptPublic])
def list_my_attempts(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    return pronunciation_service.list_attempts_for_student(
        db, student=current_student, skip=skip, limit=limit
    )


@router.get("/attempts/{attempt_id}", response_model=AttemptPublic)
def get_attempt(
    attempt_id: int,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    attempt = pronunciation_service.get_attempt(db, attempt_id)
    if not attempt or attempt.student_id != current_student.id:
        raise HTTPException(status_code=404, detail="Attempt not found")
    return attempt
