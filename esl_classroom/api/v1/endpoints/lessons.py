# esl_classroom/api/v1/endpoints/lessons.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from esl_classroom.core.security import get_current_teacher, get_current_user
from esl_classroom.db.session import get_db
from esl_classroom.models.lesson import Lesson
from esl_classroom.models.user import User
from esl_classroom.schemas.lesson import (
    Flashcard,
    LessonCreate,
    LessonPublic,
    LessonUpdate,
)
from esl_classroom.services import lesson_service

router = APIRouter(prefix="/lessons", tags=["lessons"])


def _get_own_lesson(db: Session, lesson_id: int, teacher: User) -> Lesson:
    lesson = lesson_service.get_lesson(db, lesson_id)
    if not lesson:
        raise HTTPException(status_code=404, detail="Lesson not found")
    if lesson.teacher_id != teacher.id:
        raise HTTPException(status_code=403, detail="Not allowed to edit this lesson")
    return lesson


@router.post("/", response_model=LessonPublic, status_code=status.HTTP_201_CREATED)
def create_lesson(
    obj_in: LessonCreate,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    return lesson_service.create_lesson(db, teacher=current_teacher, obj_in=obj_in)


@router.get("/", response_model=List[LessonPublic])
def list_lessons(
    level: str | None = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return lesson_service.list_lessons(db, level=level, skip=skip, limit=limit)


@router.get("/flashcards", response_model=List[Flashcard])
def list_flashcards(
    level: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return lesson_service.list_flashcards(db, level=level)


@router.get("/{lesson_id}", response_model=LessonPublic)
def get_lesson(
    lesson_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    lesson = lesson_service.get_lesson(db, lesson_id)
    if not lesson:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lesson not found",
        )
    return lesson


@router.put("/{lesson_id}", response_model=LessonPublic)
def update_lesson(
    lesson_id: int,
    obj_in: LessonUpdate,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    lesson = _get_own_lesson(db, lesson_id, current_teacher)
    return lesson_service.update_lesson(db, db_obj=lesson, obj_in=obj_in)


@router.post("/{lesson_id}/use", response_model=LessonPublic)
def use_lesson(
    lesson_id: int,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    """
    Teacher taught this lesson plan again.
    """
    lesson = _get_own_lesson(db, lesson_id, current_teacher)
    return lesson_service.mark_used(db, db_obj=lesson)


@router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lesson(
    lesson_id: int,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    lesson = _get_own_lesson(db, lesson_id, current_teacher)
    lesson_service.delete_lesson(db, db_obj=lesson)
    return None
