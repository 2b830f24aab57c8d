# esl_classroom/api/v1/endpoints/progress.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from esl_classroom.core.security import get_current_student
from esl_classroom.db.session import get_db
from esl_classroom.models.user import User
from esl_classroom.schemas.progress import ProgressCreate, ProgressPublic, ProgressSummary
from esl_classroom.services import lesson_service

router = APIRouter(prefix="/progress", tags=["progress"])


@router.post("/", response_model=ProgressPublic, status_code=status.HTTP_201_CREATED)
def record_progress(
    obj_in: ProgressCreate,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    """
    Student finished a lesson with a score (0-100).
    """
    if lesson_service.get_lesson(db, obj_in.lesson_id) is None:
        raise HTTPException(status_code=404, detail="Lesson not found")
    return lesson_service.record_progress(db, student=current_student, obj_in=obj_in)


@router.get("/me", response_model=ProgressSummary)
def read_my_progress(
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    return lesson_service.progress_summary(db, student=current_student)
