# esl_classroom/api/v1/endpoints/classes.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from esl_classroom.core.security import get_current_user
from esl_classroom.db.session import get_db
from esl_classroom.models.classroom import Classroom
from esl_classroom.models.user import User
from esl_classroom.schemas.classroom import (
    ClassAnalytics,
    ClassroomCreate,
    ClassroomPublic,
    ClassroomUpdate,
    JoinRequest,
    MessageResponse,
)
from esl_classroom.services import class_service
from esl_classroom.services.class_service import (
    EnrollmentCodeError,
    EnrollmentError,
    InvalidEnrollmentCode,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/classes", tags=["classes"])


def _get_class_or_404(db: Session, class_id: int) -> Classroom:
    classroom = class_service.get_class(db, class_id)
    if classroom is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return classroom


def _get_owned_class(db: Session, class_id: int, teacher: User, detail: str) -> Classroom:
    classroom = _get_class_or_404(db, class_id)
    if classroom.teacher_id != teacher.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
    return classroom


@router.post("/", response_model=ClassroomPublic, status_code=status.HTTP_201_CREATED)
def create_class(
    obj_in: ClassroomCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Teacher creates a class; the enrollment code is generated.
    """
    if not current_user.is_teacher:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only teachers can create classes",
        )
    try:
        return class_service.create_class(db, teacher=current_user, obj_in=obj_in)
    except EnrollmentCodeError as e:
        logger.error(f"Could not create class for teacher {current_user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not generate an enrollment code",
        )


@router.get("/teacher", response_model=List[ClassroomPublic])
def list_teacher_classes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return class_service.list_classes_for_teacher(db, teacher=current_user)


@router.get("/student", response_model=List[ClassroomPublic])
def list_student_classes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return class_service.list_classes_for_student(db, student=current_user)


@router.post("/join", response_model=ClassroomPublic)
def join_class(
    payload: JoinRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Student joins a class with its enrollment code (case-insensitive).
    """
    if not current_user.is_student:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only students can join classes",
        )
    try:
        return class_service.join_class(
            db, student=current_user, enrollment_code=payload.enrollment_code
        )
    except InvalidEnrollmentCode as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EnrollmentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{class_id}", response_model=ClassroomPublic)
def get_class(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    classroom = _get_class_or_404(db, class_id)
    # only the teacher and enrolled students may look
    if not classroom.has_member(current_user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return classroom


@router.put("/{class_id}", response_model=ClassroomPublic)
def update_class(
    class_id: int,
    obj_in: ClassroomUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    classroom = _get_owned_class(
        db, class_id, current_user, "Only the teacher can edit this class"
    )
    return class_service.update_class(db, db_obj=classroom, obj_in=obj_in)


@router.post("/{class_id}/enrollment-code", response_model=ClassroomPublic)
def regenerate_enrollment_code(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    classroom = _get_owned_class(
        db, class_id, current_user, "Only the teacher can change the enrollment code"
    )
    try:
        return class_service.regenerate_enrollment_code(db, db_obj=classroom)
    except EnrollmentCodeError as e:
        logger.error(f"Could not regenerate code for class {class_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not generate an enrollment code",
        )


@router.delete("/{class_id}/students/{student_id}", response_model=MessageResponse)
def remove_student(
    class_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    classroom = _get_owned_class(
        db, class_id, current_user, "Only the teacher can remove students"
    )
    class_service.remove_student(db, classroom=classroom, student_id=student_id)
    return MessageResponse(message="Student removed successfully")


@router.get("/{class_id}/analytics", response_model=ClassAnalytics)
def get_class_analytics(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    classroom = _get_owned_class(
        db, class_id, current_user, "Only the teacher can view class analytics"
    )
    return class_service.class_analytics(db, classroom=classroom)
