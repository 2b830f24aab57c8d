# esl_classroom/services/class_service.py
import logging
import secrets
import string
from typing import List, Optional

from sqlalchemy.orm import Session

from esl_classroom.core.config import settings
from esl_classroom.models.assignment import Assignment
from esl_classroom.models.classroom import Classroom
from esl_classroom.models.user import User
from esl_classroom.schemas.classroom import (
    ClassroomCreate,
    ClassroomUpdate,
    ClassAnalytics,
)

logger = logging.getLogger(__name__)

_CLEARABLE_FIELDS = {"description", "schedule"}

ENROLLMENT_ALPHABET = string.digits + string.ascii_uppercase


class EnrollmentError(Exception):
    """Base class for a rejected join request."""


class InvalidEnrollmentCode(EnrollmentError):
    pass


class ClassInactive(EnrollmentError):
    pass


class AlreadyEnrolled(EnrollmentError):
    pass


class ClassFull(EnrollmentError):
    pass


class EnrollmentCodeError(Exception):
    """No free enrollment code could be drawn."""


def normalize_enrollment_code(code: str) -> str:
    return code.strip().upper()


def generate_enrollment_code(length: int | None = None) -> str:
    length = length or settings.ENROLLMENT_CODE_LENGTH
    return "".join(secrets.choice(ENROLLMENT_ALPHABET) for _ in range(length))


def _unique_enrollment_code(db: Session) -> str:
    for _ in range(settings.ENROLLMENT_CODE_ATTEMPTS):
        code = generate_enrollment_code()
        taken = (
            db.query(Classroom.id)
            .filter(Classroom.enrollment_code == code)
            .first()
        )
        if taken is None:
            return code
    raise EnrollmentCodeError(
        f"no free enrollment code after {settings.ENROLLMENT_CODE_ATTEMPTS} attempts"
    )


def create_class(
    db: Session,
    *,
    teacher: User,
    obj_in: ClassroomCreate,
) -> Classroom:
    data = obj_in.model_dump()
    db_obj = Classroom(
        teacher_id=teacher.id,
        enrollment_code=_unique_enrollment_code(db),
        is_active=True,
        **data,
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    logger.info(
        f"Teacher {teacher.id} created class {db_obj.id} ({db_obj.enrollment_code})"
    )
    return db_obj


def get_class(db: Session, class_id: int) -> Optional[Classroom]:
    return db.get(Classroom, class_id)


def get_class_by_code(db: Session, code: str) -> Optional[Classroom]:
    return (
        db.query(Classroom)
        .filter(Classroom.enrollment_code == normalize_enrollment_code(code))
        .first()
    )


def list_classes_for_teacher(db: Session, *, teacher: User) -> List[Classroom]:
    return (
        db.query(Classroom)
        .filter(Classroom.teacher_id == teacher.id)
        .order_by(Classroom.created_at.desc(), Classroom.id.desc())
        .all()
    )


def list_classes_for_student(db: Session, *, student: User) -> List[Classroom]:
    return (
        db.query(Classroom)
        .filter(Classroom.students.any(User.id == student.id))
        .order_by(Classroom.created_at.desc(), Classroom.id.desc())
        .all()
    )


def join_class(db: Session, *, student: User, enrollment_code: str) -> Classroom:
    """
    Enroll a student by code. Checks run in this order:
    unknown code, inactive class, already enrolled, class full.
    """
    classroom = get_class_by_code(db, enrollment_code)
    if classroom is None:
        raise InvalidEnrollmentCode("Invalid enrollment code")
    if not classroom.is_active:
        raise ClassInactive("Class is not accepting new students")
    if classroom.has_student(student.id):
        raise AlreadyEnrolled("Already enrolled in this class")
    if classroom.is_full:
        raise ClassFull("Class is full")

    classroom.students.append(student)
    db.add(classroom)
    db.commit()
    db.refresh(classroom)
    logger.info(f"Student {student.id} joined class {classroom.id}")
    return classroom


def remove_student(db: Session, *, classroom: Classroom, student_id: int) -> bool:
    """Returns False when the student was not enrolled (nothing to do)."""
    remaining = [s for s in classroom.students if s.id != student_id]
    if len(remaining) == len(classroom.students):
        return False
    classroom.students = remaining
    db.add(classroom)
    db.commit()
    logger.info(f"Student {student_id} removed from class {classroom.id}")
    return True


def update_class(
    db: Session,
    *,
    db_obj: Classroom,
    obj_in: ClassroomUpdate,
) -> Classroom:
    # null on a NOT NULL column leaves it unchanged
    update_data = {
        field: value
        for field, value in obj_in.model_dump(exclude_unset=True).items()
        if value is not None or field in _CLEARABLE_FIELDS
    }
    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def regenerate_enrollment_code(db: Session, *, db_obj: Classroom) -> Classroom:
    db_obj.enrollment_code = _unique_enrollment_code(db)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    logger.info(f"Class {db_obj.id} enrollment code regenerated")
    return db_obj


def class_analytics(db: Session, *, classroom: Classroom) -> ClassAnalytics:
    assignments: List[Assignment] = (
        db.query(Assignment).filter(Assignment.class_id == classroom.id).all()
    )
    student_count = len(classroom.students)

    submission_count = 0
    graded_count = 0
    late_count = 0
    grade_ratios = []
    for assignment in assignments:
        for sub in assignment.submissions:
            submission_count += 1
            if sub.status == "late":
                late_count += 1
            if sub.grade is not None:
                graded_count += 1
                if assignment.points:
                    grade_ratios.append(sub.grade / assignment.points)

    expected = student_count * len(assignments)
    submission_rate = round(submission_count / expected, 3) if expected else 0.0
    average_grade = (
        round(sum(grade_ratios) / len(grade_ratios) * 100, 1) if grade_ratios else None
    )

    return ClassAnalytics(
        class_id=classroom.id,
        student_count=student_count,
        max_students=classroom.max_students,
        assignment_count=len(assignments),
        submission_count=submission_count,
        graded_count=graded_count,
        late_count=late_count,
        submission_rate=submission_rate,
        average_grade=average_grade,
    )
