# esl_classroom/services/assignment_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from esl_classroom.models.assignment import Assignment, AssignmentSubmission
from esl_classroom.models.classroom import Classroom
from esl_classroom.models.user import User
from esl_classroom.schemas.assignment import (
    AssignmentCreate,
    AssignmentUpdate,
    GradeUpdate,
    StudentAssignment,
    SubmissionCreate,
    TeacherAssignment,
)

logger = logging.getLogger(__name__)


class SubmissionError(Exception):
    pass


class GradingError(Exception):
    pass


def create_assignment(
    db: Session,
    *,
    teacher: User,
    classroom: Classroom,
    obj_in: AssignmentCreate,
) -> Assignment:
    data = obj_in.model_dump(exclude={"class_id"})
    db_obj = Assignment(class_id=classroom.id, teacher_id=teacher.id, **data)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    logger.info(f"Assignment {db_obj.id} created for class {classroom.id}")
    return db_obj


def get_assignment(db: Session, assignment_id: int) -> Optional[Assignment]:
    return db.get(Assignment, assignment_id)


def list_assignments_for_class(db: Session, *, class_id: int) -> List[Assignment]:
    return (
        db.query(Assignment)
        .filter(Assignment.class_id == class_id)
        .order_by(Assignment.due_date.asc())
        .all()
    )


def list_assignments_for_teacher(db: Session, *, teacher: User) -> List[TeacherAssignment]:
    assignments = (
        db.query(Assignment)
        .filter(Assignment.teacher_id == teacher.id)
        .order_by(Assignment.due_date.asc())
        .all()
    )
    return [
        TeacherAssignment(
            id=a.id,
            class_id=a.class_id,
            class_name=a.classroom.name,
            title=a.title,
            description=a.description,
            type=a.type,
            points=a.points,
            due_date=a.due_date,
            attachments=a.attachments or [],
            total_students=len(a.classroom.students),
            submitted_count=len(a.submissions),
            graded_count=sum(1 for s in a.submissions if s.grade is not None),
        )
        for a in assignments
    ]


def list_assignments_for_student(db: Session, *, student: User) -> List[StudentAssignment]:
    """
    Every assignment of every class the student is enrolled in,
    merged with the student's own submission (status 'pending' if none).
    """
    assignments = (
        db.query(Assignment)
        .join(Classroom, Assignment.class_id == Classroom.id)
        .filter(Classroom.students.any(User.id == student.id))
        .order_by(Assignment.due_date.asc())
        .all()
    )
    result = []
    for a in assignments:
        own = find_submission(a, student.id)
        result.append(
            StudentAssignment(
                id=a.id,
                class_id=a.class_id,
                class_name=a.classroom.name,
                title=a.title,
                description=a.description,
                type=a.type,
                points=a.points,
                due_date=a.due_date,
                attachments=a.attachments or [],
                status=own.status if own else "pending",
                grade=own.grade if own else None,
                feedback=own.feedback if own else None,
                submitted_at=own.submitted_at if own else None,
            )
        )
    return result


def update_assignment(
    db: Session,
    *,
    db_obj: Assignment,
    obj_in: AssignmentUpdate,
) -> Assignment:
    # every assignment column is NOT NULL
    update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_assignment(db: Session, *, db_obj: Assignment) -> None:
    db.delete(db_obj)
    db.commit()


def find_submission(assignment: Assignment, student_id: int) -> Optional[AssignmentSubmission]:
    for sub in assignment.submissions:
        if sub.student_id == student_id:
            return sub
    return None


def get_submission(
    db: Session, *, assignment: Assignment, submission_id: int
) -> Optional[AssignmentSubmission]:
    sub = db.get(AssignmentSubmission, submission_id)
    if sub is None or sub.assignment_id != assignment.id:
        return None
    return sub


def submit(
    db: Session,
    *,
    assignment: Assignment,
    student: User,
    obj_in: SubmissionCreate,
) -> AssignmentSubmission:
    """
    One submission per student and assignment. Resubmitting before grading
    replaces the content; after grading it is rejected.
    """
    now = datetime.now(timezone.utc)
    sub = find_submission(assignment, student.id)
    if sub is None:
        sub = AssignmentSubmission(
            assignment_id=assignment.id,
            student_id=student.id,
            content=obj_in.content,
            attachments=obj_in.attachments,
            submitted_at=now,
        )
    else:
        if sub.grade is not None:
            raise SubmissionError("Submission already graded")
        sub.content = obj_in.content
        sub.attachments = obj_in.attachments
        sub.submitted_at = now

    db.add(sub)
    db.commit()
    db.refresh(sub)
    logger.info(
        f"Student {student.id} submitted assignment {assignment.id} ({sub.status})"
    )
    return sub


def grade_submission(
    db: Session,
    *,
    assignment: Assignment,
    submission: AssignmentSubmission,
    grade_in: GradeUpdate,
) -> AssignmentSubmission:
    if grade_in.grade > assignment.points:
        raise GradingError(f"Grade must be between 0 and {assignment.points}")

    submission.grade = grade_in.grade
    submission.feedback = grade_in.feedback
    submission.graded_at = datetime.now(timezone.utc)

    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info(
        f"Submission {submission.id} graded {submission.grade}/{assignment.points}"
    )
    return submission
