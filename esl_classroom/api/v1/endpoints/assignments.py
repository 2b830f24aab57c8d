# esl_classroom/api/v1/endpoints/assignments.py
from typing import List, Union

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from esl_classroom.core.security import get_current_student, get_current_teacher, get_current_user
from esl_classroom.db.session import get_db
from esl_classroom.models.assignment import Assignment
from esl_classroom.models.user import User
from esl_classroom.schemas.assignment import (
    AssignmentCreate,
    AssignmentPublic,
    AssignmentUpdate,
    GradeUpdate,
    StudentAssignment,
    SubmissionCreate,
    SubmissionPublic,
    TeacherAssignment,
)
from esl_classroom.services import assignment_service, class_service
from esl_classroom.services.assignment_service import GradingError, SubmissionError

router = APIRouter(prefix="/assignments", tags=["assignments"])


def _get_assignment_or_404(db: Session, assignment_id: int) -> Assignment:
    assignment = assignment_service.get_assignment(db, assignment_id)
    if assignment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
    return assignment


def _get_owned_assignment(db: Session, assignment_id: int, teacher: User) -> Assignment:
    assignment = _get_assignment_or_404(db, assignment_id)
    if assignment.teacher_id != teacher.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to manage this assignment",
        )
    return assignment


@router.post("/", response_model=AssignmentPublic, status_code=status.HTTP_201_CREATED)
def create_assignment(
    obj_in: AssignmentCreate,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    """
    Teacher posts an assignment to one of their classes.
    """
    classroom = class_service.get_class(db, obj_in.class_id)
    if classroom is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    if classroom.teacher_id != current_teacher.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to add assignments to this class",
        )
    return assignment_service.create_assignment(
        db, teacher=current_teacher, classroom=classroom, obj_in=obj_in
    )


@router.get("/mine", response_model=List[Union[TeacherAssignment, StudentAssignment]])
def list_my_assignments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Teacher: assignments they created, with submission counts.
    Student: assignments of their classes, with their own status.
    """
    if current_user.is_teacher:
        return assignment_service.list_assignments_for_teacher(db, teacher=current_user)
    return assignment_service.list_assignments_for_student(db, student=current_user)


@router.get("/class/{class_id}", response_model=List[AssignmentPublic])
def list_class_assignments(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    classroom = class_service.get_class(db, class_id)
    if classroom is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    if not classroom.has_member(current_user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    assignments = assignment_service.list_assignments_for_class(db, class_id=class_id)
    if classroom.teacher_id == current_user.id:
        return assignments
    # students never see each other's work
    return [_student_view(a, current_user.id) for a in assignments]


@router.get("/{assignment_id}", response_model=AssignmentPublic)
def get_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    assignment = _get_assignment_or_404(db, assignment_id)
    if assignment.teacher_id == current_user.id:
        return assignment
    if not assignment.classroom.has_student(current_user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return _student_view(assignment, current_user.id)


@router.put("/{assignment_id}", response_model=AssignmentPublic)
def update_assignment(
    assignment_id: int,
    obj_in: AssignmentUpdate,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    assignment = _get_owned_assignment(db, assignment_id, current_teacher)
    return assignment_service.update_assignment(db, db_obj=assignment, obj_in=obj_in)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    assignment = _get_owned_assignment(db, assignment_id, current_teacher)
    assignment_service.delete_assignment(db, db_obj=assignment)
    return None


@router.post(
    "/{assignment_id}/submissions",
    response_model=SubmissionPublic,
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    assignment_id: int,
    obj_in: SubmissionCreate,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    assignment = _get_assignment_or_404(db, assignment_id)
    if not assignment.classroom.has_student(current_student.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enrolled in this class",
        )
    try:
        return assignment_service.submit(
            db, assignment=assignment, student=current_student, obj_in=obj_in
        )
    except SubmissionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{assignment_id}/submissions", response_model=List[SubmissionPublic])
def list_submissions(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    assignment = _get_owned_assignment(db, assignment_id, current_teacher)
    return assignment.submissions


@router.put(
    "/{assignment_id}/submissions/{submission_id}/grade",
    response_model=SubmissionPublic,
)
def grade_submission(
    assignment_id: int,
    submission_id: int,
    grade_in: GradeUpdate,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    assignment = _get_owned_assignment(db, assignment_id, current_teacher)
    sub = assignment_service.get_submission(db, assignment=assignment, submission_id=submission_id)
    if sub is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    try:
        return assignment_service.grade_submission(
            db, assignment=assignment, submission=sub, grade_in=grade_in
        )
    except GradingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _student_view(assignment: Assignment, student_id: int) -> AssignmentPublic:
    view = AssignmentPublic.model_validate(assignment)
    own = [s for s in view.submissions if s.student.id == student_id]
    return view.model_copy(update={"submissions": own})
