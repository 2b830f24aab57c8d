# esl_classroom/models/assignment.py
from datetime import timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from esl_classroom.db.base_class import Base

ASSIGNMENT_TYPES = (
    "essay",
    "grammar",
    "vocabulary",
    "listening",
    "speaking",
    "reading",
)


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(20), nullable=False)
    points = Column(Integer, nullable=False, default=100)
    due_date = Column(DateTime(timezone=True), nullable=False)
    attachments = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    classroom = relationship("Classroom", back_populates="assignments")
    teacher = relationship("User")
    submissions = relationship(
        "AssignmentSubmission",
        back_populates="assignment",
        cascade="all, delete-orphan",
        order_by="AssignmentSubmission.submitted_at",
    )


class AssignmentSubmission(Base):
    __tablename__ = "assignment_submissions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )

    id = Column(Integer, primary_key=True, index=True)
    assignment_id = Column(
        Integer, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    content = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=False, default=list)
    submitted_at = Column(DateTime(timezone=True), nullable=False)

    # teacher grading
    grade = Column(Integer, nullable=True)
    feedback = Column(Text, nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)

    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("User")

    @property
    def status(self) -> str:
        """graded / late / on-time"""
        if self.grade is not None:
            return "graded"
        due = self.assignment.due_date if self.assignment else None
        if due is not None and _as_aware(self.submitted_at) > _as_aware(due):
            return "late"
        return "on-time"


def _as_aware(value):
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
