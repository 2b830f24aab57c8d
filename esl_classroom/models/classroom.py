# esl_classroom/models/classroom.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from esl_classroom.db.base_class import Base

CLASS_LEVELS = (
    "beginner",
    "elementary",
    "intermediate",
    "upper-intermediate",
    "advanced",
)

# composite primary key: a student is enrolled at most once
class_students = Table(
    "class_students",
    Base.metadata,
    Column("class_id", Integer, ForeignKey("classes.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("joined_at", DateTime(timezone=True), server_default=func.now()),
)


class Classroom(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    enrollment_code = Column(String(16), unique=True, nullable=False, index=True)
    level = Column(String(30), nullable=False, default="beginner")

    # {"days": ["Monday", ...], "time": "10:00 AM", "duration": 60}
    schedule = Column(JSON, nullable=True)

    max_students = Column(Integer, nullable=False, default=30)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    teacher = relationship("User", back_populates="taught_classes")
    students = relationship(
        "User",
        secondary=class_students,
        back_populates="enrolled_classes",
        order_by="User.name",
    )
    assignments = relationship(
        "Assignment",
        back_populates="classroom",
        cascade="all, delete-orphan",
    )

    def has_student(self, user_id: int) -> bool:
        return any(s.id == user_id for s in self.students)

    def has_member(self, user_id: int) -> bool:
        return self.teacher_id == user_id or self.has_student(user_id)

    @property
    def is_full(self) -> bool:
        return len(self.students) >= self.max_students
