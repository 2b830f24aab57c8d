# esl_classroom/models/user.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from esl_classroom.db.base_class import Base

ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)  # not unique
    role = Column(String(20), nullable=False)  # 'teacher' / 'student'
    level = Column(String(30), nullable=True)
    last_active_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    taught_classes = relationship("Classroom", back_populates="teacher")
    enrolled_classes = relationship(
        "Classroom",
        secondary="class_students",
        back_populates="students",
    )

    @property
    def is_teacher(self) -> bool:
        return self.role == ROLE_TEACHER

    @property
    def is_student(self) -> bool:
        return self.role == ROLE_STUDENT
