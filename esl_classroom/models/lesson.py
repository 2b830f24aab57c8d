# esl_classroom/models/lesson.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from esl_classroom.db.base_class import Base


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    title = Column(String(255), nullable=False)
    title_ko = Column(String(255), nullable=True)
    level = Column(String(30), nullable=False, default="beginner", index=True)
    duration = Column(Integer, nullable=True)  # minutes

    # lesson plan
    objectives = Column(JSON, nullable=False, default=list)
    materials = Column(JSON, nullable=False, default=list)
    activities = Column(JSON, nullable=False, default=list)
    homework = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # study content
    vocabulary = Column(JSON, nullable=False, default=list)
    phrases = Column(JSON, nullable=False, default=list)

    times_used = Column(Integer, nullable=False, default=0)
    last_used_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    progress_records = relationship(
        "LessonProgress",
        back_populates="lesson",
        cascade="all, delete-orphan",
    )


class LessonProgress(Base):
    __tablename__ = "lesson_progress"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    lesson_id = Column(
        Integer, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    score = Column(Integer, nullable=False)  # 0-100
    completed_at = Column(DateTime(timezone=True), server_default=func.now())

    lesson = relationship("Lesson", back_populates="progress_records")
