# esl_classroom/models/pronunciation.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from esl_classroom.db.base_class import Base


class PronunciationExercise(Base):
    __tablename__ = "pronunciation_exercises"

    id = Column(Integer, primary_key=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    phrase = Column(Text, nullable=False)
    ipa = Column(String(255), nullable=True)
    difficulty = Column(String(10), nullable=False, default="easy")  # easy / medium / hard
    category = Column(String(100), nullable=True)
    tips = Column(JSON, nullable=False, default=list)
    common_mistakes = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PronunciationAttempt(Base):
    __tablename__ = "pronunciation_attempts"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("pronunciation_exercises.id"), nullable=True)

    target_text = Column(Text, nullable=False)
    transcript = Column(Text, nullable=False)
    mode = Column(String(20), nullable=False, default="positional")

    # status: pending / scored
    status = Column(String(20), nullable=False, default="pending", index=True)
    accuracy = Column(Integer, nullable=True)
    feedback = Column(JSON, nullable=True)
    scored_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    exercise = relationship("PronunciationExercise")
