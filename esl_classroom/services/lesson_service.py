# esl_classroom/services/lesson_service.py
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from esl_classroom.models.lesson import Lesson, LessonProgress
from esl_classroom.models.user import User
from esl_classroom.schemas.lesson import Flashcard, LessonCreate, LessonUpdate
from esl_classroom.schemas.progress import ProgressCreate, ProgressPublic, ProgressSummary

# nullable lesson columns; null on any other field is ignored
_CLEARABLE_FIELDS = {"title_ko", "duration", "homework", "notes"}


def create_lesson(
    db: Session,
    *,
    teacher: User,
    obj_in: LessonCreate,
) -> Lesson:
    """
    teacher creates a lesson plan
    """
    db_obj = Lesson(teacher_id=teacher.id, **obj_in.model_dump())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def get_lesson(db: Session, lesson_id: int) -> Optional[Lesson]:
    return db.get(Lesson, lesson_id)


def list_lessons(
    db: Session,
    *,
    level: str | None = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Lesson]:
    q = db.query(Lesson)
    if level:
        q = q.filter(Lesson.level == level)
    return q.order_by(Lesson.id.asc()).offset(skip).limit(limit).all()


def list_flashcards(db: Session, *, level: str | None = None) -> List[Flashcard]:
    """
    vocabulary of every lesson, flattened in lesson order
    """
    cards = []
    for lesson in list_lessons(db, level=level, limit=None):
        for vocab in lesson.vocabulary or []:
            cards.append(
                Flashcard(
                    lesson_id=lesson.id,
                    word=vocab["word"],
                    translation=vocab.get("translation"),
                    example=vocab.get("example"),
                )
            )
    return cards


def update_lesson(
    db: Session,
    *,
    db_obj: Lesson,
    obj_in: LessonUpdate,
) -> Lesson:
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


def mark_used(db: Session, *, db_obj: Lesson) -> Lesson:
    db_obj.times_used = (db_obj.times_used or 0) + 1
    db_obj.last_used_at = datetime.now(timezone.utc)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_lesson(db: Session, *, db_obj: Lesson) -> None:
    db.delete(db_obj)
    db.commit()


def record_progress(
    db: Session,
    *,
    student: User,
    obj_in: ProgressCreate,
) -> LessonProgress:
    record = LessonProgress(
        student_id=student.id,
        lesson_id=obj_in.lesson_id,
        score=obj_in.score,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def progress_summary(db: Session, *, student: User) -> ProgressSummary:
    records = (
        db.query(LessonProgress)
        .filter(LessonProgress.student_id == student.id)
        .order_by(LessonProgress.completed_at.desc(), LessonProgress.id.desc())
        .all()
    )
    completed = (
        db.query(func.count(func.distinct(LessonProgress.lesson_id)))
        .filter(LessonProgress.student_id == student.id)
        .scalar()
    )
    average = (
        round(sum(r.score for r in records) / len(records), 1) if records else None
    )
    return ProgressSummary(
        completed_lessons=completed or 0,
        average_score=average,
        records=[ProgressPublic.model_validate(r) for r in records],
    )
