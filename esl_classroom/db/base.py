# esl_classroom/db/base.py
# Import all models here so Base.metadata knows every table (create_all / alembic)
from esl_classroom.db.base_class import Base  # noqa

from esl_classroom.models.user import User  # noqa
from esl_classroom.models.classroom import Classroom, class_students  # noqa
from esl_classroom.models.assignment import Assignment, AssignmentSubmission  # noqa
from esl_classroom.models.lesson import Lesson, LessonProgress  # noqa
from esl_classroom.models.pronunciation import (  # noqa
    PronunciationExercise,
    PronunciationAttempt,
)
