from esl_classroom.models.user import User  # noqa
from esl_classroom.models.classroom import Classroom, class_students  # noqa
from esl_classroom.models.assignment import Assignment, AssignmentSubmission  # noqa
from esl_classroom.models.lesson import Lesson, LessonProgress  # noqa
from esl_classroom.models.pronunciation import (  # noqa
    PronunciationExercise,
    PronunciationAttempt,
)
