"""
Pronunciation Tasks for Worker
These tasks are executed by RQ workers to score pronunciation attempts
"""

import logging
from esl_classroom.db.session import SessionLocal
from esl_classroom.services.pronunciation_service import run_scoring_for_attempt, ScoringError

logger = logging.getLogger(__name__)


def pronunciation_scoring_task(attempt_id: int) -> dict:
    """
    Worker task to score a pronunciation attempt.

    Opens its own database session, runs the scorer, saves the result
    and returns a summary dict (never raises).

    Args:
        attempt_id: ID of the attempt to score
    """
    db = SessionLocal()
    try:
        logger.info(f"Starting pronunciation scoring for attempt {attempt_id}")

        attempt = run_scoring_for_attempt(db, attempt_id)

        logger.info(
            f"Completed pronunciation scoring for attempt {attempt_id}: "
            f"accuracy={attempt.accuracy}"
        )
        return {
            "status": "success",
            "attempt_id": attempt.id,
            "accuracy": attempt.accuracy,
            "feedback": attempt.feedback,
            "message": f"Successfully scored attempt {attempt_id}",
        }

    except ScoringError as e:
        logger.error(f"Scoring failed for attempt {attempt_id}: {e}")
        return {
            "status": "error",
            "attempt_id": attempt_id,
            "error": str(e),
            "message": f"Scoring failed for attempt {attempt_id}",
        }

    except Exception as e:
        logger.error(
            f"Unexpected error during scoring task for attempt {attempt_id}: {e}",
            exc_info=True
        )
        db.rollback()
        return {
            "status": "error",
            "attempt_id": attempt_id,
            "error": str(e),
            "message": "Unexpected error during scoring",
        }

    finally:
        db.close()
