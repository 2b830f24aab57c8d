# esl_classroom/workers/queue.py
import logging

from redis import Redis
from rq import Queue

from esl_classroom.core.config import settings

logger = logging.getLogger(__name__)

_redis_conn: Redis | None = None


def get_redis_connection() -> Redis:
    global _redis_conn
    if _redis_conn is None:
        _redis_conn = Redis.from_url(settings.REDIS_URL)
    return _redis_conn


def get_pronunciation_queue() -> Queue:
    return Queue(
        settings.PRONUNCIATION_QUEUE,
        connection=get_redis_connection(),
        default_timeout=settings.SCORING_JOB_TIMEOUT,
    )


def enqueue_pronunciation_task(attempt_id: int) -> str:
    """
    Put a stored attempt on the pronunciation queue. Returns the RQ job id.
    """
    from esl_classroom.workers.tasks import pronunciation_scoring_task

    job = get_pronunciation_queue().enqueue(
        pronunciation_scoring_task,
        attempt_id,
        description=f"score pronunciation attempt {attempt_id}",
    )
    logger.info(f"Enqueued attempt {attempt_id} as job {job.id}")
    return job.id
