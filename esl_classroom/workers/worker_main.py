# esl_classroom/workers/worker_main.py
import logging

from rq import SimpleWorker

from esl_classroom.core.logging_config import setup_logging
from esl_classroom.workers.queue import get_pronunciation_queue, get_redis_connection

logger = logging.getLogger(__name__)


def main():
    setup_logging()
    queue = get_pronunciation_queue()
    logger.info(f"Worker listening on queue {queue.name!r}")

    # SimpleWorker runs jobs in-process, no fork per job
    worker = SimpleWorker([queue], connection=get_redis_connection())
    worker.work()


if __name__ == "__main__":
    main()
