# esl_classroom/core/logging_config.py
import logging

from esl_classroom.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # bcrypt version probe in passlib is noisy
    logging.getLogger("passlib").setLevel(logging.ERROR)
