# esl_classroom/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from esl_classroom.core.config import settings
from esl_classroom.core.logging_config import setup_logging
from esl_classroom.db.init_db import init_db
from esl_classroom.api.v1.endpoints import (
    assignments,
    auth,
    classes,
    health,
    lessons,
    progress,
    pronunciation,
    rooms,
    users,
)

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    setup_logging()
    init_db()
    logger.info(f"{settings.PROJECT_NAME} started")


api = settings.API_PREFIX
app.include_router(auth.router, prefix=f"{api}/auth", tags=["auth"])
app.include_router(users.router, prefix=api)
app.include_router(classes.router, prefix=api)
app.include_router(assignments.router, prefix=api)
app.include_router(lessons.router, prefix=api)
app.include_router(progress.router, prefix=api)
app.include_router(pronunciation.router, prefix=api)
app.include_router(health.router, prefix=api)
app.include_router(rooms.router)
