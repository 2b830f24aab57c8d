# esl_classroom/db/init_db.py
from esl_classroom.db.session import engine
from esl_classroom.db.base import Base


def init_db():
    Base.metadata.create_all(bind=engine)
