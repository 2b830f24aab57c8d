"""
Shared fixtures: in-memory SQLite database, FastAPI test client,
and ready-made teacher / student accounts with bearer tokens.
"""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from esl_classroom.core.security import create_access_token
from esl_classroom.db.base import Base
from esl_classroom.db.session import get_db
from esl_classroom.main import app
from esl_classroom.models.user import User

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a test database session."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _make_user(db, *, email, name, role, level=None):
    user = User(
        email=email,
        # Pre-hashed password to avoid running bcrypt in tests
        password_hash="$2b$12$hashed_password_001",
        name=name,
        role=role,
        level=level,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db_session):
    def factory(email, name="Someone", role="student", level=None):
        return _make_user(db_session, email=email, name=name, role=role, level=level)

    return factory


@pytest.fixture
def teacher(make_user):
    return make_user("teacher@school.com", name="Ms. Kim", role="teacher")


@pytest.fixture
def student(make_user):
    return make_user("student@school.com", name="Jin Park", role="student", level="beginner")


@pytest.fixture
def teacher_headers(teacher):
    return auth_headers(teacher)


@pytest.fixture
def student_headers(student):
    return auth_headers(student)


@pytest.fixture
def classroom(client, teacher_headers):
    """A class created through the API by the teacher fixture."""
    resp = client.post(
        "/api/classes/",
        json={
            "name": "Conversation A1",
            "description": "Morning group",
            "level": "beginner",
            "schedule": {"days": ["Monday", "Wednesday"], "time": "10:00 AM", "duration": 60},
            "max_students": 2,
        },
        headers=teacher_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def enrolled(client, classroom, student_headers):
    resp = client.post(
        "/api/classes/join",
        json={"enrollment_code": classroom["enrollment_code"]},
        headers=student_headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()
