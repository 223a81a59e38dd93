import os

import pytest

os.environ.setdefault("LMS_DATABASE_URL", "sqlite:///:memory:")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from lms.db import Base, get_db
from lms.main import app
from lms.models import Lecturer, User
from lms.security import hash_password
from lms.store import EntityStore

# Use in-memory SQLite for testing to ensure isolation
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def session():
    """
    Create a fresh database session for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def store(session):
    return EntityStore(session)


@pytest.fixture(scope="function")
def client(session):
    """
    Create a TestClient that uses the override_get_db dependency.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def lecturer(session):
    ada = Lecturer(
        name="Ada Lovelace",
        email="ada@example.com",
        password_hash=hash_password("secret"),
        department="Computing",
    )
    session.add(ada)
    session.commit()
    return ada


@pytest.fixture
def student(session):
    alan = User(
        name="Alan Turing",
        email="alan@example.com",
        password_hash=hash_password("secret"),
    )
    session.add(alan)
    session.commit()
    return alan


@pytest.fixture
def course_payload():
    """Valid course payload factory, override fields per test."""
    def _build(**overrides):
        payload = {
            "name": "CS101",
            "description": "Intro",
            "lecturer": "ada@example.com",
            "category": "CS",
            "duration": 10,
            "content": [{"title": "L1", "url": "http://x"}],
        }
        payload.update(overrides)
        return payload

    return _build
