"""Pytest configuration and shared fixtures."""

import os

# Point the app at a throwaway database before anything imports the engine
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", "sqlite://")

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from quizbank.db.base import Base
from quizbank.db.engine import engine
from quizbank.db.session import SessionLocal, get_db
from quizbank.main import app
from quizbank.schemas.question import QuestionOut
from quizbank.services.question_store import SqlQuestionStore
from quizbank.services.session_registry import registry
from tests.helpers.seed import SAMPLE_QUESTIONS


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh schema per test and hand out a session bound to it."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db: Session) -> SqlQuestionStore:
    return SqlQuestionStore(db)


@pytest.fixture
def stored_questions(store: SqlQuestionStore) -> list[QuestionOut]:
    """Insert the sample questions and return them with their ids."""
    store.bulk_insert(SAMPLE_QUESTIONS)
    return store.fetch_all()


@pytest.fixture(autouse=True)
def clean_registry() -> Generator[None, None, None]:
    yield
    registry.clear()


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database dependency override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close the session, it's managed by the db fixture

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
