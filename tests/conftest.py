"""Shared pytest fixtures for the EduBot test suite."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from edubot.config import get_settings
from edubot.db.base import SchoolRepository
from edubot.db.factory import get_school_repository
from edubot.db.models import Base, School
from edubot.db.seed import record_to_school
from edubot.db.sqlite_repo import SQLiteSchoolRepository
from edubot.main import app
from edubot.services.chatbot import get_completion_client

# ---------------------------------------------------------------------------
# Test data helpers
# ---------------------------------------------------------------------------


TEST_RECORDS: dict[str, dict] = {
    "-NxDps01": {
        "name": "Delhi Public School",
        "classes": ["9", "10"],
        "location": "New Delhi",
        "type": "Public",
        "distence": 5,
        "fee": 0,
        "midday": True,
        "girlSupport": True,
    },
    "-NxDps02": {
        "name": "Kendriya Vidyalaya",
        "classes": "10",
        "location": "Delhi Cantt",
        "type": "Government",
        "distence": 12,
        "fee": 400,
        "midday": True,
        "girlSupport": False,
    },
    "-NxDps03": {
        "name": "St. Mary's Convent",
        "classes": [6, 7, 8],
        "location": "Mumbai",
        "type": "Private",
        "distence": 3,
        "fee": 2500,
        "midday": False,
        "contact": "022-2640-0000",
    },
    "-NxDps04": {
        "name": "Sunrise Academy",
        "location": "Pune",
        "type": "Private",
    },
}


def _create_test_schools() -> list[School]:
    """Return School rows built from the exported records, in key order."""
    schools = []
    for school_id, (key, record) in enumerate(TEST_RECORDS.items(), start=1):
        school = record_to_school(key, record)
        school.id = school_id
        schools.append(school)
    return schools


class FakeCompletionClient:
    """Records chatbot calls and returns a canned reply."""

    def __init__(self, reply: str = "Delhi Public School is the best fit.") -> None:
        self.reply = reply
        self.calls: list[tuple[str, str, str]] = []

    async def complete(self, context: str, question: str, language: str) -> str:
        self.calls.append((context, question, language))
        return self.reply


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def db_path(tmp_path) -> str:
    """Create a temporary SQLite database seeded with test data and return its path."""
    path = str(tmp_path / "test_schools.db")
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)

    with Session(sync_engine) as session:
        session.add_all(_create_test_schools())
        session.commit()

    sync_engine.dispose()
    return path


@pytest.fixture()
def test_repo(db_path) -> SQLiteSchoolRepository:
    """Return an async :class:`SQLiteSchoolRepository` backed by the test database."""
    return SQLiteSchoolRepository(db_path)


@pytest.fixture()
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture()
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture()
def test_client(db_path, upload_dir, completion_client, monkeypatch) -> TestClient:
    """Return a FastAPI ``TestClient`` wired to the test database and a fake chatbot."""
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    monkeypatch.setenv("GROQ_API_KEY", "test-key")
    get_settings.cache_clear()

    repo = SQLiteSchoolRepository(db_path)

    def _override() -> SchoolRepository:
        return repo

    app.dependency_overrides[get_school_repository] = _override
    app.dependency_overrides[get_completion_client] = lambda: completion_client

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
    get_settings.cache_clear()
