from __future__ import annotations

import os

# Settings are read at import time; give them test values first
os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("ADMIN_PASSWORD", "admin-secret")
os.environ.setdefault("PANEL_PASSWORD", "panel-secret")
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import auditions.databases.model as models


class FakeGemini:
    """Stands in for GeminiServices.generate_structured_output"""

    def __init__(self, result=None, error: Exception | None = None):
        self.result = result or {}
        self.error = error
        self.calls = []

    async def generate_structured_output(self, prompt, expected_model, system_instruction=None, temperature=None):
        self.calls.append({"prompt": prompt, "model": expected_model})
        if self.error is not None:
            raise self.error
        return self.result


class FakeCriteriaService:
    def __init__(self, criteria=None, error: Exception | None = None):
        self.criteria = criteria or []
        self.error = error
        self.roles = []

    async def get_criteria(self, role):
        self.roles.append(role)
        if self.error is not None:
            raise self.error
        return self.criteria


class FakeQuestionService:
    def __init__(self, questions=None, error: Exception | None = None):
        self.questions = questions or []
        self.error = error
        self.roles = []

    async def get_questions(self, role):
        self.roles.append(role)
        if self.error is not None:
            raise self.error
        return self.questions


def build_contestant(roll: str, position: str = "Anchor", **fields) -> models.Contestant:
    data = {
        "roll": roll,
        "name": f"Contestant {roll}",
        "year": "2",
        "branch": "CSE",
        "section": "A",
        "preferred_position": position,
        "whatsapp": "9000000000",
        "mail": f"{roll.lower()}@example.edu",
        "feedback": "",
    }
    data.update(fields)
    return models.Contestant(**data)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    models.Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def seeded_db(db):
    db.add_all([
        build_contestant("CS22A001", "Anchor"),
        build_contestant("CS22A002", "Video Editor"),
        build_contestant("EC22B010", "Anchor"),
        build_contestant("ME22C004", "Mascot"),
    ])
    db.commit()
    return db
