"""
Shared fixtures: in-memory SQLite data store, a seeded user, and a TestClient
with the DB and auth dependencies overridden.

Run with: pytest -v
"""

from __future__ import annotations

import os

# Settings are read on import, so they must be in place before the app loads.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("STALE_PROCESSING_MINUTES", "0")

import uuid
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inkwell.auth.models import User
from inkwell.core.database import Base, get_db
from inkwell.insights.sentiment import SentimentScore
from inkwell.journals.models import JournalEntry


class FakeSentimentEngine:
    """Scores text by counting a few fixed words; no lexicon download needed."""

    POSITIVE = {"great", "happy", "love", "good"}
    NEGATIVE = {"bad", "sad", "awful", "angry"}

    def analyze(self, text: str) -> SentimentScore:
        words = [w.strip(".,!?").lower() for w in (text or "").split()]
        score = 2.0 * sum(w in self.POSITIVE for w in words) - 2.0 * sum(w in self.NEGATIVE for w in words)
        return SentimentScore(score=score, comparative=score / len(words) if words else 0.0)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def user(db) -> User:
    u = User(id=uuid.uuid4(), email="reader@example.com", name="Reader", password="not-a-real-hash")
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def make_entry(db, user):
    def _make(status: str = "processing", entry_date: date = date(2024, 3, 1), **fields) -> JournalEntry:
        entry = JournalEntry(
            id=uuid.uuid4(),
            user_id=user.id,
            entry_date=entry_date,
            image_path="uploads/page.png",
            original_filename="page.png",
            status=status,
            **fields,
        )
        db.add(entry)
        db.commit()
        return entry
    return _make


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    path = tmp_path / "page.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n fake page")
    return path


@pytest.fixture
def fake_sentiment() -> FakeSentimentEngine:
    return FakeSentimentEngine()


@pytest.fixture
def upload_dir(tmp_path: Path, monkeypatch) -> Path:
    target = tmp_path / "uploads"
    monkeypatch.setattr("inkwell.journals.storage.UPLOAD_DIR", str(target))
    return target


@pytest.fixture
def client(session_factory, user, upload_dir):
    """TestClient authenticated as ``user`` and bound to the in-memory database."""
    from main import app
    from inkwell.auth.service import get_current_user_id

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_current_user_id] = lambda: user.id
    yield TestClient(app)
    app.dependency_overrides.clear()
