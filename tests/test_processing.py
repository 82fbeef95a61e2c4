"""
tests/test_processing.py — the background processing job and insight upsert.

The job opens its own sessions, so state is always re-read through a fresh
session from ``session_factory``.
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from inkwell.insights.db import upsert_insight
from inkwell.insights.models import Insight
from inkwell.insights.service import extract_insights
from inkwell.journals.models import JournalEntry
from inkwell.journals.processing import process_entry

PAGE = "- [x] Finish report\nI need to call mom tomorrow.\nMy goal is to run a marathon someday."


def _ocr_returning(text):
    def _ocr(path):
        return text
    return _ocr


def _reload(session_factory, entry_id):
    with session_factory() as s:
        journal = s.get(JournalEntry, entry_id)
        insights = s.query(Insight).filter(Insight.entry_id == entry_id).all()
    return journal, insights


@pytest.fixture
def run(session_factory, image_file, fake_sentiment):
    """Runs the job against the test database with a stubbed OCR engine."""
    def _run(entry_id, ocr, image_path=None, sentiment_engine=fake_sentiment):
        process_entry(
            entry_id,
            image_path or image_file,
            session_factory=session_factory,
            ocr=ocr,
            sentiment_engine=sentiment_engine,
        )
    return _run


# ---------------------------------------------------------------------------
# Success
# ---------------------------------------------------------------------------

def test_successful_run_stores_text_and_insight(run, make_entry, session_factory) -> None:
    entry = make_entry()
    run(entry.id, _ocr_returning(f"  {PAGE}\n\n"))

    journal, insights = _reload(session_factory, entry.id)
    assert journal.status == "done"
    assert journal.raw_text == PAGE
    assert journal.error_message is None

    assert len(insights) == 1
    insight = insights[0]
    assert insight.sentiment_label == "neutral"
    assert insight.tasks == [
        {"description": "Finish report", "status": "done"},
        {"description": "I need to call mom tomorrow.", "status": "todo"},
    ]
    assert insight.goals == [
        {"description": "My goal is to run a marathon someday.", "horizon": "long_term"},
    ]
    assert insight.emotions == {}


def test_empty_ocr_text_still_completes(run, make_entry, session_factory) -> None:
    entry = make_entry()
    run(entry.id, _ocr_returning("   \n "))

    journal, insights = _reload(session_factory, entry.id)
    assert journal.status == "done"
    assert journal.raw_text == ""
    assert len(insights) == 1
    assert insights[0].sentiment_label == "neutral"
    assert insights[0].tasks == []
    assert insights[0].goals == []


def test_rerun_replaces_the_single_insight(run, make_entry, session_factory) -> None:
    entry = make_entry()
    run(entry.id, _ocr_returning("I am happy and I love it."))
    first = _reload(session_factory, entry.id)[1][0]
    assert first.sentiment_label == "positive"

    run(entry.id, _ocr_returning("Awful, sad day. I need to rest."))
    journal, insights = _reload(session_factory, entry.id)

    assert len(insights) == 1
    assert insights[0].id == first.id
    assert insights[0].sentiment_label == "negative"
    assert insights[0].emotions == {"sadness": 1}
    assert insights[0].tasks == [{"description": "I need to rest.", "status": "todo"}]
    assert journal.raw_text == "Awful, sad day. I need to rest."


def test_identical_reruns_are_idempotent(run, make_entry, session_factory) -> None:
    entry = make_entry()
    for _ in range(3):
        run(entry.id, _ocr_returning(PAGE))

    journal, insights = _reload(session_factory, entry.id)
    assert journal.status == "done"
    assert len(insights) == 1


def test_rerun_after_failure_clears_error(run, make_entry, session_factory, tmp_path) -> None:
    entry = make_entry()
    run(entry.id, _ocr_returning(PAGE), image_path=tmp_path / "missing.png")
    assert _reload(session_factory, entry.id)[0].status == "failed"

    run(entry.id, _ocr_returning(PAGE))
    journal, _ = _reload(session_factory, entry.id)
    assert journal.status == "done"
    assert journal.error_message is None


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

def test_missing_image_fails_without_insight(run, make_entry, session_factory, tmp_path) -> None:
    entry = make_entry()
    ocr_calls = []

    def _ocr(path):
        ocr_calls.append(path)
        return PAGE

    run(entry.id, _ocr, image_path=tmp_path / "nope.png")

    journal, insights = _reload(session_factory, entry.id)
    assert journal.status == "failed"
    assert journal.error_message == "Image not found for OCR processing"
    assert journal.raw_text is None
    assert insights == []
    assert ocr_calls == []


def test_unusable_image_path_fails_without_raising(run, make_entry, session_factory, tmp_path) -> None:
    entry = make_entry()
    too_long = tmp_path / ("a" * 300 + ".png")

    run(entry.id, _ocr_returning(PAGE), image_path=too_long)

    journal, insights = _reload(session_factory, entry.id)
    assert journal.status == "failed"
    assert journal.error_message == "Image not found for OCR processing"
    assert insights == []


def test_unexpected_error_is_recorded(run, make_entry, session_factory, monkeypatch) -> None:
    entry = make_entry()

    def _crash(*args, **kwargs):
        raise RuntimeError("worker interrupted")

    monkeypatch.setattr("inkwell.journals.processing._save_results", _crash)
    run(entry.id, _ocr_returning(PAGE))

    journal, insights = _reload(session_factory, entry.id)
    assert journal.status == "failed"
    assert journal.error_message == "Processing failed: worker interrupted"
    assert insights == []


def test_ocr_error_message_is_recorded(run, make_entry, session_factory) -> None:
    entry = make_entry()

    def _broken_ocr(path):
        raise RuntimeError("tesseract is not installed")

    run(entry.id, _broken_ocr)

    journal, insights = _reload(session_factory, entry.id)
    assert journal.status == "failed"
    assert journal.error_message == "OCR failed: tesseract is not installed"
    assert insights == []


def test_aggregation_error_is_recorded(run, make_entry, session_factory) -> None:
    entry = make_entry()

    class ExplodingEngine:
        def analyze(self, text):
            raise ValueError("lexicon unavailable")

    run(entry.id, _ocr_returning(PAGE), sentiment_engine=ExplodingEngine())

    journal, insights = _reload(session_factory, entry.id)
    assert journal.status == "failed"
    assert journal.error_message == "Insight extraction failed: lexicon unavailable"
    assert journal.raw_text is None
    assert insights == []


def test_persistence_error_rolls_back_the_entry(run, make_entry, session_factory, monkeypatch) -> None:
    entry = make_entry()

    def _failing_upsert(db, entry_id, result):
        raise OperationalError("INSERT INTO insights", {}, Exception("database is locked"))

    monkeypatch.setattr("inkwell.journals.processing.upsert_insight", _failing_upsert)
    run(entry.id, _ocr_returning(PAGE))

    journal, insights = _reload(session_factory, entry.id)
    assert journal.status == "failed"
    assert journal.error_message.startswith("Failed to save processing results:")
    assert journal.raw_text is None
    assert insights == []


def test_later_failure_keeps_previous_insight(run, make_entry, session_factory, tmp_path) -> None:
    entry = make_entry()
    run(entry.id, _ocr_returning(PAGE))

    run(entry.id, _ocr_returning(PAGE), image_path=tmp_path / "gone.png")

    journal, insights = _reload(session_factory, entry.id)
    assert journal.status == "failed"
    assert journal.raw_text == PAGE
    assert len(insights) == 1


def test_error_while_recording_failure_is_swallowed(run, make_entry, session_factory, monkeypatch) -> None:
    entry = make_entry()

    def _unwritable(db, journal_id, message):
        raise OperationalError("UPDATE journal_entries", {}, Exception("disk I/O error"))

    monkeypatch.setattr("inkwell.journals.processing.mark_journal_failed", _unwritable)

    def _broken_ocr(path):
        raise RuntimeError("boom")

    run(entry.id, _broken_ocr)

    journal, _ = _reload(session_factory, entry.id)
    assert journal.status == "processing"


def test_unknown_entry_does_not_raise(run, session_factory) -> None:
    missing_id = uuid.uuid4()
    run(missing_id, _ocr_returning(PAGE))

    journal, insights = _reload(session_factory, missing_id)
    assert journal is None
    assert insights == []


# ---------------------------------------------------------------------------
# Upsert without ON CONFLICT support
# ---------------------------------------------------------------------------

def test_orm_upsert_fallback_updates_in_place(make_entry, session_factory, fake_sentiment, monkeypatch) -> None:
    monkeypatch.setattr("inkwell.insights.db._UPSERT_INSERTS", {})
    entry = make_entry()

    with session_factory() as s:
        upsert_insight(s, entry.id, extract_insights("happy happy", fake_sentiment))
        s.commit()
    with session_factory() as s:
        upsert_insight(s, entry.id, extract_insights("sad and awful", fake_sentiment))
        s.commit()

    _, insights = _reload(session_factory, entry.id)
    assert len(insights) == 1
    assert insights[0].sentiment_label == "negative"
    assert insights[0].emotions == {"sadness": 1}
