"""
Background processing of an uploaded journal page.

A run takes an entry from ``processing`` to ``done`` (raw text and insight
written in one transaction) or to ``failed`` (error message written in a
separate, best-effort session). Nothing is raised to the caller.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inkwell.core.database import SessionLocal
from inkwell.insights.db import upsert_insight
from inkwell.insights.schemas import InsightResult
from inkwell.insights.sentiment import SentimentEngine
from inkwell.insights.service import extract_insights
from inkwell.journals.db import mark_journal_done, mark_journal_failed
from inkwell.journals.exceptions import (
    AggregationFailure,
    ImageNotFound,
    OcrFailure,
    PersistenceFailure,
    ProcessingError,
)
from inkwell.journals.models import JournalEntry
from inkwell.journals.ocr import run_ocr

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]
OcrEngine = Callable[[Path], str]


def _read_page(image_path: Path, ocr: OcrEngine) -> str:
    try:
        exists = image_path.is_file()
    except OSError as e:
        raise ImageNotFound(image_path) from e
    if not exists:
        raise ImageNotFound(image_path)
    try:
        text = ocr(image_path)
    except Exception as e:
        raise OcrFailure(f"OCR failed: {e}") from e
    return (text or "").strip()


def _analyze(raw_text: str, sentiment_engine: Optional[SentimentEngine]) -> InsightResult:
    try:
        return extract_insights(raw_text, sentiment_engine)
    except Exception as e:
        raise AggregationFailure(f"Insight extraction failed: {e}") from e


def _save_results(
    session_factory: SessionFactory, entry_id: UUID, raw_text: str, insight: InsightResult
) -> None:
    """Writes the entry's raw text and status together with its insight, atomically."""
    with session_factory() as db:
        try:
            journal = db.query(JournalEntry).filter(JournalEntry.id == entry_id).first()
            if journal is None:
                raise PersistenceFailure(f"Journal entry {entry_id} no longer exists")
            mark_journal_done(journal, raw_text)
            upsert_insight(db, entry_id, insight)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceFailure(f"Failed to save processing results: {e}") from e


def _record_failure(session_factory: SessionFactory, entry_id: UUID, message: str) -> None:
    """Best-effort write of the failed state; errors are logged, never raised."""
    try:
        with session_factory() as db:
            if not mark_journal_failed(db, entry_id, message):
                logger.warning("Entry %s disappeared before its failure could be recorded", entry_id)
    except Exception:
        logger.exception("Failed to mark entry %s as failed", entry_id)


def process_entry(
    entry_id: UUID,
    image_path: Union[str, Path],
    *,
    session_factory: SessionFactory = SessionLocal,
    ocr: OcrEngine = run_ocr,
    sentiment_engine: Optional[SentimentEngine] = None,
) -> None:
    """
    Runs OCR and insight extraction for one entry and stores the outcome.

    Args:
        entry_id (UUID): Entry already persisted in the processing state.
        image_path (str | Path): Absolute path of the uploaded page image.
        session_factory: Opens a new database session per write.
        ocr: Callable returning the text of an image.
        sentiment_engine: Sentiment scorer passed to the aggregator.
    """
    logger.info("Processing journal entry %s", entry_id)
    try:
        raw_text = _read_page(Path(image_path), ocr)
        insight = _analyze(raw_text, sentiment_engine)
        _save_results(session_factory, entry_id, raw_text, insight)
    except ProcessingError as e:
        logger.error("Processing failed for entry %s: %s", entry_id, e)
        _record_failure(session_factory, entry_id, str(e))
        return
    except Exception as e:
        logger.exception("Unexpected error while processing entry %s", entry_id)
        _record_failure(session_factory, entry_id, f"Processing failed: {e}")
        return

    logger.info(
        "Processed journal entry %s: sentiment=%s tasks=%d goals=%d",
        entry_id,
        insight.sentiment.label,
        len(insight.tasks),
        len(insight.goals),
    )
