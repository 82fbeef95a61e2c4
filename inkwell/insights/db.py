from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from inkwell.insights.models import Insight
from inkwell.insights.schemas import InsightResult

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def insight_values(result: InsightResult) -> Dict[str, Any]:
    """Column values for an insight row built from an extraction result."""
    return {
        "sentiment_label": result.sentiment.label,
        "sentiment_score": result.sentiment.score,
        "sentiment_comparative": result.sentiment.comparative,
        "emotions": dict(result.emotions),
        "tasks": [task.model_dump() for task in result.tasks],
        "goals": [goal.model_dump() for goal in result.goals],
        "analyzed_at": datetime.now(timezone.utc),
    }


def get_insight(db: Session, entry_id: UUID) -> Optional[Insight]:
    """
    Retrieves the insight for a journal entry.

    Args:
        db (Session): SQLAlchemy session.
        entry_id (UUID): Journal entry ID.

    Returns:
        Optional[Insight]: The insight or None.
    """
    return db.query(Insight).filter(Insight.entry_id == entry_id).first()


def upsert_insight(db: Session, entry_id: UUID, result: InsightResult) -> None:
    """
    Inserts or fully replaces the insight for an entry, keyed by entry_id.

    Does not commit; the caller owns the transaction.

    Args:
        db (Session): SQLAlchemy session.
        entry_id (UUID): Journal entry the insight belongs to.
        result (InsightResult): Freshly extracted insight.
    """
    values = insight_values(result)
    insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)

    if insert is not None:
        stmt = insert(Insight).values(entry_id=entry_id, **values)
        stmt = stmt.on_conflict_do_update(index_elements=["entry_id"], set_=values)
        db.execute(stmt)
        return

    # Dialects without ON CONFLICT: update-or-insert inside the caller's transaction
    existing = get_insight(db, entry_id)
    if existing:
        for field, value in values.items():
            setattr(existing, field, value)
    else:
        db.add(Insight(entry_id=entry_id, **values))
    db.flush()
