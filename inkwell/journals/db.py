import datetime
from uuid import UUID, uuid4
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload
from inkwell.journals.models import JournalEntry


def _as_aware(dt: datetime.datetime) -> datetime.datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


# Journal Entry CRUD
def get_journal(db: Session, journal_id: UUID, user_id: UUID) -> Optional[JournalEntry]:
    """
    Retrieves a journal entry by its ID for a given user.

    Args:
        db (Session): SQLAlchemy session.
        journal_id (UUID): ID of the journal.
        user_id (UUID): ID of the owner.

    Returns:
        Optional[JournalEntry]: The journal if found, else None.
    """
    return (
        db.query(JournalEntry)
        .options(selectinload(JournalEntry.insight))
        .filter(JournalEntry.id == journal_id, JournalEntry.user_id == user_id)
        .first()
    )


def get_user_journals(
    db: Session,
    user_id: UUID,
    date_from: Optional[datetime.date] = None,
    date_to: Optional[datetime.date] = None,
    status: Optional[str] = None,
) -> List[JournalEntry]:
    """
    Retrieves a user's journal entries with their insights, newest first.

    Args:
        db (Session): SQLAlchemy session.
        user_id (UUID): ID of the user.
        date_from (Optional[date]): Inclusive lower bound on entry_date.
        date_to (Optional[date]): Inclusive upper bound on entry_date.
        status (Optional[str]): Only entries in this processing status.

    Returns:
        List[JournalEntry]: Matching journal entries.
    """
    query = (
        db.query(JournalEntry)
        .options(selectinload(JournalEntry.insight))
        .filter(JournalEntry.user_id == user_id)
    )
    if date_from:
        query = query.filter(JournalEntry.entry_date >= date_from)
    if date_to:
        query = query.filter(JournalEntry.entry_date <= date_to)
    if status:
        query = query.filter(JournalEntry.status == status)
    return query.order_by(JournalEntry.entry_date.desc(), JournalEntry.created_at.desc()).all()


def create_journal(
    db: Session,
    user_id: UUID,
    entry_date: datetime.date,
    image_path: str,
    original_filename: str,
) -> JournalEntry:
    """
    Creates a journal entry for an uploaded page, in the processing state.

    Returns:
        JournalEntry: The created journal.
    """
    new_journal = JournalEntry(
        id=uuid4(),
        user_id=user_id,
        entry_date=entry_date,
        image_path=image_path,
        original_filename=original_filename,
        status="processing",  # Initial state
    )
    db.add(new_journal)
    db.commit()
    db.refresh(new_journal)
    return new_journal


def delete_journal(db: Session, journal_id: UUID, user_id: UUID) -> Optional[JournalEntry]:
    """
    Deletes a journal entry, and with it its insight, by ID for a user.

    Returns:
        Optional[JournalEntry]: The deleted journal or None.
    """
    journal = get_journal(db, journal_id, user_id)
    if journal:
        db.delete(journal)
        db.commit()
        return journal
    return None


def reset_for_processing(db: Session, journal: JournalEntry) -> JournalEntry:
    """Puts an entry back into the processing state ahead of a new job run."""
    journal.status = "processing"
    journal.error_message = None
    journal.updated_at = _utcnow()
    db.commit()
    db.refresh(journal)
    return journal


# Processing state transitions
def mark_journal_done(journal: JournalEntry, raw_text: str) -> None:
    """Records a successful run. Does not commit."""
    journal.raw_text = raw_text
    journal.status = "done"
    journal.error_message = None
    journal.updated_at = _utcnow()


def mark_journal_failed(db: Session, journal_id: UUID, message: str) -> int:
    """
    Records a failed run and commits.

    Returns:
        int: Number of rows updated (0 if the entry no longer exists).
    """
    updated = (
        db.query(JournalEntry)
        .filter(JournalEntry.id == journal_id)
        .update(
            {"status": "failed", "error_message": message, "updated_at": _utcnow()},
            synchronize_session=False,
        )
    )
    db.commit()
    return updated


def mark_stale_entries_failed(db: Session, older_than: datetime.timedelta, message: str) -> int:
    """
    Fails entries left in the processing state for longer than ``older_than``.

    Args:
        db (Session): SQLAlchemy session.
        older_than (timedelta): Age after which a processing entry is considered abandoned.
        message (str): Error message stored on each stale entry.

    Returns:
        int: Number of entries marked failed.
    """
    cutoff = _utcnow() - older_than
    processing = db.query(JournalEntry).filter(JournalEntry.status == "processing").all()
    stale = [
        j for j in processing
        if _as_aware(j.updated_at or j.created_at or _utcnow()) < cutoff
    ]
    for journal in stale:
        journal.status = "failed"
        journal.error_message = message
    db.commit()
    return len(stale)
