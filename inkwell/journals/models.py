import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
from inkwell.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id = Column(Uuid, primary_key=True, index=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    entry_date = Column(Date, nullable=False)
    image_path = Column(String, nullable=False)  # e.g. "uploads/<uuid>.jpg"
    original_filename = Column(String, nullable=False)

    status = Column(String, nullable=False, default="processing")  # processing, done, failed
    error_message = Column(Text, nullable=True)
    raw_text = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user = relationship("User", back_populates="journals")
    insight = relationship(
        "Insight",
        back_populates="entry",
        uselist=False,
        cascade="all, delete-orphan",
    )
