import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Float, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship
from inkwell.core.database import Base


class Insight(Base):
    __tablename__ = "insights"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    entry_id = Column(
        Uuid,
        ForeignKey("journal_entries.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    sentiment_label = Column(String, nullable=False)  # positive, neutral, negative
    sentiment_score = Column(Float, nullable=False)
    sentiment_comparative = Column(Float, nullable=False, default=0.0)
    emotions = Column(JSON, nullable=False, default=dict)
    tasks = Column(JSON, nullable=False, default=list)
    goals = Column(JSON, nullable=False, default=list)
    analyzed_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    entry = relationship("JournalEntry", back_populates="insight")
