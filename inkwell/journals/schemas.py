from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID
from pydantic import BaseModel

from inkwell.insights.schemas import InsightOut

EntryStatus = Literal["processing", "done", "failed"]


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class JournalEntryBase(BaseSchema):
    id: UUID
    user_id: UUID
    entry_date: date
    original_filename: str
    image_path: str
    status: EntryStatus
    error_message: Optional[str] = None
    raw_text: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JournalEntryOut(JournalEntryBase):
    insight: Optional[InsightOut] = None


class JournalEntryList(BaseModel):
    entries: List[JournalEntryOut]
