import datetime
from typing import Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from inkwell.insights.schemas import Goal, Task


class DateRange(BaseModel):
    date_from: datetime.date = Field(alias="from")
    date_to: datetime.date = Field(alias="to")

    class Config:
        populate_by_name = True


class SentimentPoint(BaseModel):
    date: datetime.date
    average: float


class DashboardEntry(BaseModel):
    id: UUID
    entry_date: datetime.date
    status: str
    raw_text: Optional[str] = None
    sentiment_label: Optional[str] = None
    sentiment_score: Optional[float] = None
    emotions: Dict[str, int] = Field(default_factory=dict)
    tasks: List[Task] = Field(default_factory=list)
    goals: List[Goal] = Field(default_factory=list)


class DashboardSummary(BaseModel):
    range: DateRange
    sentiment_trend: List[SentimentPoint]
    emotion_distribution: Dict[str, int]
    task_summary: Dict[str, int]
    goal_summary: Dict[str, int]
    sentiment_counts: Dict[str, int]
    status_breakdown: Dict[str, int]
    entries: List[DashboardEntry]
