from datetime import datetime
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field


SentimentLabel = Literal["positive", "neutral", "negative"]
TaskStatus = Literal["todo", "in-progress", "done"]
Horizon = Literal["short_term", "long_term"]


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class Task(BaseSchema):
    description: str
    status: TaskStatus


class Goal(BaseSchema):
    description: str
    horizon: Horizon


class SentimentResult(BaseSchema):
    label: SentimentLabel
    score: float
    comparative: float = 0.0


class InsightResult(BaseSchema):
    """Output of one extraction pass over a page of text."""
    sentiment: SentimentResult
    emotions: Dict[str, int] = Field(default_factory=dict)
    tasks: List[Task] = Field(default_factory=list)
    goals: List[Goal] = Field(default_factory=list)


class InsightOut(BaseSchema):
    sentiment_label: SentimentLabel
    sentiment_score: float
    sentiment_comparative: float = 0.0
    emotions: Dict[str, int] = Field(default_factory=dict)
    tasks: List[Task] = Field(default_factory=list)
    goals: List[Goal] = Field(default_factory=list)
    analyzed_at: Optional[datetime] = None
