from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from inkwell.dashboard.schemas import DashboardEntry, DashboardSummary, DateRange, SentimentPoint
from inkwell.journals.models import JournalEntry

DEFAULT_RANGE_DAYS = 30


def resolve_range(
    range_days: Optional[int],
    date_from: Optional[date],
    date_to: Optional[date],
    today: Optional[date] = None,
) -> Tuple[date, date]:
    """
    Works out the dashboard window.

    ``date_to`` defaults to today and ``date_from`` to ``range_days - 1`` days
    before it, so a 30 day range covers 30 calendar days inclusive.
    """
    days = range_days if range_days and range_days > 0 else DEFAULT_RANGE_DAYS
    end = date_to or today or date.today()
    start = date_from or end - timedelta(days=days - 1)
    return start, end


def get_entries_in_range(db: Session, user_id: UUID, date_from: date, date_to: date) -> List[JournalEntry]:
    return (
        db.query(JournalEntry)
        .options(selectinload(JournalEntry.insight))
        .filter(
            JournalEntry.user_id == user_id,
            JournalEntry.entry_date >= date_from,
            JournalEntry.entry_date <= date_to,
        )
        .order_by(JournalEntry.entry_date.asc())
        .all()
    )


def _to_dashboard_entry(journal: JournalEntry) -> DashboardEntry:
    insight = journal.insight
    return DashboardEntry(
        id=journal.id,
        entry_date=journal.entry_date,
        status=journal.status,
        raw_text=journal.raw_text,
        sentiment_label=insight.sentiment_label if insight else None,
        sentiment_score=insight.sentiment_score if insight else None,
        emotions=(insight.emotions or {}) if insight else {},
        tasks=(insight.tasks or []) if insight else [],
        goals=(insight.goals or []) if insight else [],
    )


def summarize_entries(journals: Iterable[JournalEntry], date_from: date, date_to: date) -> DashboardSummary:
    """
    Aggregates trend and summary statistics over a set of entries.

    Args:
        journals: Entries (with insights loaded) inside the window.
        date_from (date): Window start, echoed back in the summary.
        date_to (date): Window end, echoed back in the summary.

    Returns:
        DashboardSummary: Sentiment trend, emotion totals, task/goal/status breakdowns.
    """
    sentiment_by_date: Dict[date, List[float]] = defaultdict(list)
    emotion_totals: Dict[str, int] = defaultdict(int)
    task_summary = {"total": 0, "todo": 0, "in-progress": 0, "done": 0}
    goal_summary = {"total": 0, "short_term": 0, "long_term": 0}
    sentiment_counts = {"positive": 0, "neutral": 0, "negative": 0}
    status_breakdown = {"processing": 0, "done": 0, "failed": 0}

    entries = []
    for journal in journals:
        entry = _to_dashboard_entry(journal)
        entries.append(entry)

        if entry.sentiment_label in sentiment_counts:
            sentiment_counts[entry.sentiment_label] += 1
        if entry.sentiment_score is not None:
            sentiment_by_date[entry.entry_date].append(float(entry.sentiment_score))

        for emotion, count in entry.emotions.items():
            emotion_totals[emotion] += int(count or 0)

        for task in entry.tasks:
            task_summary["total"] += 1
            if task.status in task_summary:
                task_summary[task.status] += 1

        for goal in entry.goals:
            goal_summary["total"] += 1
            if goal.horizon in goal_summary:
                goal_summary[goal.horizon] += 1

        if entry.status in status_breakdown:
            status_breakdown[entry.status] += 1

    sentiment_trend = [
        SentimentPoint(date=day, average=sum(scores) / len(scores))
        for day, scores in sorted(sentiment_by_date.items())
    ]

    return DashboardSummary(
        range=DateRange(date_from=date_from, date_to=date_to),
        sentiment_trend=sentiment_trend,
        emotion_distribution=dict(emotion_totals),
        task_summary=task_summary,
        goal_summary=goal_summary,
        sentiment_counts=sentiment_counts,
        status_breakdown=status_breakdown,
        entries=entries,
    )
