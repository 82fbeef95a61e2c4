from datetime import date
from typing import Optional
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Security
from sqlalchemy.orm import Session

from inkwell.auth.service import get_current_user_id
from inkwell.core.database import get_db
from inkwell.dashboard.schemas import DashboardSummary
from inkwell.dashboard.service import get_entries_in_range, resolve_range, summarize_entries

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])
logger = logging.getLogger(__name__)


@router.get(
    "/summary",
    response_model=DashboardSummary,
    response_model_by_alias=True,
    summary="Summarize journal insights over a date range",
    responses={
        200: {"description": "Summary computed."},
        400: {"description": "Invalid date range."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to load dashboard data."},
    },
)
def dashboard_summary_route(
    range_days: Optional[int] = Query(None, alias="range", ge=1),
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> DashboardSummary:
    start, end = resolve_range(range_days, date_from, date_to)
    if start > end:
        raise HTTPException(status_code=400, detail="Invalid date range")

    try:
        journals = get_entries_in_range(db, user_id, start, end)
        return summarize_entries(journals, start, end)
    except Exception as e:
        logger.error(f"Dashboard summary failed for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load dashboard data")
