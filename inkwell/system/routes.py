from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from inkwell.core.database import get_db
from inkwell.system.schemas import HealthResponse

router = APIRouter(prefix="/system", tags=["System"])
logger = logging.getLogger(__name__)


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"description": "Database unreachable"}},
)
def health_route(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Healthcheck error: {e}")
        return JSONResponse(status_code=500, content={"status": "error", "message": "Database error"})
    return HealthResponse(status="ok", time=datetime.now(timezone.utc))
