from datetime import date
from typing import Optional
from uuid import UUID
import logging

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Response,
    Security,
    UploadFile,
    status,
)
from sqlalchemy.orm import Session

from inkwell.auth.service import get_current_user_id
from inkwell.core.config import MAX_UPLOAD_MB
from inkwell.core.database import get_db
from inkwell.journals.db import (
    create_journal,
    delete_journal,
    get_journal,
    get_user_journals,
    reset_for_processing,
)
from inkwell.journals.processing import process_entry
from inkwell.journals.schemas import EntryStatus, JournalEntryList, JournalEntryOut
from inkwell.journals.storage import delete_image, resolve_image_path, save_image

router = APIRouter(prefix="/journals", tags=["Journals"])
logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = MAX_UPLOAD_MB * 1024 * 1024


def parse_entry_date(value: Optional[str]) -> date:
    """Parses an ISO date, falling back to today when missing or invalid."""
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return date.today()


@router.post(
    "",
    response_model=JournalEntryOut,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a journal page",
    description="Store a photographed journal page and queue it for OCR and insight extraction.",
    responses={
        201: {"description": "Entry created; processing continues in the background."},
        400: {"description": "Missing or non-image upload."},
        401: {"description": "Unauthorized."},
        413: {"description": "Image too large."},
        500: {"description": "Failed to save journal entry."},
    },
)
def upload_journal_route(
    background_tasks: BackgroundTasks,
    image: UploadFile = File(...),
    entry_date: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> JournalEntryOut:
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image uploads are allowed")

    # Reads at most one byte past the limit
    data = image.file.read(MAX_UPLOAD_BYTES + 1)
    if not data:
        raise HTTPException(status_code=400, detail="Image is required")
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"Image exceeds {MAX_UPLOAD_MB} MB limit")

    try:
        image_ref = save_image(data, image.filename)
        journal = create_journal(
            db,
            user_id=user_id,
            entry_date=parse_entry_date(entry_date),
            image_path=image_ref,
            original_filename=image.filename or "page",
        )
    except Exception as e:
        logger.error(f"Error saving journal upload for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save journal entry")

    background_tasks.add_task(process_entry, journal.id, str(resolve_image_path(image_ref)))
    return JournalEntryOut.model_validate(journal)


@router.get(
    "",
    response_model=JournalEntryList,
    summary="List journal entries",
    description="List the user's entries with their insights, newest first.",
    responses={
        200: {"description": "Journal entries retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to load entries."},
    },
)
def list_journals_route(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    entry_status: Optional[EntryStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> JournalEntryList:
    try:
        journals = get_user_journals(db, user_id, date_from, date_to, entry_status)
        return JournalEntryList(entries=[JournalEntryOut.model_validate(j) for j in journals])
    except Exception as e:
        logger.error(f"Error listing journals for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load entries")


@router.get(
    "/{journal_id}",
    response_model=JournalEntryOut,
    summary="Get a journal entry by ID",
    responses={
        200: {"description": "Journal retrieved successfully."},
        401: {"description": "Unauthorized."},
        404: {"description": "Journal not found."},
    },
)
def read_journal_route(
    journal_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> JournalEntryOut:
    journal = get_journal(db, journal_id, user_id)
    if journal is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return JournalEntryOut.model_validate(journal)


@router.post(
    "/{journal_id}/reprocess",
    response_model=JournalEntryOut,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Re-run OCR and insight extraction",
    description="Reset the entry to processing and queue a new processing run.",
    responses={
        202: {"description": "Processing queued."},
        401: {"description": "Unauthorized."},
        404: {"description": "Journal not found."},
    },
)
def reprocess_journal_route(
    journal_id: UUID,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> JournalEntryOut:
    journal = get_journal(db, journal_id, user_id)
    if journal is None:
        raise HTTPException(status_code=404, detail="Entry not found")

    journal = reset_for_processing(db, journal)
    background_tasks.add_task(process_entry, journal.id, str(resolve_image_path(journal.image_path)))
    logger.info("Reprocessing journal entry %s", journal.id)
    return JournalEntryOut.model_validate(journal)


@router.delete(
    "/{journal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a journal entry",
    description="Delete an entry, its insight and its stored image.",
    responses={
        204: {"description": "Journal deleted successfully."},
        401: {"description": "Unauthorized."},
        404: {"description": "Journal not found."},
        500: {"description": "Failed to delete entry."},
    },
)
def delete_journal_route(
    journal_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> Response:
    try:
        deleted = delete_journal(db, journal_id, user_id)
    except Exception as e:
        logger.error(f"Error deleting journal {journal_id} for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete entry")

    if deleted is None:
        raise HTTPException(status_code=404, detail="Entry not found")

    delete_image(deleted.image_path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
