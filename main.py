import logging
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from inkwell.auth import routes as auth_router
from inkwell.core.config import CLIENT_ORIGINS, LOG_LEVEL, STALE_PROCESSING_MINUTES, UPLOAD_DIR
from inkwell.core.database import Base, SessionLocal, engine
from inkwell.dashboard import routes as dashboard_router
from inkwell.journals import routes as journals_router
from inkwell.journals.db import mark_stale_entries_failed
from inkwell.journals.storage import get_upload_dir
from inkwell.system import routes as system_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STALE_ENTRY_MESSAGE = "Processing did not complete; please reprocess the entry"

app = FastAPI(
    title="Inkwell API",
    version="1.0.0",
    description="Backend for Inkwell: handwritten journal OCR and insight extraction.",
)

# CORS config
app.add_middleware(
    CORSMiddleware,
    allow_origins=CLIENT_ORIGINS,
    allow_credentials="*" not in CLIENT_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth_router.router)
app.include_router(journals_router.router)
app.include_router(dashboard_router.router)
app.include_router(system_router.router)

# Uploaded page images
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR, check_dir=False), name="uploads")


# DB Tables
@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)
    get_upload_dir()


@app.on_event("startup")
def fail_stale_entries():
    if STALE_PROCESSING_MINUTES <= 0:
        return
    with SessionLocal() as db:
        count = mark_stale_entries_failed(
            db, timedelta(minutes=STALE_PROCESSING_MINUTES), STALE_ENTRY_MESSAGE
        )
    if count:
        logger.warning("Marked %d stale processing entries as failed", count)
