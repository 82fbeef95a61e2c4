"""
Storage of uploaded page images on the local filesystem.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

from inkwell.core.config import UPLOAD_DIR

logger = logging.getLogger(__name__)

IMAGE_URL_PREFIX = "uploads"
DEFAULT_EXTENSION = ".jpg"


def get_upload_dir() -> Path:
    path = Path(UPLOAD_DIR).resolve()
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_image(data: bytes, original_filename: Optional[str]) -> str:
    """
    Writes an uploaded image under a fresh name.

    Args:
        data (bytes): Image bytes.
        original_filename (Optional[str]): Client-side name, used for its extension only.

    Returns:
        str: The stored image reference, e.g. ``uploads/<uuid>.png``.
    """
    ext = Path(original_filename or "").suffix.lower() or DEFAULT_EXTENSION
    stored_name = f"{uuid.uuid4()}{ext}"
    (get_upload_dir() / stored_name).write_bytes(data)
    return f"{IMAGE_URL_PREFIX}/{stored_name}"


def resolve_image_path(image_ref: str) -> Path:
    """Absolute path of a stored image reference."""
    return get_upload_dir() / Path(image_ref).name


def delete_image(image_ref: Optional[str]) -> None:
    """Best-effort removal of a stored image; a missing file is not an error."""
    if not image_ref:
        return
    try:
        resolve_image_path(image_ref).unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error("Failed to delete journal image %s: %s", image_ref, e)
