"""
OCR via pytesseract + Pillow.

Requires the Tesseract binary; set TESSERACT_CMD when it is not on PATH.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import pytesseract
from PIL import Image

from inkwell.core.config import OCR_DEBUG, OCR_LANGUAGE, TESSERACT_CMD

logger = logging.getLogger(__name__)

if TESSERACT_CMD:
    pytesseract.pytesseract.tesseract_cmd = TESSERACT_CMD


def run_ocr(image_path: Union[str, Path], language: Optional[str] = None) -> str:
    """
    Runs OCR on a single image file.

    Args:
        image_path: Path to the page image.
        language: Tesseract language hint, defaults to OCR_LANGUAGE.

    Returns:
        str: Extracted text, trimmed. May be empty.

    Raises:
        Whatever Pillow or pytesseract raise; the caller decides how to report it.
    """
    lang = language or OCR_LANGUAGE
    path = Path(image_path)
    if OCR_DEBUG:
        logger.info("[OCR] recognizing %s (lang=%s)", path.name, lang)

    with Image.open(path) as img:
        text = pytesseract.image_to_string(img, lang=lang)

    if OCR_DEBUG:
        logger.info("[OCR] %s -> %d characters", path.name, len(text))
    return (text or "").strip()
