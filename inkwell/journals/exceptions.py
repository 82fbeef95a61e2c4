class ProcessingError(Exception):
    """Base class for failures of the entry processing job.

    ``str(error)`` is the message stored on the failed entry.
    """


class ImageNotFound(ProcessingError):
    """Raised when the uploaded page image is missing from disk."""

    def __init__(self, image_path=None):
        self.image_path = image_path
        super().__init__("Image not found for OCR processing")


class OcrFailure(ProcessingError):
    """Raised when the OCR engine errors out."""


class AggregationFailure(ProcessingError):
    """Raised when insight extraction fails unexpectedly."""


class PersistenceFailure(ProcessingError):
    """Raised when processing results cannot be written."""
