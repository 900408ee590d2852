"""Turn uploaded file bytes into document insert payloads."""

import base64
import binascii
import logging
import os
from typing import Optional

from .config import settings
from .schemas import DocumentRow, InsertDocument


logger = logging.getLogger(__name__)


class UploadRejected(ValueError):
    """The uploaded file cannot be stored as a document."""


def document_from_upload(
    filename: str, content: bytes, mime_type: Optional[str] = None
) -> InsertDocument:
    """Validate an uploaded file and build its :data:`InsertDocument`.

    Only extensions listed in ``settings.allowed_extensions`` are accepted and
    the file must be non-empty and no larger than ``settings.max_upload_bytes``.
    The content is stored base64-encoded; ``size`` is the raw byte count.
    """
    ext = os.path.splitext(filename)[1].lower()
    if ext not in {e.lower() for e in settings.allowed_extensions}:
        raise UploadRejected(f"Only {', '.join(settings.allowed_extensions)} files are allowed")
    if not content:
        raise UploadRejected("No file uploaded")
    if len(content) > settings.max_upload_bytes:
        raise UploadRejected(
            f"File exceeds the {settings.max_upload_bytes} byte upload limit"
        )

    logger.debug("accepted upload %s (%d bytes)", filename, len(content))
    values = {
        "filename": os.path.basename(filename),
        "data": base64.b64encode(content).decode("ascii"),
        "size": len(content),
    }
    if mime_type:
        values["mime_type"] = mime_type
    return InsertDocument(**values)


def decode_document_data(document: DocumentRow) -> bytes:
    """Return the original bytes of a stored document."""
    try:
        return base64.b64decode(document.data, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"document {document.id} holds invalid base64 data") from exc
