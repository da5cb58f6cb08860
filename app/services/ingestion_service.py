"""
Document ingestion: turn an uploaded file into a stored, searchable document.

Responsibility: Validate the upload, extract its text (txt, md, pdf), and store it
through the same clean → chunk → embed path as POST /api/store. Called by the API
layer; no HTTP or FastAPI here.
"""

import asyncio
import logging
import re
from pathlib import Path

from app.core.config import ALLOWED_EXTENSIONS, MAX_UPLOAD_BYTES
from app.ingest.loader import bytes_to_text
from app.schemas.qa import StoreResult
from app.services.document_service import store_text

logger = logging.getLogger(__name__)


class InvalidFileTypeError(Exception):
    """Raised when an upload has a disallowed extension."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        allowed = ", ".join(sorted(ALLOWED_EXTENSIONS))
        super().__init__(f"Unsupported file type: {filename or 'unnamed'}. Allowed: {allowed}")


class FileTooLargeError(Exception):
    """Raised when an upload exceeds MAX_UPLOAD_BYTES."""

    def __init__(self, size: int) -> None:
        self.size = size
        super().__init__(f"File too large: {size} bytes (limit {MAX_UPLOAD_BYTES})")


def _sanitize_filename(filename: str) -> str:
    """Safe basename used as the stored chunks' source."""
    if not filename or not filename.strip():
        return "unnamed"
    base = Path(filename).name
    safe = re.sub(r"[^\w.\-]", "_", base.replace("..", ""))
    return safe.strip() or "unnamed"


async def store_upload(filename: str, raw: bytes) -> StoreResult:
    """
    Extract and store one uploaded file. Chunks carry the sanitized filename as source.

    Raises InvalidFileTypeError or FileTooLargeError before any parsing, and ValueError
    when the file cannot be parsed or holds no text.
    """
    if Path(filename or "").suffix.lower() not in ALLOWED_EXTENSIONS:
        raise InvalidFileTypeError(filename)
    if len(raw) > MAX_UPLOAD_BYTES:
        raise FileTooLargeError(len(raw))

    source = _sanitize_filename(filename)
    text = await asyncio.to_thread(bytes_to_text, raw, source)
    logger.info("[ingestion:store_upload] file=%s bytes=%d text_len=%d", source, len(raw), len(text))
    return await store_text(text, source=source)
