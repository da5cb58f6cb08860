"""
Text ingestion: clean, chunk, embed and store a submitted text as one document.

Responsibility: Back /api/store and /api/store-embedding. Called by the API layer; no HTTP here.
"""

import asyncio
import logging
import uuid

from app.core.config import CHUNK_OVERLAP, CHUNK_SIZE
from app.schemas.qa import StoreResult
from app.services.text_processing import chunk_text, clean_text
from app.services.vector_store import store_chunks

logger = logging.getLogger(__name__)


async def store_text(text: str, source: str | None = None) -> StoreResult:
    """
    Store text under a new document id. Chunks record `source` (default: the document id).
    Raises ValueError when nothing is left after cleaning.
    """
    cleaned = clean_text(text)
    chunks = chunk_text(cleaned, chunk_size=CHUNK_SIZE, overlap=CHUNK_OVERLAP)
    if not chunks:
        raise ValueError("Text is empty after cleaning")
    document_id = f"doc-{uuid.uuid4().hex[:12]}"
    items = [
        {"text": c, "metadata": {"source": source or document_id, "chunk_id": i}}
        for i, c in enumerate(chunks)
    ]
    stored = await asyncio.to_thread(store_chunks, items)
    logger.info("[document_service:store_text] OUT document_id=%s chunks=%d", document_id, stored)
    return StoreResult(document_id=document_id, chunks_stored=stored)
